"""
Vendor approval rules for multi-vendor bookings.

Pure functions over the ``vendor_approvals`` mapping
(``{vendor_id: {"status": ..., "approved_at": ..., "notes": ...}}``); nothing
here touches the database or emits notifications.
"""
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from app.models.booking import ApprovalStatus, BookingStatus

DECISIONS = {
    "approve": ApprovalStatus.APPROVED,
    "reject": ApprovalStatus.REJECTED,
}


def _status_of(entry: Optional[dict]) -> str:
    return (entry or {}).get("status", ApprovalStatus.PENDING.value)


def build_approvals(vendor_ids: Iterable[str]) -> Dict[str, dict]:
    """One pending entry per distinct vendor, in first-seen order."""
    approvals: Dict[str, dict] = {}
    for vendor_id in vendor_ids:
        if vendor_id not in approvals:
            approvals[vendor_id] = {"status": ApprovalStatus.PENDING.value}
    return approvals


def all_approved(approvals: Dict[str, dict]) -> bool:
    # An empty map means no gate: vacuously approved
    return all(_status_of(e) == ApprovalStatus.APPROVED.value for e in approvals.values())


def any_rejected(approvals: Dict[str, dict]) -> bool:
    return any(_status_of(e) == ApprovalStatus.REJECTED.value for e in approvals.values())


def pending_vendors(approvals: Dict[str, dict]) -> List[str]:
    return [
        vendor_id
        for vendor_id, entry in approvals.items()
        if _status_of(entry) == ApprovalStatus.PENDING.value
    ]


def evaluate(approvals: Dict[str, dict]) -> BookingStatus:
    """Aggregate booking status for an approvals map. Rejection dominates."""
    if any_rejected(approvals):
        return BookingStatus.CANCELLED
    if all_approved(approvals):
        return BookingStatus.APPROVED
    return BookingStatus.PENDING_APPROVAL


def apply_decision(
    approvals: Dict[str, dict],
    vendor_id: str,
    decision: str,
    notes: Optional[str] = None,
    decided_at: Optional[datetime] = None,
) -> Dict[str, dict]:
    """
    Return a new approvals map with ``vendor_id``'s entry replaced.

    The key set never changes: deciding for a vendor that is not part of the
    booking raises ``KeyError``.
    """
    if vendor_id not in approvals:
        raise KeyError(vendor_id)
    try:
        new_status = DECISIONS[decision]
    except KeyError:
        raise ValueError(f"Unknown decision '{decision}'")

    decided_at = decided_at or datetime.now(timezone.utc)
    updated = {vid: dict(entry or {}) for vid, entry in approvals.items()}
    updated[vendor_id] = {
        "status": new_status.value,
        "approved_at": decided_at.isoformat(),
        "notes": notes,
    }
    return updated
