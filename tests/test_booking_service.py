"""
Tests for booking creation and vendor decisions
"""
from decimal import Decimal

import pytest
from sqlalchemy.orm.exc import StaleDataError

from app.exceptions import (
    AuthorizationError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from app.models.booking import Booking, BookingStatus
from app.models.notification import Notification
from app.schemas.booking import BookingCreate
from app.services import approval_engine, booking_service


def _notifications_for(db, recipient_id):
    return db.query(Notification).filter(Notification.recipient_id == recipient_id).all()


def test_package_booking_waits_for_every_vendor(
    db, package_booking, golf_vendor, hotel_vendor
):
    """
    Test: A golf + hotel package starts pending with one entry per vendor
    """
    assert package_booking.status == BookingStatus.PENDING_APPROVAL
    assert package_booking.total_amount == Decimal("7800000")
    assert set(package_booking.vendor_approvals) == {golf_vendor.id, hotel_vendor.id}
    assert all(e["status"] == "pending" for e in package_booking.vendor_approvals.values())

    for vendor in (golf_vendor, hotel_vendor):
        notifications = _notifications_for(db, vendor.id)
        assert [n.type for n in notifications] == ["approval_needed"]
        assert notifications[0].data["booking_id"] == package_booking.id


def test_same_vendor_for_two_items_gets_one_entry(
    db, customer, golf_course, golf_vendor_profile, notifier
):
    """
    Test: A vendor owning several items of the booking is asked only once
    """
    from app.models.catalog import TravelPackage

    shuttle = TravelPackage(
        vendor_id=golf_vendor_profile.id, name="Club Shuttle", price=Decimal("150000")
    )
    db.add(shuttle)
    db.commit()

    booking = booking_service.create_booking(
        db,
        customer,
        BookingCreate(
            booking_type="package",
            booking_details={
                "golf": {"course_id": golf_course.id},
                "travel": {"package_id": shuttle.id},
            },
            total_amount=Decimal("2650000"),
        ),
        notifier=notifier,
    )

    assert list(booking.vendor_approvals) == [golf_vendor_profile.id]
    assert len(_notifications_for(db, golf_vendor_profile.id)) == 1


def test_all_approvals_move_booking_to_approved(
    db, package_booking, golf_vendor, hotel_vendor, customer, notifier
):
    booking = booking_service.record_vendor_decision(
        db, golf_vendor, package_booking.id, "approve", notes="Caddies arranged", notifier=notifier
    )
    assert booking.status == BookingStatus.PENDING_APPROVAL
    assert booking.vendor_approvals[golf_vendor.id]["status"] == "approved"
    assert booking.vendor_approvals[golf_vendor.id]["notes"] == "Caddies arranged"
    assert booking.vendor_approvals[golf_vendor.id]["approved_at"]
    assert booking.vendor_approvals[hotel_vendor.id]["status"] == "pending"

    booking = booking_service.record_vendor_decision(
        db, hotel_vendor, package_booking.id, "approve", notifier=notifier
    )
    assert booking.status == BookingStatus.APPROVED

    messages = [n.message for n in _notifications_for(db, customer.id)]
    assert "A vendor has approved your booking. Waiting for other approvals." in messages
    assert "All vendors have approved your booking. You can now proceed to payment." in messages


def test_rejection_cancels_and_late_approval_is_ignored(
    db, package_booking, golf_vendor, hotel_vendor, customer, notifier
):
    """
    Test: Rejection short-circuits; a later approval leaves the booking cancelled
    """
    booking = booking_service.record_vendor_decision(
        db, hotel_vendor, package_booking.id, "reject", notes="No rooms", notifier=notifier
    )
    assert booking.status == BookingStatus.CANCELLED

    late = booking_service.record_vendor_decision(
        db, golf_vendor, package_booking.id, "approve", notifier=notifier
    )

    assert late.status == BookingStatus.CANCELLED
    assert late.vendor_approvals[golf_vendor.id]["status"] == "pending"
    assert late.vendor_approvals[hotel_vendor.id]["status"] == "rejected"
    titles = [n.title for n in _notifications_for(db, customer.id)]
    assert titles == ["Booking Update"]


def test_vendor_outside_booking_cannot_decide(db, package_booking, travel_vendor, notifier):
    with pytest.raises(AuthorizationError):
        booking_service.record_vendor_decision(
            db, travel_vendor, package_booking.id, "approve", notifier=notifier
        )


def test_customer_cannot_decide_own_booking(db, package_booking, customer, notifier):
    with pytest.raises(AuthorizationError):
        booking_service.record_vendor_decision(
            db, customer, package_booking.id, "approve", notifier=notifier
        )


def test_decision_on_missing_booking(db, golf_vendor, notifier):
    with pytest.raises(NotFoundError):
        booking_service.record_vendor_decision(
            db, golf_vendor, "does-not-exist", "approve", notifier=notifier
        )


def test_unknown_action_is_rejected(db, package_booking, golf_vendor, notifier):
    with pytest.raises(ValidationError):
        booking_service.record_vendor_decision(
            db, golf_vendor, package_booking.id, "postpone", notifier=notifier
        )


@pytest.mark.parametrize("total", ["0", "-100"])
def test_non_positive_amount_is_rejected(
    db, customer, booking_request, notifier, total
):
    with pytest.raises(ValidationError):
        booking_service.create_booking(
            db,
            customer,
            booking_request(total=total),
            notifier=notifier,
        )
    assert db.query(Booking).count() == 0


def test_unknown_catalog_item_is_rejected(db, customer, notifier):
    request = BookingCreate(
        booking_type="golf",
        booking_details={"golf": {"course_id": "missing-course"}},
        total_amount=Decimal("2500000"),
    )

    with pytest.raises(ValidationError):
        booking_service.create_booking(db, customer, request, notifier=notifier)


def test_tee_time_from_another_course_is_rejected(
    db, customer, golf_course, golf_vendor_profile, notifier
):
    from app.models.catalog import GolfCourse, TeeTime
    from datetime import date

    other_course = GolfCourse(vendor_id=golf_vendor_profile.id, name="Handara Golf")
    db.add(other_course)
    db.flush()
    foreign_slot = TeeTime(
        course_id=other_course.id, date=date(2026, 11, 14), time="08:00", price=Decimal("1800000")
    )
    db.add(foreign_slot)
    db.commit()

    request = BookingCreate(
        booking_type="golf",
        booking_details={"golf": {"course_id": golf_course.id, "tee_time_id": foreign_slot.id}},
        total_amount=Decimal("2500000"),
    )
    with pytest.raises(ValidationError):
        booking_service.create_booking(db, customer, request, notifier=notifier)


def test_single_type_booking_must_include_its_item(db, customer, hotel, notifier):
    request = BookingCreate(
        booking_type="golf",
        booking_details={"hotel": {"hotel_id": hotel.id}},
        total_amount=Decimal("2650000"),
    )

    with pytest.raises(ValidationError):
        booking_service.create_booking(db, customer, request, notifier=notifier)


def test_total_amount_is_locked_after_creation(
    db, package_booking, tee_time, hotel_room, golf_vendor, hotel_vendor, notifier
):
    """
    Test: Catalog price changes after creation never touch the booking amount
    """
    tee_time.price = Decimal("9999999")
    hotel_room.price_per_night = Decimal("5000000")
    db.commit()

    booking_service.record_vendor_decision(db, golf_vendor, package_booking.id, "approve", notifier=notifier)
    booking = booking_service.record_vendor_decision(
        db, hotel_vendor, package_booking.id, "approve", notifier=notifier
    )

    db.refresh(booking)
    assert booking.total_amount == Decimal("7800000")
    assert booking.booking_details["golf"]["players"] == 2


def test_single_type_booking_cannot_carry_other_items(
    db, customer, golf_course, hotel, notifier
):
    """
    Test: Only a package may combine item types
    """
    request = BookingCreate(
        booking_type="golf",
        booking_details={
            "golf": {"course_id": golf_course.id},
            "hotel": {"hotel_id": hotel.id},
        },
        total_amount=Decimal("5150000"),
    )

    with pytest.raises(ValidationError):
        booking_service.create_booking(db, customer, request, notifier=notifier)
    assert db.query(Booking).count() == 0


def test_demoted_vendor_cannot_decide(db, package_booking, golf_vendor, notifier):
    """
    Test: A listed vendor id acting without a vendor role is refused
    """
    from app.models.profile import UserRole
    from app.services.auth import Principal

    demoted = Principal(id=golf_vendor.id, role=UserRole.USER, email=golf_vendor.email)

    with pytest.raises(AuthorizationError):
        booking_service.record_vendor_decision(
            db, demoted, package_booking.id, "approve", notifier=notifier
        )


def test_concurrent_approvals_are_not_lost(
    db, package_booking, golf_vendor, hotel_vendor, notifier, monkeypatch
):
    """
    Test: When another vendor commits first, the decision is re-applied on top of it
    """
    real_commit = db.commit
    calls = {"n": 0}

    def racing_commit():
        calls["n"] += 1
        if calls["n"] == 1:
            # The hotel vendor's approval lands between our read and our write
            db.rollback()
            other = db.query(Booking).filter(Booking.id == package_booking.id).first()
            other.vendor_approvals = approval_engine.apply_decision(
                other.vendor_approvals, hotel_vendor.id, "approve"
            )
            other.status = approval_engine.evaluate(other.vendor_approvals)
            real_commit()
            raise StaleDataError("bookings row changed")
        return real_commit()

    monkeypatch.setattr(db, "commit", racing_commit)

    booking = booking_service.record_vendor_decision(
        db, golf_vendor, package_booking.id, "approve", notifier=notifier
    )

    assert booking.status == BookingStatus.APPROVED
    assert booking.vendor_approvals[golf_vendor.id]["status"] == "approved"
    assert booking.vendor_approvals[hotel_vendor.id]["status"] == "approved"


def test_gives_up_after_repeated_conflicts(
    db, package_booking, golf_vendor, notifier, monkeypatch, test_settings
):
    monkeypatch.setattr(test_settings, "APPROVAL_MAX_RETRIES", 2)
    attempts = []

    def always_stale():
        attempts.append(1)
        raise StaleDataError("bookings row changed")

    monkeypatch.setattr(db, "commit", always_stale)

    with pytest.raises(InternalError):
        booking_service.record_vendor_decision(
            db, golf_vendor, package_booking.id, "approve", notifier=notifier
        )
    assert len(attempts) == 2


def test_list_bookings_is_scoped_by_role(
    db, package_booking, customer, other_customer, golf_vendor, travel_vendor, admin
):
    assert [b.id for b in booking_service.list_bookings(db, customer)] == [package_booking.id]
    assert booking_service.list_bookings(db, other_customer) == []
    assert [b.id for b in booking_service.list_bookings(db, golf_vendor)] == [package_booking.id]
    assert booking_service.list_bookings(db, travel_vendor) == []
    assert [b.id for b in booking_service.list_bookings(db, admin)] == [package_booking.id]


def test_get_booking_hides_other_customers_bookings(db, package_booking, other_customer):
    with pytest.raises(NotFoundError):
        booking_service.get_booking(db, other_customer, package_booking.id)
