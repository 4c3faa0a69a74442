"""
Xendit payment gateway client.

Wraps the Invoice API (v2) behind a small adapter: ``create_invoice``,
``get_invoice`` (current status) and ``expire_invoice``. Every call has a bounded
timeout; transport errors and non-2xx responses surface as
``ExternalServiceError``.
"""
import hmac
import logging
from typing import List, Optional

import httpx

from app.core.config import settings
from app.exceptions import ExternalServiceError
from app.schemas.payment import Invoice, InvoiceRequest

logger = logging.getLogger(__name__)

PAYMENT_METHODS: List[str] = [
    "CREDIT_CARD",
    "BCA",
    "BNI",
    "BSI",
    "BRI",
    "MANDIRI",
    "PERMATA",
    "ALFAMART",
    "INDOMARET",
    "OVO",
    "DANA",
    "SHOPEEPAY",
    "LINKAJA",
    "JENIUSPAY",
    "QRIS",
]


class XenditClient:
    def __init__(
        self,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.secret_key = secret_key if secret_key is not None else settings.XENDIT_SECRET_KEY
        self.base_url = (base_url or settings.XENDIT_API_URL).rstrip("/")
        self.timeout = timeout or settings.XENDIT_TIMEOUT_SECONDS
        self.transport = transport

    def _client(self) -> httpx.Client:
        # Basic auth: secret key as username, empty password
        return httpx.Client(
            base_url=self.base_url,
            auth=(self.secret_key, ""),
            timeout=self.timeout,
            transport=self.transport,
        )

    def _request(self, method: str, path: str, json: dict = None) -> dict:
        try:
            with self._client() as client:
                response = client.request(method, path, json=json)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Xendit %s %s failed with %s: %s",
                method,
                path,
                e.response.status_code,
                e.response.text,
            )
            raise ExternalServiceError("Payment provider rejected the request") from e
        except httpx.HTTPError as e:
            logger.error("Xendit %s %s error: %s", method, path, e)
            raise ExternalServiceError() from e

    def create_invoice(self, params: InvoiceRequest) -> Invoice:
        payload = {
            "external_id": params.external_id,
            "amount": float(params.amount),
            "description": params.description,
            "currency": params.currency,
            "invoice_duration": params.invoice_duration,
            "success_redirect_url": params.success_redirect_url,
            "failure_redirect_url": params.failure_redirect_url,
            "payment_methods": PAYMENT_METHODS,
            "items": [
                {
                    "name": item.name,
                    "quantity": item.quantity,
                    "price": float(item.price),
                    "category": item.category,
                }
                for item in params.items
            ],
        }
        if params.payer_email:
            payload["payer_email"] = params.payer_email
            payload["customer"] = {
                "given_names": params.customer_name,
                "email": params.payer_email,
                "mobile_number": params.customer_phone,
            }

        data = self._request("POST", "/v2/invoices", json=payload)
        logger.info(f"Xendit invoice {data.get('id')} created for {params.external_id}")
        return Invoice(
            id=data["id"],
            invoice_url=data["invoice_url"],
            expiry_date=data.get("expiry_date"),
            status=data.get("status"),
        )

    def get_invoice(self, invoice_id: str) -> Invoice:
        data = self._request("GET", f"/v2/invoices/{invoice_id}")
        return Invoice(
            id=data["id"],
            invoice_url=data.get("invoice_url", ""),
            expiry_date=data.get("expiry_date"),
            status=data.get("status"),
        )

    def expire_invoice(self, invoice_id: str) -> Invoice:
        data = self._request("POST", f"/invoices/{invoice_id}/expire!")
        logger.info(f"Xendit invoice {invoice_id} expired")
        return Invoice(
            id=data["id"],
            invoice_url=data.get("invoice_url", ""),
            expiry_date=data.get("expiry_date"),
            status=data.get("status"),
        )


def verify_webhook_token(token: Optional[str]) -> bool:
    """Compare the ``x-callback-token`` header against the configured token."""
    expected = settings.XENDIT_WEBHOOK_TOKEN
    if not expected:
        logger.warning("XENDIT_WEBHOOK_TOKEN not configured")
        return False
    if not token:
        return False
    return hmac.compare_digest(token.encode(), expected.encode())


def get_payment_gateway() -> XenditClient:
    return XenditClient()
