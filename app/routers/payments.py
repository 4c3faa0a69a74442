from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from typing import List
import logging

from app.crud import payment as payment_crud
from app.database import get_db
from app.exceptions import ValidationError
from app.schemas.payment import (
    InvoiceResponse,
    PaymentCreateRequest,
    PaymentInDB,
    WebhookPayload,
)
from app.services import booking_service, invoice_service, webhook_service
from app.services.auth import Principal, get_current_principal
from app.services.notification_service import (
    NotificationService,
    get_notification_service,
)
from app.services.xendit_client import XenditClient, get_payment_gateway

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/create", response_model=InvoiceResponse)
def create_payment(
    request: PaymentCreateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    gateway: XenditClient = Depends(get_payment_gateway),
):
    """Issue (or return the live) invoice for an approved booking."""
    payment = invoice_service.create_payment_for_booking(
        db, principal, request.booking_id, gateway
    )
    return {
        "success": True,
        "data": {
            "invoiceUrl": payment.invoice_url,
            "invoiceId": payment.xendit_invoice_id,
            "paymentId": payment.id,
            "expiryDate": payment.expiry_date,
        },
    }


@router.get("/booking/{booking_id}", response_model=List[PaymentInDB])
def read_booking_payments(
    booking_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    booking = booking_service.get_booking(db, principal, booking_id)
    return payment_crud.get_payments_for_booking(db, booking.id)


@router.post("/webhook")
async def payment_webhook(
    request: Request,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Invoice callback from Xendit. The token is checked before the body is read."""
    webhook_service.authenticate_callback(request.headers.get("x-callback-token"))

    try:
        payload = WebhookPayload.model_validate(await request.json())
    except (ValueError, PydanticValidationError) as e:
        raise ValidationError("Invalid webhook payload") from e

    logger.info(f"Xendit webhook received: external_id={payload.external_id} status={payload.status}")
    await run_in_threadpool(webhook_service.handle_invoice_callback, db, payload, notifier)
    return {"success": True}


@router.get("/webhook")
def webhook_status():
    return {"success": True, "message": "Webhook endpoint active"}
