from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional


class PaymentCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    booking_id: str = Field(alias="bookingId")


class InvoiceItem(BaseModel):
    name: str
    quantity: int = 1
    price: Decimal
    category: Optional[str] = None


class InvoiceRequest(BaseModel):
    """Parameters for a gateway invoice. Items are informational only."""

    external_id: str
    amount: Decimal
    payer_email: Optional[str] = None
    description: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    items: List[InvoiceItem] = []
    success_redirect_url: Optional[str] = None
    failure_redirect_url: Optional[str] = None
    currency: str = "IDR"
    invoice_duration: int = 86400


class Invoice(BaseModel):
    id: str
    invoice_url: str
    expiry_date: Optional[str] = None
    status: Optional[str] = None


class InvoiceData(BaseModel):
    invoiceUrl: str
    invoiceId: Optional[str] = None
    paymentId: str
    expiryDate: Optional[str] = None


class InvoiceResponse(BaseModel):
    success: bool = True
    data: InvoiceData


class WebhookPayload(BaseModel):
    """Invoice callback body sent by the payment gateway."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    external_id: str
    status: str
    amount: Optional[Decimal] = None
    paid_amount: Optional[Decimal] = None
    paid_at: Optional[datetime] = None
    payment_method: Optional[str] = None
    payment_channel: Optional[str] = None


class PaymentInDB(BaseModel):
    id: str
    booking_id: str
    xendit_invoice_id: Optional[str] = None
    xendit_external_id: Optional[str] = None
    invoice_url: Optional[str] = None
    amount: Decimal
    status: str
    payment_method: Optional[str] = None
    payment_channel: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
