# app/payment/schema.py
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from app.order.schema import OrderOut

class PaymentCallback(BaseModel):
    """Gateway webhook body; extra keys are kept for the audit trail."""
    order_id: str = Field(..., alias="orderId")
    order_amount: Decimal = Field(..., alias="orderAmount")
    payment_status: str = Field(..., alias="paymentStatus")
    reference_id: Optional[str] = Field(None, alias="referenceId")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

class PaymentSessionReq(BaseModel):
    return_url: str
    notify_url: str
    customer_phone: Optional[str] = None

class PaymentSessionOut(BaseModel):
    order_id: int
    external_ref: str
    payment_session_id: Optional[str] = None
    payment_url: Optional[str] = None

class SettlementOut(BaseModel):
    order: OrderOut
    payment_status: str
    settled: bool
