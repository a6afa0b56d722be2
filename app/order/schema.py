# app/order/schema.py
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from typing import Optional, Dict, Any
from datetime import datetime
from enum import Enum

class OrderTypeEnum(str, Enum):
    donation = "donation"
    product = "product"
    membership = "membership"

class OrderStatusEnum(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"

# --- Requests ---

class OrderCreate(BaseModel):
    """Checkout submission."""
    creator_id: int
    product_id: Optional[int] = None
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)
    customer_email: EmailStr
    customer_name: Optional[str] = Field(None, max_length=100)
    type: OrderTypeEnum

    @model_validator(mode="after")
    def check_product(self):
        if self.type == OrderTypeEnum.donation and self.product_id is not None:
            raise ValueError("Donations cannot reference a product")
        if self.type != OrderTypeEnum.donation and self.product_id is None:
            raise ValueError(f"{self.type.value} orders require a product_id")
        return self

class OrderStatusUpdate(BaseModel):
    status: OrderStatusEnum
    payment_id: Optional[str] = None

# --- Responses ---

class OrderOut(BaseModel):
    id: int
    creator_id: int
    customer_email: str
    customer_name: Optional[str] = None
    product_id: Optional[int] = None
    amount: Decimal
    platform_fee: Decimal
    creator_earnings: Decimal
    type: OrderTypeEnum
    status: OrderStatusEnum
    payment_id: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class PaymentMeta(BaseModel):
    payment_id: Optional[str] = None
    payment_data: Optional[Dict[str, Any]] = None
