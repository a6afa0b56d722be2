# app/payout/schema.py
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, Dict, Any
from datetime import datetime
from enum import Enum

BANK_FIELDS = ("account_number", "ifsc", "account_holder_name", "bank_name")

class PayoutStatusEnum(str, Enum):
    pending = "pending"
    processing = "processing"
    completed = "completed"
    rejected = "rejected"

class PaymentDetails(BaseModel):
    """Where the money goes: a full bank account, or a UPI id."""
    account_number: Optional[str] = Field(None, min_length=6, max_length=20, pattern=r"^\d+$")
    ifsc: Optional[str] = Field(None, pattern=r"^[A-Z]{4}0[A-Z0-9]{6}$")
    account_holder_name: Optional[str] = Field(None, min_length=1, max_length=100)
    bank_name: Optional[str] = Field(None, min_length=1, max_length=100)
    upi_id: Optional[str] = Field(None, max_length=100, pattern=r"^[A-Za-z0-9._\-]{2,64}@[A-Za-z]{2,32}$")

    @model_validator(mode="after")
    def check_exactly_one_method(self):
        provided = [f for f in BANK_FIELDS if getattr(self, f)]
        if provided and len(provided) != len(BANK_FIELDS):
            missing = sorted(set(BANK_FIELDS) - set(provided))
            raise ValueError(f"Incomplete bank details, missing: {', '.join(missing)}")
        has_bank = len(provided) == len(BANK_FIELDS)
        has_upi = bool(self.upi_id)
        if has_bank and has_upi:
            raise ValueError("Provide bank details or a UPI id, not both")
        if not has_bank and not has_upi:
            raise ValueError("Provide either bank details or a UPI id")
        return self

    @property
    def method(self) -> str:
        return "upi" if self.upi_id else "bank"

# --- Requests ---

class PayoutRequest(BaseModel):
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)
    payment_details: PaymentDetails

class PayoutStatusUpdate(BaseModel):
    status: PayoutStatusEnum
    admin_notes: Optional[str] = None

# --- Responses ---

class PayoutOut(BaseModel):
    id: int
    creator_id: int
    amount: Decimal
    status: PayoutStatusEnum
    bank_details: Dict[str, Any]
    admin_notes: Optional[str] = None
    requested_at: datetime
    processed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class BalanceOut(BaseModel):
    creator_id: int
    total_earnings: Decimal
    committed_payouts: Decimal
    available_balance: Decimal
    minimum_payout: Decimal
