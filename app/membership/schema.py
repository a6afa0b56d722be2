# app/membership/schema.py
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class MembershipOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    subscriber_email: str
    creator_id: int
    product_id: int
    order_id: int
    expires_at: datetime
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
