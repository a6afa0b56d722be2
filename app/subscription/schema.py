# app/subscription/schema.py
from decimal import Decimal
from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import datetime

class SubscriptionTier(BaseModel):
    id: int
    name: str
    price: Decimal
    duration: int
    is_active: bool

class SubscriptionStatus(BaseModel):
    is_active: bool
    tier: Optional[SubscriptionTier] = None
    expires_at: Optional[datetime] = None
    days_remaining: Optional[int] = None
    auto_renew: bool = False

class ExpiringMembership(BaseModel):
    id: int
    subscriber_email: str
    creator_id: int
    product_id: int
    expires_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ReminderResult(BaseModel):
    window_days: int
    reminded: int
    memberships: List[ExpiringMembership]

class MembershipAnalytics(BaseModel):
    total: int
    active: int
    expired: int
    expiring_this_week: int
    mrr: Decimal
    avg_membership_price: Decimal
    retention_rate: float
