# app/subscription/subscription.py
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.Shared.dependencies import get_db
import app.user.user as _user_auth
from app.user.models import User

import app.membership.service as _membership_services
import app.subscription.schema as _schemas
import app.subscription.service as _services
from app.Shared.schema import MessageResp
from app.core import settings as _settings
from app.core.errors import Forbidden

router = APIRouter()

@router.get("/status/{creator_id}", response_model=_schemas.SubscriptionStatus, tags=["SUBSCRIPTION API"])
def get_subscription_status(
    creator_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.check_status(db, current_user.id, creator_id)

@router.post("/renew/{membership_id}", response_model=MessageResp, tags=["SUBSCRIPTION API"])
def renew_membership(
    membership_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    membership = _membership_services.get_membership(db, membership_id)
    if membership and not current_user.is_admin and current_user.id not in (membership.user_id, membership.creator_id):
        raise Forbidden("Not your membership")

    if not _services.renew(db, membership_id, background_tasks):
        raise HTTPException(status_code=400, detail="Failed to renew membership")
    return {"message": "Membership renewed successfully"}

@router.get("/analytics", response_model=_schemas.MembershipAnalytics, tags=["SUBSCRIPTION API"])
def get_membership_analytics(
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.membership_analytics(db, current_user.id)

@router.post("/reminders", response_model=_schemas.ReminderResult, tags=["SUBSCRIPTION API"])
def send_expiry_reminders(
    background_tasks: BackgroundTasks,
    within_days: Optional[int] = Query(None, ge=1, le=60),
    db: Session = Depends(get_db),
    admin: User = Depends(_user_auth.get_admin)
):
    """Hook for the scheduler: emails everyone whose access ends within the window."""
    window = within_days or _settings.EXPIRY_REMINDER_DAYS
    reminded = _services.send_expiry_reminders(db, window, background_tasks=background_tasks)
    return {"window_days": window, "reminded": len(reminded), "memberships": reminded}
