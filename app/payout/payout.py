# app/payout/payout.py
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.Shared.dependencies import get_db
import app.user.user as _user_auth
from app.user.models import User

import app.notification.service as _notifications
import app.payout.schema as _schemas
import app.payout.service as _services
from app.core.errors import NotFound

router = APIRouter()
admin_router = APIRouter()

# --- Creator Routes ---

@router.get("/", response_model=List[_schemas.PayoutOut], tags=["PAYOUT API"])
def list_my_payouts(
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.list_payouts_by_creator(db, current_user.id)

@router.get("/balance", response_model=_schemas.BalanceOut, tags=["PAYOUT API"])
def get_my_balance(
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.balance_summary(db, current_user.id)

@router.post("/", response_model=_schemas.PayoutOut, status_code=status.HTTP_201_CREATED, tags=["PAYOUT API"])
def request_payout(
    payout_in: _schemas.PayoutRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.request_payout(db, current_user.id, payout_in.amount, payout_in.payment_details)

# --- Admin Routes ---

@admin_router.get("/", response_model=List[_schemas.PayoutOut], tags=["ADMIN PAYOUT API"])
def list_pending_payouts(
    db: Session = Depends(get_db),
    admin: User = Depends(_user_auth.get_admin)
):
    return _services.list_pending_payouts(db)

@admin_router.put("/{payout_id}", response_model=_schemas.PayoutOut, tags=["ADMIN PAYOUT API"])
def update_payout_status(
    payout_id: int,
    updates: _schemas.PayoutStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: User = Depends(_user_auth.get_admin)
):
    before = _services.get_payout(db, payout_id)
    if not before:
        raise NotFound(f"Payout {payout_id} not found")
    previous_status = before.status

    payout = _services.admin_update_status(db, payout_id, updates.status, updates.admin_notes, actor=admin)
    if payout.status != previous_status and payout.processed_at is not None:
        _notifications.notify_payout_processed(background_tasks, db, payout)
    return payout
