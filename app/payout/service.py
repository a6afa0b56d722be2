# app/payout/service.py
import datetime
import logging
import threading
from decimal import Decimal
from typing import Any, Dict, FrozenSet, List, Optional, Union

from pydantic import ValidationError
from sqlalchemy import desc
from sqlalchemy.orm import Session

import app.payout.schema as _schemas
from app.core import ledger as _ledger
from app.core import settings as _settings
from app.core.errors import (
    BelowMinimum,
    Forbidden,
    InsufficientBalance,
    InvalidAmount,
    InvalidPaymentDetails,
    InvalidTransition,
    NotFound,
)
from app.order.models import Order, OrderStatus
from app.payout.models import Payout, PayoutStatus
from app.user.models import User

logger = logging.getLogger("uvicorn.error")

# Payouts that already hold money against the balance
COMMITTED_PAYOUT_STATUSES: FrozenSet[PayoutStatus] = frozenset({
    PayoutStatus.pending,
    PayoutStatus.processing,
    PayoutStatus.completed,
})

PAYOUT_TRANSITIONS: Dict[PayoutStatus, FrozenSet[PayoutStatus]] = {
    PayoutStatus.pending: frozenset({PayoutStatus.processing, PayoutStatus.completed, PayoutStatus.rejected}),
    PayoutStatus.processing: frozenset({PayoutStatus.completed, PayoutStatus.rejected}),
    PayoutStatus.completed: frozenset(),
    PayoutStatus.rejected: frozenset(),
}

PROCESSED_STATUSES = frozenset({PayoutStatus.completed, PayoutStatus.rejected})

# ==========================================
#   PER-CREATOR SERIALIZATION
# ==========================================

# One lock per creator that has ever requested a payout in this process;
# bounded by the creator count, never evicted.
_creator_locks: Dict[int, threading.Lock] = {}
_creator_locks_guard = threading.Lock()

def _creator_lock(creator_id: int) -> threading.Lock:
    with _creator_locks_guard:
        lock = _creator_locks.get(creator_id)
        if lock is None:
            lock = _creator_locks[creator_id] = threading.Lock()
        return lock

# ==========================================
#   BALANCE
# ==========================================

def total_completed_earnings(db: Session, creator_id: int) -> Decimal:
    rows = db.query(Order.creator_earnings).filter(
        Order.creator_id == creator_id,
        Order.status == OrderStatus.completed.value
    ).all()
    return sum((_ledger.to_money(r.creator_earnings) for r in rows), _ledger.ZERO)

def total_committed_payouts(db: Session, creator_id: int) -> Decimal:
    rows = db.query(Payout.amount).filter(
        Payout.creator_id == creator_id,
        Payout.status.in_([s.value for s in COMMITTED_PAYOUT_STATUSES])
    ).all()
    return sum((_ledger.to_money(r.amount) for r in rows), _ledger.ZERO)

def available_balance(db: Session, creator_id: int) -> Decimal:
    return total_completed_earnings(db, creator_id) - total_committed_payouts(db, creator_id)

def balance_summary(db: Session, creator_id: int) -> Dict[str, Any]:
    earnings = total_completed_earnings(db, creator_id)
    committed = total_committed_payouts(db, creator_id)
    return {
        "creator_id": creator_id,
        "total_earnings": earnings,
        "committed_payouts": committed,
        "available_balance": earnings - committed,
        "minimum_payout": _ledger.to_money(_settings.MIN_PAYOUT_AMOUNT),
    }

# ==========================================
#   QUERIES
# ==========================================

def get_payout(db: Session, payout_id: int) -> Optional[Payout]:
    return db.query(Payout).filter(Payout.id == payout_id).first()

def list_payouts_by_creator(db: Session, creator_id: int) -> List[Payout]:
    return db.query(Payout)\
             .filter(Payout.creator_id == creator_id)\
             .order_by(desc(Payout.requested_at))\
             .all()

def list_pending_payouts(db: Session) -> List[Payout]:
    """Admin review queue, oldest first."""
    return db.query(Payout)\
             .filter(Payout.status.in_([PayoutStatus.pending.value, PayoutStatus.processing.value]))\
             .order_by(Payout.requested_at.asc())\
             .all()

# ==========================================
#   REQUEST
# ==========================================

def _validate_details(
    payment_details: Union[_schemas.PaymentDetails, Dict[str, Any]]
) -> _schemas.PaymentDetails:
    if isinstance(payment_details, _schemas.PaymentDetails):
        return payment_details
    try:
        return _schemas.PaymentDetails.model_validate(payment_details or {})
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise InvalidPaymentDetails(messages)

def request_payout(
    db: Session,
    creator_id: int,
    amount: _ledger.Money,
    payment_details: Union[_schemas.PaymentDetails, Dict[str, Any]],
    now: Optional[datetime.datetime] = None
) -> Payout:
    """
    Creates a pending payout if the creator can cover it.

    The balance read and the insert run under a per-creator lock and a row
    lock on the creator, so two concurrent requests cannot both spend the
    same balance.
    """
    amount = _ledger.to_money(amount)
    if amount <= _ledger.ZERO:
        raise InvalidAmount("Payout amount must be greater than zero")
    minimum = _ledger.to_money(_settings.MIN_PAYOUT_AMOUNT)
    if amount < minimum:
        raise BelowMinimum(f"Minimum payout is {minimum}")
    details = _validate_details(payment_details)

    with _creator_lock(creator_id):
        try:
            creator = db.query(User)\
                        .filter(User.id == creator_id, User.is_deleted == False)\
                        .with_for_update()\
                        .first()
            if not creator:
                raise NotFound(f"Creator {creator_id} not found")

            balance = available_balance(db, creator_id)
            if amount > balance:
                raise InsufficientBalance(f"Requested {amount} exceeds available balance {balance}")

            payout = Payout(
                creator_id=creator_id,
                amount=amount,
                status=PayoutStatus.pending.value,
                bank_details=details.model_dump(exclude_none=True),
                requested_at=now or datetime.datetime.utcnow()
            )
            db.add(payout)
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(payout)
    logger.info("Payout %s requested by creator %s: %s via %s", payout.id, creator_id, amount, details.method)
    return payout

# ==========================================
#   ADMIN DECISION
# ==========================================

def admin_update_status(
    db: Session,
    payout_id: int,
    status: PayoutStatus,
    admin_notes: Optional[str],
    actor: Optional[User],
    now: Optional[datetime.datetime] = None
) -> Payout:
    if actor is None or not actor.is_admin:
        raise Forbidden("Admin access required")

    status = PayoutStatus(status)
    payout = get_payout(db, payout_id)
    if not payout:
        raise NotFound(f"Payout {payout_id} not found")

    current = PayoutStatus(payout.status)
    if status != current and status not in PAYOUT_TRANSITIONS[current]:
        raise InvalidTransition(f"Payout {payout.id} cannot move from {current.value} to {status.value}")

    payout.status = status.value
    if admin_notes is not None:
        payout.admin_notes = admin_notes
    if status != current and status in PROCESSED_STATUSES:
        payout.processed_at = now or datetime.datetime.utcnow()
        payout.processed_by = actor.id

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(payout)
    logger.info("Payout %s moved %s -> %s by admin %s", payout.id, current.value, status.value, actor.id)
    return payout
