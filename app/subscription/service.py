# app/subscription/service.py
import datetime
import logging
import math
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

import app.membership.service as _membership_services
import app.notification.service as _notifications
import app.product.service as _product_services
from app.core import ledger as _ledger
from app.core import settings as _settings
from app.membership.models import Membership
from app.product.models import ProductType

logger = logging.getLogger("uvicorn.error")

ONE_DAY = datetime.timedelta(days=1)


def days_remaining(expires_at: datetime.datetime, now: datetime.datetime) -> int:
    return math.ceil((expires_at - now) / ONE_DAY)


def check_status(
    db: Session,
    user_id: int,
    creator_id: int,
    now: Optional[datetime.datetime] = None
) -> Dict[str, Any]:
    """Whether ``user_id`` is currently entitled to ``creator_id``'s membership content."""
    now = now or datetime.datetime.utcnow()
    membership = _membership_services.get_active_membership(db, user_id, creator_id, now=now)
    if membership is None:
        return {"is_active": False, "auto_renew": False}

    product = _product_services.get_product(db, membership.product_id)
    tier = None
    if product:
        tier = {
            "id": product.id,
            "name": product.title,
            "price": _ledger.to_money(product.price),
            "duration": product.membership_duration or _settings.DEFAULT_MEMBERSHIP_DURATION,
            "is_active": bool(product.is_active),
        }

    return {
        "is_active": True,
        "tier": tier,
        "expires_at": membership.expires_at,
        "days_remaining": days_remaining(membership.expires_at, now),
        "auto_renew": False,
    }


def renew(db: Session, membership_id: int, background_tasks: Optional[BackgroundTasks] = None) -> bool:
    """Extends a membership by one period and confirms it to the subscriber."""
    if not _membership_services.renew_membership(db, membership_id):
        logger.info("Renewal refused for membership %s", membership_id)
        return False
    membership = _membership_services.get_membership(db, membership_id)
    _notifications.notify_membership_renewed(background_tasks, db, membership)
    return True


def find_expiring_soon(
    db: Session,
    within_days: int,
    now: Optional[datetime.datetime] = None,
    creator_id: Optional[int] = None
) -> List[Membership]:
    now = now or datetime.datetime.utcnow()
    horizon = now + datetime.timedelta(days=within_days)
    return [
        m for m in _membership_services.list_active_memberships(db, now=now, creator_id=creator_id)
        if m.expires_at <= horizon
    ]


def send_expiry_reminders(
    db: Session,
    within_days: Optional[int] = None,
    now: Optional[datetime.datetime] = None,
    background_tasks: Optional[BackgroundTasks] = None
) -> List[Membership]:
    """Entry point for the external scheduler; returns the memberships reminded."""
    now = now or datetime.datetime.utcnow()
    within_days = within_days if within_days is not None else _settings.EXPIRY_REMINDER_DAYS
    expiring = find_expiring_soon(db, within_days, now=now)
    for membership in expiring:
        _notifications.notify_membership_expiring(
            background_tasks, db, membership, days_remaining(membership.expires_at, now)
        )
    logger.info("Expiry reminders: %s membership(s) within %s day(s)", len(expiring), within_days)
    return expiring


def membership_analytics(db: Session, creator_id: int, now: Optional[datetime.datetime] = None) -> Dict[str, Any]:
    now = now or datetime.datetime.utcnow()
    week_from_now = now + datetime.timedelta(days=7)
    memberships = _membership_services.list_memberships_by_creator(db, creator_id)

    active = [m for m in memberships if m.is_entitled(now)]
    expired = [m for m in memberships if m.expires_at <= now]
    expiring_this_week = [m for m in active if m.expires_at <= week_from_now]

    membership_products = [
        p for p in _product_services.list_products_by_creator(db, creator_id)
        if p.type == ProductType.membership.value
    ]
    if membership_products:
        total_price = sum((_ledger.to_money(p.price) for p in membership_products), _ledger.ZERO)
        avg_price = _ledger.round_money(total_price / len(membership_products))
    else:
        avg_price = _ledger.ZERO

    return {
        "total": len(memberships),
        "active": len(active),
        "expired": len(expired),
        "expiring_this_week": len(expiring_this_week),
        "mrr": _ledger.round_money(avg_price * len(active)),
        "avg_membership_price": avg_price,
        "retention_rate": (len(active) / len(memberships) * 100) if memberships else 0.0,
    }
