# app/membership/service.py
import datetime
import logging
from typing import List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from app.core.errors import LedgerError, NotFound
from app.membership.models import Membership
from app.order.models import Order
from app.product.models import Product
import app.user.service as _user_services

logger = logging.getLogger("uvicorn.error")


def active_clause(now: datetime.datetime):
    """Entitlement needs both the flag and an unexpired date."""
    return and_(Membership.is_active == True, Membership.expires_at > now)

# --- Queries ---

def get_membership(db: Session, membership_id: int) -> Optional[Membership]:
    return db.query(Membership).filter(Membership.id == membership_id).first()

def list_memberships_by_user(db: Session, user_id: int) -> List[Membership]:
    user = _user_services.get_user_by_id(db, user_id)
    query = db.query(Membership)
    if user:
        # Memberships bought before the account existed are matched on email
        query = query.filter(or_(Membership.user_id == user_id, Membership.subscriber_email == user.email))
    else:
        query = query.filter(Membership.user_id == user_id)
    return query.order_by(Membership.expires_at.desc()).all()

def list_memberships_by_creator(db: Session, creator_id: int) -> List[Membership]:
    return db.query(Membership)\
             .filter(Membership.creator_id == creator_id)\
             .order_by(Membership.expires_at.desc())\
             .all()

def list_active_memberships(
    db: Session,
    now: Optional[datetime.datetime] = None,
    creator_id: Optional[int] = None
) -> List[Membership]:
    now = now or datetime.datetime.utcnow()
    query = db.query(Membership).filter(active_clause(now))
    if creator_id is not None:
        query = query.filter(Membership.creator_id == creator_id)
    return query.order_by(Membership.expires_at.asc()).all()

def get_active_membership(
    db: Session,
    user_id: int,
    creator_id: int,
    now: Optional[datetime.datetime] = None
) -> Optional[Membership]:
    now = now or datetime.datetime.utcnow()
    for membership in list_memberships_by_user(db, user_id):
        if membership.creator_id == creator_id and membership.is_entitled(now):
            return membership
    return None

# --- Mutations ---

def _duration(product: Product) -> datetime.timedelta:
    if not product.membership_duration:
        raise LedgerError(f"Product {product.id} has no membership duration")
    return datetime.timedelta(days=product.membership_duration)

def _resolve_subscriber_id(db: Session, order: Order) -> Optional[int]:
    if order.customer_id:
        return order.customer_id
    user = _user_services.get_user_by_email(db, order.customer_email)
    return user.id if user else None

def create_membership(db: Session, order: Order, commit: bool = True) -> Membership:
    """Starts a membership at the order's completion time."""
    if not order.is_completed or order.completed_at is None:
        raise LedgerError(f"Order {order.id} is not completed")
    product = db.query(Product).filter(Product.id == order.product_id).first()
    if not product:
        raise NotFound(f"Product {order.product_id} not found")

    membership = Membership(
        user_id=_resolve_subscriber_id(db, order),
        subscriber_email=order.customer_email,
        creator_id=order.creator_id,
        product_id=product.id,
        order_id=order.id,
        expires_at=order.completed_at + _duration(product),
        is_active=True,
        created_at=order.completed_at
    )
    db.add(membership)
    if commit:
        db.commit()
        db.refresh(membership)
    else:
        db.flush()
    return membership

def create_or_renew_for_order(db: Session, order: Order) -> Membership:
    """
    Applies a completed membership order.

    A subscriber still holding time on the same product gets it extended
    from the current expiry; otherwise a fresh membership starts. Does not
    commit, the caller owns the transaction.
    """
    existing = db.query(Membership).filter(
        Membership.product_id == order.product_id,
        Membership.subscriber_email == order.customer_email,
        active_clause(order.completed_at)
    ).order_by(Membership.expires_at.desc()).first()

    if existing is None:
        return create_membership(db, order, commit=False)

    product = db.query(Product).filter(Product.id == existing.product_id).first()
    if not product:
        raise NotFound(f"Product {existing.product_id} not found")

    existing.expires_at = existing.expires_at + _duration(product)
    existing.order_id = order.id
    if existing.user_id is None:
        existing.user_id = _resolve_subscriber_id(db, order)
    db.flush()
    logger.info("Membership %s extended to %s by order %s", existing.id, existing.expires_at, order.id)
    return existing

def renew_membership(db: Session, membership_id: int) -> bool:
    membership = get_membership(db, membership_id)
    if not membership:
        return False
    product = db.query(Product).filter(Product.id == membership.product_id).first()
    if not product or not product.membership_duration:
        return False

    membership.expires_at = membership.expires_at + datetime.timedelta(days=product.membership_duration)
    db.commit()
    db.refresh(membership)
    return True
