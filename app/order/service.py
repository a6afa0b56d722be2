# app/order/service.py
import datetime
import logging
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

import app.membership.service as _membership_services
import app.order.schema as _schemas
import app.product.service as _product_services
import app.user.service as _user_services
from app.core import ledger as _ledger
from app.core import settings as _settings
from app.core.errors import InvalidAmount, InvalidTransition, LedgerError, NotFound
from app.order.models import Order, OrderStatus, OrderType

logger = logging.getLogger("uvicorn.error")

# Allowed status changes; anything missing here is rejected
ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.pending: frozenset({OrderStatus.completed, OrderStatus.failed, OrderStatus.refunded}),
    OrderStatus.completed: frozenset(),
    OrderStatus.failed: frozenset(),
    OrderStatus.refunded: frozenset(),
}

# --- Queries ---

def get_order(db: Session, order_id: int) -> Optional[Order]:
    return db.query(Order).filter(Order.id == order_id).first()

def get_order_or_404(db: Session, order_id: int) -> Order:
    order = get_order(db, order_id)
    if not order:
        raise NotFound(f"Order {order_id} not found")
    return order

def lock_order(db: Session, order_id: int) -> Order:
    """Row-locks the order for the current transaction and reloads it from the database."""
    order = db.query(Order)\
              .filter(Order.id == order_id)\
              .with_for_update()\
              .populate_existing()\
              .first()
    if not order:
        raise NotFound(f"Order {order_id} not found")
    return order

def list_orders_by_creator(db: Session, creator_id: int, status: Optional[str] = None) -> List[Order]:
    query = db.query(Order).filter(Order.creator_id == creator_id)
    if status:
        query = query.filter(Order.status == status)
    return query.order_by(desc(Order.created_at)).all()

def list_orders_by_customer(db: Session, customer_email: str) -> List[Order]:
    return db.query(Order)\
             .filter(Order.customer_email == customer_email)\
             .order_by(desc(Order.created_at))\
             .all()

def list_completed_orders(db: Session, creator_id: int) -> List[Order]:
    return list_orders_by_creator(db, creator_id, status=OrderStatus.completed.value)

# --- Checkout ---

def create_order(
    db: Session,
    payload: _schemas.OrderCreate,
    customer_id: Optional[int] = None,
    now: Optional[datetime.datetime] = None
) -> Order:
    """Creates a pending order with its fee split frozen."""
    _user_services.get_creator_or_404(db, payload.creator_id)
    amount = _ledger.to_money(payload.amount)

    if payload.product_id is not None:
        product = _product_services.get_product_or_404(db, payload.product_id)
        if product.creator_id != payload.creator_id:
            raise NotFound(f"Product {product.id} not found for creator {payload.creator_id}")
        if not product.is_active:
            raise LedgerError(f"Product {product.id} is no longer on sale")
        if product.type != payload.type.value:
            raise LedgerError(f"Product {product.id} is a {product.type}, not a {payload.type.value}")
        if amount != _ledger.to_money(product.price):
            raise InvalidAmount(f"Amount {amount} does not match product price {product.price}")

    split = _ledger.split(amount, _settings.PLATFORM_FEE_PERCENTAGE)

    order = Order(
        creator_id=payload.creator_id,
        customer_email=payload.customer_email,
        customer_name=payload.customer_name,
        customer_id=customer_id,
        product_id=payload.product_id,
        amount=amount,
        platform_fee=split.platform_fee,
        creator_earnings=split.creator_earnings,
        type=payload.type.value,
        status=OrderStatus.pending.value,
        created_at=now or datetime.datetime.utcnow()
    )
    try:
        db.add(order)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(order)
    logger.info(
        "Order %s created for creator %s: amount=%s fee=%s earnings=%s",
        order.id, order.creator_id, order.amount, order.platform_fee, order.creator_earnings
    )
    return order

# --- Status Machine ---

def update_order_status(
    db: Session,
    order_id: int,
    new_status: OrderStatus,
    payment_meta: Optional[_schemas.PaymentMeta] = None,
    now: Optional[datetime.datetime] = None
) -> Order:
    """
    Moves an order through its lifecycle.

    Only pending orders move. The status is read under a row lock, so of two
    overlapping callbacks only the first completes the order. Completion
    stamps ``completed_at`` and applies the membership in the same commit.
    Repeating the current status is a no-op so gateway retries are harmless.
    Notifications are the caller's job.
    """
    new_status = OrderStatus(new_status)
    order = lock_order(db, order_id)
    current = OrderStatus(order.status)

    if new_status == current:
        db.rollback()
        logger.info("Order %s already %s, ignoring repeat transition", order_id, current.value)
        return order
    if new_status not in ORDER_TRANSITIONS[current]:
        db.rollback()
        raise InvalidTransition(f"Order {order.id} cannot move from {current.value} to {new_status.value}")

    try:
        order.status = new_status.value
        if payment_meta is not None:
            if payment_meta.payment_id:
                order.payment_id = payment_meta.payment_id
            if payment_meta.payment_data is not None:
                order.payment_data = payment_meta.payment_data

        if new_status == OrderStatus.completed:
            order.completed_at = now or datetime.datetime.utcnow()
            if order.type == OrderType.membership.value:
                _membership_services.create_or_renew_for_order(db, order)

        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Order %s transition %s -> %s rolled back", order_id, current.value, new_status.value)
        raise

    db.refresh(order)
    logger.info("Order %s moved %s -> %s", order.id, current.value, new_status.value)
    return order
