# app/payment/service.py
import datetime
import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

import app.notification.service as _notifications
import app.order.service as _order_services
import app.payment.gateway as _gateway
import app.payment.schema as _schemas
from app.core import ledger as _ledger
from app.core.errors import IntegrityMismatch, InvalidTransition, NotFound
from app.order.models import Order, OrderStatus
from app.order.schema import PaymentMeta

logger = logging.getLogger("uvicorn.error")

EXTERNAL_REF_PREFIX = "order_"
SUCCESS = "SUCCESS"
# Gateway states that are not an outcome yet
UNSETTLED_STATUSES = frozenset({"PENDING", "NOT_ATTEMPTED", "ACTIVE", "USER_DROPPED_PENDING"})


def external_ref(order_id: int) -> str:
    return f"{EXTERNAL_REF_PREFIX}{order_id}"

def parse_external_ref(ref: str) -> int:
    raw = ref[len(EXTERNAL_REF_PREFIX):] if ref.startswith(EXTERNAL_REF_PREFIX) else ref
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise NotFound(f"Unknown order reference {ref!r}")


def settle_order(
    db: Session,
    order_id: int,
    payment_status: str,
    reference_id: Optional[str],
    amount: Any,
    payment_data: Optional[Dict[str, Any]] = None,
    background_tasks: Optional[BackgroundTasks] = None,
    now: Optional[datetime.datetime] = None
) -> Order:
    """
    Applies a payment outcome to an order.

    SUCCESS completes the order, anything else fails it. A successful payment
    whose amount differs from the order is refused and leaves the order
    pending. The order is read under its row lock so a retried callback sees
    the status the first one committed and sends no second email.
    """
    order = _order_services.lock_order(db, order_id)
    succeeded = str(payment_status).upper() == SUCCESS

    if succeeded:
        reported = _ledger.to_money(amount)
        expected = _ledger.to_money(order.amount)
        if reported != expected:
            logger.error(
                "Amount mismatch on order %s: gateway reported %s, order is %s (ref %s)",
                order.id, reported, expected, reference_id
            )
            db.rollback()
            raise IntegrityMismatch(f"Paid amount {reported} does not match order amount {expected}")

    previous_status = order.status
    order = _order_services.update_order_status(
        db,
        order.id,
        OrderStatus.completed if succeeded else OrderStatus.failed,
        PaymentMeta(payment_id=reference_id, payment_data=payment_data),
        now=now
    )
    if previous_status != order.status and order.is_completed:
        _notifications.notify_order_completed(background_tasks, db, order)
    return order


def apply_payment_callback(
    db: Session,
    callback: _schemas.PaymentCallback,
    background_tasks: Optional[BackgroundTasks] = None,
    now: Optional[datetime.datetime] = None
) -> Order:
    order_id = parse_external_ref(callback.order_id)
    logger.info("Payment callback for order %s: %s (ref %s)", order_id, callback.payment_status, callback.reference_id)
    return settle_order(
        db,
        order_id,
        callback.payment_status,
        callback.reference_id,
        callback.order_amount,
        payment_data=callback.model_dump(mode="json", by_alias=True),
        background_tasks=background_tasks,
        now=now
    )


def verify_order_payment(
    db: Session,
    order_id: int,
    background_tasks: Optional[BackgroundTasks] = None,
    now: Optional[datetime.datetime] = None
) -> Tuple[Order, str, bool]:
    """Polls the gateway for a pending order. Returns (order, gateway status, settled)."""
    order = _order_services.get_order_or_404(db, order_id)
    if order.status != OrderStatus.pending.value:
        return order, order.status.upper(), False

    payment = _gateway.fetch_payment(external_ref(order.id))
    if payment is None:
        return order, "NOT_FOUND", False
    if payment.payment_status in UNSETTLED_STATUSES:
        return order, payment.payment_status, False

    order = settle_order(
        db, order.id, payment.payment_status, payment.reference_id, payment.amount,
        payment_data=payment.raw, background_tasks=background_tasks, now=now
    )
    return order, payment.payment_status, True


def start_payment_session(db: Session, order_id: int, request: _schemas.PaymentSessionReq) -> Dict[str, Any]:
    order = _order_services.get_order_or_404(db, order_id)
    if order.status != OrderStatus.pending.value:
        raise InvalidTransition(f"Order {order.id} is {order.status}, payment already settled")

    title = order.product.title if order.product else "donation"
    session = _gateway.create_payment_session(
        external_ref(order.id),
        order.amount,
        customer_email=order.customer_email,
        customer_name=order.customer_name or order.customer_email,
        return_url=request.return_url,
        notify_url=request.notify_url,
        note=f"Payment for {title}",
        customer_phone=request.customer_phone
    )
    return {
        "order_id": order.id,
        "external_ref": session.external_ref,
        "payment_session_id": session.payment_session_id,
        "payment_url": session.payment_url,
    }
