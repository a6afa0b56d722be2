# app/order/order.py
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.Shared.dependencies import get_db
import app.user.user as _user_auth
from app.user.models import User

import app.notification.service as _notifications
import app.order.schema as _schemas
import app.order.service as _services
from app.core.errors import Forbidden
from app.order.models import OrderStatus

router = APIRouter()

# --- Checkout (public) ---

@router.post("/", response_model=_schemas.OrderOut, status_code=status.HTTP_201_CREATED, tags=["ORDER API"])
def checkout(order_in: _schemas.OrderCreate, db: Session = Depends(get_db)):
    """Creates a pending order; the payment gateway completes it later."""
    return _services.create_order(db, order_in)

# --- Creator / Customer Views ---

@router.get("/", response_model=List[_schemas.OrderOut], tags=["ORDER API"])
def list_my_sales(
    status: Optional[_schemas.OrderStatusEnum] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.list_orders_by_creator(db, current_user.id, status.value if status else None)

@router.get("/purchases", response_model=List[_schemas.OrderOut], tags=["ORDER API"])
def list_my_purchases(
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    return _services.list_orders_by_customer(db, current_user.email)

@router.get("/{order_id}", response_model=_schemas.OrderOut, tags=["ORDER API"])
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(_user_auth.get_current_user)
):
    order = _services.get_order_or_404(db, order_id)
    allowed = current_user.is_admin or order.creator_id == current_user.id \
        or order.customer_email == current_user.email
    if not allowed:
        raise Forbidden("Not your order")
    return order

# --- Manual Settlement (admin) ---

@router.put("/{order_id}/status", response_model=_schemas.OrderOut, tags=["ORDER API"])
def update_order_status(
    order_id: int,
    updates: _schemas.OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: User = Depends(_user_auth.get_admin)
):
    previous_status = _services.lock_order(db, order_id).status
    order = _services.update_order_status(
        db, order_id, OrderStatus(updates.status.value),
        _schemas.PaymentMeta(payment_id=updates.payment_id)
    )
    if previous_status != order.status and order.is_completed:
        _notifications.notify_order_completed(background_tasks, db, order)
    return order
