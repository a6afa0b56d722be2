from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.Shared.dependencies import get_db

import app.payment.gateway as _gateway
import app.payment.schema as _schemas
import app.payment.service as _services

router = APIRouter()

async def verified_callback(
    request: Request,
    x_webhook_signature: Optional[str] = Header(None),
    x_webhook_timestamp: Optional[str] = Header(None)
) -> _schemas.PaymentCallback:
    # the signature covers the exact bytes sent, so parse only after checking them
    raw_body = await request.body()
    _gateway.verify_webhook_signature(raw_body, x_webhook_timestamp, x_webhook_signature)
    try:
        return _schemas.PaymentCallback.model_validate_json(raw_body)
    except ValidationError as e:
        raise RequestValidationError(e.errors())

@router.post("/session/{order_id}", response_model=_schemas.PaymentSessionOut, tags=["PAYMENT API"])
def create_payment_session(
    order_id: int,
    session_in: _schemas.PaymentSessionReq,
    db: Session = Depends(get_db)
):
    return _services.start_payment_session(db, order_id, session_in)

@router.post("/verify/{order_id}", response_model=_schemas.SettlementOut, tags=["PAYMENT API"])
def verify_payment(
    order_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db)
):
    order, payment_status, settled = _services.verify_order_payment(db, order_id, background_tasks)
    return {"order": order, "payment_status": payment_status, "settled": settled}

@router.post("/webhook", tags=["PAYMENT API"])
def payment_webhook(
    background_tasks: BackgroundTasks,
    callback: _schemas.PaymentCallback = Depends(verified_callback),
    db: Session = Depends(get_db)
):
    """Gateway notification. Errors answer non-2xx so the gateway retries."""
    order = _services.apply_payment_callback(db, callback, background_tasks)
    return {"status": "OK", "order_id": order.id, "order_status": order.status}
