# app/payment/gateway.py
"""
Thin Cashfree PG client.

Only the fields settlement needs are read back: the payment status, the
gateway reference and the amount. Every call carries a timeout; a timeout
surfaces as ``PaymentGatewayTimeout`` and nothing is written locally.
"""
import base64
import hashlib
import hmac
import logging
import time
from typing import Any, Dict, NamedTuple, Optional

import requests

from app.core import settings as _settings
from app.core.errors import InvalidSignature, PaymentGatewayError, PaymentGatewayTimeout

logger = logging.getLogger("uvicorn.error")


class PaymentSession(NamedTuple):
    external_ref: str
    payment_session_id: Optional[str]
    payment_url: Optional[str]


class GatewayPayment(NamedTuple):
    payment_status: str
    reference_id: Optional[str]
    amount: Optional[Any]
    raw: Dict[str, Any]


def _headers() -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "x-client-id": _settings.CASHFREE_APP_ID,
        "x-client-secret": _settings.CASHFREE_SECRET_KEY,
        "x-api-version": _settings.CASHFREE_API_VERSION,
    }


def _call(method: str, path: str, **kwargs) -> requests.Response:
    url = f"{_settings.CASHFREE_BASE_URL}{path}"
    try:
        return requests.request(method, url, headers=_headers(), timeout=_settings.PAYMENT_GATEWAY_TIMEOUT, **kwargs)
    except requests.Timeout:
        logger.warning("Payment gateway timed out: %s %s", method, path)
        raise PaymentGatewayTimeout("Payment gateway timed out, order left pending")
    except requests.RequestException as e:
        logger.error("Payment gateway unreachable: %s %s: %s", method, path, e)
        raise PaymentGatewayError("Payment gateway unreachable")


def _json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        raise PaymentGatewayError("Invalid response from payment gateway")


def create_payment_session(
    external_ref: str,
    amount: Any,
    customer_email: str,
    customer_name: str,
    return_url: str,
    notify_url: str,
    note: str,
    customer_phone: Optional[str] = None
) -> PaymentSession:
    body = {
        "order_id": external_ref,
        "order_amount": float(amount),
        "order_currency": _settings.CURRENCY,
        "customer_details": {
            "customer_id": customer_email,
            "customer_email": customer_email,
            "customer_name": customer_name,
            "customer_phone": customer_phone or "9999999999",
        },
        "order_meta": {"return_url": return_url, "notify_url": notify_url},
        "order_note": note,
    }
    response = _call("POST", "/pg/orders", json=body)
    data = _json(response)

    if not response.ok or not (data.get("order_id") or data.get("payment_session_id")):
        message = data.get("message") or data.get("error_description") or "Failed to create payment session"
        logger.error("Cashfree rejected session for %s: %s", external_ref, message)
        raise PaymentGatewayError(message)

    session_id = data.get("payment_session_id")
    return PaymentSession(
        external_ref=external_ref,
        payment_session_id=session_id,
        payment_url=data.get("payment_link") or f"{_settings.CASHFREE_BASE_URL}/pg/view/order/{session_id}",
    )


def fetch_payment(external_ref: str) -> Optional[GatewayPayment]:
    """Latest payment attempt for an order, or None when nothing was attempted."""
    response = _call("GET", f"/pg/orders/{external_ref}/payments")
    if response.status_code == 404:
        return None
    data = _json(response)

    if response.ok and not data:
        return None
    if not response.ok:
        raise PaymentGatewayError(data.get("message") if isinstance(data, dict) else "Payment lookup failed")

    payment = data[0]
    return GatewayPayment(
        payment_status=str(payment.get("payment_status", "")).upper(),
        reference_id=str(payment["cf_payment_id"]) if payment.get("cf_payment_id") is not None else None,
        amount=payment.get("payment_amount"),
        raw=payment,
    )


def webhook_signature(raw_body: bytes, timestamp: str, secret: str) -> str:
    digest = hmac.new(secret.encode(), timestamp.encode() + raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def verify_webhook_signature(
    raw_body: bytes,
    timestamp: Optional[str],
    signature: Optional[str],
    now: Optional[float] = None
) -> None:
    """
    Checks Cashfree's ``x-webhook-signature``: base64 HMAC-SHA256 of the
    timestamp header followed by the raw body, keyed with the client secret.
    """
    secret = _settings.CASHFREE_SECRET_KEY
    if not secret:
        logger.error("Webhook received but CASHFREE_SECRET_KEY is not configured")
        raise InvalidSignature("Webhook signing secret not configured")
    if not timestamp or not signature:
        logger.warning("Webhook rejected: missing signature headers")
        raise InvalidSignature("Missing webhook signature")

    try:
        sent_at = int(timestamp)
    except ValueError:
        logger.warning("Webhook rejected: bad timestamp %r", timestamp)
        raise InvalidSignature("Invalid webhook timestamp")
    # Cashfree sends milliseconds
    if sent_at > 10 ** 12:
        sent_at //= 1000
    now = time.time() if now is None else now
    if abs(now - sent_at) > _settings.WEBHOOK_TOLERANCE_SECONDS:
        logger.warning("Webhook rejected: stale timestamp %s", timestamp)
        raise InvalidSignature("Stale webhook timestamp")

    expected = webhook_signature(raw_body, timestamp, secret)
    if not hmac.compare_digest(expected, signature):
        logger.warning("Webhook rejected: invalid signature")
        raise InvalidSignature("Invalid webhook signature")
