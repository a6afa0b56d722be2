# app/notification/service.py
"""
Transactional email for settlement events.

Everything here is fire-and-forget: it runs after the state change has been
committed, and a delivery failure is logged but never raised back into the
request that triggered it.
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, NamedTuple, Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from app.core import settings as _settings
from app.membership.models import Membership
from app.order.models import Order
from app.payout.models import Payout
from app.product.models import Product
from app.user.models import User

logger = logging.getLogger("uvicorn.error")


class EmailMessage(NamedTuple):
    recipient: str
    subject: str
    html_body: str


# --- A. Transport ---

def send_email(recipient_email: str, subject: str, html_body: str) -> bool:
    if not _settings.SMTP_SERVER:
        logger.warning("SMTP_SERVER not configured, dropping email to %s: %s", recipient_email, subject)
        return False

    msg = MIMEMultipart("alternative")
    msg['Subject'] = subject
    msg['From'] = _settings.SENDER_EMAIL
    msg['To'] = recipient_email
    msg.attach(MIMEText(html_body, "html"))

    try:
        with smtplib.SMTP(_settings.SMTP_SERVER, _settings.SMTP_PORT, timeout=10) as server:
            server.starttls()
            if _settings.SENDER_PASSWORD:
                server.login(_settings.SENDER_EMAIL, _settings.SENDER_PASSWORD)
            server.sendmail(_settings.SENDER_EMAIL, recipient_email, msg.as_string())
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", recipient_email, e)
        return False


def _deliver(message: EmailMessage) -> None:
    try:
        if not send_email(message.recipient, message.subject, message.html_body):
            logger.warning("Email '%s' to %s was not delivered", message.subject, message.recipient)
    except Exception:
        logger.exception("Email '%s' to %s crashed", message.subject, message.recipient)


def _dispatch(background_tasks: Optional[BackgroundTasks], messages: List[EmailMessage]) -> int:
    """Queues on the response's background tasks, or sends inline when there is no request."""
    for message in messages:
        if background_tasks is not None:
            background_tasks.add_task(_deliver, message)
        else:
            _deliver(message)
    return len(messages)


def _money(value) -> str:
    return f"{_settings.CURRENCY} {value}"


# --- B. Templates ---

def order_completed_messages(order: Order, creator: User, product: Optional[Product]) -> List[EmailMessage]:
    item = product.title if product else "your support"
    customer = order.customer_name or "there"
    messages = [
        EmailMessage(
            recipient=order.customer_email,
            subject=f"Thanks for your purchase from {creator.display_name}",
            html_body=(
                f"<p>Hi {customer},</p>"
                f"<p>Your payment of {_money(order.amount)} for {item} was successful.</p>"
                f"<p>Order reference: #{order.id}</p>"
            ),
        )
    ]
    if creator.email:
        messages.append(EmailMessage(
            recipient=creator.email,
            subject=f"New {order.type}: {_money(order.amount)}",
            html_body=(
                f"<p>{customer} ({order.customer_email}) paid {_money(order.amount)} for {item}.</p>"
                f"<p>Platform fee: {_money(order.platform_fee)}<br/>"
                f"Your earnings: {_money(order.creator_earnings)}</p>"
            ),
        ))
    return messages


def membership_renewed_message(membership: Membership, product: Product) -> EmailMessage:
    return EmailMessage(
        recipient=membership.subscriber_email,
        subject=f"Your {product.title} membership was renewed",
        html_body=(
            f"<p>Your membership is now valid until "
            f"{membership.expires_at:%d %b %Y}.</p>"
        ),
    )


def membership_expiring_message(membership: Membership, product: Optional[Product], days_remaining: int) -> EmailMessage:
    title = product.title if product else "membership"
    return EmailMessage(
        recipient=membership.subscriber_email,
        subject=f"Your {title} access ends in {days_remaining} day(s)",
        html_body=(
            f"<p>Your {title} access expires on {membership.expires_at:%d %b %Y}.</p>"
            f"<p>Renew before then to keep your benefits.</p>"
        ),
    )


def payout_processed_message(payout: Payout, creator: User) -> EmailMessage:
    notes = f"<p>Notes: {payout.admin_notes}</p>" if payout.admin_notes else ""
    return EmailMessage(
        recipient=creator.email,
        subject=f"Payout #{payout.id} {payout.status}",
        html_body=f"<p>Your payout request of {_money(payout.amount)} is now {payout.status}.</p>{notes}",
    )


# --- C. Event Hooks ---

def notify_order_completed(background_tasks: Optional[BackgroundTasks], db: Session, order: Order) -> int:
    try:
        creator = db.query(User).filter(User.id == order.creator_id).first()
        if not creator:
            logger.warning("Order %s completed but creator %s is missing", order.id, order.creator_id)
            return 0
        product = db.query(Product).filter(Product.id == order.product_id).first() if order.product_id else None
        return _dispatch(background_tasks, order_completed_messages(order, creator, product))
    except Exception:
        logger.exception("Could not queue completion emails for order %s", order.id)
        return 0


def notify_membership_renewed(background_tasks: Optional[BackgroundTasks], db: Session, membership: Membership) -> int:
    try:
        product = db.query(Product).filter(Product.id == membership.product_id).first()
        if not product:
            return 0
        return _dispatch(background_tasks, [membership_renewed_message(membership, product)])
    except Exception:
        logger.exception("Could not queue renewal email for membership %s", membership.id)
        return 0


def notify_membership_expiring(
    background_tasks: Optional[BackgroundTasks],
    db: Session,
    membership: Membership,
    days_remaining: int
) -> int:
    try:
        product = db.query(Product).filter(Product.id == membership.product_id).first()
        return _dispatch(background_tasks, [membership_expiring_message(membership, product, days_remaining)])
    except Exception:
        logger.exception("Could not queue expiry reminder for membership %s", membership.id)
        return 0


def notify_payout_processed(background_tasks: Optional[BackgroundTasks], db: Session, payout: Payout) -> int:
    try:
        creator = db.query(User).filter(User.id == payout.creator_id).first()
        if not creator or not creator.email:
            return 0
        return _dispatch(background_tasks, [payout_processed_message(payout, creator)])
    except Exception:
        logger.exception("Could not queue payout email for payout %s", payout.id)
        return 0
