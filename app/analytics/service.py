# app/analytics/service.py
"""
Read-side rollups for the creator dashboard.

Nothing is cached; every call recomputes from the order and product tables.
Revenue figures are creator earnings of completed orders, bucketed by the
order's creation date.
"""
import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

import app.membership.service as _membership_services
import app.order.service as _order_services
import app.product.service as _product_services
from app.core import ledger as _ledger
from app.order.models import Order, OrderStatus

TOP_PRODUCTS = 5
RECENT_ACTIVITY = 10


# --- Helpers ---

def month_start(now: datetime.datetime, offset: int = 0) -> datetime.datetime:
    """First instant of the calendar month ``offset`` months away from ``now``."""
    index = now.year * 12 + (now.month - 1) + offset
    return datetime.datetime(index // 12, index % 12 + 1, 1)

def growth(this: Any, last: Any) -> float:
    if not last:
        return 0.0
    return round(float((Decimal(this) - Decimal(last)) / Decimal(last) * 100), 2)

def _earnings(orders: Iterable[Order]) -> Decimal:
    return sum((_ledger.to_money(o.creator_earnings) for o in orders), _ledger.ZERO)

def _completed(orders: Iterable[Order]) -> List[Order]:
    return [o for o in orders if o.status == OrderStatus.completed.value]

def _in_range(orders: Iterable[Order], start: datetime.datetime, end: Optional[datetime.datetime] = None) -> List[Order]:
    return [o for o in orders if o.created_at >= start and (end is None or o.created_at < end)]


# --- Dashboard ---

def top_selling_products(db: Session, completed: List[Order], limit: int = TOP_PRODUCTS) -> List[Dict[str, Any]]:
    sales: Dict[int, Dict[str, Any]] = {}
    for order in completed:
        if order.product_id is None:
            continue
        entry = sales.setdefault(order.product_id, {"sales": 0, "revenue": _ledger.ZERO})
        entry["sales"] += 1
        entry["revenue"] += _ledger.to_money(order.creator_earnings)

    ranked = sorted(sales.items(), key=lambda item: (-item[1]["sales"], item[0]))[:limit]
    top = []
    for product_id, stats in ranked:
        product = _product_services.get_product(db, product_id)
        top.append({
            "id": product_id,
            "title": product.title if product else "Unknown Product",
            "sales": stats["sales"],
            "revenue": stats["revenue"],
        })
    return top

def creator_analytics(
    db: Session,
    creator_id: int,
    now: Optional[datetime.datetime] = None,
    top_n: int = TOP_PRODUCTS
) -> Dict[str, Any]:
    now = now or datetime.datetime.utcnow()
    this_month_start = month_start(now)
    last_month_start = month_start(now, -1)

    orders = _order_services.list_orders_by_creator(db, creator_id)
    products = _product_services.list_products_by_creator(db, creator_id)

    this_month_orders = _in_range(orders, this_month_start)
    last_month_orders = _in_range(orders, last_month_start, this_month_start)
    completed = _completed(orders)
    completed_this_month = _completed(this_month_orders)
    completed_last_month = _completed(last_month_orders)

    revenue_this_month = _earnings(completed_this_month)
    revenue_last_month = _earnings(completed_last_month)

    # Any order this month makes an email "new", returning customers included
    all_customers = {o.customer_email for o in orders}
    this_month_customers = {o.customer_email for o in this_month_orders}

    total_order_value = sum((_ledger.to_money(o.amount) for o in completed), _ledger.ZERO)
    avg_order_value = _ledger.round_money(total_order_value / len(completed)) if completed else _ledger.ZERO
    conversion_rate = (len(completed) / len(all_customers) * 100) if completed else 0.0

    recent = sorted(orders, key=lambda o: o.created_at, reverse=True)[:RECENT_ACTIVITY]

    return {
        "revenue": {
            "total": _earnings(completed),
            "this_month": revenue_this_month,
            "last_month": revenue_last_month,
            "growth": growth(revenue_this_month, revenue_last_month),
        },
        "orders": {
            "total": len(completed),
            "this_month": len(completed_this_month),
            "last_month": len(completed_last_month),
            "growth": growth(len(completed_this_month), len(completed_last_month)),
        },
        "products": {
            "total": len(products),
            "active": len([p for p in products if p.is_active]),
            "top_selling": top_selling_products(db, completed, top_n),
        },
        "customers": {
            "total": len(all_customers),
            "returning": len(all_customers) - len(this_month_customers),
            "new_this_month": len(this_month_customers),
        },
        "traffic": {
            "conversion_rate": round(conversion_rate, 2),
            "avg_order_value": avg_order_value,
        },
        "recent_activity": [
            {
                "type": "order",
                "timestamp": o.created_at,
                "description": f"Order from {o.customer_name or o.customer_email} - {o.type}",
                "amount": _ledger.to_money(o.amount),
            }
            for o in recent
        ],
    }


# --- Trends ---

def monthly_trends(
    db: Session,
    creator_id: int,
    months: int = 6,
    now: Optional[datetime.datetime] = None
) -> List[Dict[str, Any]]:
    """Oldest month first, current month last."""
    now = now or datetime.datetime.utcnow()
    completed = _order_services.list_completed_orders(db, creator_id)

    trends = []
    for i in range(months - 1, -1, -1):
        start = month_start(now, -i)
        month_orders = _in_range(completed, start, month_start(now, -i + 1))
        trends.append({
            "month": start.strftime("%b %Y"),
            "revenue": _earnings(month_orders),
            "orders": len(month_orders),
            "customers": len({o.customer_email for o in month_orders}),
        })
    return trends

def product_analytics(db: Session, product_id: int) -> Dict[str, Any]:
    product = _product_services.get_product_or_404(db, product_id)
    product_orders = [
        o for o in _order_services.list_orders_by_creator(db, product.creator_id)
        if o.product_id == product_id
    ]
    completed = _completed(product_orders)
    revenue = _earnings(completed)

    conversion: Dict[str, int] = {}
    for order in product_orders:
        conversion[order.status] = conversion.get(order.status, 0) + 1

    return {
        "product": product,
        "sales": {
            "total": len(completed),
            "revenue": revenue,
            "avg_price": _ledger.round_money(revenue / len(completed)) if completed else _ledger.ZERO,
        },
        "conversion": conversion,
        "recent_sales": product_orders[:RECENT_ACTIVITY],
    }


# --- Summary Cards ---

def earnings_summary(db: Session, creator_id: int, now: Optional[datetime.datetime] = None) -> Dict[str, Decimal]:
    now = now or datetime.datetime.utcnow()
    completed = _order_services.list_completed_orders(db, creator_id)
    return {
        "total": _earnings(completed),
        "this_month": _earnings(_in_range(completed, month_start(now), month_start(now, 1))),
    }

def creator_stats(db: Session, creator_id: int, now: Optional[datetime.datetime] = None) -> Dict[str, int]:
    now = now or datetime.datetime.utcnow()
    return {
        "total_orders": len(_order_services.list_completed_orders(db, creator_id)),
        "total_products": len(_product_services.list_products_by_creator(db, creator_id, active_only=True)),
        "total_members": len(_membership_services.list_active_memberships(db, now=now, creator_id=creator_id)),
    }
