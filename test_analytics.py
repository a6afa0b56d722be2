import datetime
from decimal import Decimal

import app.analytics.service as _services
from app.order.models import OrderStatus
from app.product.models import ProductType
from conftest import NOW

LAST_MONTH = datetime.datetime(2024, 2, 10, 9, 0, 0)
TWO_MONTHS_AGO = datetime.datetime(2024, 1, 20, 9, 0, 0)


def test_growth_is_zero_without_a_baseline():
    assert _services.growth(Decimal("500.00"), Decimal("0.00")) == 0.0
    assert _services.growth(3, 0) == 0.0


def test_growth_percentage():
    assert _services.growth(Decimal("150"), Decimal("100")) == 50.0
    assert _services.growth(1, 3) == -66.67


def test_month_start_crosses_year_boundary():
    january = datetime.datetime(2024, 1, 15, 8, 30)
    assert _services.month_start(january) == datetime.datetime(2024, 1, 1)
    assert _services.month_start(january, -1) == datetime.datetime(2023, 12, 1)
    assert _services.month_start(january, 12) == datetime.datetime(2025, 1, 1)


def test_revenue_growth_with_empty_last_month(db, creator, make_order):
    make_order(creator, amount="555.56")

    stats = _services.creator_analytics(db, creator.id, now=NOW)

    assert stats["revenue"]["this_month"] == Decimal("500.00")
    assert stats["revenue"]["last_month"] == Decimal("0.00")
    assert stats["revenue"]["growth"] == 0.0
    assert stats["orders"]["growth"] == 0.0


def test_dashboard_revenue_and_orders(db, creator, make_order):
    make_order(creator, amount="100.00", created_at=LAST_MONTH)
    make_order(creator, amount="100.00", created_at=NOW)
    make_order(creator, amount="200.00", created_at=NOW)
    make_order(creator, amount="999.00", created_at=NOW, status=OrderStatus.failed)

    stats = _services.creator_analytics(db, creator.id, now=NOW)

    assert stats["revenue"]["total"] == Decimal("360.00")
    assert stats["revenue"]["this_month"] == Decimal("270.00")
    assert stats["revenue"]["last_month"] == Decimal("90.00")
    assert stats["revenue"]["growth"] == 200.0
    assert stats["orders"] == {"total": 3, "this_month": 2, "last_month": 1, "growth": 100.0}
    assert stats["traffic"]["avg_order_value"] == Decimal("133.33")
    assert len(stats["recent_activity"]) == 4


def test_average_order_value_is_zero_without_sales(db, creator, make_order):
    make_order(creator, amount="50.00", status=OrderStatus.pending)

    stats = _services.creator_analytics(db, creator.id, now=NOW)

    assert stats["traffic"]["avg_order_value"] == Decimal("0.00")
    assert stats["traffic"]["conversion_rate"] == 0.0


def test_top_selling_products_ranked_by_sales(db, creator, make_product, make_order):
    zine = make_product(creator, price="50.00", title="Zine")
    course = make_product(creator, price="900.00", title="Course")
    for _ in range(3):
        make_order(creator, product=zine)
    make_order(creator, product=course)
    make_order(creator, product=course, status=OrderStatus.failed)

    top = _services.creator_analytics(db, creator.id, now=NOW)["products"]["top_selling"]

    assert [(p["title"], p["sales"]) for p in top] == [("Zine", 3), ("Course", 1)]
    assert top[0]["revenue"] == Decimal("135.00")


def test_top_selling_respects_limit(db, creator, make_product, make_order):
    for i in range(4):
        make_order(creator, product=make_product(creator, price="10.00", title=f"Print {i}"))

    stats = _services.creator_analytics(db, creator.id, now=NOW, top_n=2)

    assert len(stats["products"]["top_selling"]) == 2
    assert stats["products"]["total"] == 4


def test_new_customers_count_anyone_who_ordered_this_month(db, creator, make_order):
    # A repeat buyer from last month is still reported as new this month
    make_order(creator, amount="10.00", email="regular@example.com", created_at=LAST_MONTH)
    make_order(creator, amount="10.00", email="regular@example.com", created_at=NOW)
    make_order(creator, amount="10.00", email="first@example.com", created_at=NOW)
    make_order(creator, amount="10.00", email="lapsed@example.com", created_at=TWO_MONTHS_AGO)

    customers = _services.creator_analytics(db, creator.id, now=NOW)["customers"]

    assert customers["total"] == 3
    assert customers["new_this_month"] == 2
    assert customers["returning"] == 1


def test_monthly_trends_oldest_first(db, creator, make_order):
    make_order(creator, amount="100.00", created_at=TWO_MONTHS_AGO)
    make_order(creator, amount="200.00", created_at=NOW, email="a@example.com")
    make_order(creator, amount="200.00", created_at=NOW, email="b@example.com")

    trends = _services.monthly_trends(db, creator.id, months=3, now=NOW)

    assert [t["month"] for t in trends] == ["Jan 2024", "Feb 2024", "Mar 2024"]
    assert [t["orders"] for t in trends] == [1, 0, 2]
    assert trends[2]["revenue"] == Decimal("360.00")
    assert trends[2]["customers"] == 2


def test_product_analytics(db, creator, make_product, make_order):
    zine = make_product(creator, price="50.00", title="Zine")
    make_order(creator, product=zine)
    make_order(creator, product=zine)
    make_order(creator, product=zine, status=OrderStatus.pending)

    stats = _services.product_analytics(db, zine.id)

    assert stats["sales"]["total"] == 2
    assert stats["sales"]["revenue"] == Decimal("90.00")
    assert stats["sales"]["avg_price"] == Decimal("45.00")
    assert stats["conversion"] == {"completed": 2, "pending": 1}


def test_earnings_summary_and_stats(db, creator, make_product, make_order):
    club = make_product(creator, price="200.00", type=ProductType.membership, title="Club")
    make_product(creator, price="10.00", title="Retired", is_active=False)
    make_order(creator, amount="100.00", created_at=LAST_MONTH)
    make_order(creator, product=club, created_at=NOW)

    assert _services.earnings_summary(db, creator.id, now=NOW) == {
        "total": Decimal("270.00"),
        "this_month": Decimal("180.00"),
    }
    assert _services.creator_stats(db, creator.id, now=NOW) == {
        "total_orders": 2,
        "total_products": 1,
        "total_members": 1,
    }
