import datetime
import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import app.payout.service as _services
from app.core.db.base import Base
from app.core.errors import (
    BelowMinimum,
    Forbidden,
    InsufficientBalance,
    InvalidAmount,
    InvalidPaymentDetails,
    InvalidTransition,
    NotFound,
)
from app.order.models import Order, OrderStatus
from app.payout.models import Payout, PayoutStatus
from app.payout.schema import PaymentDetails
from app.user.models import User
from conftest import BANK_DETAILS, NOW, UPI_DETAILS


def earn(make_order, creator, *earnings):
    """Completed donations whose creator share equals each value given."""
    for value in earnings:
        # 10% fee, so earnings of 900 need an order of 1000
        make_order(creator, amount=(Decimal(value) / Decimal("0.9")).quantize(Decimal("0.01")))


def payout_count(db, creator):
    return db.query(Payout).filter(Payout.creator_id == creator.id).count()


def test_balance_is_completed_earnings_minus_committed_payouts(db, creator, make_order):
    make_order(creator, amount="1000.00")
    make_order(creator, amount="500.00")
    make_order(creator, amount="300.00", status=OrderStatus.pending)
    make_order(creator, amount="300.00", status=OrderStatus.failed)
    _services.request_payout(db, creator.id, "200.00", UPI_DETAILS, now=NOW)

    completed = db.query(Order).filter(Order.creator_id == creator.id, Order.status == "completed").all()
    committed = db.query(Payout).filter(
        Payout.creator_id == creator.id, Payout.status.in_(["pending", "processing", "completed"])
    ).all()
    expected = sum(o.creator_earnings for o in completed) - sum(p.amount for p in committed)

    assert _services.available_balance(db, creator.id) == expected
    assert expected == Decimal("1150.00")


def test_full_balance_payout_then_nothing_left(db, creator, make_order):
    earn(make_order, creator, "450.00", "270.00")
    make_order(creator, amount="555.56")  # earnings 500.00
    make_order(creator, amount="333.33")  # earnings 300.00

    balance = _services.available_balance(db, creator.id)
    payout = _services.request_payout(db, creator.id, balance, BANK_DETAILS, now=NOW)

    assert payout.status == PayoutStatus.pending.value
    assert payout.amount == balance
    assert _services.available_balance(db, creator.id) == Decimal("0.00")

    with pytest.raises(InsufficientBalance):
        _services.request_payout(db, creator.id, "100.00", UPI_DETAILS)
    assert payout_count(db, creator) == 1


def test_eight_hundred_balance_scenario(db, creator, make_order):
    make_order(creator, amount="555.56")
    make_order(creator, amount="333.33")
    assert _services.available_balance(db, creator.id) == Decimal("800.00")

    payout = _services.request_payout(db, creator.id, "800", UPI_DETAILS, now=NOW)

    assert payout.status == PayoutStatus.pending.value
    with pytest.raises(InsufficientBalance):
        _services.request_payout(db, creator.id, "100", UPI_DETAILS)


def test_overdraw_creates_no_payout(db, creator, make_order):
    make_order(creator, amount="200.00")

    with pytest.raises(InsufficientBalance):
        _services.request_payout(db, creator.id, "180.01", UPI_DETAILS)
    assert payout_count(db, creator) == 0


def test_below_minimum_is_rejected(db, creator, make_order):
    make_order(creator, amount="1000.00")

    with pytest.raises(BelowMinimum):
        _services.request_payout(db, creator.id, "99.99", UPI_DETAILS)
    assert payout_count(db, creator) == 0


def test_fraction_of_a_paisa_is_not_rounded_up_to_the_minimum(db, creator, make_order):
    make_order(creator, amount="1000.00")

    with pytest.raises(InvalidAmount):
        _services.request_payout(db, creator.id, "99.995", UPI_DETAILS)
    assert payout_count(db, creator) == 0


@pytest.mark.parametrize("amount", ["0", "-100", "lots"])
def test_invalid_amount_is_rejected(db, creator, amount):
    with pytest.raises(InvalidAmount):
        _services.request_payout(db, creator.id, amount, UPI_DETAILS)


@pytest.mark.parametrize("details", [
    {},
    {**BANK_DETAILS, **UPI_DETAILS},
    {"account_number": "123456789012", "ifsc": "HDFC0001234"},
    {"upi_id": "not-an-upi"},
    {**BANK_DETAILS, "ifsc": "hdfc1234"},
])
def test_payment_details_need_exactly_one_method(db, creator, make_order, details):
    make_order(creator, amount="1000.00")

    with pytest.raises(InvalidPaymentDetails):
        _services.request_payout(db, creator.id, "100.00", details)
    assert payout_count(db, creator) == 0


@pytest.mark.parametrize("upi_id", ["creator@okhdfc", "asha.rao-99@ybl", "a_b@paytm"])
def test_upi_ids_are_accepted(upi_id):
    details = PaymentDetails(upi_id=upi_id)
    assert details.method == "upi"


@pytest.mark.parametrize("upi_id", ["@okhdfc", "asha@", "ásha@okhdfc", "asha rao@ybl", "asha@ok1"])
def test_malformed_upi_ids_are_refused(upi_id):
    with pytest.raises(ValidationError):
        PaymentDetails(upi_id=upi_id)


def test_full_bank_details_are_accepted():
    assert PaymentDetails(**BANK_DETAILS).method == "bank"


def test_creator_lock_is_shared_per_creator():
    assert _services._creator_lock(11) is _services._creator_lock(11)
    assert _services._creator_lock(11) is not _services._creator_lock(12)

def test_unknown_creator_cannot_request(db):
    with pytest.raises(NotFound):
        _services.request_payout(db, 999, "100.00", UPI_DETAILS)


def test_processing_payouts_stay_committed_and_rejected_ones_release(db, creator, admin, make_order):
    make_order(creator, amount="1000.00")
    payout = _services.request_payout(db, creator.id, "500.00", UPI_DETAILS, now=NOW)

    _services.admin_update_status(db, payout.id, PayoutStatus.processing, None, actor=admin, now=NOW)
    assert _services.available_balance(db, creator.id) == Decimal("400.00")

    _services.admin_update_status(db, payout.id, PayoutStatus.rejected, "Account closed", actor=admin, now=NOW)
    assert _services.available_balance(db, creator.id) == Decimal("900.00")


def test_admin_decision_sets_processed_fields_only_when_final(db, creator, admin, make_order):
    make_order(creator, amount="1000.00")
    payout = _services.request_payout(db, creator.id, "500.00", UPI_DETAILS, now=NOW)

    payout = _services.admin_update_status(db, payout.id, PayoutStatus.processing, "Queued", actor=admin, now=NOW)
    assert payout.processed_at is None
    assert payout.admin_notes == "Queued"

    done_at = NOW + datetime.timedelta(days=1)
    payout = _services.admin_update_status(db, payout.id, PayoutStatus.completed, "Paid", actor=admin, now=done_at)
    assert payout.processed_at == done_at
    assert payout.processed_by == admin.id
    assert payout.admin_notes == "Paid"


def test_non_admin_cannot_decide(db, creator, make_order):
    make_order(creator, amount="1000.00")
    payout = _services.request_payout(db, creator.id, "500.00", UPI_DETAILS)

    with pytest.raises(Forbidden):
        _services.admin_update_status(db, payout.id, PayoutStatus.completed, None, actor=creator)
    with pytest.raises(Forbidden):
        _services.admin_update_status(db, payout.id, PayoutStatus.completed, None, actor=None)

    db.refresh(payout)
    assert payout.status == PayoutStatus.pending.value


@pytest.mark.parametrize("final", [PayoutStatus.completed, PayoutStatus.rejected])
def test_final_payouts_cannot_move(db, creator, admin, make_order, final):
    make_order(creator, amount="1000.00")
    payout = _services.request_payout(db, creator.id, "500.00", UPI_DETAILS)
    _services.admin_update_status(db, payout.id, final, None, actor=admin)

    with pytest.raises(InvalidTransition):
        _services.admin_update_status(db, payout.id, PayoutStatus.pending, None, actor=admin)


def test_unknown_payout_is_not_found(db, admin):
    with pytest.raises(NotFound):
        _services.admin_update_status(db, 321, PayoutStatus.completed, None, actor=admin)


def test_review_queue_lists_open_payouts_oldest_first(db, creator, admin, make_order):
    make_order(creator, amount="5000.00")
    first = _services.request_payout(db, creator.id, "100.00", UPI_DETAILS, now=NOW)
    second = _services.request_payout(db, creator.id, "200.00", UPI_DETAILS, now=NOW + datetime.timedelta(hours=1))
    done = _services.request_payout(db, creator.id, "300.00", UPI_DETAILS, now=NOW + datetime.timedelta(hours=2))
    _services.admin_update_status(db, done.id, PayoutStatus.completed, None, actor=admin)

    assert [p.id for p in _services.list_pending_payouts(db)] == [first.id, second.id]


def test_concurrent_requests_cannot_spend_the_same_balance(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'ledger.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    with Session() as setup:
        creator = User(email="busy@example.com", username="busy", role="creator")
        setup.add(creator)
        setup.commit()
        setup.add(Order(
            creator_id=creator.id, customer_email="fan@example.com",
            amount=Decimal("1000.00"), platform_fee=Decimal("100.00"), creator_earnings=Decimal("900.00"),
            type="donation", status="completed", created_at=NOW, completed_at=NOW,
        ))
        setup.commit()
        creator_id = creator.id

    workers = 4
    barrier = threading.Barrier(workers)

    def attempt(_):
        barrier.wait()
        session = Session()
        try:
            _services.request_payout(session, creator_id, "600.00", UPI_DETAILS)
            return "accepted"
        except InsufficientBalance:
            return "refused"
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(attempt, range(workers)))

    with Session() as check:
        assert check.query(Payout).count() == 1
        assert _services.available_balance(check, creator_id) == Decimal("300.00")
    assert results.count("accepted") == 1
    assert results.count("refused") == workers - 1
    engine.dispose()
