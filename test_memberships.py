import datetime

import app.membership.service as _services
from app.membership.models import Membership
from app.product.models import ProductType
from conftest import NOW


def membership_for(db, creator, make_product, make_order, email="member@example.com", duration=30, **order_kwargs):
    product = make_product(creator, price="499.00", type=ProductType.membership, duration=duration, title="Inner Circle")
    make_order(creator, product=product, email=email, **order_kwargs)
    return db.query(Membership).filter(Membership.subscriber_email == email).one()


def test_renewal_adds_duration_to_current_expiry(db, creator, make_product, make_order):
    membership = membership_for(db, creator, make_product, make_order)
    membership.expires_at = datetime.datetime(2024, 1, 10)
    db.commit()

    assert _services.renew_membership(db, membership.id) is True

    db.refresh(membership)
    assert membership.expires_at == datetime.datetime(2024, 2, 9)


def test_renewal_of_lapsed_membership_is_still_additive(db, creator, make_product, make_order):
    membership = membership_for(db, creator, make_product, make_order, duration=7)
    lapsed_at = NOW - datetime.timedelta(days=100)
    membership.expires_at = lapsed_at
    db.commit()

    _services.renew_membership(db, membership.id)

    db.refresh(membership)
    assert membership.expires_at == lapsed_at + datetime.timedelta(days=7)


def test_renewal_fails_for_unknown_membership(db):
    assert _services.renew_membership(db, 999) is False


def test_renewal_fails_when_product_is_missing(db, creator, make_product, make_order):
    membership = membership_for(db, creator, make_product, make_order)
    original_expiry = membership.expires_at
    membership.product_id = 4242
    db.commit()

    assert _services.renew_membership(db, membership.id) is False
    db.refresh(membership)
    assert membership.expires_at == original_expiry


def test_active_query_needs_flag_and_future_expiry(db, creator, make_product, make_order):
    live = membership_for(db, creator, make_product, make_order, email="live@example.com")
    paused = membership_for(db, creator, make_product, make_order, email="paused@example.com")
    lapsed = membership_for(db, creator, make_product, make_order, email="lapsed@example.com")
    paused.is_active = False
    lapsed.expires_at = NOW - datetime.timedelta(seconds=1)
    db.commit()

    active = _services.list_active_memberships(db, now=NOW, creator_id=creator.id)

    assert [m.id for m in active] == [live.id]


def test_expiry_boundary_is_exclusive(db, creator, make_product, make_order):
    membership = membership_for(db, creator, make_product, make_order)

    assert membership.is_entitled(membership.expires_at - datetime.timedelta(seconds=1))
    assert not membership.is_entitled(membership.expires_at)
    assert _services.list_active_memberships(db, now=membership.expires_at) == []


def test_membership_links_account_by_email(db, creator, make_user, make_product, make_order):
    fan = make_user(email="fan@example.com")
    membership = membership_for(db, creator, make_product, make_order, email="fan@example.com")

    assert membership.user_id == fan.id
    assert [m.id for m in _services.list_memberships_by_user(db, fan.id)] == [membership.id]


def test_memberships_bought_before_signup_are_found_by_email(db, creator, make_user, make_product, make_order):
    membership = membership_for(db, creator, make_product, make_order, email="late@example.com")
    assert membership.user_id is None

    late = make_user(email="late@example.com")

    assert [m.id for m in _services.list_memberships_by_user(db, late.id)] == [membership.id]


def test_get_active_membership_is_scoped_to_creator(db, creator, make_user, make_product, make_order):
    fan = make_user(email="fan@example.com")
    other_creator = make_user()
    membership_for(db, creator, make_product, make_order, email="fan@example.com")

    assert _services.get_active_membership(db, fan.id, creator.id, now=NOW) is not None
    assert _services.get_active_membership(db, fan.id, other_creator.id, now=NOW) is None
    assert _services.get_active_membership(db, fan.id, creator.id, now=NOW + datetime.timedelta(days=31)) is None
