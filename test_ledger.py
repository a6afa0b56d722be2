from decimal import Decimal

import pytest

from app.core import ledger
from app.core.errors import InvalidAmount


def test_split_thousand_at_ten_percent():
    result = ledger.split(Decimal("1000"), 10)
    assert result.platform_fee == Decimal("100.00")
    assert result.creator_earnings == Decimal("900.00")


@pytest.mark.parametrize("amount", ["0.01", "0.05", "0.15", "1.99", "333.33", "1234.57", "99999.99"])
@pytest.mark.parametrize("fee_percentage", [10, "2.5", "7.75"])
def test_split_parts_add_back_to_amount(amount, fee_percentage):
    result = ledger.split(amount, fee_percentage)
    assert result.platform_fee + result.creator_earnings == Decimal(amount)


def test_split_rounds_fee_half_up_and_leaves_remainder_to_creator():
    result = ledger.split("0.05", 10)
    assert result.platform_fee == Decimal("0.01")
    assert result.creator_earnings == Decimal("0.04")


def test_zero_fee_keeps_everything_for_creator():
    result = ledger.split("250.00", 0)
    assert result.platform_fee == Decimal("0.00")
    assert result.creator_earnings == Decimal("250.00")


@pytest.mark.parametrize("amount", [0, "0.00", -5, "-0.01"])
def test_split_rejects_non_positive_amounts(amount):
    with pytest.raises(InvalidAmount):
        ledger.split(amount, 10)


@pytest.mark.parametrize("amount", ["abc", None, "NaN", "Infinity", True])
def test_to_money_rejects_malformed_input(amount):
    with pytest.raises(InvalidAmount):
        ledger.to_money(amount)


def test_to_money_does_not_leak_float_noise():
    assert ledger.to_money(0.1) == Decimal("0.10")
    assert ledger.to_money(250.0) == Decimal("250.00")


@pytest.mark.parametrize("amount", ["99.995", "0.001", 2.675, Decimal("10.0001")])
def test_to_money_refuses_fractions_of_a_paisa(amount):
    with pytest.raises(InvalidAmount):
        ledger.to_money(amount)


def test_round_money_is_for_computed_figures():
    assert ledger.round_money(Decimal("700") / 3) == Decimal("233.33")
    assert ledger.round_money("2.675") == Decimal("2.68")


@pytest.mark.parametrize("fee_percentage", [-1, 101])
def test_split_rejects_fee_percentage_out_of_range(fee_percentage):
    with pytest.raises(InvalidAmount):
        ledger.split("100.00", fee_percentage)
