"""Tests for money coercion, cent rounding and rupee formatting."""

from decimal import Decimal

import pytest
from shared.errors import InvalidArgument
from shared.money import format_inr, round_to_cents, to_money


class TestToMoney:
    def test_int_and_str(self):
        assert to_money(100) == Decimal("100")
        assert to_money("19.99") == Decimal("19.99")

    def test_float_keeps_short_repr(self):
        assert to_money(0.1) == Decimal("0.1")

    def test_decimal_passes_through(self):
        value = Decimal("5.25")
        assert to_money(value) is value

    def test_garbage_is_invalid_argument(self):
        with pytest.raises(InvalidArgument):
            to_money("ten rupees")


class TestRoundToCents:
    def test_rounds_half_up(self):
        assert round_to_cents(Decimal("0.005")) == Decimal("0.01")
        assert round_to_cents(Decimal("2.675")) == Decimal("2.68")

    def test_keeps_two_places(self):
        assert str(round_to_cents(Decimal("300"))) == "300.00"


class TestFormatInr:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (0, "₹0"),
            (999, "₹999"),
            (8299, "₹8,299"),
            (123456, "₹1,23,456"),
            (12345678, "₹1,23,45,678"),
            (Decimal("1234.50"), "₹1,234.5"),
            (Decimal("20799.999"), "₹20,799.999"),
        ],
    )
    def test_indian_grouping(self, amount, expected):
        assert format_inr(amount) == expected

    def test_negative_amount(self):
        assert format_inr(-1500) == "₹-1,500"
