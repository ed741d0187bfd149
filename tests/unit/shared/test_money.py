from __future__ import annotations

from decimal import Decimal

import pytest

from shared.domain.money import ZERO, line_total, money_sum, to_money

pytestmark = pytest.mark.unit


class TestToMoney:
    def test_quantizes_to_two_places(self):
        assert to_money("10") == Decimal("10.00")
        assert to_money(Decimal("1.005")) == Decimal("1.01")

    def test_rounds_half_up(self):
        assert to_money("2.345") == Decimal("2.35")
        assert to_money("2.344") == Decimal("2.34")

    def test_rejects_floats(self):
        with pytest.raises(TypeError):
            to_money(0.1)


class TestArithmetic:
    def test_line_total(self):
        assert line_total(Decimal("19.90"), 3) == Decimal("59.70")

    def test_money_sum_has_no_drift(self):
        assert money_sum([Decimal("0.10")] * 3) == Decimal("0.30")

    def test_money_sum_of_nothing_is_zero(self):
        assert money_sum([]) == ZERO
