from decimal import Decimal
from types import SimpleNamespace

import pytest

from bookrental.domain.errors import InvariantViolation
from bookrental.domain.rules import duration_in_bounds, money_equal, sum_lines, verify_payment_total


def test_duration_bounds():
    assert duration_in_bounds(1)
    assert duration_in_bounds(30)
    assert not duration_in_bounds(0)
    assert not duration_in_bounds(31)
    assert not duration_in_bounds(True)


def test_money_equal_uses_epsilon():
    assert money_equal(Decimal("250.00"), 250.004)
    assert not money_equal(Decimal("250.00"), Decimal("250.01"))
    assert not money_equal(250, 260)


def test_sum_lines():
    assert sum_lines([(Decimal("100"), 2), (Decimal("50"), 1)]) == Decimal("250.00")
    assert sum_lines([]) == Decimal("0.00")


def test_verify_payment_total():
    items = [
        SimpleNamespace(rent_price=Decimal("100.00"), rental_duration=2),
        SimpleNamespace(rent_price=Decimal("50.00"), rental_duration=1),
    ]
    verify_payment_total(items, Decimal("250.00"))

    with pytest.raises(InvariantViolation) as exc:
        verify_payment_total(items, Decimal("260.00"))
    assert exc.value.status_code == 500
    assert exc.value.reason == "invariant_violation"
