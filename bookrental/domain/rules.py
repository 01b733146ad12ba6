# bookrental/domain/rules.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from bookrental.domain.errors import InvariantViolation
from bookrental.utils.settings import MIN_RENTAL_DAYS, MAX_RENTAL_DAYS, PRICE_EPSILON

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def duration_in_bounds(days) -> bool:
    return isinstance(days, int) and not isinstance(days, bool) and MIN_RENTAL_DAYS <= days <= MAX_RENTAL_DAYS


def money_equal(a, b, epsilon: Decimal = PRICE_EPSILON) -> bool:
    return abs(Decimal(str(a)) - Decimal(str(b))) < epsilon


def line_total(price, duration: int) -> Decimal:
    return Decimal(str(price)) * duration


def sum_lines(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    """Suma (cena * dni) dla par (price, duration)."""
    return to_money(sum((line_total(p, d) for p, d in lines), Decimal("0")))


def verify_payment_total(items, total) -> None:
    """
    Suma pozycji platnosci musi zgadzac sie z totalem (epsilon).
    Rozjazd to defekt - nigdy go nie poprawiamy po cichu.
    """
    computed = sum_lines((i.rent_price, i.rental_duration) for i in items)
    if not money_equal(computed, total):
        raise InvariantViolation(
            f"Payment total {total} differs from item sum {computed}",
            errors=[{"reason": "invariant_violation", "computed": str(computed), "stored": str(total)}],
        )
