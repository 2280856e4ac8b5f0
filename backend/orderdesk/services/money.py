from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP


# Storage precision: amounts carry 2 decimal places, unit values 4.
AMOUNT_QUANTUM = Decimal("0.01")
UNIT_QUANTUM = Decimal("0.0001")


def quantize_amount(value: Decimal) -> Decimal:
    return value.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)


def quantize_unit(value: Decimal) -> Decimal:
    return value.quantize(UNIT_QUANTUM, rounding=ROUND_HALF_UP)


def to_cents(amount: Decimal) -> int:
    """Convert a currency amount to integer cents (half-up)."""
    cents = (amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(cents)


def format_brl(amount: Decimal) -> str:
    """Render an amount as `1.234,56` (pt-BR grouping), used in error details."""
    cents = to_cents(amount)
    sign = "-" if cents < 0 else ""
    cents_abs = abs(cents)
    reais = f"{cents_abs // 100:,}".replace(",", ".")
    return f"{sign}{reais},{cents_abs % 100:02d}"
