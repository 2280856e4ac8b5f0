"""
Turn submitted item lines and installment entries into storable values.

Both resolvers are pure: lookups happen in the caller, so a failing line is
reported before anything is written.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from decimal import ROUND_DOWN, Decimal
from typing import Any, Iterable

from orderdesk.core.errors import InvalidArgumentError
from orderdesk.models.payment import PaymentMethod
from orderdesk.models.product import Product
from orderdesk.services.money import AMOUNT_QUANTUM, format_brl, quantize_amount, quantize_unit


ZERO = Decimal("0")


@dataclass
class ResolvedItem:
    position: int
    product_id: int
    product_code: str
    product_name: str
    unit: str
    quantity: Decimal
    unit_price: Decimal
    unit_discount: Decimal
    unit_net: Decimal
    line_total: Decimal
    apportioned_cost: Decimal = ZERO
    landed_unit_cost: Decimal = ZERO
    landed_total_cost: Decimal = ZERO
    notes: str | None = None

    def row_values(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ResolvedInstallment:
    installment_number: int
    payment_method_id: int
    payment_method_name: str
    payment_method_code: str | None
    due_date: date
    amount: Decimal

    def row_values(self) -> dict[str, Any]:
        return asdict(self)


def resolve_item(line: Any, product: Product, *, position: int) -> ResolvedItem:
    quantity = quantize_unit(line.quantity)
    if quantity <= 0:
        raise InvalidArgumentError(f"Item {position} ({product.code}): quantity must be greater than zero")

    unit_price = quantize_unit(line.unit_price)
    unit_discount = quantize_unit(line.unit_discount)
    gross = unit_price * quantity
    discount = unit_discount * quantity
    if discount > gross:
        raise InvalidArgumentError(
            f"Item {position} ({product.code}): discount {format_brl(discount)} exceeds price {format_brl(gross)}"
        )

    unit_net = unit_price - unit_discount
    line_total = quantize_amount(unit_net * quantity)
    return ResolvedItem(
        position=position,
        product_id=product.id,
        product_code=product.code,
        product_name=product.name,
        unit=product.unit,
        quantity=quantity,
        unit_price=unit_price,
        unit_discount=unit_discount,
        unit_net=unit_net,
        line_total=line_total,
        apportioned_cost=ZERO,
        landed_unit_cost=unit_net,
        landed_total_cost=line_total,
        notes=line.notes,
    )


def apportion_charges(items: list[ResolvedItem], charges: Decimal) -> None:
    """
    Spread `charges` (freight + insurance + other) over the items by line total
    and fill in their landed costs.

    Every item first gets its share rounded down to the cent. The cents left over
    go one each to the items that lost the most to rounding, earlier positions
    first on ties, so the shares always add up to `charges`. Items that all total
    zero share the charges evenly.
    """
    if not items:
        return

    charges = quantize_amount(charges)
    base = sum((item.line_total for item in items), ZERO)
    if base > 0:
        exact = [charges * item.line_total / base for item in items]
    else:
        exact = [charges / len(items)] * len(items)

    shares = [value.quantize(AMOUNT_QUANTUM, rounding=ROUND_DOWN) for value in exact]
    leftover = int((charges - sum(shares, ZERO)) / AMOUNT_QUANTUM)
    by_rounding_loss = sorted(range(len(items)), key=lambda i: exact[i] - shares[i], reverse=True)
    for i in by_rounding_loss[:leftover]:
        shares[i] += AMOUNT_QUANTUM

    for item, share in zip(items, shares, strict=True):
        item.apportioned_cost = share
        item.landed_total_cost = item.line_total + share
        item.landed_unit_cost = quantize_unit(item.unit_net + share / item.quantity)


def resolve_installment(entry: Any, method: PaymentMethod, *, number: int) -> ResolvedInstallment:
    amount = quantize_amount(entry.amount)
    if amount <= 0:
        raise InvalidArgumentError(f"Installment {entry.installment_number}: amount must be greater than zero")
    return ResolvedInstallment(
        installment_number=number,
        payment_method_id=method.id,
        payment_method_name=method.name,
        payment_method_code=method.code,
        due_date=entry.due_date,
        amount=amount,
    )


def order_installment_entries(entries: Iterable[Any]) -> list[Any]:
    """Sort entries by submitted number; the caller renumbers them 1..n."""
    ordered = sorted(entries, key=lambda e: e.installment_number)
    seen: set[int] = set()
    for entry in ordered:
        if entry.installment_number in seen:
            raise InvalidArgumentError(f"Duplicate installment number: {entry.installment_number}")
        seen.add(entry.installment_number)
    return ordered
