from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from orderdesk.core.errors import InvalidArgumentError
from orderdesk.services.money import format_brl, quantize_amount


@dataclass(frozen=True)
class OrderCharges:
    freight: Decimal
    insurance: Decimal
    other: Decimal
    discount: Decimal
    surcharge: Decimal

    @property
    def apportionable(self) -> Decimal:
        # Costs that are spread over the items as landed cost.
        return self.freight + self.insurance + self.other

    @classmethod
    def from_order(cls, order: Any) -> OrderCharges:
        return cls(
            freight=quantize_amount(order.freight_amount),
            insurance=quantize_amount(order.insurance_amount),
            other=quantize_amount(order.other_charges),
            discount=quantize_amount(order.discount_amount),
            surcharge=quantize_amount(order.surcharge_amount),
        )


@dataclass(frozen=True)
class OrderTotals:
    products_total: Decimal
    grand_total: Decimal


def compute_totals(line_totals: Iterable[Decimal], charges: OrderCharges) -> OrderTotals:
    """
    products_total = sum of the stored line totals;
    grand_total = products_total + freight + insurance + other + surcharge - discount.
    """
    products_total = quantize_amount(sum((quantize_amount(t) for t in line_totals), Decimal("0")))
    grand_total = products_total + charges.apportionable + charges.surcharge - charges.discount
    if grand_total < 0:
        raise InvalidArgumentError(
            f"Discount {format_brl(charges.discount)} exceeds the order total "
            f"{format_brl(grand_total + charges.discount)}"
        )
    return OrderTotals(products_total=products_total, grand_total=quantize_amount(grand_total))
