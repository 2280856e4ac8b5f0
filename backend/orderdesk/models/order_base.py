from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.core.enums import FreightType, OrderStatus
from orderdesk.models.base import IdPrimaryKeyMixin, TimestampMixin
from orderdesk.models.sql_enums import freight_type_enum, order_status_enum


# Columns shared by sales and purchase orders. Each family declares its own
# tables, counterparty column, natural-key index and child relationships.

MONEY = Numeric(14, 2)
UNIT_VALUE = Numeric(14, 4)
ZERO = Decimal("0")


class OrderHeaderMixin(IdPrimaryKeyMixin, TimestampMixin):
    order_number: Mapped[str] = mapped_column(String(20), nullable=False)
    document_model: Mapped[str] = mapped_column(String(10), nullable=False)
    document_series: Mapped[str] = mapped_column(String(10), nullable=False)

    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    expected_delivery_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    delivered_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    payment_term_id: Mapped[int] = mapped_column(ForeignKey("payment_terms.id"), nullable=False)
    employee_id: Mapped[int | None] = mapped_column(ForeignKey("employees.id"), nullable=True)
    carrier_id: Mapped[int | None] = mapped_column(ForeignKey("carriers.id"), nullable=True)

    freight_type: Mapped[FreightType] = mapped_column(freight_type_enum, nullable=False, default=FreightType.CIF)
    freight_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    insurance_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    other_charges: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    discount_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    surcharge_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)

    # Derived from the children on every write; never taken from the client.
    products_total: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    grand_total: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[OrderStatus] = mapped_column(order_status_enum, nullable=False, default=OrderStatus.PENDING)
    approved_by_id: Mapped[int | None] = mapped_column(ForeignKey("employees.id"), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class OrderItemMixin(IdPrimaryKeyMixin):
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    # Snapshot of the product at write time.
    product_code: Mapped[str] = mapped_column(String(40), nullable=False)
    product_name: Mapped[str] = mapped_column(String(200), nullable=False)
    unit: Mapped[str] = mapped_column(String(10), nullable=False)

    quantity: Mapped[Decimal] = mapped_column(UNIT_VALUE, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(UNIT_VALUE, nullable=False)
    unit_discount: Mapped[Decimal] = mapped_column(UNIT_VALUE, nullable=False, default=ZERO)
    unit_net: Mapped[Decimal] = mapped_column(UNIT_VALUE, nullable=False)
    line_total: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    # Share of freight + insurance + other charges, and the resulting landed cost.
    apportioned_cost: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    landed_unit_cost: Mapped[Decimal] = mapped_column(UNIT_VALUE, nullable=False)
    landed_total_cost: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class OrderInstallmentMixin(IdPrimaryKeyMixin):
    installment_number: Mapped[int] = mapped_column(Integer, nullable=False)

    payment_method_id: Mapped[int] = mapped_column(ForeignKey("payment_methods.id"), nullable=False)
    payment_method_name: Mapped[str] = mapped_column(String(100), nullable=False)
    payment_method_code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
