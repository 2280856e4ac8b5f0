from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from orderdesk.core.enums import FreightType, OrderStatus


class OrderItemCreate(BaseModel):
    product_id: int
    # Sign and discount bound are checked by the engine so both surface as domain errors.
    quantity: Decimal = Field(max_digits=14, decimal_places=4)
    unit_price: Decimal = Field(ge=0, max_digits=14, decimal_places=4)
    unit_discount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=14, decimal_places=4)
    notes: str | None = None


class OrderInstallmentCreate(BaseModel):
    installment_number: int = Field(ge=1)
    payment_method_id: int
    due_date: date
    amount: Decimal = Field(max_digits=14, decimal_places=2)


class OrderCreateBase(BaseModel):
    # Omitted: the next numeric number of the family is allocated.
    order_number: str | None = Field(default=None, min_length=1, max_length=20)
    document_model: str = Field(min_length=1, max_length=10)
    document_series: str = Field(min_length=1, max_length=10)

    issue_date: date
    expected_delivery_date: date | None = None
    delivered_date: date | None = None

    payment_term_id: int
    employee_id: int | None = None
    carrier_id: int | None = None

    freight_type: FreightType = FreightType.CIF
    freight_amount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    insurance_amount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    other_charges: Decimal = Field(default=Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    surcharge_amount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=14, decimal_places=2)

    notes: str | None = None

    items: list[OrderItemCreate] = Field(default_factory=list)
    installments: list[OrderInstallmentCreate] = Field(default_factory=list)


class OrderUpdateBase(BaseModel):
    """
    Partial update: only fields present in the request are applied.

    `items` / `installments`, when present, replace the existing children.
    """

    order_number: str | None = Field(default=None, min_length=1, max_length=20)
    document_model: str | None = Field(default=None, min_length=1, max_length=10)
    document_series: str | None = Field(default=None, min_length=1, max_length=10)

    issue_date: date | None = None
    expected_delivery_date: date | None = None
    delivered_date: date | None = None

    payment_term_id: int | None = None
    employee_id: int | None = None
    carrier_id: int | None = None

    freight_type: FreightType | None = None
    freight_amount: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    insurance_amount: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    other_charges: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    discount_amount: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    surcharge_amount: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)

    notes: str | None = None

    items: list[OrderItemCreate] | None = None
    installments: list[OrderInstallmentCreate] | None = None


class ApproveRequest(BaseModel):
    approver_id: int | None = None


class DenyRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class OrderExistsOut(BaseModel):
    exists: bool


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
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
    apportioned_cost: Decimal
    landed_unit_cost: Decimal
    landed_total_cost: Decimal
    notes: str | None


class OrderInstallmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    installment_number: int
    payment_method_id: int
    payment_method_name: str
    payment_method_code: str | None
    due_date: date
    amount: Decimal


class OrderOutBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    # Set by subclasses: the field that carries the counterparty's display name.
    counterparty_name_field: ClassVar[str]

    id: int
    order_number: str
    document_model: str
    document_series: str
    issue_date: date
    expected_delivery_date: date | None
    delivered_date: date | None

    payment_term_id: int
    payment_term_name: str | None = None
    employee_id: int | None
    employee_name: str | None = None
    carrier_id: int | None
    carrier_name: str | None = None

    freight_type: FreightType
    freight_amount: Decimal
    insurance_amount: Decimal
    other_charges: Decimal
    discount_amount: Decimal
    surcharge_amount: Decimal
    products_total: Decimal
    grand_total: Decimal

    notes: str | None
    status: OrderStatus
    approved_by_id: int | None
    approver_name: str | None = None
    approved_at: datetime | None
    active: bool
    created_at: datetime
    updated_at: datetime

    items: list[OrderItemOut]
    installments: list[OrderInstallmentOut]

    @classmethod
    def from_view(cls, view: Any) -> OrderOutBase:
        out = cls.model_validate(view.order)
        return out.model_copy(
            update={
                cls.counterparty_name_field: view.counterparty_name,
                "payment_term_name": view.payment_term_name,
                "employee_name": view.employee_name,
                "carrier_name": view.carrier_name,
                "approver_name": view.approver_name,
            }
        )
