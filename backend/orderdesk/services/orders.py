from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from orderdesk.core.enums import OrderStatus
from orderdesk.core.errors import DuplicateKeyError, InvalidArgumentError, NotFoundError
from orderdesk.models.party import Carrier
from orderdesk.models.payment import PaymentTerm
from orderdesk.services.audit import audit_log
from orderdesk.services.lookups import get_employee, get_payment_method, get_product, get_reference
from orderdesk.services.money import quantize_amount
from orderdesk.services.order_families import OrderFamily
from orderdesk.services.order_lines import (
    ResolvedInstallment,
    ResolvedItem,
    apportion_charges,
    order_installment_entries,
    resolve_installment,
    resolve_item,
)
from orderdesk.services.order_numbers import next_order_number, order_exists
from orderdesk.services.order_totals import OrderCharges, compute_totals
from orderdesk.services.unit_of_work import DUPLICATE_ORDER_MESSAGE, unit_of_work


logger = logging.getLogger(__name__)

_AMOUNT_FIELDS = ("freight_amount", "insurance_amount", "other_charges", "discount_amount", "surcharge_amount")
_HEADER_FIELDS = (
    "document_model",
    "document_series",
    "issue_date",
    "expected_delivery_date",
    "delivered_date",
    "payment_term_id",
    "employee_id",
    "carrier_id",
    "freight_type",
    *_AMOUNT_FIELDS,
    "notes",
)
# Columns that may not be cleared by a partial update.
_REQUIRED_FIELDS = frozenset(
    {"order_number", "document_model", "document_series", "issue_date", "payment_term_id", "freight_type", *_AMOUNT_FIELDS}
)


def _snapshot(order: Any, family: OrderFamily) -> dict[str, Any]:
    return {
        "order_number": order.order_number,
        "document_model": order.document_model,
        "document_series": order.document_series,
        family.counterparty_field: getattr(order, family.counterparty_field),
        "status": order.status,
        "products_total": order.products_total,
        "grand_total": order.grand_total,
        "items_count": len(order.items),
        "installments_count": len(order.installments),
        "active": order.active,
    }


async def load_active_order(session: AsyncSession, family: OrderFamily, order_id: int) -> Any:
    """Active order with its children, locked for the rest of the transaction."""
    model = family.order_model
    result = await session.execute(
        select(model)
        .where(model.id == order_id, model.active.is_(True))
        .options(selectinload(model.items), selectinload(model.installments))
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    order = result.scalar_one_or_none()
    if order is None:
        raise NotFoundError(f"Order not found: {order_id}")
    return order


async def _check_references(session: AsyncSession, family: OrderFamily, values: dict[str, Any]) -> None:
    if values.get(family.counterparty_field) is not None:
        await get_reference(
            session, family.counterparty_model, values[family.counterparty_field], label=family.counterparty_field[:-3]
        )
    if values.get("payment_term_id") is not None:
        await get_reference(session, PaymentTerm, values["payment_term_id"], label="payment term")
    if values.get("carrier_id") is not None:
        await get_reference(session, Carrier, values["carrier_id"], label="carrier")
    if values.get("employee_id") is not None:
        await get_employee(session, values["employee_id"])


async def _resolve_items(session: AsyncSession, lines: list[Any]) -> list[ResolvedItem]:
    resolved: list[ResolvedItem] = []
    for position, line in enumerate(lines, start=1):
        product = await get_product(session, line.product_id)
        resolved.append(resolve_item(line, product, position=position))
    return resolved


async def _resolve_installments(session: AsyncSession, entries: list[Any]) -> list[ResolvedInstallment]:
    resolved: list[ResolvedInstallment] = []
    for number, entry in enumerate(order_installment_entries(entries), start=1):
        method = await get_payment_method(session, entry.payment_method_id)
        resolved.append(resolve_installment(entry, method, number=number))
    return resolved


def _recompute_totals(order: Any) -> None:
    charges = OrderCharges.from_order(order)
    apportion_charges(order.items, charges.apportionable)
    totals = compute_totals((item.line_total for item in order.items), charges)
    order.products_total = totals.products_total
    order.grand_total = totals.grand_total


async def create_order(session: AsyncSession, *, family: OrderFamily, actor: str, data: Any) -> Any:
    """
    Create an order with its items and installments in a single transaction.

    Without an explicit `order_number` the next numeric number of the family is
    allocated. Totals are always derived from the resolved items.
    """
    counterparty_id = getattr(data, family.counterparty_field)

    async with unit_of_work(session, family=family):
        await _check_references(
            session,
            family,
            {
                family.counterparty_field: counterparty_id,
                "payment_term_id": data.payment_term_id,
                "carrier_id": data.carrier_id,
                "employee_id": data.employee_id,
            },
        )

        if data.order_number:
            order_number = data.order_number
            if await order_exists(
                session,
                family,
                order_number=order_number,
                document_model=data.document_model,
                document_series=data.document_series,
                counterparty_id=counterparty_id,
            ):
                raise DuplicateKeyError(DUPLICATE_ORDER_MESSAGE)
        else:
            order_number = await next_order_number(session, family)

        items = await _resolve_items(session, data.items)
        installments = await _resolve_installments(session, data.installments)

        header = {field: getattr(data, field) for field in _HEADER_FIELDS}
        for field in _AMOUNT_FIELDS:
            header[field] = quantize_amount(header[field])

        order = family.order_model(
            **header,
            order_number=order_number,
            status=OrderStatus.PENDING,
            active=True,
            items=[family.item_model(**item.row_values()) for item in items],
            installments=[family.installment_model(**inst.row_values()) for inst in installments],
        )
        setattr(order, family.counterparty_field, counterparty_id)
        _recompute_totals(order)

        session.add(order)
        await session.flush()

        await audit_log(
            session,
            actor=actor,
            entity_type=family.entity_type,
            entity_id=order.id,
            action="create",
            after=_snapshot(order, family),
        )

    logger.info("Created %s order %s (id=%s) by %s", family.entity_type, order.order_number, order.id, actor)
    return order


async def update_order(
    session: AsyncSession, *, family: OrderFamily, actor: str, order_id: int, data: Any
) -> Any:
    """
    Apply a partial update. Only fields set on `data` change; `items` and
    `installments`, when given, replace the existing children. Totals are
    recomputed from the resulting items on every update.
    """
    changes = data.model_dump(exclude_unset=True, exclude={"items", "installments"})
    for field, value in changes.items():
        if value is None and field in _REQUIRED_FIELDS | {family.counterparty_field}:
            raise InvalidArgumentError(f"{field} cannot be empty")

    async with unit_of_work(session, family=family):
        order = await load_active_order(session, family, order_id)
        before = _snapshot(order, family)

        await _check_references(session, family, changes)

        key_fields = ("order_number", "document_model", "document_series", family.counterparty_field)
        if any(field in changes and changes[field] != getattr(order, field) for field in key_fields):
            new_key = {field: changes.get(field, getattr(order, field)) for field in key_fields}
            if await order_exists(
                session,
                family,
                order_number=new_key["order_number"],
                document_model=new_key["document_model"],
                document_series=new_key["document_series"],
                counterparty_id=new_key[family.counterparty_field],
                exclude_id=order.id,
            ):
                raise DuplicateKeyError(DUPLICATE_ORDER_MESSAGE)

        items = await _resolve_items(session, data.items) if data.items is not None else None
        installments = await _resolve_installments(session, data.installments) if data.installments is not None else None

        for field, value in changes.items():
            if field in _AMOUNT_FIELDS:
                value = quantize_amount(value)
            setattr(order, field, value)

        if items is not None:
            order.items.clear()
            await session.flush()
            order.items.extend(family.item_model(**item.row_values()) for item in items)
        if installments is not None:
            # Old rows must be gone before new numbers reuse the unique (order, number) slots.
            order.installments.clear()
            await session.flush()
            order.installments.extend(family.installment_model(**inst.row_values()) for inst in installments)

        _recompute_totals(order)
        await session.flush()

        await audit_log(
            session,
            actor=actor,
            entity_type=family.entity_type,
            entity_id=order.id,
            action="update",
            before=before,
            after=_snapshot(order, family),
        )

    logger.info("Updated %s order id=%s by %s", family.entity_type, order_id, actor)
    return order


async def delete_order(session: AsyncSession, *, family: OrderFamily, actor: str, order_id: int) -> bool:
    """
    Remove an order. Orders with items or installments are deactivated and keep
    their rows; empty orders are deleted. Returns True for a soft delete.
    """
    async with unit_of_work(session, family=family):
        order = await load_active_order(session, family, order_id)
        before = _snapshot(order, family)

        soft = bool(order.items or order.installments)
        if soft:
            order.active = False
        else:
            await session.delete(order)
        await session.flush()

        await audit_log(
            session,
            actor=actor,
            entity_type=family.entity_type,
            entity_id=order_id,
            action="deactivate" if soft else "delete",
            before=before,
        )

    logger.info(
        "%s %s order id=%s by %s", "Deactivated" if soft else "Deleted", family.entity_type, order_id, actor
    )
    return soft
