from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, selectinload

from orderdesk.core.errors import NotFoundError
from orderdesk.models.employee import Employee
from orderdesk.models.party import Carrier
from orderdesk.models.payment import PaymentTerm
from orderdesk.services.order_families import OrderFamily


@dataclass(frozen=True)
class OrderView:
    """An order with its children and the display names of what it references."""

    order: Any
    counterparty_name: str | None
    payment_term_name: str | None
    employee_name: str | None
    carrier_name: str | None
    approver_name: str | None


def _view_query(family: OrderFamily) -> Select:
    model = family.order_model
    counterparty = family.counterparty_model
    responsible = aliased(Employee, name="responsible_employee")
    approver = aliased(Employee, name="approver")
    return (
        select(
            model,
            counterparty.name.label("counterparty_name"),
            PaymentTerm.name.label("payment_term_name"),
            responsible.name.label("employee_name"),
            Carrier.name.label("carrier_name"),
            approver.name.label("approver_name"),
        )
        .outerjoin(counterparty, family.counterparty_column == counterparty.id)
        .outerjoin(PaymentTerm, model.payment_term_id == PaymentTerm.id)
        .outerjoin(responsible, model.employee_id == responsible.id)
        .outerjoin(Carrier, model.carrier_id == Carrier.id)
        .outerjoin(approver, model.approved_by_id == approver.id)
        .where(model.active.is_(True))
        .options(selectinload(model.items), selectinload(model.installments))
        .execution_options(populate_existing=True)
    )


def _to_view(row: Any) -> OrderView:
    order, counterparty_name, payment_term_name, employee_name, carrier_name, approver_name = row
    return OrderView(
        order=order,
        counterparty_name=counterparty_name,
        payment_term_name=payment_term_name,
        employee_name=employee_name,
        carrier_name=carrier_name,
        approver_name=approver_name,
    )


async def get_order(session: AsyncSession, family: OrderFamily, order_id: int) -> OrderView:
    row = (await session.execute(_view_query(family).where(family.order_model.id == order_id))).one_or_none()
    if row is None:
        raise NotFoundError(f"Order not found: {order_id}")
    return _to_view(row)


async def list_orders(
    session: AsyncSession, family: OrderFamily, *, limit: int | None = None, offset: int = 0
) -> list[OrderView]:
    """Active orders of `family`, newest first. Without `limit` every active order is returned."""
    model = family.order_model
    stmt = _view_query(family).order_by(model.created_at.desc(), model.id.desc())
    if offset:
        stmt = stmt.offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    rows = (await session.execute(stmt)).all()
    return [_to_view(r) for r in rows]
