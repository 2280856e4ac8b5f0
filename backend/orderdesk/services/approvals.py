from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.core.config import get_settings
from orderdesk.core.enums import OrderStatus
from orderdesk.core.errors import InvalidArgumentError, NoActiveEmployeeError, NotFoundError
from orderdesk.models.base import utcnow
from orderdesk.models.employee import Employee
from orderdesk.services.audit import audit_log
from orderdesk.services.lookups import get_employee, list_active_employees
from orderdesk.services.order_families import OrderFamily
from orderdesk.services.orders import load_active_order
from orderdesk.services.unit_of_work import unit_of_work


logger = logging.getLogger(__name__)


def _status_snapshot(order: Any) -> dict[str, Any]:
    return {
        "status": order.status,
        "approved_by_id": order.approved_by_id,
        "approved_at": order.approved_at,
        "notes": order.notes,
    }


def _warn_on_reentry(order: Any, family: OrderFamily, target: OrderStatus) -> None:
    if order.status != OrderStatus.PENDING:
        logger.warning(
            "%s order id=%s moves from terminal status %s to %s", family.entity_type, order.id, order.status, target
        )


async def resolve_fallback_approver(session: AsyncSession) -> Employee:
    """Approver used when the caller supplies none: the first active employee by id."""
    if not get_settings().allow_default_approver:
        raise InvalidArgumentError("An approver is required")
    employees = await list_active_employees(session)
    if not employees:
        raise NoActiveEmployeeError("No active employee available to approve the order")
    return employees[0]


async def approve_order(
    session: AsyncSession,
    *,
    family: OrderFamily,
    actor: str,
    order_id: int,
    approver_id: int | None = None,
) -> Any:
    async with unit_of_work(session, family=family):
        order = await load_active_order(session, family, order_id)

        if approver_id is None:
            approver = await resolve_fallback_approver(session)
        else:
            approver = await get_employee(session, approver_id)
            if not approver.active:
                raise NotFoundError(f"Referenced employee not found: {approver_id}")

        _warn_on_reentry(order, family, OrderStatus.APPROVED)
        before = _status_snapshot(order)

        order.status = OrderStatus.APPROVED
        order.approved_by_id = approver.id
        order.approved_at = utcnow()
        await session.flush()

        await audit_log(
            session,
            actor=actor,
            entity_type=family.entity_type,
            entity_id=order.id,
            action="approve",
            before=before,
            after=_status_snapshot(order),
        )

    logger.info("Approved %s order id=%s (approver=%s) by %s", family.entity_type, order_id, approver.id, actor)
    return order


async def deny_order(
    session: AsyncSession,
    *,
    family: OrderFamily,
    actor: str,
    order_id: int,
    reason: str | None = None,
) -> Any:
    """Cancel the order and append the denial note to its existing notes."""
    async with unit_of_work(session, family=family):
        order = await load_active_order(session, family, order_id)

        _warn_on_reentry(order, family, OrderStatus.CANCELLED)
        before = _status_snapshot(order)

        reason = (reason or "").strip()
        note = f"Negado: {reason}" if reason else family.denied_note
        order.notes = f"{order.notes}\n{note}" if order.notes else note
        order.status = OrderStatus.CANCELLED
        await session.flush()

        await audit_log(
            session,
            actor=actor,
            entity_type=family.entity_type,
            entity_id=order.id,
            action="deny",
            before=before,
            after=_status_snapshot(order),
        )

    logger.info("Denied %s order id=%s by %s", family.entity_type, order_id, actor)
    return order
