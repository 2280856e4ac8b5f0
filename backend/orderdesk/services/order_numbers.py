from __future__ import annotations

import re

from sqlalchemy import Integer, Numeric, Select, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.models.order_number_counter import OrderNumberCounter
from orderdesk.services.order_families import OrderFamily


_NUMERIC_ORDER_NUMBER = re.compile(r"[0-9]+")


def _numeric_order_number_max(family: OrderFamily, dialect: str) -> Select | None:
    """Highest numeric order number of `family` in SQL, or None where the dialect has no pattern match."""
    column = family.order_model.order_number
    if dialect == "postgresql":
        return select(func.max(cast(column, Numeric))).where(column.op("~", is_comparison=True)("^[0-9]+$"))
    if dialect == "sqlite":
        # GLOB has no repetition operator: keep values without any non-digit.
        return select(func.max(cast(column, Integer))).where(
            column != "", column.op("NOT GLOB", is_comparison=True)("*[^0-9]*")
        )
    return None


async def next_order_number(session: AsyncSession, family: OrderFamily) -> str:
    """
    Next free numeric order number for `family`: highest numeric number + 1.

    Non-numeric numbers ("PV-0001") are ignored and inactive orders still count,
    so a number is never handed out twice. The family's counter row is locked for
    the rest of the transaction, which serializes concurrent allocators.
    """
    result = await session.execute(
        select(OrderNumberCounter).where(OrderNumberCounter.family == family.key).with_for_update()
    )
    counter = result.scalar_one_or_none()
    if counter is None:
        counter = OrderNumberCounter(family=family.key, last_number=0)
        session.add(counter)
        await session.flush()

    stmt = _numeric_order_number_max(family, session.get_bind().dialect.name)
    if stmt is not None:
        highest = int((await session.execute(stmt)).scalar_one() or 0)
    else:
        numbers = (await session.execute(select(family.order_model.order_number))).scalars().all()
        highest = max((int(n) for n in numbers if _NUMERIC_ORDER_NUMBER.fullmatch(n)), default=0)

    number = highest + 1
    counter.last_number = number
    await session.flush()

    return str(number)


async def order_exists(
    session: AsyncSession,
    family: OrderFamily,
    *,
    order_number: str,
    document_model: str,
    document_series: str,
    counterparty_id: int,
    exclude_id: int | None = None,
) -> bool:
    """True when an active order of `family` already uses this natural key."""
    model = family.order_model
    stmt = (
        select(model.id)
        .where(
            model.active.is_(True),
            model.order_number == order_number,
            model.document_model == document_model,
            model.document_series == document_series,
            family.counterparty_column == counterparty_id,
        )
        .limit(1)
    )
    if exclude_id is not None:
        stmt = stmt.where(model.id != exclude_id)
    return (await session.execute(stmt)).first() is not None
