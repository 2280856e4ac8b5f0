from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import event, select

from orderdesk.models.order_number_counter import OrderNumberCounter
from orderdesk.models.purchase import PurchaseOrder
from orderdesk.models.sales import SalesOrder
from orderdesk.services.order_families import PURCHASES, SALES
from orderdesk.services.order_numbers import next_order_number, order_exists


def _sales_order(ref, order_number: str, *, active: bool = True, customer_id: int | None = None) -> SalesOrder:
    return SalesOrder(
        order_number=order_number,
        document_model="55",
        document_series="1",
        issue_date=date(2026, 10, 1),
        payment_term_id=ref.payment_term_id,
        customer_id=customer_id or ref.customer_id,
        active=active,
    )


@pytest.mark.asyncio
async def test_next_order_number_starts_at_one(db_session, reference_data) -> None:
    async with db_session.begin():
        number = await next_order_number(db_session, SALES)
    assert number == "1"


@pytest.mark.asyncio
async def test_next_order_number_ignores_non_numeric_and_counts_inactive(db_session, reference_data) -> None:
    async with db_session.begin():
        db_session.add_all(
            [
                _sales_order(reference_data, "1"),
                _sales_order(reference_data, "2"),
                _sales_order(reference_data, "5", active=False),
                _sales_order(reference_data, "PV-0001"),
                _sales_order(reference_data, "12a"),
            ]
        )

    async with db_session.begin():
        number = await next_order_number(db_session, SALES)
        counter = (
            await db_session.execute(select(OrderNumberCounter).where(OrderNumberCounter.family == SALES.key))
        ).scalar_one()

    assert number == "6"
    assert counter.last_number == 6


@pytest.mark.asyncio
async def test_next_order_number_compares_numerically(db_session, reference_data) -> None:
    async with db_session.begin():
        db_session.add_all([_sales_order(reference_data, "9"), _sales_order(reference_data, "0010")])

    async with db_session.begin():
        number = await next_order_number(db_session, SALES)
    assert number == "11"


@pytest.mark.asyncio
async def test_next_order_number_takes_the_maximum_in_the_database(db_engine, db_session, reference_data) -> None:
    async with db_session.begin():
        db_session.add_all([_sales_order(reference_data, str(n)) for n in range(1, 51)])

    statements: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany) -> None:  # noqa: ANN001
        statements.append(statement.lower())

    event.listen(db_engine.sync_engine, "before_cursor_execute", _record)
    try:
        async with db_session.begin():
            number = await next_order_number(db_session, SALES)
    finally:
        event.remove(db_engine.sync_engine, "before_cursor_execute", _record)

    assert number == "51"
    assert any("max(" in s and "from sales_orders" in s for s in statements)
    assert not any("from sales_orders" in s and "max(" not in s for s in statements)


@pytest.mark.asyncio
async def test_next_order_number_is_per_family(db_session, reference_data) -> None:
    async with db_session.begin():
        db_session.add(_sales_order(reference_data, "41"))
        db_session.add(
            PurchaseOrder(
                order_number="7",
                document_model="55",
                document_series="1",
                issue_date=date(2026, 10, 1),
                payment_term_id=reference_data.payment_term_id,
                supplier_id=reference_data.supplier_id,
            )
        )

    async with db_session.begin():
        sales_number = await next_order_number(db_session, SALES)
        purchase_number = await next_order_number(db_session, PURCHASES)

    assert sales_number == "42"
    assert purchase_number == "8"


@pytest.mark.asyncio
async def test_order_exists_matches_full_natural_key_among_active_orders(db_session, reference_data) -> None:
    async with db_session.begin():
        active = _sales_order(reference_data, "100")
        inactive = _sales_order(reference_data, "200", active=False)
        db_session.add_all([active, inactive])
    active_id = active.id

    key = {"document_model": "55", "document_series": "1", "counterparty_id": reference_data.customer_id}

    assert await order_exists(db_session, SALES, order_number="100", **key) is True
    assert await order_exists(db_session, SALES, order_number="200", **key) is False
    assert await order_exists(db_session, SALES, order_number="100", **(key | {"document_series": "2"})) is False
    assert (
        await order_exists(
            db_session, SALES, order_number="100", **(key | {"counterparty_id": reference_data.other_customer_id})
        )
        is False
    )
    assert await order_exists(db_session, SALES, order_number="100", exclude_id=active_id, **key) is False
    # Same key in the other family is unrelated.
    assert await order_exists(db_session, PURCHASES, order_number="100", **key) is False
