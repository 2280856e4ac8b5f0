from __future__ import annotations

from datetime import date

import pytest

from orderdesk.core.errors import NotFoundError
from orderdesk.models.employee import Employee
from orderdesk.models.sales import SalesOrder
from orderdesk.schemas.sales import SalesOrderCreate, SalesOrderOut
from orderdesk.services.order_families import PURCHASES, SALES
from orderdesk.services.order_reader import get_order, list_orders
from orderdesk.services.orders import create_order, delete_order


def _payload(ref, **overrides) -> SalesOrderCreate:
    data = {
        "document_model": "55",
        "document_series": "1",
        "issue_date": date(2026, 10, 7),
        "customer_id": ref.customer_id,
        "payment_term_id": ref.payment_term_id,
        "items": [{"product_id": ref.product_ids[1], "quantity": "2", "unit_price": "7.45"}],
    }
    data.update(overrides)
    return SalesOrderCreate.model_validate(data)


@pytest.mark.asyncio
async def test_get_order_resolves_reference_names(db_session, session_factory, reference_data) -> None:
    async with session_factory() as session:
        async with session.begin():
            session.add(Employee(id=21, name="Fernanda Lima"))

    order = await create_order(
        db_session,
        family=SALES,
        actor="tester",
        data=_payload(reference_data, employee_id=21, carrier_id=reference_data.carrier_id),
    )

    async with session_factory() as session:
        view = await get_order(session, SALES, order.id)

    assert view.counterparty_name == "Mercado Central"
    assert view.payment_term_name == "30/60"
    assert view.employee_name == "Fernanda Lima"
    assert view.carrier_name == "Transportes Rápidos"
    assert view.approver_name is None


@pytest.mark.asyncio
async def test_reads_are_idempotent(db_session, session_factory, reference_data) -> None:
    order = await create_order(db_session, family=SALES, actor="tester", data=_payload(reference_data))

    async with session_factory() as session:
        first = SalesOrderOut.from_view(await get_order(session, SALES, order.id))
        second = SalesOrderOut.from_view(await get_order(session, SALES, order.id))

    assert first == second
    assert first.customer_name == "Mercado Central"
    assert [i.product_code for i in first.items] == ["P-002"]


@pytest.mark.asyncio
async def test_list_orders_returns_active_orders_newest_first(db_session, session_factory, reference_data) -> None:
    ids = []
    for number in ("10", "11", "12"):
        order = await create_order(
            db_session, family=SALES, actor="tester", data=_payload(reference_data, order_number=number)
        )
        ids.append(order.id)
    await delete_order(db_session, family=SALES, actor="tester", order_id=ids[1])

    async with session_factory() as session:
        views = await list_orders(session, SALES)
        purchases = await list_orders(session, PURCHASES)

    assert [v.order.order_number for v in views] == ["12", "10"]
    assert purchases == []


@pytest.mark.asyncio
async def test_list_orders_returns_every_active_order(session_factory, reference_data) -> None:
    async with session_factory() as session:
        async with session.begin():
            session.add_all(
                SalesOrder(
                    order_number=str(n),
                    document_model="55",
                    document_series="1",
                    customer_id=reference_data.customer_id,
                    issue_date=date(2026, 10, 7),
                    payment_term_id=reference_data.payment_term_id,
                )
                for n in range(1, 502)
            )

    async with session_factory() as session:
        views = await list_orders(session, SALES)

    assert len(views) == 501
    assert {v.order.order_number for v in views} == {str(n) for n in range(1, 502)}


@pytest.mark.asyncio
async def test_list_orders_pages_with_limit_and_offset(db_session, session_factory, reference_data) -> None:
    for _ in range(5):
        await create_order(db_session, family=SALES, actor="tester", data=_payload(reference_data))

    async with session_factory() as session:
        first_page = await list_orders(session, SALES, limit=2)
        second_page = await list_orders(session, SALES, limit=2, offset=2)
        rest = await list_orders(session, SALES, offset=4)

    assert [v.order.order_number for v in first_page] == ["5", "4"]
    assert [v.order.order_number for v in second_page] == ["3", "2"]
    assert [v.order.order_number for v in rest] == ["1"]


@pytest.mark.asyncio
async def test_get_order_of_other_family_is_not_found(db_session, session_factory, reference_data) -> None:
    order = await create_order(db_session, family=SALES, actor="tester", data=_payload(reference_data))
    order_id = order.id

    async with session_factory() as session:
        with pytest.raises(NotFoundError):
            await get_order(session, PURCHASES, order_id + 100)
        with pytest.raises(NotFoundError):
            await get_order(session, SALES, order_id + 1)
