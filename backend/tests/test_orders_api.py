from __future__ import annotations

from decimal import Decimal

import pytest

from orderdesk.models.employee import Employee


def _sales_body(ref, **overrides) -> dict:
    body = {
        "document_model": "55",
        "document_series": "1",
        "issue_date": "2026-10-10",
        "customer_id": ref.customer_id,
        "payment_term_id": ref.payment_term_id,
        "freight_amount": "15.00",
        "items": [
            {"product_id": ref.product_ids[0], "quantity": "2", "unit_price": "30.00", "unit_discount": "2.50"},
        ],
        "installments": [
            {"installment_number": 1, "payment_method_id": ref.cash_method_id, "due_date": "2026-11-10", "amount": "70.00"},
        ],
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_create_and_read_sales_order(api_client, reference_data) -> None:
    res = await api_client.post("/api/v1/sales", json=_sales_body(reference_data))
    assert res.status_code == 201, res.text
    created = res.json()

    assert created["order_number"] == "1"
    assert created["status"] == "PENDING"
    assert created["customer_name"] == "Mercado Central"
    assert created["payment_term_name"] == "30/60"
    assert Decimal(created["products_total"]) == Decimal("55.00")
    assert Decimal(created["grand_total"]) == Decimal("70.00")
    assert Decimal(created["items"][0]["landed_total_cost"]) == Decimal("70.00")
    assert created["installments"][0]["payment_method_name"] == "Dinheiro"

    res = await api_client.get(f"/api/v1/sales/{created['id']}")
    assert res.status_code == 200
    assert res.json() == created

    res = await api_client.get("/api/v1/sales")
    assert [o["id"] for o in res.json()] == [created["id"]]


@pytest.mark.asyncio
async def test_client_supplied_totals_are_ignored(api_client, reference_data) -> None:
    res = await api_client.post(
        "/api/v1/sales", json=_sales_body(reference_data, products_total="1.00", grand_total="1.00")
    )
    assert res.status_code == 201
    assert Decimal(res.json()["grand_total"]) == Decimal("70.00")


@pytest.mark.asyncio
async def test_requests_require_basic_auth(api_client) -> None:
    res = await api_client.get("/api/v1/sales", auth=None)
    assert res.status_code == 401

    res = await api_client.get("/api/v1/sales", auth=("test-user", "wrong"))
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_duplicate_order_number_returns_conflict(api_client, reference_data) -> None:
    body = _sales_body(reference_data, order_number="500")
    assert (await api_client.post("/api/v1/sales", json=body)).status_code == 201

    res = await api_client.get(
        "/api/v1/sales/check-exists",
        params={
            "order_number": "500",
            "document_model": "55",
            "document_series": "1",
            "counterparty_id": reference_data.customer_id,
        },
    )
    assert res.json() == {"exists": True}

    res = await api_client.post("/api/v1/sales", json=body)
    assert res.status_code == 409
    assert "already exists" in res.json()["detail"]
    assert "retry" in res.json()["detail"]


@pytest.mark.asyncio
async def test_validation_errors_return_422(api_client, reference_data) -> None:
    items = [{"product_id": reference_data.product_ids[0], "quantity": "1", "unit_price": "5", "unit_discount": "6"}]
    res = await api_client.post("/api/v1/sales", json=_sales_body(reference_data, items=items))
    assert res.status_code == 422
    assert "discount" in res.json()["detail"]

    res = await api_client.post("/api/v1/sales", json=_sales_body(reference_data, discount_amount="-1"))
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_unknown_references_return_404(api_client, reference_data) -> None:
    items = [{"product_id": 9999, "quantity": "1", "unit_price": "5"}]
    res = await api_client.post("/api/v1/sales", json=_sales_body(reference_data, items=items))
    assert res.status_code == 404

    res = await api_client.get("/api/v1/sales/9999")
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_partial_update_recomputes_totals(api_client, reference_data) -> None:
    created = (await api_client.post("/api/v1/sales", json=_sales_body(reference_data))).json()

    res = await api_client.patch(
        f"/api/v1/sales/{created['id']}", json={"discount_amount": "10.00", "notes": "Desconto negociado"}
    )
    assert res.status_code == 200, res.text
    updated = res.json()
    assert updated["notes"] == "Desconto negociado"
    assert Decimal(updated["grand_total"]) == Decimal("60.00")
    assert len(updated["items"]) == 1


@pytest.mark.asyncio
async def test_approve_uses_acting_employee_header(api_client, session_factory, reference_data) -> None:
    async with session_factory() as session:
        async with session.begin():
            session.add_all([Employee(id=1, name="Gerente"), Employee(id=8, name="Supervisora")])
    created = (await api_client.post("/api/v1/sales", json=_sales_body(reference_data))).json()

    res = await api_client.patch(f"/api/v1/sales/{created['id']}/approve", headers={"X-Employee-Id": "8"})
    assert res.status_code == 200, res.text
    assert res.json()["status"] == "APPROVED"
    assert res.json()["approved_by_id"] == 8
    assert res.json()["approver_name"] == "Supervisora"

    # An explicit approver in the body wins over the header.
    res = await api_client.patch(
        f"/api/v1/sales/{created['id']}/approve", json={"approver_id": 1}, headers={"X-Employee-Id": "8"}
    )
    assert res.json()["approved_by_id"] == 1

    res = await api_client.patch(f"/api/v1/sales/{created['id']}/approve", headers={"X-Employee-Id": "0"})
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_approve_without_any_active_employee_returns_404(api_client, reference_data) -> None:
    created = (await api_client.post("/api/v1/sales", json=_sales_body(reference_data))).json()

    res = await api_client.patch(f"/api/v1/sales/{created['id']}/approve")
    assert res.status_code == 404
    assert "No active employee" in res.json()["detail"]


@pytest.mark.asyncio
async def test_deny_and_delete(api_client, reference_data) -> None:
    created = (await api_client.post("/api/v1/sales", json=_sales_body(reference_data, notes="Pedido via telefone"))).json()

    res = await api_client.patch(f"/api/v1/sales/{created['id']}/deny", json={"reason": "limite de crédito"})
    assert res.status_code == 200
    assert res.json()["status"] == "CANCELLED"
    assert res.json()["notes"] == "Pedido via telefone\nNegado: limite de crédito"

    res = await api_client.delete(f"/api/v1/sales/{created['id']}")
    assert res.status_code == 204
    assert (await api_client.get(f"/api/v1/sales/{created['id']}")).status_code == 404
    assert (await api_client.delete(f"/api/v1/sales/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_purchase_routes(api_client, reference_data) -> None:
    body = _sales_body(reference_data, freight_type="FOB")
    body.pop("customer_id")
    body["supplier_id"] = reference_data.supplier_id

    res = await api_client.post("/api/v1/purchases", json=body)
    assert res.status_code == 201, res.text
    created = res.json()
    assert created["supplier_name"] == "Distribuidora Norte"
    assert created["freight_type"] == "FOB"

    res = await api_client.patch(f"/api/v1/purchases/{created['id']}/deny")
    assert res.json()["notes"] == "Compra negada"

    assert (await api_client.get("/api/v1/sales")).json() == []


@pytest.mark.asyncio
async def test_list_is_unbounded_unless_paged(api_client, reference_data) -> None:
    for _ in range(3):
        assert (await api_client.post("/api/v1/sales", json=_sales_body(reference_data))).status_code == 201

    res = await api_client.get("/api/v1/sales")
    assert [o["order_number"] for o in res.json()] == ["3", "2", "1"]

    res = await api_client.get("/api/v1/sales", params={"limit": 1, "offset": 1})
    assert [o["order_number"] for o in res.json()] == ["2"]

    assert (await api_client.get("/api/v1/sales", params={"limit": 0})).status_code == 422


@pytest.mark.asyncio
async def test_healthz(api_client) -> None:
    res = await api_client.get("/healthz")
    assert res.json() == {"status": "ok"}
