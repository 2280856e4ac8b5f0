from typing import Any

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.api.v1.errors import http_error
from orderdesk.core.db import get_session
from orderdesk.core.errors import OrderError
from orderdesk.core.security import acting_employee_id, require_basic_auth
from orderdesk.schemas.orders import ApproveRequest, DenyRequest, OrderExistsOut
from orderdesk.services.approvals import approve_order, deny_order
from orderdesk.services.order_families import OrderFamily
from orderdesk.services.order_numbers import order_exists
from orderdesk.services.order_reader import get_order, list_orders
from orderdesk.services.orders import create_order, delete_order, update_order


def build_order_router(
    family: OrderFamily,
    *,
    create_schema: type[Any],
    update_schema: type[Any],
    out_schema: type[Any],
) -> APIRouter:
    """Routes shared by sales and purchase orders, bound to one family."""
    router = APIRouter()

    async def _read(session: AsyncSession, order_id: int) -> Any:
        try:
            view = await get_order(session, family, order_id)
        except OrderError as e:
            raise http_error(e) from e
        return out_schema.from_view(view)

    @router.post("", response_model=out_schema, status_code=201)
    async def create_order_endpoint(
        data: create_schema,  # type: ignore[valid-type]
        session: AsyncSession = Depends(get_session),
        actor: str = Depends(require_basic_auth),
    ) -> Any:
        try:
            order = await create_order(session, family=family, actor=actor, data=data)
        except OrderError as e:
            raise http_error(e) from e
        return await _read(session, order.id)

    @router.get("", response_model=list[out_schema])
    async def list_orders_endpoint(
        limit: int | None = Query(default=None, ge=1),
        offset: int = Query(default=0, ge=0),
        session: AsyncSession = Depends(get_session),
    ) -> Any:
        views = await list_orders(session, family, limit=limit, offset=offset)
        return [out_schema.from_view(v) for v in views]

    @router.get("/check-exists", response_model=OrderExistsOut)
    async def check_exists_endpoint(
        order_number: str = Query(min_length=1, max_length=20),
        document_model: str = Query(min_length=1, max_length=10),
        document_series: str = Query(min_length=1, max_length=10),
        counterparty_id: int = Query(),
        exclude_id: int | None = Query(default=None),
        session: AsyncSession = Depends(get_session),
    ) -> OrderExistsOut:
        exists = await order_exists(
            session,
            family,
            order_number=order_number,
            document_model=document_model,
            document_series=document_series,
            counterparty_id=counterparty_id,
            exclude_id=exclude_id,
        )
        return OrderExistsOut(exists=exists)

    @router.get("/{order_id}", response_model=out_schema)
    async def get_order_endpoint(order_id: int, session: AsyncSession = Depends(get_session)) -> Any:
        return await _read(session, order_id)

    @router.patch("/{order_id}", response_model=out_schema)
    async def update_order_endpoint(
        order_id: int,
        data: update_schema,  # type: ignore[valid-type]
        session: AsyncSession = Depends(get_session),
        actor: str = Depends(require_basic_auth),
    ) -> Any:
        try:
            await update_order(session, family=family, actor=actor, order_id=order_id, data=data)
        except OrderError as e:
            raise http_error(e) from e
        return await _read(session, order_id)

    @router.delete("/{order_id}", status_code=204)
    async def delete_order_endpoint(
        order_id: int,
        session: AsyncSession = Depends(get_session),
        actor: str = Depends(require_basic_auth),
    ) -> Response:
        try:
            await delete_order(session, family=family, actor=actor, order_id=order_id)
        except OrderError as e:
            raise http_error(e) from e
        return Response(status_code=204)

    @router.patch("/{order_id}/approve", response_model=out_schema)
    async def approve_order_endpoint(
        order_id: int,
        data: ApproveRequest | None = None,
        employee_id: int | None = Depends(acting_employee_id),
        session: AsyncSession = Depends(get_session),
        actor: str = Depends(require_basic_auth),
    ) -> Any:
        approver_id = data.approver_id if data is not None and data.approver_id is not None else employee_id
        try:
            await approve_order(session, family=family, actor=actor, order_id=order_id, approver_id=approver_id)
        except OrderError as e:
            raise http_error(e) from e
        return await _read(session, order_id)

    @router.patch("/{order_id}/deny", response_model=out_schema)
    async def deny_order_endpoint(
        order_id: int,
        data: DenyRequest | None = None,
        session: AsyncSession = Depends(get_session),
        actor: str = Depends(require_basic_auth),
    ) -> Any:
        try:
            await deny_order(
                session, family=family, actor=actor, order_id=order_id, reason=data.reason if data else None
            )
        except OrderError as e:
            raise http_error(e) from e
        return await _read(session, order_id)

    return router
