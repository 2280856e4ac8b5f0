from __future__ import annotations

from typing import ClassVar

from orderdesk.schemas.orders import OrderCreateBase, OrderOutBase, OrderUpdateBase


class SalesOrderCreate(OrderCreateBase):
    customer_id: int


class SalesOrderUpdate(OrderUpdateBase):
    customer_id: int | None = None


class SalesOrderOut(OrderOutBase):
    counterparty_name_field: ClassVar[str] = "customer_name"

    customer_id: int
    customer_name: str | None = None
