from __future__ import annotations

from typing import ClassVar

from orderdesk.schemas.orders import OrderCreateBase, OrderOutBase, OrderUpdateBase


class PurchaseOrderCreate(OrderCreateBase):
    supplier_id: int


class PurchaseOrderUpdate(OrderUpdateBase):
    supplier_id: int | None = None


class PurchaseOrderOut(OrderOutBase):
    counterparty_name_field: ClassVar[str] = "supplier_name"

    supplier_id: int
    supplier_name: str | None = None
