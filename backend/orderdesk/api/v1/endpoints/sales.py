from __future__ import annotations

from orderdesk.api.v1.endpoints.orders import build_order_router
from orderdesk.schemas.sales import SalesOrderCreate, SalesOrderOut, SalesOrderUpdate
from orderdesk.services.order_families import SALES


router = build_order_router(
    SALES,
    create_schema=SalesOrderCreate,
    update_schema=SalesOrderUpdate,
    out_schema=SalesOrderOut,
)
