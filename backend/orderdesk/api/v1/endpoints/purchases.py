from __future__ import annotations

from orderdesk.api.v1.endpoints.orders import build_order_router
from orderdesk.schemas.purchases import PurchaseOrderCreate, PurchaseOrderOut, PurchaseOrderUpdate
from orderdesk.services.order_families import PURCHASES


router = build_order_router(
    PURCHASES,
    create_schema=PurchaseOrderCreate,
    update_schema=PurchaseOrderUpdate,
    out_schema=PurchaseOrderOut,
)
