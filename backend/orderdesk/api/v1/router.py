from __future__ import annotations

from fastapi import APIRouter, Depends

from orderdesk.api.v1.endpoints import purchases, sales
from orderdesk.core.security import require_basic_auth


api_router = APIRouter(dependencies=[Depends(require_basic_auth)])

api_router.include_router(sales.router, prefix="/sales", tags=["sales"])
api_router.include_router(purchases.router, prefix="/purchases", tags=["purchases"])
