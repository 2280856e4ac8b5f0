from __future__ import annotations

from fastapi import HTTPException

from orderdesk.core.errors import (
    DuplicateKeyError,
    InvalidArgumentError,
    NotFoundError,
    OrderError,
    StorageFailureError,
)


def http_error(exc: OrderError) -> HTTPException:
    """Map an order engine error to the HTTP response the endpoints return."""
    # NotFound first: NoActiveEmployeeError is both a NotFound and an InvalidArgument.
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidArgumentError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, DuplicateKeyError):
        return HTTPException(status_code=409, detail=f"{exc}, retry with a different order number")
    if isinstance(exc, StorageFailureError):
        return HTTPException(status_code=503, detail="Storage unavailable, the order was not saved; retry later")
    return HTTPException(status_code=500, detail=str(exc))
