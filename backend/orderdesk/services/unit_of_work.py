from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.core.errors import DuplicateKeyError, StorageFailureError
from orderdesk.services.order_families import OrderFamily


logger = logging.getLogger(__name__)


DUPLICATE_ORDER_MESSAGE = "order already exists with this number/model/series/counterparty"


def is_natural_key_violation(exc: IntegrityError, family: OrderFamily) -> bool:
    message = str(exc.orig)
    # PostgreSQL names the index; SQLite lists the indexed columns.
    return family.natural_key_index in message or f"{family.table_name}.order_number" in message


@asynccontextmanager
async def unit_of_work(session: AsyncSession, *, family: OrderFamily | None = None) -> AsyncIterator[AsyncSession]:
    """
    One transaction: commit when the block completes, roll back on any exception.
    Inside a transaction the caller already opened it becomes a savepoint and the
    caller commits.

    Driver errors are re-raised typed. A collision on the family's natural-key index
    becomes `DuplicateKeyError`; everything else becomes `StorageFailureError`.
    Domain errors raised inside the block propagate unchanged.
    """
    try:
        if session.in_transaction():
            async with session.begin_nested():
                yield session
        else:
            async with session.begin():
                yield session
    except IntegrityError as e:
        if family is not None and is_natural_key_violation(e, family):
            raise DuplicateKeyError(DUPLICATE_ORDER_MESSAGE) from e
        logger.exception("Integrity error in unit of work")
        raise StorageFailureError("Storage rejected the write") from e
    except (DBAPIError, OSError) as e:
        logger.exception("Storage failure in unit of work")
        raise StorageFailureError("Storage failure, the transaction was rolled back") from e
