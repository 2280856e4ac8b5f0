from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

from alembic.autogenerate import compare_metadata
from alembic.migration import MigrationContext
from sqlalchemy import inspect
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

# Script entrypoint: ensure `backend/` is importable.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import orderdesk.models  # noqa: E402,F401  (register models with Base.metadata)
from orderdesk.models.base import Base  # noqa: E402
from orderdesk.services.order_families import PURCHASES, SALES  # noqa: E402

NATURAL_KEY_COLUMNS = ("order_number", "document_model", "document_series")


def _include_object(obj, name: str | None, type_: str, reflected: bool, compare_to) -> bool:  # noqa: ANN001
    # Only the order engine's own tables; other schemas may share the database.
    if type_ == "table":
        return name in Base.metadata.tables
    return True


def natural_key_problems(sync_conn: Connection) -> list[str]:
    """
    Check the partial unique index behind each family's natural key.

    Autogenerate does not compare index predicates, so a full unique index (or a
    missing one) would go unnoticed; the predicate is only reflected on PostgreSQL.
    """
    inspector = inspect(sync_conn)
    problems: list[str] = []
    for family in (SALES, PURCHASES):
        table = family.table_name
        expected = [*NATURAL_KEY_COLUMNS, family.counterparty_field]
        index = next((ix for ix in inspector.get_indexes(table) if ix["name"] == family.natural_key_index), None)
        if index is None:
            problems.append(f"{table}: natural key index {family.natural_key_index} is missing")
            continue
        if not index.get("unique"):
            problems.append(f"{table}: {family.natural_key_index} is not unique")
        if list(index["column_names"]) != expected:
            problems.append(f"{table}: {family.natural_key_index} covers {index['column_names']}, expected {expected}")
        if sync_conn.dialect.name == "postgresql":
            predicate = (index.get("dialect_options") or {}).get("postgresql_where")
            if not predicate or "active" not in str(predicate):
                problems.append(f"{table}: {family.natural_key_index} is not restricted to active orders")
    return problems


def _run_checks(sync_conn: Connection) -> tuple[list, list[str]]:
    ctx = MigrationContext.configure(
        sync_conn,
        opts={
            "target_metadata": Base.metadata,
            "compare_type": True,
            # Defaults live on the models (Python side), not in the database.
            "compare_server_default": False,
            "include_object": _include_object,
        },
    )
    return compare_metadata(ctx, Base.metadata), natural_key_problems(sync_conn)


async def _main() -> int:
    url = os.environ.get("DATABASE_URL")
    if not url:
        print("DATABASE_URL is required.", file=sys.stderr)
        return 2

    engine = create_async_engine(url, pool_pre_ping=True)
    try:
        async with engine.connect() as conn:
            diffs, key_problems = await conn.run_sync(_run_checks)
    finally:
        await engine.dispose()

    for d in diffs:
        print(f"drift: {d}", file=sys.stderr)
    for problem in key_problems:
        print(f"natural key: {problem}", file=sys.stderr)
    if diffs or key_problems:
        return 1

    print("Order schema matches models; natural key indexes are in place.")
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(_main()))
