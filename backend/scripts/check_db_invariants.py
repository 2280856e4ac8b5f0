from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine

# Script entrypoint: ensure `backend/` is importable.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from orderdesk.core.enums import FreightType, OrderFamilyKey, OrderStatus  # noqa: E402


EXPECTED_ENUMS: dict[str, list[str]] = {
    "order_family": [e.value for e in OrderFamilyKey],
    "order_status": [e.value for e in OrderStatus],
    "freight_type": [e.value for e in FreightType],
}

# (orders table, items table, installments table)
ORDER_TABLES: tuple[tuple[str, str, str], ...] = (
    ("sales_orders", "sales_order_items", "sales_order_installments"),
    ("purchase_orders", "purchase_order_items", "purchase_order_installments"),
)


async def _check_enums(conn: AsyncConnection) -> int:
    for type_name, expected in EXPECTED_ENUMS.items():
        rows = (
            await conn.execute(
                text(
                    """
                    SELECT e.enumlabel
                    FROM pg_enum e
                    JOIN pg_type t ON t.oid = e.enumtypid
                    JOIN pg_namespace n ON n.oid = t.typnamespace
                    WHERE n.nspname = 'public' AND t.typname = :type_name
                    ORDER BY e.enumsortorder
                    """
                ),
                {"type_name": type_name},
            )
        ).all()
        actual = [r[0] for r in rows]

        missing = [v for v in expected if v not in actual]
        if missing:
            print(f"Enum type '{type_name}' is missing values: {missing}", file=sys.stderr)
            print(f"Expected: {expected}", file=sys.stderr)
            print(f"Actual:   {actual}", file=sys.stderr)
            return 1
    return 0


async def _check_totals(conn: AsyncConnection, orders: str, items: str) -> int:
    rows = (
        await conn.execute(
            text(
                f"""
                SELECT o.id, o.products_total, o.grand_total, COALESCE(SUM(i.line_total), 0) AS items_total,
                       o.freight_amount + o.insurance_amount + o.other_charges
                       + o.surcharge_amount - o.discount_amount AS adjustments
                FROM {orders} o
                LEFT JOIN {items} i ON i.order_id = o.id
                GROUP BY o.id
                HAVING o.products_total <> COALESCE(SUM(i.line_total), 0)
                    OR o.grand_total <> o.products_total + o.freight_amount + o.insurance_amount
                       + o.other_charges + o.surcharge_amount - o.discount_amount
                """
            )
        )
    ).all()
    for r in rows:
        print(
            f"{orders} id={r.id}: products_total={r.products_total} items_total={r.items_total} "
            f"grand_total={r.grand_total} adjustments={r.adjustments}",
            file=sys.stderr,
        )
    return 1 if rows else 0


async def _check_installments(conn: AsyncConnection, installments: str) -> int:
    rows = (
        await conn.execute(
            text(
                f"""
                SELECT order_id, count(*) AS n, min(installment_number) AS lo, max(installment_number) AS hi
                FROM {installments}
                GROUP BY order_id
                HAVING min(installment_number) <> 1 OR max(installment_number) <> count(*)
                """
            )
        )
    ).all()
    for r in rows:
        print(f"{installments} order_id={r.order_id}: numbers {r.lo}..{r.hi} for {r.n} rows", file=sys.stderr)
    return 1 if rows else 0


async def _main() -> int:
    url = os.environ.get("DATABASE_URL")
    if not url:
        print("DATABASE_URL is required.", file=sys.stderr)
        return 2

    engine = create_async_engine(url, pool_pre_ping=True)
    failures = 0
    try:
        async with engine.connect() as conn:
            if await _check_enums(conn):
                return 1
            for orders, items, installments in ORDER_TABLES:
                failures += await _check_totals(conn, orders, items)
                failures += await _check_installments(conn, installments)
    finally:
        await engine.dispose()

    if failures:
        print("DB invariants violated (see above).", file=sys.stderr)
        return 1

    print("DB invariants ok (enums, order totals, installment numbering).")
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(_main()))
