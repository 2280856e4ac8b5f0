"""
Read-only access to the reference data an order points at.

Products, payment methods and employees are maintained by other modules; the
order engine only needs these narrow lookups.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.core.errors import NotFoundError
from orderdesk.models.employee import Employee
from orderdesk.models.payment import PaymentMethod
from orderdesk.models.product import Product


async def get_product(session: AsyncSession, product_id: int) -> Product:
    product = await session.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"Referenced product not found: {product_id}")
    return product


async def get_payment_method(session: AsyncSession, payment_method_id: int) -> PaymentMethod:
    method = await session.get(PaymentMethod, payment_method_id)
    if method is None:
        raise NotFoundError(f"Referenced payment method not found: {payment_method_id}")
    return method


async def get_employee(session: AsyncSession, employee_id: int) -> Employee:
    employee = await session.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError(f"Referenced employee not found: {employee_id}")
    return employee


async def list_active_employees(session: AsyncSession) -> list[Employee]:
    rows = (await session.execute(select(Employee).where(Employee.active.is_(True)).order_by(Employee.id))).scalars()
    return list(rows.all())


async def get_reference(session: AsyncSession, model: type[Any], ref_id: int, *, label: str) -> Any:
    """Fetch an active counterparty, payment term or carrier referenced by an order."""
    row = await session.get(model, ref_id)
    if row is None or not row.active:
        raise NotFoundError(f"Referenced {label} not found: {ref_id}")
    return row
