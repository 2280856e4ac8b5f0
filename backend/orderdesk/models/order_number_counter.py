from __future__ import annotations

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.core.enums import OrderFamilyKey
from orderdesk.models.base import Base
from orderdesk.models.sql_enums import order_family_enum


class OrderNumberCounter(Base):
    """
    One row per order family, locked while a new order number is allocated.

    The allocated number itself is derived from the orders table; `last_number`
    only records the most recent allocation.
    """

    __tablename__ = "order_number_counters"

    family: Mapped[OrderFamilyKey] = mapped_column(order_family_enum, primary_key=True)
    last_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
