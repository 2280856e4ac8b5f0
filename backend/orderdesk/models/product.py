from __future__ import annotations

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.models.base import Base, IdPrimaryKeyMixin, TimestampMixin


class Product(IdPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "products"
    __table_args__ = (UniqueConstraint("code", name="uq_product_code"),)

    code: Mapped[str] = mapped_column(String(40), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    # Unit of measure abbreviation, e.g. "UN", "KG", "CX".
    unit: Mapped[str] = mapped_column(String(10), nullable=False, default="UN")
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
