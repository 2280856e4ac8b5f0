from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.models.base import Base, IdPrimaryKeyMixin, TimestampMixin


class Employee(IdPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "employees"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
