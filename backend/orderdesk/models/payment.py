from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.models.base import Base, IdPrimaryKeyMixin, TimestampMixin


class PaymentMethod(IdPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "payment_methods"

    # Short code shown on installment schedules, e.g. "DIN", "PIX", "BOL".
    code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class PaymentTerm(IdPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "payment_terms"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
