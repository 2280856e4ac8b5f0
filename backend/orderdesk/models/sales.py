from __future__ import annotations

from sqlalchemy import ForeignKey, Index, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orderdesk.models.base import Base
from orderdesk.models.order_base import OrderHeaderMixin, OrderInstallmentMixin, OrderItemMixin


class SalesOrder(OrderHeaderMixin, Base):
    __tablename__ = "sales_orders"
    __table_args__ = (
        # Natural key, unique among active orders only.
        Index(
            "uq_sales_orders_natural_key",
            "order_number",
            "document_model",
            "document_series",
            "customer_id",
            unique=True,
            postgresql_where=text("active"),
            sqlite_where=text("active"),
        ),
    )

    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False, index=True)

    items: Mapped[list["SalesOrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="SalesOrderItem.position",
        passive_deletes=True,
    )
    installments: Mapped[list["SalesOrderInstallment"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="SalesOrderInstallment.installment_number",
        passive_deletes=True,
    )


class SalesOrderItem(OrderItemMixin, Base):
    __tablename__ = "sales_order_items"

    order_id: Mapped[int] = mapped_column(ForeignKey("sales_orders.id", ondelete="CASCADE"), nullable=False, index=True)

    order: Mapped[SalesOrder] = relationship(back_populates="items")


class SalesOrderInstallment(OrderInstallmentMixin, Base):
    __tablename__ = "sales_order_installments"
    __table_args__ = (UniqueConstraint("order_id", "installment_number", name="uq_sales_order_installment_number"),)

    order_id: Mapped[int] = mapped_column(ForeignKey("sales_orders.id", ondelete="CASCADE"), nullable=False, index=True)

    order: Mapped[SalesOrder] = relationship(back_populates="installments")
