from __future__ import annotations

from sqlalchemy import ForeignKey, Index, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orderdesk.models.base import Base
from orderdesk.models.order_base import OrderHeaderMixin, OrderInstallmentMixin, OrderItemMixin


class PurchaseOrder(OrderHeaderMixin, Base):
    __tablename__ = "purchase_orders"
    __table_args__ = (
        Index(
            "uq_purchase_orders_natural_key",
            "order_number",
            "document_model",
            "document_series",
            "supplier_id",
            unique=True,
            postgresql_where=text("active"),
            sqlite_where=text("active"),
        ),
    )

    supplier_id: Mapped[int] = mapped_column(ForeignKey("suppliers.id"), nullable=False, index=True)

    items: Mapped[list["PurchaseOrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderItem.position",
        passive_deletes=True,
    )
    installments: Mapped[list["PurchaseOrderInstallment"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderInstallment.installment_number",
        passive_deletes=True,
    )


class PurchaseOrderItem(OrderItemMixin, Base):
    __tablename__ = "purchase_order_items"

    order_id: Mapped[int] = mapped_column(
        ForeignKey("purchase_orders.id", ondelete="CASCADE"), nullable=False, index=True
    )

    order: Mapped[PurchaseOrder] = relationship(back_populates="items")


class PurchaseOrderInstallment(OrderInstallmentMixin, Base):
    __tablename__ = "purchase_order_installments"
    __table_args__ = (
        UniqueConstraint("order_id", "installment_number", name="uq_purchase_order_installment_number"),
    )

    order_id: Mapped[int] = mapped_column(
        ForeignKey("purchase_orders.id", ondelete="CASCADE"), nullable=False, index=True
    )

    order: Mapped[PurchaseOrder] = relationship(back_populates="installments")
