"""initial order schema

Revision ID: 0b3e5a7c2d41
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0b3e5a7c2d41"
down_revision = None
branch_labels = None
depends_on = None


# Created explicitly in upgrade(); both order families share the types.
order_family = postgresql.ENUM("SALES", "PURCHASES", name="order_family", create_type=False)
order_status = postgresql.ENUM("PENDING", "APPROVED", "CANCELLED", name="order_status", create_type=False)
freight_type = postgresql.ENUM("CIF", "FOB", "NONE", name="freight_type", create_type=False)

MONEY = sa.Numeric(14, 2)
UNIT_VALUE = sa.Numeric(14, 4)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _reference_table(name: str, *columns: sa.Column) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *columns,
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )


def _order_tables(prefix: str, counterparty_field: str, counterparty_table: str) -> None:
    orders = f"{prefix}_orders"
    op.create_table(
        orders,
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("order_number", sa.String(length=20), nullable=False),
        sa.Column("document_model", sa.String(length=10), nullable=False),
        sa.Column("document_series", sa.String(length=10), nullable=False),
        sa.Column(counterparty_field, sa.Integer(), sa.ForeignKey(f"{counterparty_table}.id"), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("expected_delivery_date", sa.Date(), nullable=True),
        sa.Column("delivered_date", sa.Date(), nullable=True),
        sa.Column("payment_term_id", sa.Integer(), sa.ForeignKey("payment_terms.id"), nullable=False),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=True),
        sa.Column("carrier_id", sa.Integer(), sa.ForeignKey("carriers.id"), nullable=True),
        sa.Column("freight_type", freight_type, nullable=False),
        sa.Column("freight_amount", MONEY, nullable=False),
        sa.Column("insurance_amount", MONEY, nullable=False),
        sa.Column("other_charges", MONEY, nullable=False),
        sa.Column("discount_amount", MONEY, nullable=False),
        sa.Column("surcharge_amount", MONEY, nullable=False),
        sa.Column("products_total", MONEY, nullable=False),
        sa.Column("grand_total", MONEY, nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", order_status, nullable=False),
        sa.Column("approved_by_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f(f"ix_{orders}_{counterparty_field}"), orders, [counterparty_field], unique=False)
    op.create_index(
        f"uq_{orders}_natural_key",
        orders,
        ["order_number", "document_model", "document_series", counterparty_field],
        unique=True,
        postgresql_where=sa.text("active"),
        sqlite_where=sa.text("active"),
    )

    items = f"{prefix}_order_items"
    op.create_table(
        items,
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey(f"{orders}.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("product_code", sa.String(length=40), nullable=False),
        sa.Column("product_name", sa.String(length=200), nullable=False),
        sa.Column("unit", sa.String(length=10), nullable=False),
        sa.Column("quantity", UNIT_VALUE, nullable=False),
        sa.Column("unit_price", UNIT_VALUE, nullable=False),
        sa.Column("unit_discount", UNIT_VALUE, nullable=False),
        sa.Column("unit_net", UNIT_VALUE, nullable=False),
        sa.Column("line_total", MONEY, nullable=False),
        sa.Column("apportioned_cost", MONEY, nullable=False),
        sa.Column("landed_unit_cost", UNIT_VALUE, nullable=False),
        sa.Column("landed_total_cost", MONEY, nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f(f"ix_{items}_order_id"), items, ["order_id"], unique=False)

    installments = f"{prefix}_order_installments"
    op.create_table(
        installments,
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey(f"{orders}.id", ondelete="CASCADE"), nullable=False),
        sa.Column("installment_number", sa.Integer(), nullable=False),
        sa.Column("payment_method_id", sa.Integer(), sa.ForeignKey("payment_methods.id"), nullable=False),
        sa.Column("payment_method_name", sa.String(length=100), nullable=False),
        sa.Column("payment_method_code", sa.String(length=20), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("order_id", "installment_number", name=f"uq_{prefix}_order_installment_number"),
    )
    op.create_index(op.f(f"ix_{installments}_order_id"), installments, ["order_id"], unique=False)


def upgrade() -> None:
    bind = op.get_bind()
    for enum in (order_family, order_status, freight_type):
        enum.create(bind, checkfirst=True)

    _reference_table("customers", sa.Column("name", sa.String(length=200), nullable=False), sa.Column("tax_id", sa.String(length=20), nullable=True))
    _reference_table("suppliers", sa.Column("name", sa.String(length=200), nullable=False), sa.Column("tax_id", sa.String(length=20), nullable=True))
    _reference_table("carriers", sa.Column("name", sa.String(length=200), nullable=False))
    _reference_table(
        "products",
        sa.Column("code", sa.String(length=40), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("unit", sa.String(length=10), nullable=False),
    )
    op.create_unique_constraint("uq_product_code", "products", ["code"])
    _reference_table(
        "payment_methods",
        sa.Column("code", sa.String(length=20), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
    )
    _reference_table("payment_terms", sa.Column("name", sa.String(length=100), nullable=False))
    _reference_table(
        "employees",
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=200), nullable=True),
    )

    _order_tables("sales", "customer_id", "customers")
    _order_tables("purchase", "supplier_id", "suppliers")

    op.create_table(
        "order_number_counters",
        sa.Column("family", order_family, nullable=False),
        sa.Column("last_number", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("family"),
    )
    counters = sa.table("order_number_counters", sa.column("family", order_family), sa.column("last_number", sa.Integer()))
    op.bulk_insert(counters, [{"family": "SALES", "last_number": 0}, {"family": "PURCHASES", "last_number": 0}])

    op.create_table(
        "audit_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("actor", sa.String(length=200), nullable=False),
        sa.Column("entity_type", sa.String(length=100), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("before", sa.JSON(), nullable=True),
        sa.Column("after", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_audit_logs_entity_id"), "audit_logs", ["entity_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_audit_logs_entity_id"), table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_table("order_number_counters")

    for prefix in ("purchase", "sales"):
        op.drop_table(f"{prefix}_order_installments")
        op.drop_table(f"{prefix}_order_items")
        op.drop_index(f"uq_{prefix}_orders_natural_key", table_name=f"{prefix}_orders")
        op.drop_table(f"{prefix}_orders")

    for table in ("employees", "payment_terms", "payment_methods", "products", "carriers", "suppliers", "customers"):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in (order_family, order_status, freight_type):
        enum.drop(bind, checkfirst=True)
