from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from orderdesk.core.enums import OrderFamilyKey
from orderdesk.models.party import Customer, Supplier
from orderdesk.models.purchase import PurchaseOrder, PurchaseOrderInstallment, PurchaseOrderItem
from orderdesk.models.sales import SalesOrder, SalesOrderInstallment, SalesOrderItem


@dataclass(frozen=True)
class OrderFamily:
    """
    Everything that differs between sales and purchase orders.

    The engine functions take a family instead of being duplicated per order type.
    """

    key: OrderFamilyKey
    entity_type: str
    order_model: type[Any]
    item_model: type[Any]
    installment_model: type[Any]
    counterparty_model: type[Any]
    counterparty_field: str
    natural_key_index: str
    denied_note: str

    @property
    def counterparty_column(self) -> Any:
        return getattr(self.order_model, self.counterparty_field)

    @property
    def table_name(self) -> str:
        return self.order_model.__tablename__


SALES = OrderFamily(
    key=OrderFamilyKey.SALES,
    entity_type="sale",
    order_model=SalesOrder,
    item_model=SalesOrderItem,
    installment_model=SalesOrderInstallment,
    counterparty_model=Customer,
    counterparty_field="customer_id",
    natural_key_index="uq_sales_orders_natural_key",
    denied_note="Venda negada",
)

PURCHASES = OrderFamily(
    key=OrderFamilyKey.PURCHASES,
    entity_type="purchase",
    order_model=PurchaseOrder,
    item_model=PurchaseOrderItem,
    installment_model=PurchaseOrderInstallment,
    counterparty_model=Supplier,
    counterparty_field="supplier_id",
    natural_key_index="uq_purchase_orders_natural_key",
    denied_note="Compra negada",
)
