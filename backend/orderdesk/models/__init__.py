from orderdesk.models.audit_log import AuditLog
from orderdesk.models.employee import Employee
from orderdesk.models.order_number_counter import OrderNumberCounter
from orderdesk.models.party import Carrier, Customer, Supplier
from orderdesk.models.payment import PaymentMethod, PaymentTerm
from orderdesk.models.product import Product
from orderdesk.models.purchase import PurchaseOrder, PurchaseOrderInstallment, PurchaseOrderItem
from orderdesk.models.sales import SalesOrder, SalesOrderInstallment, SalesOrderItem

__all__ = [
    "AuditLog",
    "Carrier",
    "Customer",
    "Employee",
    "OrderNumberCounter",
    "PaymentMethod",
    "PaymentTerm",
    "Product",
    "PurchaseOrder",
    "PurchaseOrderInstallment",
    "PurchaseOrderItem",
    "SalesOrder",
    "SalesOrderInstallment",
    "SalesOrderItem",
    "Supplier",
]
