from __future__ import annotations

from sqlalchemy import Enum

from orderdesk.core.enums import FreightType, OrderFamilyKey, OrderStatus

order_family_enum = Enum(OrderFamilyKey, name="order_family")
order_status_enum = Enum(OrderStatus, name="order_status")
freight_type_enum = Enum(FreightType, name="freight_type")
