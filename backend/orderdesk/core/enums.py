from __future__ import annotations

from enum import StrEnum


class OrderFamilyKey(StrEnum):
    SALES = "SALES"
    PURCHASES = "PURCHASES"


class OrderStatus(StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    CANCELLED = "CANCELLED"


class FreightType(StrEnum):
    # Seller pays (Cost, Insurance and Freight).
    CIF = "CIF"
    # Buyer pays (Free On Board).
    FOB = "FOB"
    NONE = "NONE"
