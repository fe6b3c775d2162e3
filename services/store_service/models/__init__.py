"""Store Service models package."""

from services.store_service.models.accounts import User
from services.store_service.models.catalog import FaqEntry, Product
from services.store_service.models.commerce import CartItem, Order, PromoCode
from services.store_service.models.enums import ManagedEntity, OrderStatus
from services.store_service.models.ledger import Expense
from services.store_service.models.snapshot import (
    SNAPSHOT_VERSION,
    OrderSnapshot,
    SnapshotLine,
)

__all__ = [
    "CartItem",
    "Expense",
    "FaqEntry",
    "ManagedEntity",
    "Order",
    "OrderSnapshot",
    "OrderStatus",
    "Product",
    "PromoCode",
    "SNAPSHOT_VERSION",
    "SnapshotLine",
    "User",
]
