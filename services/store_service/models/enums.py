"""Enum definitions for store service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class OrderStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class ManagedEntity(str, enum.Enum):
    """Entities exposed through the admin entity manager."""

    USERS = "users"
    PRODUCTS = "products"
    ORDERS = "orders"
    PROMO_CODES = "promo_codes"
    EXPENSES = "expenses"
    FAQ = "faq"
