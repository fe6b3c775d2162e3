"""
Model factories for creating valid test data.

Every factory produces a valid, insertable SQLAlchemy model instance.
Override any field via kwargs.

Usage:
    product = ProductFactory.create(price=Decimal("450"))
    db_session.add(product)
    await db_session.commit()
"""

import itertools
from datetime import datetime, timezone
from decimal import Decimal

_ids = itertools.count(1)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _seq() -> int:
    return next(_ids)


async def persist(db, *objs):
    """Add, commit and refresh ``objs``; returns the first (or all of them)."""
    db.add_all(objs)
    await db.commit()
    for obj in objs:
        await db.refresh(obj)
    return objs[0] if len(objs) == 1 else objs


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


class UserFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import User

        n = _seq()
        defaults = {
            "telegram_id": 900000 + n,
            "name": "Test Customer",
            "phone": "+70000000000",
            "username": f"customer{n}",
            "points": 0,
            "referral_code": f"REF-T{n:05d}",
            "created_at": _now(),
        }
        defaults.update(overrides)
        return User(**defaults)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class ProductFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import Product

        defaults = {
            "name": f"Product {_seq()}",
            "category": "tea",
            "description": "Test product",
            "price": Decimal("100.00"),
            "purchase_price": Decimal("40.00"),
            "image_url": None,
            "stock": 10,
            "created_at": _now(),
        }
        defaults.update(overrides)
        return Product(**defaults)


# ---------------------------------------------------------------------------
# Commerce
# ---------------------------------------------------------------------------


class CartItemFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import CartItem

        defaults = {"quantity": 1}
        defaults.update(overrides)
        return CartItem(**defaults)


class PromoCodeFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import PromoCode

        defaults = {
            "code": f"PROMO{_seq()}",
            "discount_percent": 10,
            "is_active": True,
            "created_at": _now(),
        }
        defaults.update(overrides)
        return PromoCode(**defaults)


class OrderFactory:
    @staticmethod
    def create(lines=None, **overrides):
        """``lines`` is a list of (product, quantity) pairs for the snapshot."""
        from services.store_service.models import (
            Order,
            OrderSnapshot,
            OrderStatus,
            SnapshotLine,
        )

        snapshot = OrderSnapshot(
            lines=tuple(
                SnapshotLine(
                    product_id=product.id,
                    name=product.name,
                    unit_price=product.price,
                    quantity=quantity,
                )
                for product, quantity in (lines or [])
            )
        )
        subtotal = snapshot.subtotal
        defaults = {
            "user_telegram_id": 900000,
            "details": snapshot.to_stored(),
            "subtotal": subtotal,
            "promo_code": None,
            "promo_discount_percent": 0,
            "points_spent": 0,
            "total_price": subtotal,
            "cashback_points": 0,
            "address": "Test street 1",
            "comment": None,
            "status": OrderStatus.ACTIVE,
            "created_at": _now(),
        }
        defaults.update(overrides)
        return Order(**defaults)


class ExpenseFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import Expense

        defaults = {
            "amount": Decimal("100.00"),
            "comment": "Packaging",
            "created_at": _now(),
        }
        defaults.update(overrides)
        return Expense(**defaults)


class FaqEntryFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import FaqEntry

        defaults = {"question": "How long is delivery?", "answer": "1-2 days"}
        defaults.update(overrides)
        return FaqEntry(**defaults)
