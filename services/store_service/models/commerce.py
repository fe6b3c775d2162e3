"""Store commerce models: cart lines, orders, promo codes."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base, JSONVariant
from services.store_service.models.enums import OrderStatus, enum_values
from services.store_service.models.snapshot import OrderSnapshot
from sqlalchemy import BigInteger, Boolean, CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# CART MODELS
# ============================================================================


class CartItem(Base):
    """One product line in a user's cart. Adding the same product bumps quantity."""

    __tablename__ = "cart_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_telegram_id: Mapped[int] = mapped_column(
        BigInteger, index=True, nullable=False
    )
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_telegram_id", "product_id", name="uq_cart_user_product"),
        CheckConstraint("quantity > 0", name="ck_cart_items_positive_quantity"),
    )

    product = relationship("Product")

    def __repr__(self):
        return f"<CartItem user={self.user_telegram_id} product={self.product_id} qty={self.quantity}>"


# ============================================================================
# ORDER MODELS
# ============================================================================


class Order(Base):
    """Settled order. Line items live in the immutable ``details`` snapshot."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_telegram_id: Mapped[int] = mapped_column(
        BigInteger, index=True, nullable=False
    )

    # Versioned OrderSnapshot payload
    details: Mapped[dict] = mapped_column(JSONVariant, nullable=False)

    # Pricing
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    promo_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    promo_discount_percent: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    points_spent: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Points credited on completion (0 while active or when cashback is off)
    cashback_points: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )

    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[OrderStatus] = mapped_column(
        SAEnum(
            OrderStatus,
            values_callable=enum_values,
            name="order_status_enum",
        ),
        default=OrderStatus.ACTIVE,
        server_default="active",
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint("points_spent >= 0", name="ck_orders_points_spent_non_negative"),
        CheckConstraint("total_price >= 0", name="ck_orders_total_non_negative"),
        Index("ix_orders_status_created_at", "status", "created_at"),
    )

    @property
    def snapshot(self) -> OrderSnapshot:
        return OrderSnapshot.from_stored(self.details)

    def __repr__(self):
        return f"<Order {self.id} status={self.status} total={self.total_price}>"


class PromoCode(Base):
    """Percentage discount code. Codes are stored upper-cased."""

    __tablename__ = "promo_codes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    discount_percent: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=true(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    __table_args__ = (
        CheckConstraint(
            "discount_percent >= 1 AND discount_percent <= 100",
            name="ck_promo_codes_percent_range",
        ),
    )

    def __repr__(self):
        return f"<PromoCode {self.code} {self.discount_percent}% active={self.is_active}>"
