"""Pydantic schemas for store service."""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from services.store_service.models import Order, OrderStatus, SnapshotLine, User
from services.store_service.services.discounts import normalize_promo_code

# ============================================================================
# USER SCHEMAS
# ============================================================================


class UserRegister(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    username: Optional[str] = Field(None, max_length=255)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    telegram_id: int
    name: Optional[str] = None
    phone: Optional[str] = None
    username: Optional[str] = None
    points: int
    referral_code: Optional[str] = None
    created_at: datetime
    is_admin: bool = False


class UserAdminUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    username: Optional[str] = Field(None, max_length=255)
    points: Optional[int] = Field(None, ge=0)


class CustomerContact(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: Optional[str] = None
    phone: Optional[str] = None
    username: Optional[str] = None


# ============================================================================
# PRODUCT SCHEMAS
# ============================================================================


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    purchase_price: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = None
    stock: int = 0


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    purchase_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = None
    stock: Optional[int] = None


class ProductResponse(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


# ============================================================================
# FAQ SCHEMAS
# ============================================================================


class FaqCreate(BaseModel):
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)


class FaqUpdate(BaseModel):
    question: Optional[str] = Field(None, min_length=1)
    answer: Optional[str] = Field(None, min_length=1)


class FaqResponse(FaqCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int


# ============================================================================
# CART SCHEMAS
# ============================================================================


class CartItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)


class CartItemRemove(BaseModel):
    product_id: int
    remove_all: bool = False


class CartLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: int
    quantity: int
    name: str
    price: Decimal
    image_url: Optional[str] = None


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    subtotal: Decimal


# ============================================================================
# CHECKOUT SCHEMAS
# ============================================================================


class CheckoutOptions(BaseModel):
    promo_code: Optional[str] = Field(None, max_length=50)
    # Garbage or negative values are clamped to 0 by the discount calculator
    points_requested: Optional[Union[int, float, str]] = 0


class OrderCreate(CheckoutOptions):
    address: str = Field(..., min_length=1)
    comment: Optional[str] = None


class QuoteResponse(BaseModel):
    items: list[SnapshotLine]
    subtotal: Decimal
    promo_code_applied: Optional[str] = None
    promo_percent: int
    points_balance: int
    points_cap: int
    points_spent: int
    final_price: int


class PlaceOrderResponse(BaseModel):
    success: bool = True
    order_id: int
    total_price: Decimal
    points_spent: int


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderResponse(BaseModel):
    id: int
    user_telegram_id: int
    items: list[SnapshotLine]
    subtotal: Decimal
    promo_code: Optional[str] = None
    promo_discount_percent: int
    points_spent: int
    total_price: Decimal
    cashback_points: int
    address: Optional[str] = None
    comment: Optional[str] = None
    status: OrderStatus
    created_at: datetime
    completed_at: Optional[datetime] = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            user_telegram_id=order.user_telegram_id,
            items=list(order.snapshot.lines),
            subtotal=order.subtotal,
            promo_code=order.promo_code,
            promo_discount_percent=order.promo_discount_percent,
            points_spent=order.points_spent,
            total_price=order.total_price,
            cashback_points=order.cashback_points,
            address=order.address,
            comment=order.comment,
            status=order.status,
            created_at=order.created_at,
            completed_at=order.completed_at,
        )


class AdminOrderResponse(OrderResponse):
    customer: Optional[CustomerContact] = None

    @classmethod
    def from_order_and_user(cls, order: Order, user: Optional[User]) -> "AdminOrderResponse":
        base = OrderResponse.from_order(order).model_dump()
        customer = CustomerContact.model_validate(user) if user is not None else None
        return cls(**base, customer=customer)


class OrderContactUpdate(BaseModel):
    address: Optional[str] = None
    comment: Optional[str] = None


class OrderAdminUpdate(OrderContactUpdate):
    """Entity-manager update for orders; only contact fields are editable."""


# ============================================================================
# PROMO CODE SCHEMAS
# ============================================================================


class PromoCodeCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    discount_percent: int = Field(..., ge=1, le=100)
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        normalized = normalize_promo_code(v)
        if not normalized:
            raise ValueError("Promo code cannot be blank")
        return normalized


class PromoCodeUpdate(BaseModel):
    discount_percent: Optional[int] = Field(None, ge=1, le=100)
    is_active: Optional[bool] = None


class PromoCodeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    discount_percent: int
    is_active: bool
    created_at: datetime


# ============================================================================
# EXPENSE & REPORT SCHEMAS
# ============================================================================


class ExpenseCreate(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    comment: Optional[str] = None


class ExpenseUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    comment: Optional[str] = None


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    amount: Decimal
    comment: Optional[str] = None
    created_at: datetime


class MonthlyStatsResponse(BaseModel):
    period_start: datetime
    period_end: datetime
    revenue: Decimal
    cogs: Decimal
    expenses: Decimal
    net_profit: Decimal
    expenses_list: list[ExpenseResponse]


# ============================================================================
# PRODUCT WIZARD SCHEMAS
# ============================================================================


class WizardStepRequest(BaseModel):
    value: str


class WizardStateResponse(BaseModel):
    step: Optional[str] = None
    prompt: Optional[str] = None
    collected: dict[str, Optional[str]] = Field(default_factory=dict)
    completed: bool = False
    product: Optional[ProductResponse] = None
