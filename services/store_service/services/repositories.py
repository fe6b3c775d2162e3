"""Typed repositories, one per managed entity.

The admin entity manager dispatches on the ``ManagedEntity`` enum; each
repository only ever writes the fields declared on its pydantic schemas, so
no table or column name from a request reaches a query.
"""

from typing import Any, ClassVar, Generic, Optional, TypeVar

from libs.common.errors import ConflictError, InvalidInputError, NotFoundError
from libs.common.logging import get_logger
from libs.db.base import Base
from libs.db.transactions import atomic
from pydantic import BaseModel, ValidationError
from services.store_service.models import (
    Expense,
    FaqEntry,
    ManagedEntity,
    Order,
    OrderStatus,
    Product,
    PromoCode,
    User,
)
from services.store_service.schemas import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
    FaqCreate,
    FaqResponse,
    FaqUpdate,
    OrderAdminUpdate,
    OrderResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    PromoCodeCreate,
    PromoCodeResponse,
    PromoCodeUpdate,
    UserAdminUpdate,
    UserResponse,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

MAX_PAGE_SIZE = 200


class Repository(Generic[ModelT]):
    """Explicit create/get/list/update/delete for one model."""

    entity: ClassVar[ManagedEntity]
    model: ClassVar[type[Base]]
    create_schema: ClassVar[Optional[type[BaseModel]]]
    update_schema: ClassVar[type[BaseModel]]
    read_schema: ClassVar[type[BaseModel]]

    def parse_create(self, payload: dict[str, Any]) -> BaseModel:
        if self.create_schema is None:
            raise InvalidInputError(f"{self.entity.value} cannot be created here")
        return _validate(self.create_schema, payload)

    def parse_update(self, payload: dict[str, Any]) -> BaseModel:
        return _validate(self.update_schema, payload)

    def serialize(self, obj: ModelT) -> dict[str, Any]:
        return self.read_schema.model_validate(obj).model_dump(mode="json")

    async def get(self, db: AsyncSession, entity_id: int) -> ModelT:
        obj = await db.get(self.model, entity_id)
        if obj is None:
            raise NotFoundError(f"{self.entity.value} {entity_id} not found")
        return obj

    async def list_all(
        self, db: AsyncSession, *, limit: int = 50, offset: int = 0
    ) -> list[ModelT]:
        limit = min(max(limit, 1), MAX_PAGE_SIZE)
        result = await db.execute(
            select(self.model)
            .order_by(self.model.id.desc())
            .limit(limit)
            .offset(max(offset, 0))
        )
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, data: BaseModel) -> ModelT:
        obj = self.model(**data.model_dump())
        async with atomic(db, f"create {self.entity.value}"):
            db.add(obj)
        await db.refresh(obj)
        logger.info("Created %s %s", self.entity.value, obj.id)
        return obj

    async def update(self, db: AsyncSession, entity_id: int, data: BaseModel) -> ModelT:
        async with atomic(db, f"update {self.entity.value}"):
            obj = await self.get(db, entity_id)
            self.check_update(obj)
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(obj, field, value)
        await db.refresh(obj)
        logger.info("Updated %s %s", self.entity.value, entity_id)
        return obj

    async def delete(self, db: AsyncSession, entity_id: int) -> None:
        async with atomic(db, f"delete {self.entity.value}"):
            obj = await self.get(db, entity_id)
            await db.delete(obj)
        logger.info("Deleted %s %s", self.entity.value, entity_id)

    def check_update(self, obj: ModelT) -> None:
        """Hook for entity-specific update guards."""


def _validate(schema: type[BaseModel], payload: dict[str, Any]) -> BaseModel:
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) or "body" for err in e.errors()})
        raise InvalidInputError(f"Invalid fields: {', '.join(fields)}") from e


class UserRepository(Repository[User]):
    entity = ManagedEntity.USERS
    model = User
    create_schema = None  # users register through the mini-app
    update_schema = UserAdminUpdate
    read_schema = UserResponse


class ProductRepository(Repository[Product]):
    entity = ManagedEntity.PRODUCTS
    model = Product
    create_schema = ProductCreate
    update_schema = ProductUpdate
    read_schema = ProductResponse


class OrderRepository(Repository[Order]):
    entity = ManagedEntity.ORDERS
    model = Order
    create_schema = None  # orders only come from checkout
    update_schema = OrderAdminUpdate
    read_schema = OrderResponse

    def serialize(self, obj: Order) -> dict[str, Any]:
        return OrderResponse.from_order(obj).model_dump(mode="json")

    def check_update(self, obj: Order) -> None:
        if obj.status != OrderStatus.ACTIVE:
            raise ConflictError("Completed orders cannot be edited")


class PromoCodeRepository(Repository[PromoCode]):
    entity = ManagedEntity.PROMO_CODES
    model = PromoCode
    create_schema = PromoCodeCreate
    update_schema = PromoCodeUpdate
    read_schema = PromoCodeResponse

    async def create(self, db: AsyncSession, data: BaseModel) -> PromoCode:
        existing = await db.execute(select(PromoCode.id).where(PromoCode.code == data.code))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(f"Promo code {data.code} already exists")
        return await super().create(db, data)


class ExpenseRepository(Repository[Expense]):
    entity = ManagedEntity.EXPENSES
    model = Expense
    create_schema = ExpenseCreate
    update_schema = ExpenseUpdate
    read_schema = ExpenseResponse


class FaqRepository(Repository[FaqEntry]):
    entity = ManagedEntity.FAQ
    model = FaqEntry
    create_schema = FaqCreate
    update_schema = FaqUpdate
    read_schema = FaqResponse


REPOSITORIES: dict[ManagedEntity, Repository] = {
    repo.entity: repo
    for repo in (
        UserRepository(),
        ProductRepository(),
        OrderRepository(),
        PromoCodeRepository(),
        ExpenseRepository(),
        FaqRepository(),
    )
}


def get_repository(entity: ManagedEntity) -> Repository:
    return REPOSITORIES[entity]
