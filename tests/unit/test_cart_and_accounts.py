"""Unit tests for cart operations and customer registration."""

from decimal import Decimal

import pytest
from libs.common.errors import ConflictError, InvalidInputError, NotFoundError, UserNotFoundError
from services.store_service.services.accounts import (
    generate_referral_code,
    get_user,
    register_user,
)
from services.store_service.services.cart_ops import add_to_cart, list_cart, remove_from_cart
from tests.factories import ProductFactory, persist

USER_ID = 5001

# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_add_same_product_increments_line(db_session):
    product = await persist(db_session, ProductFactory.create(price=Decimal("150.00")))

    await add_to_cart(db_session, user_id=USER_ID, product_id=product.id)
    item = await add_to_cart(db_session, user_id=USER_ID, product_id=product.id, quantity=2)

    assert item.quantity == 3
    lines = await list_cart(db_session, USER_ID)
    assert len(lines) == 1
    assert lines[0].line_total == Decimal("450.00")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_add_unknown_product(db_session):
    with pytest.raises(NotFoundError):
        await add_to_cart(db_session, user_id=USER_ID, product_id=404)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_add_rejects_non_positive_quantity(db_session):
    product = await persist(db_session, ProductFactory.create())
    with pytest.raises(InvalidInputError):
        await add_to_cart(db_session, user_id=USER_ID, product_id=product.id, quantity=0)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_remove_decrements_then_deletes(db_session):
    product = await persist(db_session, ProductFactory.create())
    await add_to_cart(db_session, user_id=USER_ID, product_id=product.id, quantity=2)

    item = await remove_from_cart(db_session, user_id=USER_ID, product_id=product.id)
    assert item.quantity == 1

    item = await remove_from_cart(db_session, user_id=USER_ID, product_id=product.id)
    assert item is None
    assert await list_cart(db_session, USER_ID) == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_remove_all_and_missing_line(db_session):
    product = await persist(db_session, ProductFactory.create())
    await add_to_cart(db_session, user_id=USER_ID, product_id=product.id, quantity=5)

    assert await remove_from_cart(
        db_session, user_id=USER_ID, product_id=product.id, remove_all=True
    ) is None
    # Removing again is a no-op
    assert await remove_from_cart(db_session, user_id=USER_ID, product_id=product.id) is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_carts_are_per_user(db_session):
    product = await persist(db_session, ProductFactory.create())
    await add_to_cart(db_session, user_id=USER_ID, product_id=product.id)

    assert await list_cart(db_session, USER_ID + 1) == []


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_referral_code_shape():
    code = generate_referral_code()
    assert code.startswith("REF-")
    assert len(code) == len("REF-") + 6
    assert code[4:].isalnum() and code[4:].upper() == code[4:]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_register_grants_welcome_points(db_session):
    user = await register_user(
        db_session, telegram_id=USER_ID, name="Anna", phone="+7900", username="anna"
    )

    assert user.points == 500
    assert user.referral_code.startswith("REF-")
    assert (await get_user(db_session, USER_ID)).id == user.id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_register_twice_conflicts(db_session):
    await register_user(db_session, telegram_id=USER_ID, name=None, phone=None, username=None)
    with pytest.raises(ConflictError):
        await register_user(db_session, telegram_id=USER_ID, name=None, phone=None, username=None)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_get_unknown_user(db_session):
    with pytest.raises(UserNotFoundError):
        await get_user(db_session, 123)
