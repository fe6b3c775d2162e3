"""Integration tests for the mini-app (customer) endpoints."""

from decimal import Decimal

import pytest
from tests.conftest import CUSTOMER_ID, user_headers
from tests.factories import FaqEntryFactory, ProductFactory, PromoCodeFactory, persist


async def _register(client, user_id=CUSTOMER_ID):
    response = await client.post(
        "/api/register",
        json={"name": "Anna", "phone": "+7900", "username": "anna"},
        headers=user_headers(user_id),
    )
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_register_and_fetch_profile(client):
    """POST /api/register then GET /api/user/{id}."""
    created = await _register(client)
    assert created["points"] == 500
    assert created["is_admin"] is False

    response = await client.get(f"/api/user/{CUSTOMER_ID}")
    assert response.status_code == 200
    assert response.json()["referral_code"] == created["referral_code"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_register_requires_user_header(client):
    response = await client.post("/api/register", json={})
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_flag_on_profile(client):
    await _register(client, user_id=111)
    response = await client.get("/api/user/111")
    assert response.json()["is_admin"] is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_profile_404(client):
    response = await client.get("/api/user/42")
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_catalog_and_faq(client, db_session):
    await persist(
        db_session,
        ProductFactory.create(name="Oolong"),
        FaqEntryFactory.create(question="Delivery?", answer="Daily"),
    )

    products = (await client.get("/api/products")).json()
    faq = (await client.get("/api/faq")).json()

    assert [p["name"] for p in products] == ["Oolong"]
    assert faq[0]["answer"] == "Daily"


# ---------------------------------------------------------------------------
# Cart and checkout
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cart_add_remove(client, db_session):
    product = await persist(db_session, ProductFactory.create(price=Decimal("120.00")))
    headers = user_headers()

    response = await client.post(
        "/api/cart/add", json={"product_id": product.id, "quantity": 3}, headers=headers
    )
    assert response.status_code == 200, response.text
    assert Decimal(response.json()["subtotal"]) == Decimal("360")

    response = await client.post(
        "/api/cart/remove", json={"product_id": product.id}, headers=headers
    )
    assert response.json()["items"][0]["quantity"] == 2

    response = await client.post(
        "/api/cart/remove", json={"product_id": product.id, "remove_all": True}, headers=headers
    )
    assert response.json()["items"] == []

    response = await client.get("/api/cart", headers=headers)
    assert response.json() == {"items": [], "subtotal": "0"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_flow(client, db_session, notifier):
    """Quote, place the order, then see it in history."""
    await _register(client)
    product = await persist(db_session, ProductFactory.create(price=Decimal("500.00")))
    await persist(db_session, PromoCodeFactory.create(code="SALE10", discount_percent=10))
    headers = user_headers()
    await client.post("/api/cart/add", json={"product_id": product.id, "quantity": 2}, headers=headers)

    quote = await client.post(
        "/api/cart/quote", json={"promo_code": "sale10", "points_requested": 200}, headers=headers
    )
    assert quote.status_code == 200, quote.text
    assert quote.json()["final_price"] == 765
    assert quote.json()["points_cap"] == 135

    placed = await client.post(
        "/api/order",
        json={"address": "Lenina 1", "promo_code": "sale10", "points_requested": 200},
        headers=headers,
    )
    assert placed.status_code == 201, placed.text
    body = placed.json()
    assert body["success"] is True
    assert body["points_spent"] == 135
    assert Decimal(body["total_price"]) == Decimal("765")
    assert len(notifier.messages) == 1

    history = (await client.get("/api/orders", headers=headers)).json()
    assert [o["id"] for o in history] == [body["order_id"]]
    assert history[0]["status"] == "active"
    assert history[0]["items"][0]["quantity"] == 2

    profile = (await client.get(f"/api/user/{CUSTOMER_ID}")).json()
    assert profile["points"] == 365

    cart = (await client.get("/api/cart", headers=headers)).json()
    assert cart["items"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_order_with_empty_cart(client):
    await _register(client)
    response = await client.post(
        "/api/order", json={"address": "Lenina 1"}, headers=user_headers()
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Cart is empty"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_order_requires_address(client):
    response = await client.post("/api/order", json={}, headers=user_headers())
    assert response.status_code == 422
