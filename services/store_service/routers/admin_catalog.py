"""Admin store catalog router: products and promo codes."""

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    PromoCodeCreate,
    PromoCodeResponse,
    PromoCodeUpdate,
)
from services.store_service.services.repositories import (
    ProductRepository,
    PromoCodeRepository,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["admin-store"])

products = ProductRepository()
promo_codes = PromoCodeRepository()


# ============================================================================
# PRODUCTS
# ============================================================================


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_in: ProductCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a product. ``image_url`` is a handle already issued by the media store."""
    return await products.create(db, product_in)


@router.patch("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product_in: ProductUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await products.update(db, product_id, product_in)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a product. Past orders keep their snapshot of it."""
    await products.delete(db, product_id)


# ============================================================================
# PROMO CODES
# ============================================================================


@router.get("/promo-codes", response_model=list[PromoCodeResponse])
async def list_promo_codes(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await promo_codes.list_all(db, limit=200)


@router.post("/promo-codes", response_model=PromoCodeResponse, status_code=status.HTTP_201_CREATED)
async def create_promo_code(
    promo_in: PromoCodeCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a promo code. The code is stored trimmed and upper-cased."""
    return await promo_codes.create(db, promo_in)


@router.patch("/promo-codes/{promo_id}", response_model=PromoCodeResponse)
async def update_promo_code(
    promo_id: int,
    promo_in: PromoCodeUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Change the percent or (de)activate a code. Past orders are unaffected."""
    return await promo_codes.update(db, promo_id, promo_in)


@router.delete("/promo-codes/{promo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_promo_code(
    promo_id: int,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await promo_codes.delete(db, promo_id)
