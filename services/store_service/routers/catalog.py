"""Store catalog router: products and FAQ."""

from fastapi import APIRouter, Depends
from libs.db.session import get_async_db
from services.store_service.models import FaqEntry, Product
from services.store_service.schemas import FaqResponse, ProductResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])


@router.get("/products", response_model=list[ProductResponse])
async def list_products(db: AsyncSession = Depends(get_async_db)):
    """List all products, newest first."""
    result = await db.execute(select(Product).order_by(Product.id.desc()))
    return result.scalars().all()


@router.get("/faq", response_model=list[FaqResponse])
async def list_faq(db: AsyncSession = Depends(get_async_db)):
    result = await db.execute(select(FaqEntry).order_by(FaqEntry.id.asc()))
    return result.scalars().all()
