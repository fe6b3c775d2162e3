"""Admin entity manager: typed CRUD over an allow-listed set of entities."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.models import ManagedEntity
from services.store_service.services.repositories import get_repository
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/entities", tags=["admin-store"])


@router.get("/{entity}")
async def list_entities(
    entity: ManagedEntity,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
) -> list[dict[str, Any]]:
    repo = get_repository(entity)
    return [repo.serialize(obj) for obj in await repo.list_all(db, limit=limit, offset=offset)]


@router.get("/{entity}/{entity_id}")
async def get_entity(
    entity: ManagedEntity,
    entity_id: int,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
) -> dict[str, Any]:
    repo = get_repository(entity)
    return repo.serialize(await repo.get(db, entity_id))


@router.post("/{entity}", status_code=status.HTTP_201_CREATED)
async def create_entity(
    entity: ManagedEntity,
    payload: dict[str, Any] = Body(...),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
) -> dict[str, Any]:
    repo = get_repository(entity)
    return repo.serialize(await repo.create(db, repo.parse_create(payload)))


@router.patch("/{entity}/{entity_id}")
async def update_entity(
    entity: ManagedEntity,
    entity_id: int,
    payload: dict[str, Any] = Body(...),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
) -> dict[str, Any]:
    repo = get_repository(entity)
    return repo.serialize(await repo.update(db, entity_id, repo.parse_update(payload)))


@router.delete("/{entity}/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entity(
    entity: ManagedEntity,
    entity_id: int,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await get_repository(entity).delete(db, entity_id)
