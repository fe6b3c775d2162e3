"""Store users router: registration and profile lookup."""

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import get_current_user, is_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import UserRegister, UserResponse
from services.store_service.services.accounts import get_user, register_user
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserRegister,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Register the calling Telegram user."""
    user = await register_user(
        db,
        telegram_id=current_user.user_id,
        name=payload.name,
        phone=payload.phone,
        username=payload.username,
    )
    response = UserResponse.model_validate(user)
    response.is_admin = current_user.is_admin
    return response


@router.get("/user/{telegram_id}", response_model=UserResponse)
async def get_user_profile(
    telegram_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    """Get a user profile, flagged with admin status."""
    user = await get_user(db, telegram_id)
    response = UserResponse.model_validate(user)
    response.is_admin = is_admin(telegram_id)
    return response
