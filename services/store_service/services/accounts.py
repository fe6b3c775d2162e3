"""Customer registration and lookup."""

import secrets
import string
from typing import Optional

from libs.common.config import get_settings
from libs.common.errors import ConflictError, UserNotFoundError
from libs.common.logging import get_logger
from libs.db.transactions import atomic
from services.store_service.models import User
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

REFERRAL_ALPHABET = string.ascii_uppercase + string.digits
REFERRAL_CODE_LENGTH = 6
MAX_REFERRAL_ATTEMPTS = 5


def generate_referral_code(prefix: Optional[str] = None) -> str:
    """Random referral code like ``REF-4KQ9ZT``."""
    prefix = get_settings().REFERRAL_CODE_PREFIX if prefix is None else prefix
    suffix = "".join(secrets.choice(REFERRAL_ALPHABET) for _ in range(REFERRAL_CODE_LENGTH))
    return f"{prefix}{suffix}"


async def get_user(db: AsyncSession, telegram_id: int) -> User:
    result = await db.execute(select(User).where(User.telegram_id == telegram_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise UserNotFoundError()
    return user


async def register_user(
    db: AsyncSession,
    *,
    telegram_id: int,
    name: Optional[str],
    phone: Optional[str],
    username: Optional[str],
) -> User:
    """Create a customer with a unique referral code and the welcome points.

    Raises ``ConflictError`` if the Telegram id is already registered.
    """
    existing = await db.execute(select(User.id).where(User.telegram_id == telegram_id))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("User already registered")

    for _ in range(MAX_REFERRAL_ATTEMPTS):
        code = generate_referral_code()
        taken = await db.execute(select(User.id).where(User.referral_code == code))
        if taken.scalar_one_or_none() is None:
            break
    else:
        raise ConflictError("Could not allocate a referral code, please retry")

    user = User(
        telegram_id=telegram_id,
        name=name,
        phone=phone,
        username=username,
        points=get_settings().WELCOME_POINTS,
        referral_code=code,
    )
    async with atomic(db, "register_user"):
        db.add(user)

    await db.refresh(user)
    logger.info("Registered user %s (referral=%s)", telegram_id, user.referral_code)
    return user
