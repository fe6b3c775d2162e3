from typing import Annotated, Optional, Union

from fastapi import Depends, Header

from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.errors import ForbiddenError, InvalidInputError
from libs.common.logging import get_logger

logger = get_logger(__name__)

USER_ID_HEADER = "X-Telegram-User-Id"


def is_admin(user_id: Union[int, str, None]) -> bool:
    """Return True if ``user_id`` is in the configured admin allowlist."""
    if user_id is None:
        return False
    return str(user_id).strip() in get_settings().admin_ids


def ensure_admin(user_id: Union[int, str, None]) -> None:
    """Raise ``ForbiddenError`` unless ``user_id`` is an admin."""
    if not is_admin(user_id):
        logger.warning("Rejected admin operation for user %s", user_id)
        raise ForbiddenError()


async def get_current_user(
    x_telegram_user_id: Annotated[Optional[str], Header(alias=USER_ID_HEADER)] = None,
) -> AuthUser:
    """
    Resolve the caller from the ``X-Telegram-User-Id`` header.
    """
    if not x_telegram_user_id:
        raise ForbiddenError("Missing user id")
    try:
        user_id = int(x_telegram_user_id)
    except ValueError:
        raise InvalidInputError("Malformed user id")
    return AuthUser(user_id=user_id, is_admin=is_admin(user_id))


async def require_admin(
    current_user: Annotated[AuthUser, Depends(get_current_user)]
) -> AuthUser:
    """
    Ensure the caller is in the admin allowlist.
    """
    ensure_admin(current_user.user_id)
    return current_user
