"""All-or-nothing unit of work around an ``AsyncSession``."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from libs.common.errors import ConflictError, StoreUnavailableError
from libs.common.logging import get_logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@asynccontextmanager
async def atomic(db: AsyncSession, action: str) -> AsyncIterator[AsyncSession]:
    """Commit on success, roll back on any error.

    Driver errors are logged with full detail and re-raised as caller-safe
    store errors: constraint violations become ``ConflictError``, anything
    else ``StoreUnavailableError``. Domain errors pass through unchanged.
    """
    try:
        yield db
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("%s rolled back on constraint violation: %s", action, e.orig)
        raise ConflictError() from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("%s rolled back on store failure", action)
        raise StoreUnavailableError() from e
    except Exception:
        await db.rollback()
        raise
