"""Store error taxonomy.

Every error is an ``HTTPException`` so the service layer can raise it directly
and FastAPI turns it into a response. ``detail`` is always safe to show to the
caller; internal context goes to the log instead.
"""

from typing import Optional

from fastapi import HTTPException, status


class StoreError(HTTPException):
    """Base class for domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Store error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class NotFoundError(StoreError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class UserNotFoundError(NotFoundError):
    default_detail = "User not found"


class OrderNotFoundError(NotFoundError):
    default_detail = "Order not found"


class ForbiddenError(StoreError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class EmptyCartError(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Cart is empty"


class InvalidInputError(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class ConflictError(StoreError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflicting update, please retry"


class StoreUnavailableError(StoreError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Store temporarily unavailable"
