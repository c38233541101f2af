# storefront/api/errors.py
from fastapi import HTTPException

from storefront.domain.errors import (
    StorefrontError,
    NotFoundError,
    ForbiddenError,
    CartInvalidError,
    CartConflictError,
    CheckoutConflictError,
)


def to_http(e: Exception) -> HTTPException:
    """Map a domain error raised by a service to the HTTP error returned to the client."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, ForbiddenError):
        return HTTPException(status_code=403, detail=e.message)
    if isinstance(e, CartInvalidError):
        return HTTPException(status_code=400, detail={"message": e.message, "issues": e.issues})
    if isinstance(e, (CartConflictError, CheckoutConflictError)):
        return HTTPException(status_code=409, detail=e.message)
    if isinstance(e, StorefrontError):
        return HTTPException(status_code=400, detail=e.message)
    return HTTPException(status_code=400, detail=str(e))
