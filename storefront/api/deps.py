# storefront/api/deps.py
from fastapi import Header, HTTPException


def get_current_user_id(x_user_id: int | None = Header(None)) -> int:
    """
    Caller identity. Authentication lives in front of this service and
    forwards the authenticated user as X-User-Id.
    """
    if x_user_id is None or x_user_id <= 0:
        raise HTTPException(status_code=401, detail="Missing or invalid X-User-Id header")
    return x_user_id
