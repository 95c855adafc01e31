"""Bearer-token guard for admin endpoints.

Token issuance (login) happens elsewhere; this only checks the presented
token against the configured admin token.
"""

import secrets
from typing import Optional
from fastapi import Header, HTTPException

from ..config import get_settings


async def require_admin(authorization: Optional[str] = Header(None)) -> str:
    """Reject the request unless it carries ``Authorization: Bearer <admin_token>``."""
    settings = get_settings()
    if not settings.admin_token:
        raise HTTPException(status_code=503, detail="Admin access is not configured")

    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    if not secrets.compare_digest(token, settings.admin_token):
        raise HTTPException(status_code=401, detail="Invalid admin token")

    return token
