"""Authentication dependency for the admin session-inspection endpoints.

Behavior matrix:
  ADMIN_API_KEY set + valid bearer token → allow
  ADMIN_API_KEY set + wrong/missing      → 401 Unauthorized
  ADMIN_API_KEY empty + DEBUG=true       → allow (local dev convenience)
  ADMIN_API_KEY empty + DEBUG=false      → 403 Forbidden (locked in production)

Visitor endpoints are unauthenticated; only sessions' internals are guarded.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from leadbot.config import settings

log = logging.getLogger("leadbot.auth")

_bearer_scheme = HTTPBearer(auto_error=False)


async def require_admin_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> None:
    """FastAPI dependency: protect admin endpoints with a bearer token."""
    key = settings.admin_api_key

    if not key:
        if settings.debug:
            return
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin API key not configured. Set ADMIN_API_KEY in .env.",
        )

    if credentials is None or not secrets.compare_digest(credentials.credentials, key):
        log.warning("Rejected admin request with invalid token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin token.",
            headers={"WWW-Authenticate": "Bearer"},
        )
