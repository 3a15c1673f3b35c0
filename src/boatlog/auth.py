"""
Caller authentication for the boat log API.

Callers present a bearer token issued by the external identity provider. The token's
`sub` claim identifies the caller there; it is resolved to the internal account record
(`users.auth_id`) before any boat-scoped work happens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.boatlog.services import boats_service
from src.boatlog.state import get_state

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CallerIdentity:
    """Verified identity-provider claims for the current request."""

    auth_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# PUBLIC_INTERFACE
def decode_token(token: str, secret: str, algorithms, audience: Optional[str] = None) -> Dict[str, Any]:
    """Verify signature/expiry and return the token payload. Raises jwt.InvalidTokenError."""
    options = {"verify_exp": True, "verify_aud": audience is not None}
    return jwt.decode(token, secret, algorithms=list(algorithms), audience=audience, options=options)


# PUBLIC_INTERFACE
def get_caller(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CallerIdentity:
    """FastAPI dependency: verify the bearer token. No store access happens here."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Unauthorized")

    cfg = get_state(request.app).config
    if not cfg.auth_jwt_secret:
        raise _unauthorized("Unauthorized")

    try:
        payload = decode_token(
            credentials.credentials,
            cfg.auth_jwt_secret,
            cfg.auth_jwt_algorithms,
            audience=cfg.auth_jwt_audience,
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning("Rejected bearer token: %s", e)
        raise _unauthorized("Invalid token")

    subject = payload.get("sub")
    if not subject:
        raise _unauthorized("Invalid token payload")

    return CallerIdentity(
        auth_id=str(subject),
        email=payload.get("email"),
        name=payload.get("name"),
        claims=payload,
    )


# PUBLIC_INTERFACE
def get_current_account(request: Request, caller: CallerIdentity = Depends(get_caller)) -> dict:
    """FastAPI dependency: resolve the verified caller to its internal account record."""
    account = boats_service.get_account_by_auth_id(request, caller.auth_id)
    if not account:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return account


# PUBLIC_INTERFACE
def is_admin(request: Request, caller: CallerIdentity) -> bool:
    """Whether the caller's subject is on the configured admin allowlist."""
    return caller.auth_id in get_state(request.app).config.admin_user_ids


# PUBLIC_INTERFACE
def require_admin(request: Request, caller: CallerIdentity = Depends(get_caller)) -> CallerIdentity:
    """FastAPI dependency: allow only allowlisted admins."""
    if not is_admin(request, caller):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return caller
