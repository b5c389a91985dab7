"""
FastAPI dependencies for authentication and authorization.

``authenticate_jwt`` is installed as an application-wide dependency in
``main.py``, so it runs for every routed request. It is advisory: a missing
or bad token just leaves the request anonymous. The ``ensure_*`` guards then reject
requests that lack the identity a route needs with a 401.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from jobly.core.exceptions import UnauthorizedError
from jobly.core.security import decode_token

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>); never errors by itself
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TokenIdentity:
    """Identity carried by a verified token."""
    username: str
    is_admin: bool = False


async def authenticate_jwt(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[TokenIdentity]:
    """
    Verify the bearer token if one was sent and store the identity on
    ``request.state.user``.

    Returns None (anonymous) when there is no token or it fails verification.
    """
    request.state.user = None
    if not credentials:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        logger.debug("Ignoring invalid bearer token")
        return None

    username = payload.get("sub")
    if not username:
        return None

    identity = TokenIdentity(username=username, is_admin=bool(payload.get("is_admin", False)))
    request.state.user = identity
    return identity


def ensure_logged_in(
    user: Optional[TokenIdentity] = Depends(authenticate_jwt),
) -> TokenIdentity:
    """Require any authenticated user."""
    if user is None:
        raise UnauthorizedError()
    return user


def ensure_admin(
    user: Optional[TokenIdentity] = Depends(authenticate_jwt),
) -> TokenIdentity:
    """Require an authenticated admin."""
    if user is None or not user.is_admin:
        if user is not None:
            logger.warning(f"Non-admin {user.username} denied admin route")
        raise UnauthorizedError()
    return user


def ensure_correct_user_or_admin(
    username: str,
    user: Optional[TokenIdentity] = Depends(authenticate_jwt),
) -> TokenIdentity:
    """
    Require the user named in the ``username`` path parameter, or an admin.

    A self match passes straight away; anyone else must be an admin.
    """
    if user is None:
        raise UnauthorizedError()

    if user.username == username:
        return user

    return ensure_admin(user)
