"""
FastAPI dependency functions for authentication.

These can be used in routes with Depends() to protect endpoints.
"""

import logging
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from blog_platform.storage.base import BaseUserStore

from .config import REALM
from .schemas import Identity
from .service import AuthenticationError, authenticate_user

log = logging.getLogger("blog.auth")

# HTTP Basic authentication scheme; a missing header is rejected with 401.
security = HTTPBasic(realm=REALM)


def unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": f'Basic realm="{REALM}"'},
    )


def make_current_identity(users: BaseUserStore) -> Callable[..., Identity]:
    """
    Build a dependency that resolves Basic credentials against `users`.

    Args:
        users (BaseUserStore): Credential store of the app being built.

    Returns:
        Callable: A FastAPI dependency returning the authenticated Identity.
    """

    def get_current_identity(credentials: HTTPBasicCredentials = Depends(security)) -> Identity:
        try:
            return authenticate_user(users, credentials.username, credentials.password)
        except AuthenticationError as exc:
            log.info("Rejected credentials for %r: %s", credentials.username, exc.reason.value)
            raise unauthorized()

    return get_current_identity
