"""
Core authentication logic.

This module checks a username/password pair against the credential store
and resolves it to an Identity. Failures carry a reason for server-side
logging; the HTTP layer must never echo that reason to the client, so
callers cannot tell which usernames exist.
"""

import enum
import logging

from blog_platform.storage.base import BaseUserStore

from .schemas import Identity
from .utils import verify_password

log = logging.getLogger("blog.auth")


class AuthFailure(str, enum.Enum):
    INCORRECT_USERNAME = "Incorrect username"
    INCORRECT_PASSWORD = "Incorrect password"


class AuthenticationError(Exception):
    """Raised when a credential pair does not resolve to a user."""

    def __init__(self, reason: AuthFailure):
        super().__init__(reason.value)
        self.reason = reason


def authenticate_user(users: BaseUserStore, username: str, password: str) -> Identity:
    """
    Authenticate a user by validating their username and password.

    Args:
        users (BaseUserStore): Credential store to look the user up in.
        username (str): The username provided by the client.
        password (str): The plaintext password provided by the client.

    Returns:
        Identity: The authenticated user's id and profile fields.

    Raises:
        AuthenticationError: With INCORRECT_USERNAME if no such user exists,
            or INCORRECT_PASSWORD if the password does not match the digest.
        StorageError: If the credential store fails.
    """
    user = users.find_by_username(username)
    if user is None:
        raise AuthenticationError(AuthFailure.INCORRECT_USERNAME)

    if not verify_password(password, user.password):
        raise AuthenticationError(AuthFailure.INCORRECT_PASSWORD)

    return Identity(
        id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
    )
