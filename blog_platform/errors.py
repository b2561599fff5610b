"""
Domain errors raised by the Blog API service layer.

Routes in `main.py` translate these into HTTP responses; nothing below the
route layer knows about status codes.
"""

from typing import Optional


class BlogError(Exception):
    """Base class for expected, client-visible failures."""


class InvalidRequestError(BlogError, ValueError):
    """A request body is missing a required field or is inconsistent."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class UsernameTakenError(BlogError):
    """Registration attempted with a username that already exists."""

    def __init__(self, username: str):
        super().__init__("username already taken")
        self.username = username


class PostNotFoundError(BlogError):
    """No post exists for the requested id."""

    def __init__(self, post_id: str):
        super().__init__(f"Post {post_id!r} not found")
        self.post_id = post_id
