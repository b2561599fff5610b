"""
Base storage interfaces for the Blog API.

Purpose:
    Define a small, stable contract per record type that multiple storage
    backends (in-memory, MongoDB, PostgreSQL) can implement without requiring
    changes to the manager or the routes.

Errors:
    Backends translate their driver exceptions into `StorageError` so the
    route layer only has one persistence failure to map to a 500.
    Uniqueness violations surface as `DuplicateKeyError`.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Mapping, Optional

from ..models import BlogPost, User

# Fields a post update may touch; anything else in an update mapping is ignored.
UPDATABLE_POST_FIELDS = ("title", "content")


class StorageError(Exception):
    """Raised when the persistence layer fails."""


class DuplicateKeyError(StorageError):
    """Raised when a write would violate a uniqueness constraint."""


class BaseUserStore(ABC):
    """Abstract credential store."""

    @abstractmethod  # pragma: no cover
    def find_by_username(self, username: str) -> Optional[User]:
        """Return the user with this username, or None."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def count_by_username(self, username: str) -> int:
        """Return how many users carry this username (0 or 1)."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def create(self, user: User) -> User:
        """
        Persist a new user and return it with its assigned id.

        Raises:
            DuplicateKeyError: If the username is already taken.
        """
        raise NotImplementedError


class BasePostStore(ABC):
    """Abstract blog post store."""

    @abstractmethod  # pragma: no cover
    def list_all(self) -> List[BlogPost]:
        """Return every post in creation order."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def find_by_id(self, post_id: str) -> Optional[BlogPost]:
        """Return the post with this id, or None (including malformed ids)."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def create(self, post: BlogPost) -> BlogPost:
        """Persist a new post and return it with its assigned id."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def update_fields(self, post_id: str, fields: Mapping[str, object]) -> Optional[BlogPost]:
        """
        Apply a partial update restricted to UPDATABLE_POST_FIELDS.

        Returns:
            Optional[BlogPost]: The updated record, or None if the id is absent.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def delete_by_id(self, post_id: str) -> bool:
        """Remove a post. Returns True if a record existed and was removed."""
        raise NotImplementedError


class Stores:
    """Bundle of the stores one backend provides, plus its teardown hook."""

    def __init__(self, users: BaseUserStore, posts: BasePostStore,
                 backend: str = "memory", close: Optional[Callable[[], None]] = None):
        self.users = users
        self.posts = posts
        self.backend = backend
        self._close = close

    def close(self) -> None:
        if self._close is not None:
            self._close()
            self._close = None


def clean_update(fields: Mapping[str, object]) -> dict:
    """Keep only the updatable post fields from an update mapping."""
    return {k: v for k, v in fields.items() if k in UPDATABLE_POST_FIELDS}
