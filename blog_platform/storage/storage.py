"""
Storage module for the Blog API (in-memory implementation).

Responsibilities:
    - Hold users and blog posts keyed by a generated id
    - Enforce username uniqueness at write time
    - Apply partial post updates and deletes

Design:
    - This is an in-memory reference implementation that satisfies the
      BaseUserStore / BasePostStore contracts.
    - Every read and write hands out a deep copy, so callers can never
      mutate store-owned state by accident.
    - A lock serializes mutations because FastAPI runs sync routes on a
      threadpool.

LLM Prompt Example:
    "Explain how this in-memory storage can be swapped for MongoDB or Postgres
     without changing the manager or API code, by adhering to narrow store
     interfaces."
"""

import threading
import uuid
from typing import Dict, List, Mapping, Optional

from ..models import BlogPost, User
from .base import BasePostStore, BaseUserStore, DuplicateKeyError, clean_update


def _new_id() -> str:
    return uuid.uuid4().hex


class UserStore(BaseUserStore):
    def __init__(self):
        """
        Initialize an empty user table.

        Internal schema:
            self.users = {user_id: User}
        """
        self.users: Dict[str, User] = {}
        self._lock = threading.Lock()

    def _snapshot(self) -> List[User]:
        # Single-step copy; creates may resize the dict concurrently.
        return list(self.users.values())

    def find_by_username(self, username: str) -> Optional[User]:
        for user in self._snapshot():
            if user.username == username:
                return user.model_copy(deep=True)
        return None

    def count_by_username(self, username: str) -> int:
        return sum(1 for user in self._snapshot() if user.username == username)

    def create(self, user: User) -> User:
        with self._lock:
            if self.count_by_username(user.username):
                raise DuplicateKeyError(f"username {user.username!r} already exists")
            stored = user.model_copy(update={"id": _new_id()}, deep=True)
            self.users[stored.id] = stored
        return stored.model_copy(deep=True)


class PostStore(BasePostStore):
    def __init__(self):
        """
        Initialize an empty post table.

        Internal schema:
            self.posts = {post_id: BlogPost}   # insertion ordered
        """
        self.posts: Dict[str, BlogPost] = {}
        self._lock = threading.Lock()

    def list_all(self) -> List[BlogPost]:
        return [post.model_copy(deep=True) for post in list(self.posts.values())]

    def find_by_id(self, post_id: str) -> Optional[BlogPost]:
        post = self.posts.get(post_id)
        return post.model_copy(deep=True) if post else None

    def create(self, post: BlogPost) -> BlogPost:
        stored = post.model_copy(update={"id": _new_id()}, deep=True)
        with self._lock:
            self.posts[stored.id] = stored
        return stored.model_copy(deep=True)

    def update_fields(self, post_id: str, fields: Mapping[str, object]) -> Optional[BlogPost]:
        with self._lock:
            existing = self.posts.get(post_id)
            if existing is None:
                return None
            updated = existing.model_copy(update=clean_update(fields), deep=True)
            self.posts[post_id] = updated
        return updated.model_copy(deep=True)

    def delete_by_id(self, post_id: str) -> bool:
        with self._lock:
            return self.posts.pop(post_id, None) is not None
