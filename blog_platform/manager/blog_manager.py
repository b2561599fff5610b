"""
BlogManager module for the Blog API.

Responsibilities:
    - Register users (uniqueness pre-check, password hashing, create)
    - Create posts with the author taken from the authenticated identity
    - Apply partial post updates and deletes
    - Interface with the injected user and post stores

Design notes:
    - The manager receives validated commands (see `schemas.py`), never raw
      request bodies.
    - Username uniqueness is checked with `count_by_username` first so the
      common case yields a friendly conflict; the store's own uniqueness
      guarantee covers the race between two concurrent registrations.
    - Expected failures raise `BlogError` subclasses; storage failures
      propagate as `StorageError` for the route layer to map to a 500.
"""

import logging
from typing import Callable, List, Optional

from auth.schemas import Identity
from auth.utils import hash_password

from ..errors import PostNotFoundError, UsernameTakenError
from ..models import Author, BlogPost, User
from ..schemas import CreatePostCommand, RegisterUserCommand, UpdatePostCommand
from ..storage.base import BasePostStore, BaseUserStore, DuplicateKeyError

log = logging.getLogger("blog.manager")

PasswordHasher = Callable[[str], str]  # plaintext -> digest


class BlogManager:
    """Coordinates the create/read/update/delete rules for users and posts."""

    def __init__(
        self,
        users: BaseUserStore,
        posts: BasePostStore,
        hasher: Optional[PasswordHasher] = None,
    ):
        """
        Args:
            users (BaseUserStore): Credential store.
            posts (BasePostStore): Post store.
            hasher (Optional[PasswordHasher]): Digest function; bcrypt by default.
        """
        self.users = users
        self.posts = posts
        self.hasher = hasher or hash_password

    # ---------------------------------------------------------------------
    # Users
    # ---------------------------------------------------------------------
    def register_user(self, cmd: RegisterUserCommand) -> User:
        """
        Create a new user from a validated registration command.

        Raises:
            UsernameTakenError: If the username already exists, whether seen
                by the pre-check or by the store at insert time.
        """
        if self.users.count_by_username(cmd.username) > 0:
            raise UsernameTakenError(cmd.username)

        user = User(
            username=cmd.username,
            password=self.hasher(cmd.password),
            first_name=cmd.first_name,
            last_name=cmd.last_name,
        )
        try:
            created = self.users.create(user)
        except DuplicateKeyError:
            log.info("Lost registration race for username %r", cmd.username)
            raise UsernameTakenError(cmd.username)
        log.info("Registered user %r", created.username)
        return created

    # ---------------------------------------------------------------------
    # Posts
    # ---------------------------------------------------------------------
    def list_posts(self) -> List[BlogPost]:
        return self.posts.list_all()

    def get_post(self, post_id: str) -> BlogPost:
        post = self.posts.find_by_id(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    def create_post(self, cmd: CreatePostCommand, identity: Identity) -> BlogPost:
        post = BlogPost(
            title=cmd.title,
            content=cmd.content,
            author=Author(first_name=identity.first_name, last_name=identity.last_name),
        )
        created = self.posts.create(post)
        log.info("User %r created post %s", identity.username, created.id)
        return created

    def update_post(self, cmd: UpdatePostCommand) -> BlogPost:
        updated = self.posts.update_fields(cmd.post_id, cmd.fields)
        if updated is None:
            raise PostNotFoundError(cmd.post_id)
        return updated

    def delete_post(self, post_id: str) -> bool:
        """Delete a post; returns False when there was nothing to delete."""
        removed = self.posts.delete_by_id(post_id)
        if not removed:
            log.info("Delete requested for missing post %s", post_id)
        return removed
