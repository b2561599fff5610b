"""
Global pytest fixtures for the Blog API test suite.

Responsibilities:
    - Pin the environment before the app modules read it (memory backend,
      cheap bcrypt cost)
    - Provide fresh in-memory stores and a TestClient built on them
    - Provide a seeded user and its Basic credentials for write routes

Why an app factory?
    Using `create_app(stores=...)` gives every test its own stores, so no
    state leaks between tests and the test can inspect the stores directly.
"""

import os

os.environ["BLOG_STORAGE_BACKEND"] = "memory"
os.environ.setdefault("BLOG_BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from auth.utils import hash_password
from blog_platform.manager.blog_manager import BlogManager
from blog_platform.models import Author, BlogPost, User
from blog_platform.storage.base import Stores
from blog_platform.storage.storage import PostStore, UserStore
from main import create_app

TEST_USERNAME = "testboy"
TEST_PASSWORD = "AliensExist"


@pytest.fixture
def stores() -> Stores:
    """Fresh in-memory user and post stores."""
    return Stores(users=UserStore(), posts=PostStore())


@pytest.fixture
def client(stores: Stores) -> TestClient:
    """A TestClient over a new app instance bound to the `stores` fixture."""
    return TestClient(create_app(stores=stores))


@pytest.fixture
def manager(stores: Stores) -> BlogManager:
    return BlogManager(users=stores.users, posts=stores.posts)


@pytest.fixture
def user(stores: Stores) -> User:
    """A registered user whose plaintext password is TEST_PASSWORD."""
    return stores.users.create(User(
        username=TEST_USERNAME,
        password=hash_password(TEST_PASSWORD),
        first_name="Test",
        last_name="Boy",
    ))


@pytest.fixture
def auth(user: User):
    """Basic credentials for the seeded user."""
    return (TEST_USERNAME, TEST_PASSWORD)


@pytest.fixture
def seeded_posts(stores: Stores):
    """Ten posts by assorted authors, like the seeding script produces."""
    posts = []
    for i in range(10):
        posts.append(stores.posts.create(BlogPost(
            author=Author(first_name=f"First{i}", last_name=f"Last{i}"),
            title=f"Post number {i}",
            content=f"Body of post {i}",
        )))
    return posts
