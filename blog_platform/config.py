"""
Runtime configuration for the Blog API
======================================

Simple settings module that reads from environment variables (only here),
and exposes a stable `settings` object for the rest of the codebase.
Avoid reading env vars anywhere else; import from this module instead.
The storage factory is the one exception: it re-reads the backend and
connection string at call time so tests can flip them with monkeypatch.

Storage
-------
- BLOG_STORAGE_BACKEND : "memory" (default), "mongo" or "postgres"
- DATABASE_URL         : e.g. "mongodb://localhost/blog-app"
- TEST_DATABASE_URL    : database used by seeding and opt-in test runs

Server
------
- HOST : bind address (default "0.0.0.0")
- PORT : listen port (default 8080)

Auth
----
- BLOG_BCRYPT_ROUNDS : bcrypt cost factor; default 10, clamped to [4, 31]
"""

import os


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


class _Settings:
    # -------- Storage --------
    STORAGE_BACKEND: str = os.getenv("BLOG_STORAGE_BACKEND", "memory").strip().lower()
    DATABASE_URL: str = os.getenv("DATABASE_URL", "mongodb://localhost/blog-app")
    TEST_DATABASE_URL: str = os.getenv("TEST_DATABASE_URL", "mongodb://localhost/test-blog-app")

    # -------- Server --------
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = _get_int("PORT", 8080)

    # -------- Auth --------
    BCRYPT_ROUNDS: int = max(4, min(31, _get_int("BLOG_BCRYPT_ROUNDS", 10)))


settings = _Settings()
