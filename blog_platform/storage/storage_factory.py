"""
Storage factory – switch storage backend from config (lazy env version)
======================================================================

This module centralizes selection of the storage backend so the rest of
the app can stay ignorant of where data lives.

- Reads environment **at call time** to avoid stale values in tests.
- Imports a driver-backed module **only if** that backend is selected.

Environment variables
---------------------
- BLOG_STORAGE_BACKEND: "memory" (default), "mongo" or "postgres"
- DATABASE_URL:         connection string for "mongo" / "postgres"
"""

import logging
import os
from typing import Optional

# In-memory storage always available/lightweight
from blog_platform.storage.base import Stores
from blog_platform.storage.storage import PostStore, UserStore

log = logging.getLogger("blog.storage")

BACKENDS = ("memory", "mongo", "postgres")


def get_storage(backend: Optional[str] = None, **kwargs) -> Stores:
    """
    Return the user/post stores for the configured backend.

    Parameters
    ----------
    backend : str, optional
        "memory", "mongo" or "postgres". If omitted, reads BLOG_STORAGE_BACKEND.
    kwargs : dict
        `database_url="..."` overrides DATABASE_URL for driver-backed stores.

    Returns
    -------
    Stores
    """
    be = (backend or os.getenv("BLOG_STORAGE_BACKEND", "memory")).strip().lower()
    log.info("Selected storage backend: %r", be)

    if be == "memory":
        return Stores(users=UserStore(), posts=PostStore(), backend="memory")

    if be not in BACKENDS:
        raise ValueError(f"Unknown storage backend: {be!r}")

    database_url = kwargs.get("database_url") or os.getenv("DATABASE_URL", "")
    if not database_url:
        raise ValueError(f"DATABASE_URL is required for {be} backend")

    if be == "mongo":
        from blog_platform.storage.mongo_storage import connect
    else:
        from blog_platform.storage.db_storage import connect
    return connect(database_url)
