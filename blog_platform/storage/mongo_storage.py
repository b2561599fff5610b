"""
MongoStorage – MongoDB-backed storage for the Blog API
======================================================

Document-store backend. Implements the same contracts as the in-memory
stores (see `storage.py`), so switching backends does not touch the
manager or the routes.

Documents
---------
users:
    {_id: ObjectId, username, password, firstName, lastName}
    Unique index on `username` (created on connect).
blogposts:
    {_id: ObjectId, author: {firstName, lastName}, title, content, created}

Ids leave this module as 24-char hex strings; ids that are not valid
ObjectIds simply match nothing.

Example
-------
>>> stores = connect("mongodb://localhost/blog-app")
>>> stores.posts.list_all()
[]
>>> stores.close()
"""

import contextlib
import logging
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo import errors as mongo_errors

from ..models import Author, BlogPost, User
from .base import (
    BasePostStore,
    BaseUserStore,
    DuplicateKeyError,
    StorageError,
    Stores,
    clean_update,
)

log = logging.getLogger("blog.storage.mongo")

DEFAULT_DB_NAME = "blog-app"
USERS_COLLECTION = "users"
POSTS_COLLECTION = "blogposts"


@contextlib.contextmanager
def _translate_errors():
    """Re-raise pymongo failures as storage errors."""
    try:
        yield
    except mongo_errors.DuplicateKeyError as exc:
        raise DuplicateKeyError(str(exc)) from exc
    except mongo_errors.PyMongoError as exc:
        raise StorageError(str(exc)) from exc


def _object_id(value: str) -> Optional[ObjectId]:
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


# ---- Document mapping -----------------------------------------------------

def user_from_doc(doc: Mapping[str, Any]) -> User:
    return User(
        id=str(doc["_id"]),
        username=doc["username"],
        password=doc["password"],
        first_name=doc.get("firstName") or "",
        last_name=doc.get("lastName") or "",
    )


def user_to_doc(user: User) -> Dict[str, Any]:
    return {
        "username": user.username,
        "password": user.password,
        "firstName": user.first_name,
        "lastName": user.last_name,
    }


def post_from_doc(doc: Mapping[str, Any]) -> BlogPost:
    author = doc.get("author") or {}
    fields = {
        "id": str(doc["_id"]),
        "author": Author(
            first_name=author.get("firstName") or "",
            last_name=author.get("lastName") or "",
        ),
        "title": doc["title"],
        "content": doc.get("content"),
    }
    if doc.get("created") is not None:
        fields["created"] = doc["created"]
    return BlogPost(**fields)


def post_to_doc(post: BlogPost) -> Dict[str, Any]:
    return {
        "author": {
            "firstName": post.author.first_name,
            "lastName": post.author.last_name,
        },
        "title": post.title,
        "content": post.content,
        "created": post.created,
    }


# ---- Stores ---------------------------------------------------------------

class MongoUserStore(BaseUserStore):
    """Credential store over the `users` collection."""

    def __init__(self, collection) -> None:
        self.collection = collection

    def ensure_indexes(self) -> None:
        with _translate_errors():
            self.collection.create_index([("username", ASCENDING)], unique=True)

    def find_by_username(self, username: str) -> Optional[User]:
        with _translate_errors():
            doc = self.collection.find_one({"username": username})
        return user_from_doc(doc) if doc else None

    def count_by_username(self, username: str) -> int:
        with _translate_errors():
            return self.collection.count_documents({"username": username})

    def create(self, user: User) -> User:
        doc = user_to_doc(user)
        with _translate_errors():
            result = self.collection.insert_one(doc)
        return user.model_copy(update={"id": str(result.inserted_id)})


class MongoPostStore(BasePostStore):
    """Post store over the `blogposts` collection."""

    def __init__(self, collection) -> None:
        self.collection = collection

    def list_all(self) -> List[BlogPost]:
        with _translate_errors():
            docs = list(self.collection.find().sort("_id", ASCENDING))
        return [post_from_doc(doc) for doc in docs]

    def find_by_id(self, post_id: str) -> Optional[BlogPost]:
        oid = _object_id(post_id)
        if oid is None:
            return None
        with _translate_errors():
            doc = self.collection.find_one({"_id": oid})
        return post_from_doc(doc) if doc else None

    def create(self, post: BlogPost) -> BlogPost:
        doc = post_to_doc(post)
        with _translate_errors():
            result = self.collection.insert_one(doc)
        return post.model_copy(update={"id": str(result.inserted_id)})

    def update_fields(self, post_id: str, fields: Mapping[str, object]) -> Optional[BlogPost]:
        oid = _object_id(post_id)
        if oid is None:
            return None
        updates = clean_update(fields)
        with _translate_errors():
            if not updates:
                doc = self.collection.find_one({"_id": oid})
            else:
                doc = self.collection.find_one_and_update(
                    {"_id": oid},
                    {"$set": updates},
                    return_document=ReturnDocument.AFTER,
                )
        return post_from_doc(doc) if doc else None

    def delete_by_id(self, post_id: str) -> bool:
        oid = _object_id(post_id)
        if oid is None:
            return False
        with _translate_errors():
            result = self.collection.delete_one({"_id": oid})
        return result.deleted_count == 1


def connect(database_url: str, timeout_ms: int = 5000) -> Stores:
    """
    Open a MongoClient and return the user/post stores bound to the URL's database.

    The database name comes from the URL path; "blog-app" when the URL has none.
    Raises StorageError if the server cannot be reached.
    """
    log.info("Connecting to MongoDB at %s", database_url)
    with _translate_errors():
        client = MongoClient(database_url, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
        try:
            db = client.get_default_database(default=DEFAULT_DB_NAME)
            client.admin.command("ping")
            users = MongoUserStore(db[USERS_COLLECTION])
            users.ensure_indexes()
        except mongo_errors.PyMongoError:
            client.close()
            raise
    posts = MongoPostStore(db[POSTS_COLLECTION])
    return Stores(users=users, posts=posts, backend="mongo", close=client.close)
