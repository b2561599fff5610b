"""
Record models for the Blog API.

Each model mirrors one collection in the document store:
- User     -> "users"
- BlogPost -> "blogposts"

Records carry a store-assigned `id` once persisted (None before `create`).
`api_repr()` is the single place that decides what leaves the process; the
password digest is never part of any representation.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Author(BaseModel):
    """Snapshot of the author's name at creation time."""
    first_name: str = Field("", description="Author first name")
    last_name: str = Field("", description="Author last name")


class BlogPost(BaseModel):
    """
    Blog post record.
    Collection name: "blogposts"
    """
    id: Optional[str] = Field(None, description="Store-assigned identifier")
    author: Author = Field(default_factory=Author)
    title: str = Field(..., min_length=1, description="Post title")
    content: Optional[str] = Field(None, description="Post body")
    created: datetime = Field(default_factory=utcnow, description="Creation timestamp (UTC)")

    @property
    def author_name(self) -> str:
        return f"{self.author.first_name} {self.author.last_name}".strip()

    def api_repr(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "author": self.author_name,
            "content": self.content,
            "title": self.title,
            "created": self.created,
        }


class User(BaseModel):
    """
    Registered user record.
    Collection name: "users"
    """
    id: Optional[str] = Field(None, description="Store-assigned identifier")
    username: str = Field(..., min_length=1, description="Unique login name")
    password: str = Field(..., min_length=1, description="BCrypt password digest")
    first_name: str = Field("", description="First name")
    last_name: str = Field("", description="Last name")

    def api_repr(self) -> Dict[str, str]:
        return {
            "username": self.username or "",
            "firstName": self.first_name or "",
            "lastName": self.last_name or "",
        }
