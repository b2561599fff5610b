"""
Request payloads and the commands they validate into.

Every body field is optional at parse time so that a missing field can be
reported with the API's own 400 message instead of FastAPI's generic 422.
`to_command()` is where presence rules are enforced; the manager only ever
sees fully-formed commands.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidRequestError


class UserRequest(BaseModel):
    """Payload for POST /users."""
    model_config = ConfigDict(populate_by_name=True)

    username: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")

    def to_command(self) -> "RegisterUserCommand":
        """
        Validate into a RegisterUserCommand.

        Required, non-empty, checked in order: username, password, firstName,
        lastName. Username and password are trimmed; blank counts as missing.

        Raises:
            InvalidRequestError: "Missing field: <name>" for the first gap.
        """
        username = (self.username or "").strip()
        password = (self.password or "").strip()
        for name, value in (
            ("username", username),
            ("password", password),
            ("firstName", self.first_name),
            ("lastName", self.last_name),
        ):
            if not value:
                raise InvalidRequestError(f"Missing field: {name}", field=name)
        return RegisterUserCommand(
            username=username,
            password=password,
            first_name=self.first_name,
            last_name=self.last_name,
        )


class PostCreateRequest(BaseModel):
    """Payload for POST /posts. Any `author` in the body is ignored."""
    title: Optional[str] = None
    content: Optional[str] = None

    def to_command(self) -> "CreatePostCommand":
        for name in ("title", "content"):
            if name not in self.model_fields_set:
                raise InvalidRequestError(f'Missing "{name}" in request body', field=name)
        if not self.title:
            raise InvalidRequestError('Missing "title" in request body', field="title")
        return CreatePostCommand(title=self.title, content=self.content)


class PostUpdateRequest(BaseModel):
    """Payload for PUT /posts/{id}. Only fields present in the body are applied."""
    id: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None

    def to_command(self, path_id: str) -> "UpdatePostCommand":
        if not (path_id and self.id and path_id == self.id):
            raise InvalidRequestError(
                "Request path id and request body id values must match", field="id"
            )
        fields = {
            name: getattr(self, name)
            for name in ("title", "content")
            if name in self.model_fields_set
        }
        if "title" in fields and not fields["title"]:
            raise InvalidRequestError("Post title cannot be empty", field="title")
        return UpdatePostCommand(post_id=path_id, fields=fields)


@dataclass(frozen=True)
class RegisterUserCommand:
    username: str
    password: str
    first_name: str
    last_name: str


@dataclass(frozen=True)
class CreatePostCommand:
    title: str
    content: Optional[str]


@dataclass(frozen=True)
class UpdatePostCommand:
    post_id: str
    fields: Dict[str, Optional[str]] = field(default_factory=dict)
