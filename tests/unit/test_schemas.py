"""
Unit tests for request payloads and their validation into commands.
"""

import pytest

from blog_platform.errors import InvalidRequestError
from blog_platform.schemas import (
    CreatePostCommand,
    PostCreateRequest,
    PostUpdateRequest,
    RegisterUserCommand,
    UpdatePostCommand,
    UserRequest,
)


def test_user_request_accepts_camel_case_names():
    req = UserRequest.model_validate(
        {"username": " x ", "password": " p ", "firstName": "F", "lastName": "L"}
    )
    assert req.to_command() == RegisterUserCommand(username="x", password="p", first_name="F", last_name="L")


def test_user_request_names_first_missing_field():
    req = UserRequest.model_validate({"username": "x", "lastName": "L"})
    with pytest.raises(InvalidRequestError) as info:
        req.to_command()
    assert info.value.field == "password"
    assert info.value.message == "Missing field: password"


def test_user_request_empty_names_are_missing():
    req = UserRequest.model_validate({"username": "x", "password": "p", "firstName": "", "lastName": "L"})
    with pytest.raises(InvalidRequestError, match="Missing field: firstName"):
        req.to_command()


def test_create_request_requires_presence_of_both_fields():
    with pytest.raises(InvalidRequestError, match='Missing "title"'):
        PostCreateRequest.model_validate({"content": "C"}).to_command()
    with pytest.raises(InvalidRequestError, match='Missing "content"'):
        PostCreateRequest.model_validate({"title": "T"}).to_command()


def test_create_request_rejects_empty_title():
    with pytest.raises(InvalidRequestError, match='Missing "title"'):
        PostCreateRequest.model_validate({"title": "", "content": "C"}).to_command()


def test_create_request_ignores_author():
    req = PostCreateRequest.model_validate({"title": "T", "content": "C", "author": {"firstName": "X"}})
    assert req.to_command() == CreatePostCommand(title="T", content="C")


def test_update_request_only_carries_present_fields():
    cmd = PostUpdateRequest.model_validate({"id": "abc", "content": None}).to_command("abc")
    assert cmd == UpdatePostCommand(post_id="abc", fields={"content": None})


def test_update_request_with_no_changes_is_allowed():
    cmd = PostUpdateRequest.model_validate({"id": "abc"}).to_command("abc")
    assert cmd.fields == {}


@pytest.mark.parametrize("body", [{"id": "other"}, {}, {"id": ""}])
def test_update_request_requires_matching_id(body):
    with pytest.raises(InvalidRequestError, match="must match"):
        PostUpdateRequest.model_validate(body).to_command("abc")


def test_invalid_request_without_field():
    err = InvalidRequestError("Invalid request body")
    assert err.field is None
    assert str(err) == err.message == "Invalid request body"
