from datetime import datetime, timezone

from blog_platform.models import Author, BlogPost, User


def test_author_name_joins_and_trims():
    assert BlogPost(title="t", author=Author(first_name="Ada", last_name="Lovelace")).author_name == "Ada Lovelace"
    assert BlogPost(title="t", author=Author(first_name="Ada")).author_name == "Ada"
    assert BlogPost(title="t", author=Author(last_name="Lovelace")).author_name == "Lovelace"
    assert BlogPost(title="t").author_name == ""


def test_post_api_repr_shape():
    created = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    post = BlogPost(id="p1", title="T", content="C", created=created,
                    author=Author(first_name="F", last_name="L"))

    assert post.api_repr() == {
        "id": "p1",
        "author": "F L",
        "content": "C",
        "title": "T",
        "created": created,
    }


def test_post_created_defaults_to_now():
    before = datetime.now(timezone.utc)
    post = BlogPost(title="T")
    assert post.created >= before
    assert post.created.tzinfo is not None


def test_user_api_repr_never_contains_digest():
    user = User(id="u1", username="x", password="$2b$04$digest", first_name="F", last_name="L")
    repr_ = user.api_repr()

    assert repr_ == {"username": "x", "firstName": "F", "lastName": "L"}
    assert "$2b$04$digest" not in repr_.values()
