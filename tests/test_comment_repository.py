"""
Pytest tests for the comment repository (paging, counting, creation, attribution).
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest


def _input(**overrides):
    from replybox.database.repositories import CommentInput

    fields = {
        "post": None,
        "email": "a@x.com",
        "content": "hi",
        "name": "A",
        "date_gmt": "2024-01-01 00:00:00",
    }
    fields.update(overrides)
    return CommentInput(**fields)


def test_list_empty(services):
    comments, total = services.comments.list(1, 100)
    assert comments == []
    assert total == 0


def test_list_pages_ascending(services, seed_comments):
    """250 comments at 100 per page: 100, 100, 50, ascending ids, total always 250."""
    seed_comments(250)
    page1, total = services.comments.list(1, 100)
    assert total == 250
    assert [c["id"] for c in page1] == list(range(1, 101))
    page3, total3 = services.comments.list(3, 100)
    assert total3 == 250
    assert [c["id"] for c in page3] == list(range(201, 251))
    page4, _ = services.comments.list(4, 100)
    assert page4 == []


@pytest.mark.parametrize("per_page", [1, 7, 10, 33, 100])
def test_pages_cover_every_comment_once(services, seed_comments, per_page):
    from replybox.database.repositories import page_count

    seed_comments(35)
    _, total = services.comments.list(1, per_page)
    seen = []
    for page in range(1, page_count(total, per_page) + 1):
        items, _ = services.comments.list(page, per_page)
        seen.extend(c["id"] for c in items)
    assert len(seen) == total == 35
    assert seen == sorted(set(seen))


def test_page_count():
    from replybox.database.repositories import page_count

    assert page_count(0, 100) == 0
    assert page_count(1, 100) == 1
    assert page_count(100, 100) == 1
    assert page_count(101, 100) == 2
    assert page_count(250, 100) == 3


@pytest.mark.parametrize("value", [0, -1, "abc", "1.5", "", None, True])
def test_list_rejects_bad_pagination(services, value):
    from replybox.core.exceptions import ValidationFailure

    with pytest.raises(ValidationFailure):
        services.comments.list(value, 10)
    with pytest.raises(ValidationFailure):
        services.comments.list(1, value)


def test_pagination_bounds():
    from replybox.core.exceptions import ValidationFailure
    from replybox.database.repositories import MAX_INT, page_offset, require_positive_int

    assert require_positive_int("page", str(MAX_INT)) == MAX_INT
    with pytest.raises(ValidationFailure, match="too large"):
        require_positive_int("per_page", "100000000000000000000")
    assert page_offset(1, MAX_INT) == 0
    assert page_offset(3, 100) == 200
    with pytest.raises(ValidationFailure, match="out of range"):
        page_offset(2**62, 100)


def test_list_rejects_offset_overflow(services):
    from replybox.core.exceptions import ValidationFailure

    with pytest.raises(ValidationFailure):
        services.comments.list(2**62, 100)


def test_list_accepts_numeric_strings(services, seed_comments):
    seed_comments(3)
    items, total = services.comments.list("1", " 2 ")
    assert total == 3
    assert len(items) == 2


def test_create_projects_comment(services, add_post):
    post_id = add_post()
    new_id = services.comments.create(_input(post=post_id))
    assert new_id > 0
    items, total = services.comments.list(1, 100)
    assert total == 1
    assert items[0] == {
        "id": new_id,
        "post": post_id,
        "parent": 0,
        "user_name": "A",
        "user_email": "a@x.com",
        "content": "hi",
        "approved": "1",
        "date_gmt": "2024-01-01 00:00:00",
    }


def test_create_unknown_email_keeps_name_and_no_user(services, add_post, add_user):
    from replybox.database.models import Comment

    add_user("someone@else.com", "Someone")
    new_id = services.comments.create(_input(post=add_post(), name="Guest"))
    with services.db.session_scope() as session:
        row = session.get(Comment, new_id)
        assert row.user_id == 0
        assert row.author_name == "Guest"
        assert row.agent == "ReplyBox"
        assert row.type == "comment"
        assert row.author_url == ""


def test_create_registered_email_overrides_name(services, add_post, add_user):
    from replybox.database.models import Comment

    user_id = add_user("Jane@Example.com", "Jane Doe")
    new_id = services.comments.create(_input(post=add_post(), email="jane@example.com", name="J"))
    with services.db.session_scope() as session:
        row = session.get(Comment, new_id)
        assert row.user_id == user_id
        assert row.author_name == "Jane Doe"
        assert row.author_email == "jane@example.com"


def test_find_user_by_email(services, add_user):
    user_id = add_user("a@x.com", "Alice")
    assert services.comments.find_user_by_email("A@X.com") == {
        "id": user_id,
        "email": "a@x.com",
        "display_name": "Alice",
    }
    assert services.comments.find_user_by_email("nobody@x.com") is None
    assert services.comments.find_user_by_email("") is None


def test_create_spam_flag(services, add_post):
    post_id = add_post()
    spam_id = services.comments.create(_input(post=post_id, spam=True))
    ham_id = services.comments.create(_input(post=post_id, spam=False))
    items, _ = services.comments.list(1, 10)
    statuses = {c["id"]: c["approved"] for c in items}
    assert statuses == {spam_id: "spam", ham_id: "1"}


def test_create_reply_to_existing_parent(services, add_post):
    post_id = add_post()
    parent_id = services.comments.create(_input(post=post_id))
    child_id = services.comments.create(_input(post=post_id, parent=parent_id))
    items, _ = services.comments.list(1, 10)
    assert {c["id"]: c["parent"] for c in items} == {parent_id: 0, child_id: parent_id}


@pytest.mark.parametrize("field", ["post", "content", "email"])
def test_create_requires_fields(services, add_post, field):
    from replybox.core.exceptions import ValidationFailure

    fields = {"post": add_post(), field: None}
    data = _input(**fields)
    with pytest.raises(ValidationFailure) as exc_info:
        services.comments.create(data)
    assert exc_info.value.code == "rest_missing_param"
    assert field in exc_info.value.message
    assert services.comments.list(1, 10)[1] == 0


def test_create_rejects_blank_content(services, add_post):
    from replybox.core.exceptions import ValidationFailure

    with pytest.raises(ValidationFailure):
        services.comments.create(_input(post=add_post(), content="   "))


def test_create_unknown_post_is_store_failure(services):
    from replybox.core.exceptions import StoreFailure

    with pytest.raises(StoreFailure) as exc_info:
        services.comments.create(_input(post=999))
    assert exc_info.value.code == "post_not_found"
    assert exc_info.value.status == 422


def test_create_unknown_parent_is_store_failure(services, add_post):
    from replybox.core.exceptions import StoreFailure

    with pytest.raises(StoreFailure) as exc_info:
        services.comments.create(_input(post=add_post(), parent=42))
    assert exc_info.value.code == "parent_not_found"
    assert services.comments.list(1, 10)[1] == 0


def test_create_rejects_malformed_date(services, add_post):
    from replybox.core.exceptions import ValidationFailure

    with pytest.raises(ValidationFailure):
        services.comments.create(_input(post=add_post(), date_gmt="yesterday"))


def test_create_defaults_date_to_now(services, add_post):
    from replybox.database.models import Comment

    before = datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)
    new_id = services.comments.create(_input(post=add_post(), date_gmt=None))
    with services.db.session_scope() as session:
        row = session.get(Comment, new_id)
        assert row.date_gmt >= before


def test_parse_gmt_formats():
    from replybox.database.repositories import parse_gmt

    expected = datetime(2024, 1, 1, 12, 30, 0)
    assert parse_gmt("2024-01-01 12:30:00") == expected
    assert parse_gmt("2024-01-01T12:30:00Z") == expected
    assert parse_gmt("2024-01-01T14:30:00+02:00") == expected


def test_local_date_uses_site_timezone(config, add_post):
    """The stored local date is derived from date_gmt in the configured timezone."""
    from dataclasses import replace

    from replybox.api_server.services import build_services
    from replybox.database.models import Comment

    svc = build_services(replace(config, timezone="America/New_York"))
    try:
        post_id = add_post()
        new_id = svc.comments.create(_input(post=post_id, date_gmt="2024-07-01 12:00:00"))
        with svc.db.session_scope() as session:
            row = session.get(Comment, new_id)
            assert row.date_gmt == datetime(2024, 7, 1, 12, 0, 0)
            assert row.date == datetime(2024, 7, 1, 8, 0, 0)
    finally:
        svc.db.dispose()
