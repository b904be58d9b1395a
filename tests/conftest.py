"""
Pytest fixtures for ReplyBox tests. Each test gets a temporary SQLite database.
"""

from __future__ import annotations

import pytest


@pytest.fixture
def config(tmp_path):
    """AppConfig pointing at a temporary SQLite file."""
    from replybox.config import AppConfig

    return AppConfig(database_url=f"sqlite:///{tmp_path / 'replybox.db'}")


@pytest.fixture
def services(config):
    """Service container with tables created and a secure token issued."""
    from replybox.api_server.services import build_services

    svc = build_services(config)
    svc.activate()
    yield svc
    svc.db.dispose()


@pytest.fixture
def token(services):
    return services.tokens.token


@pytest.fixture
def client(services):
    """FastAPI TestClient running the app lifespan."""
    from fastapi.testclient import TestClient

    from replybox.api_server.server import create_app

    with TestClient(create_app(services)) as c:
        yield c


@pytest.fixture
def add_post(services):
    """Insert a post and return its id."""
    from replybox.database.models import Post

    def _add(title: str = "Hello world") -> int:
        with services.db.session_scope() as session:
            post = Post(title=title)
            session.add(post)
            session.flush()
            return post.id

    return _add


@pytest.fixture
def add_user(services):
    """Insert a registered user and return its id."""
    from replybox.database.models import User

    def _add(email: str, display_name: str) -> int:
        with services.db.session_scope() as session:
            user = User(email=email, display_name=display_name)
            session.add(user)
            session.flush()
            return user.id

    return _add


@pytest.fixture
def seed_comments(services, add_post):
    """Insert n comments on one post directly; returns the post id."""
    from replybox.database.repositories import CommentInput

    def _seed(n: int) -> int:
        post_id = add_post()
        for i in range(n):
            services.comments.create(
                CommentInput(
                    post=post_id,
                    email=f"user{i}@example.com",
                    content=f"comment {i}",
                    name=f"User {i}",
                    date_gmt="2024-01-01 00:00:00",
                )
            )
        return post_id

    return _seed
