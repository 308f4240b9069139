"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests.
Tables and the default badge catalog are created once per session; every
test takes fresh user ids from `new_user_id`, so no per-test cleanup is
needed.
"""
import itertools
import os

os.environ["DATABASE_URL"] = "sqlite:///./test_askbuddy.db"
os.environ["SEED_BADGES_ON_STARTUP"] = "true"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.db.base import Base, SessionLocal, engine, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.question import Question  # noqa: E402
from app.services.catalog import seed_default_badges  # noqa: E402
from app.services.questions import create_question  # noqa: E402

_user_ids = itertools.count(1000)


def override_get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_default_badges(db)
    finally:
        db.close()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def new_user_id():
    """Factory of user ids never used by any other test in the session."""
    return lambda: next(_user_ids)


@pytest.fixture()
def ask(db):
    """Persist a question for a user the way the question handler does."""
    def _ask(user_id, text: str) -> Question:
        record = create_question(db, user_id=user_id, question=text, answer="An answer.")
        db.commit()
        return record
    return _ask


@pytest.fixture()
def as_user():
    """Request headers identifying `user_id` as the signed-in user."""
    return lambda user_id: {"X-User-Id": str(user_id)}
