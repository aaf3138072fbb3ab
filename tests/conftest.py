from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from grove.courses.dependencies import get_bucket, get_db
from grove.main import app
from tests.mocks.mongo import FakeBucket, FakeDatabase


@pytest.fixture()
def fake_db() -> FakeDatabase:
    db = FakeDatabase()
    db.profiles.docs.append(
        {
            "user_id": "inst-1",
            "full_name": "Ada Lovelace",
            "avatar_url": "https://cdn.example.com/ada.png",
            "email": "ada@example.com",
        }
    )
    db.courses.docs.append(
        {
            "course_id": "COURSE_OTHER",
            "instructor_id": "inst-2",
            "title": "Watercolor Landscapes",
            "description": "Paint",
            "status": "Active",
        }
    )
    return db


@pytest.fixture()
def fake_bucket() -> FakeBucket:
    return FakeBucket()


@pytest.fixture()
def client(fake_db: FakeDatabase, fake_bucket: FakeBucket) -> Iterator[TestClient]:
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_bucket] = lambda: fake_bucket
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
