"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
HTTP is faked by monkeypatching the methods of the session's httpx.AsyncClient.
"""
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pocketlearn.core.record_client import CollectionClient  # noqa: E402
from pocketlearn.core.session import SessionManager  # noqa: E402
from tests.helpers import HOST, FakeBackend  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def backend_env(monkeypatch):
    """Keep real environment variables and .env files out of Settings."""
    for name in (
        "DB_HOST", "DB_USER", "DB_PASS",
        "EXPO_PUBLIC_DB_HOST", "EXPO_PUBLIC_DB_USER", "EXPO_PUBLIC_DB_PASS",
        "MAX_RECORDS", "PAGE_SIZE", "LOG_LEVEL", "LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(PROJECT_ROOT / "tests")


@pytest_asyncio.fixture
async def session():
    """Session manager pointed at the fake host."""
    session = SessionManager(HOST, "service@example.com", "secret-pass")
    yield session
    await session.aclose()


@pytest.fixture
def backend(session, monkeypatch):
    """Fake backend wired into the session's HTTP client."""
    fake = FakeBackend()
    monkeypatch.setattr(session.client, "post", fake.post)
    monkeypatch.setattr(session.client, "get", fake.get)
    return fake


@pytest.fixture
def client(session):
    return CollectionClient(session, page_size=200, max_records=200)


@pytest.fixture
def course_record():
    """Raw `Courses` record as the backend returns it."""
    return {
        "id": "c1",
        "collectionId": "col_courses",
        "collectionName": "Courses",
        "Judul": "Intro to Forex",
        "Deskripsi": "Learn the basics of Forex trading.",
        "Level": "Beginner",
        "Bahasa": "EN",
        "Banner": "banner_abc.jpeg",
    }


@pytest.fixture
def lesson_records():
    """Raw `Lesson` records, course c1 out of display order plus one of c2."""
    return [
        {"id": "l3", "Courses_ID": "c1", "Judul": "Risk", "Konten": "# Risk", "Urutan": 3},
        {"id": "l1", "Courses_ID": "c1", "Judul": "Pairs", "Konten": "# Pairs", "Urutan": 1},
        {"id": "l2", "Courses_ID": "c1", "Judul": "Pips", "Urutan": 2},
        {"id": "x1", "Courses_ID": "c2", "Judul": "Other", "Konten": "", "Urutan": 1},
    ]
