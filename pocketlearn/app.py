"""
Composition root.

Builds the one SessionManager of the process and hands it to the clients
that need it. Nothing here is a module-level singleton: whoever calls
create_repository() owns the result.

Usage:
    async with open_repository(get_settings()) as repo:
        courses = await repo.list_courses()
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from config import Settings

from .catalog.repository import CourseRepository
from .core.record_client import CollectionClient
from .core.session import SessionManager


def create_session(settings: Settings) -> SessionManager:
    """Session for the configured backend; raises ConfigError if it is not configured."""
    settings.require_backend()
    return SessionManager(
        settings.db_host,
        settings.db_user,
        settings.db_pass.get_secret_value(),
        auth_path=settings.auth_path,
        timeout=settings.request_timeout,
        token_leeway_seconds=settings.token_leeway_seconds,
    )


def create_client(settings: Settings, session: SessionManager | None = None) -> CollectionClient:
    return CollectionClient(
        session or create_session(settings),
        page_size=settings.page_size,
        max_records=settings.max_records,
    )


def create_repository(settings: Settings, session: SessionManager | None = None) -> CourseRepository:
    return CourseRepository(create_client(settings, session))


@asynccontextmanager
async def open_repository(settings: Settings) -> AsyncIterator[CourseRepository]:
    """Repository whose HTTP connection is closed on exit."""
    repository = create_repository(settings)
    try:
        yield repository
    finally:
        await repository.client.session.aclose()
