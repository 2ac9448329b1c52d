"""
Collection Client

Read access to record-store collections on top of a SessionManager.
Backend paging is flattened into one ordered list, bounded by a hard cap.

Usage:
    client = CollectionClient(session, max_records=200)
    courses = await client.fetch_collection("Courses")
    lessons = await client.fetch_collection("Lesson", 'Courses_ID="abc123"')
    course = await client.fetch_record("Courses", "abc123")
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from loguru import logger

from .errors import (
    AuthError,
    FetchNetworkError,
    MalformedResponseError,
    RecordNotFoundError,
    UnauthorizedError,
)
from .session import SessionManager

RawRecord = dict[str, Any]

DEFAULT_PAGE_SIZE = 200
DEFAULT_MAX_RECORDS = 200

T = TypeVar("T")


def build_file_url(host: str, collection_id: str, record_id: str, filename: str) -> str:
    """
    URL of a file attached to a record: {host}/api/files/{collectionId}/{recordId}/{filename}.

    An empty filename still yields a well-formed URL; it just will not resolve.
    """
    return f"{host.rstrip('/')}/api/files/{collection_id}/{record_id}/{filename}"


class RecordList(list):
    """
    Records of one collection fetch, in backend order.

    truncated is True when the collection held more records than the cap
    allowed; total_items is the backend's count when it reported one.
    """

    def __init__(
        self,
        records: list[RawRecord] | None = None,
        *,
        truncated: bool = False,
        total_items: int | None = None,
    ):
        super().__init__(records or [])
        self.truncated = truncated
        self.total_items = total_items


class CollectionClient:
    """Fetches whole collections and single records as raw key-value records."""

    def __init__(
        self,
        session: SessionManager,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_records: int = DEFAULT_MAX_RECORDS,
    ):
        if page_size < 1 or max_records < 1:
            raise ValueError("page_size and max_records must be positive")
        self.session = session
        self.page_size = page_size
        self.max_records = max_records

    @property
    def host(self) -> str:
        return self.session.host

    def file_url(self, collection_id: str, record_id: str, filename: str) -> str:
        """URL of a file attached to a record."""
        return build_file_url(self.host, collection_id, record_id, filename)

    # =========================================================================
    # Public API
    # =========================================================================

    async def fetch_collection(
        self,
        name: str,
        filter: str | None = None,
        *,
        sort: str | None = None,
        timeout: float | None = None,
    ) -> RecordList:
        """
        Fetch every record of a collection, up to max_records.

        Args:
            name: Collection name (e.g. "Courses")
            filter: Server-side filter expression, passed through verbatim
            sort: Server-side sort expression, passed through verbatim
            timeout: Optional deadline in seconds for the whole fetch

        Returns:
            RecordList of raw records; truncated=True when the cap was hit

        Raises:
            UnauthorizedError, RecordNotFoundError, FetchNetworkError,
            MalformedResponseError
        """
        return await self._with_timeout(
            self._fetch_all(name, filter, sort), timeout, f"collection {name}"
        )

    async def fetch_record(
        self,
        collection_name: str,
        id: str,
        *,
        timeout: float | None = None,
    ) -> RawRecord:
        """
        Fetch one record by id.

        Raises:
            RecordNotFoundError: No record with this id
            UnauthorizedError, FetchNetworkError, MalformedResponseError
        """
        return await self._with_timeout(
            self._fetch_one(collection_name, id), timeout, f"record {collection_name}/{id}"
        )

    # =========================================================================
    # Internals
    # =========================================================================

    async def _with_timeout(self, operation: Awaitable[T], timeout: float | None, what: str) -> T:
        if timeout is None:
            return await operation
        try:
            return await asyncio.wait_for(operation, timeout)
        except asyncio.TimeoutError as e:
            raise FetchNetworkError(f"Timed out after {timeout}s fetching {what}") from e

    async def _fetch_all(self, name: str, filter: str | None, sort: str | None) -> RecordList:
        records: list[RawRecord] = []
        total_items: int | None = None
        page = 1
        per_page = min(self.page_size, self.max_records)

        while True:
            params: dict[str, Any] = {"page": page, "perPage": per_page}
            if filter:
                params["filter"] = filter
            if sort:
                params["sort"] = sort

            data = await self._get(self._records_path(name), params=params)
            items = data.get("items")
            if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
                raise MalformedResponseError(f"Listing of {name} has no valid 'items' list")

            records.extend(items)
            if isinstance(data.get("totalItems"), int) and data["totalItems"] >= 0:
                total_items = data["totalItems"]
            total_pages = data.get("totalPages")
            logger.debug(
                "Fetched {} page {}/{}: {} records", name, page, total_pages, len(items)
            )

            if len(records) >= self.max_records:
                break
            if not items or len(items) < per_page:
                break
            if isinstance(total_pages, int) and page >= total_pages:
                break
            page += 1

        truncated = len(records) > self.max_records or (
            total_items is not None and total_items > self.max_records
        )
        if truncated:
            logger.warning(
                "Collection {} truncated to {} records (backend reports {})",
                name,
                self.max_records,
                total_items if total_items is not None else "more",
            )
        return RecordList(records[: self.max_records], truncated=truncated, total_items=total_items)

    async def _fetch_one(self, collection_name: str, id: str) -> RawRecord:
        if not id or not id.strip():
            # an empty id would address the listing endpoint instead of a record
            raise RecordNotFoundError(f"No {collection_name} record with an empty id")
        return await self._get(f"{self._records_path(collection_name)}/{quote(id, safe='')}")

    def _records_path(self, name: str) -> str:
        return f"{self.host}/api/collections/{quote(name, safe='')}/records"

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET an authenticated JSON object, mapping failures onto FetchError."""
        try:
            await self.session.ensure_authenticated()
        except AuthError as e:
            raise UnauthorizedError(f"Not authenticated: {e.message}", status_code=e.status_code) from e
        if self.session.token is None:
            raise UnauthorizedError("Session was logged out while authenticating")

        try:
            response = await self.session.client.get(
                url,
                params=params,
                headers=self.session.authorization_headers(),
            )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.error("Connection error fetching {}: {}", url, e)
            raise FetchNetworkError(f"Could not fetch {url}: {e}") from e

        status = response.status_code
        if status in (401, 403):
            self.session.invalidate()
            raise UnauthorizedError(f"Backend rejected the session token ({status})", status_code=status)
        if status == 404:
            raise RecordNotFoundError(f"Not found: {url}", status_code=status)
        if not 200 <= status < 300:
            raise FetchNetworkError(f"Backend answered {status} for {url}", status_code=status)

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Response from {url} is not JSON", status_code=status) from e
        if not isinstance(data, dict):
            raise MalformedResponseError(f"Response from {url} is not an object", status_code=status)
        return data
