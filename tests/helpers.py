"""
Shared test helpers: tokens, canned responses, and an in-memory backend.
"""
import math
import re
from urllib.parse import unquote
import time

import jwt
from httpx import Request, Response

HOST = "http://pb.test"
SIGNING_KEY = "test-signing-key-0123456789abcdef-0123456789"


def make_token(expires_in: float | None = 3600) -> str:
    """Signed JWT like the backend issues; exp omitted when expires_in is None."""
    claims = {"id": "admin-1", "type": "admin"}
    if expires_in is not None:
        claims["exp"] = int(time.time() + expires_in)
    return jwt.encode(claims, SIGNING_KEY, algorithm="HS256")


def make_response(method: str, url: str, status: int = 200, json=None, content: bytes | None = None) -> Response:
    request = Request(method, url)
    if content is not None:
        return Response(status, content=content, request=request)
    return Response(status, json=json, request=request)


def auth_payload(token: str | None = None) -> dict:
    return {
        "token": token or make_token(),
        "admin": {"id": "admin-1", "email": "service@example.com"},
    }


def paged_listing(records: list[dict], params: dict) -> dict:
    """Slice `records` the way the record store pages a listing."""
    page = int(params.get("page", 1))
    per_page = int(params.get("perPage", 30))
    start = (page - 1) * per_page
    return {
        "page": page,
        "perPage": per_page,
        "totalItems": len(records),
        "totalPages": max(1, math.ceil(len(records) / per_page)),
        "items": records[start:start + per_page],
    }


class FakeBackend:
    """Counts auth exchanges and serves collections from memory."""

    def __init__(self, collections: dict[str, list[dict]] | None = None):
        self.collections = collections or {}
        self.auth_calls = 0
        self.get_calls: list[tuple[str, dict]] = []
        self.token = make_token()

    async def post(self, url, **kwargs):
        self.auth_calls += 1
        return make_response("POST", url, 200, json=auth_payload(self.token))

    async def get(self, url, params=None, headers=None, **kwargs):
        params = params or {}
        self.get_calls.append((url, dict(params)))
        if not headers or headers.get("Authorization") != f"Bearer {self.token}":
            return make_response("GET", url, 401, json={"message": "Unauthorized"})

        parts = url[len(HOST):].strip("/").split("/")  # api, collections, <name>, records[, <id>]
        records = self.collections.get(parts[2])
        if records is None:
            return make_response("GET", url, 404, json={"message": "Missing collection"})
        if len(parts) == 5:
            for record in records:
                if record.get("id") == unquote(parts[4]):
                    return make_response("GET", url, 200, json=record)
            return make_response("GET", url, 404, json={"message": "Not found"})

        match = re.fullmatch(r'(\w+)="(.*)"', params.get("filter", ""))
        if match:
            key, value = match.groups()
            records = [record for record in records if record.get(key) == value]
        return make_response("GET", url, 200, json=paged_listing(records, params))
