"""
Session Manager

Owns the one authenticated connection to the record store. Callers never
handle credentials: they await ensure_authenticated() and then use
authorization_headers() (the CollectionClient does both).

Usage:
    session = SessionManager(host, principal, secret)
    await session.ensure_authenticated()
    ...
    await session.aclose()
"""

from __future__ import annotations

import asyncio
import functools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx
import jwt
from loguru import logger

from .errors import AuthNetworkError, InvalidCredentialsError

DEFAULT_AUTH_PATH = "/api/admins/auth-with-password"
REJECTED_STATUS_CODES = (400, 401, 403)


class SessionState(str, Enum):
    """Credential state of the session."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


@dataclass
class Credential:
    """Token obtained from one successful authentication exchange."""

    token: str
    principal: dict[str, Any] = field(default_factory=dict)
    expires_at: float | None = None  # unix seconds, None when the token has no exp claim

    def is_valid(self, leeway: float = 0.0) -> bool:
        if not self.token:
            return False
        if self.expires_at is None:
            return True
        return time.time() + leeway < self.expires_at


def token_expiry(token: str) -> float | None:
    """Read the exp claim of a JWT without verifying its signature."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    exp = claims.get("exp")
    if isinstance(exp, (int, float)):
        return float(exp)
    return None


class SessionManager:
    """
    Lazily authenticated session against the record store.

    Concurrent callers of ensure_authenticated() share a single in-flight
    authentication task, so at most one exchange runs at a time.
    """

    def __init__(
        self,
        host: str,
        principal: str,
        secret: str,
        *,
        auth_path: str = DEFAULT_AUTH_PATH,
        timeout: float | None = None,
        token_leeway_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.host = host.rstrip("/")
        self.auth_path = auth_path
        self.timeout = timeout
        self.token_leeway_seconds = token_leeway_seconds
        self._principal_id = principal
        self._secret = secret
        self._client = client
        self._credential: Credential | None = None
        self._inflight: asyncio.Task[Credential] | None = None
        # bumped by logout()/invalidate(); an exchange started in an older epoch is discarded
        self._epoch = 0

    async def __aenter__(self) -> "SessionManager":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        """The shared HTTP connection, created on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.host,
                headers={"Content-Type": "application/json"},
                timeout=httpx.Timeout(self.timeout),
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> SessionState:
        if self.is_authenticated:
            return SessionState.AUTHENTICATED
        return SessionState.UNAUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        """True while a non-expired token is held."""
        return self._credential is not None and self._credential.is_valid(
            self.token_leeway_seconds
        )

    @property
    def token(self) -> str | None:
        return self._credential.token if self._credential else None

    @property
    def principal(self) -> dict[str, Any] | None:
        return self._credential.principal if self._credential else None

    def authorization_headers(self) -> dict[str, str]:
        if self._credential is None:
            return {}
        return {"Authorization": f"Bearer {self._credential.token}"}

    # =========================================================================
    # Authentication
    # =========================================================================

    async def ensure_authenticated(self) -> None:
        """
        Make sure a valid token is held.

        No network call when the current token is still valid. Otherwise joins
        the in-flight exchange or starts one.

        Raises:
            InvalidCredentialsError: The backend rejected the principal/secret
            AuthNetworkError: The exchange could not complete
        """
        if self.is_authenticated:
            return

        task = self._inflight
        if task is None:
            task = asyncio.ensure_future(self._authenticate())
            task.add_done_callback(functools.partial(self._auth_finished, self._epoch))
            self._inflight = task

        # shield: a cancelled caller must not cancel the exchange other callers await
        await asyncio.shield(task)

    def _auth_finished(self, epoch: int, task: asyncio.Task[Credential]) -> None:
        if self._inflight is task:
            self._inflight = None
        if task.cancelled():
            return
        # Awaiters re-raise this; fetching it here keeps asyncio from
        # reporting it as never retrieved when every awaiter was cancelled.
        error = task.exception()
        if error is None and epoch == self._epoch:
            self._credential = task.result()
        elif error is None:
            logger.debug("Discarding token from an exchange that outlived logout/invalidate")

    async def _authenticate(self) -> Credential:
        """Perform one authentication exchange."""
        try:
            response = await self.client.post(
                f"{self.host}{self.auth_path}",
                json={"identity": self._principal_id, "password": self._secret},
            )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.error("Connection error during auth: {}", e)
            raise AuthNetworkError(f"Could not reach {self.host}: {e}") from e

        if response.status_code in REJECTED_STATUS_CODES:
            logger.error("Authentication failed: status={}", response.status_code)
            raise InvalidCredentialsError(
                "Authentication failed. Please check your credentials.",
                status_code=response.status_code,
            )
        if response.status_code != 200:
            logger.error("Authentication failed: status={}", response.status_code)
            raise AuthNetworkError(
                f"Authentication endpoint answered {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise AuthNetworkError("Authentication response is not JSON") from e

        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthNetworkError("Authentication response carries no token")

        principal = data.get("admin") or data.get("record") or {}
        credential = Credential(
            token=token,
            principal=principal if isinstance(principal, dict) else {},
            expires_at=token_expiry(token),
        )
        logger.info("Authenticated as: {}", credential.principal.get("email", self._principal_id))
        return credential

    def invalidate(self) -> None:
        """
        Drop the token so the next ensure_authenticated() re-authenticates.

        An exchange still in flight is detached: its token will not be stored.
        """
        if self._credential is not None:
            logger.warning("Session token rejected by backend; re-authentication required")
        self._reset()

    def logout(self) -> None:
        """Clear the stored credential. Idempotent, never raises."""
        self._reset()
        logger.info("Logged out")

    def _reset(self) -> None:
        self._epoch += 1
        self._credential = None
        self._inflight = None
