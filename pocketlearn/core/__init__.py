"""
Core Module - Access to the remote record store.

Components:
- errors: ConfigError / AuthError / FetchError taxonomy
- session: SessionManager (lazy, single-flight authentication)
- record_client: CollectionClient (paged collection and record reads)
"""

from pocketlearn.core.errors import (
    AuthError,
    AuthNetworkError,
    ConfigError,
    FetchError,
    FetchNetworkError,
    InvalidCredentialsError,
    MalformedResponseError,
    PocketLearnError,
    RecordNotFoundError,
    UnauthorizedError,
)
from pocketlearn.core.record_client import (
    CollectionClient,
    RawRecord,
    RecordList,
    build_file_url,
)
from pocketlearn.core.session import Credential, SessionManager, SessionState

__all__ = [
    # Errors
    "PocketLearnError",
    "ConfigError",
    "AuthError",
    "InvalidCredentialsError",
    "AuthNetworkError",
    "FetchError",
    "UnauthorizedError",
    "RecordNotFoundError",
    "FetchNetworkError",
    "MalformedResponseError",
    # Session
    "Credential",
    "SessionManager",
    "SessionState",
    # Retrieval
    "CollectionClient",
    "RawRecord",
    "RecordList",
    "build_file_url",
]
