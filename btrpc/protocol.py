"""Protocol constants for the daemon JSON-RPC interface."""

from __future__ import annotations

from typing import Final

SESSION_ID_HEADER: Final[str] = "X-Transmission-Session-Id"
CONTENT_TYPE: Final[str] = "application/json"

DEFAULT_HOST: Final[str] = "localhost"
DEFAULT_PORT: Final[int] = 9091
DEFAULT_PATH: Final[tuple[str, ...]] = ("transmission", "rpc")

# Status the daemon uses to reject a stale or missing session token.
SESSION_CONFLICT_STATUS: Final[int] = 409

RESULT_SUCCESS: Final[str] = "success"

# Id selector sentinel: torrents active within the last minute.
RECENTLY_ACTIVE: Final[str] = "recently-active"

HASH_STRING_LENGTH: Final[int] = 40
