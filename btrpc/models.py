"""Pydantic models for btrpc.

Provides validated configuration and reply models.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from btrpc.exceptions import ConfigurationError, RpcResultError
from btrpc.protocol import (
    DEFAULT_HOST,
    DEFAULT_PATH,
    DEFAULT_PORT,
    RESULT_SUCCESS,
)


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ConnectionConfig(BaseModel):
    """Connection settings for one daemon session.

    Every assignment is type checked; a mismatch raises
    :class:`ConfigurationError` before any request is made. The session token
    is rewritten in place whenever the daemon hands out a fresh one.
    """

    host: str = Field(DEFAULT_HOST, description="Daemon host name or address")
    port: int | None = Field(DEFAULT_PORT, gt=0, le=65535, description="Daemon RPC port")
    path: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PATH),
        description="RPC endpoint path segments",
    )
    username: str | None = Field(None, description="HTTP basic auth user name")
    password: str | None = Field(None, description="HTTP basic auth password")
    session_token: str = Field("", description="Current daemon session id")
    ssl: bool = Field(False, description="Use https instead of http")
    timeout: float = Field(30.0, gt=0.0, description="Request timeout in seconds")

    model_config = {"validate_assignment": True, "strict": True}

    def __init__(self, **data: Any) -> None:
        """Build the config, translating validation failures."""
        try:
            super().__init__(**data)
        except PydanticValidationError as e:
            fields = ", ".join(sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]}))
            msg = f"Invalid connection settings: {fields}"
            raise ConfigurationError(msg, {"errors": e.errors()}) from e

    def __setattr__(self, name: str, value: Any) -> None:
        """Assign a field, translating validation failures."""
        try:
            super().__setattr__(name, value)
        except PydanticValidationError as e:
            msg = f"Invalid value for {name}: {value!r}"
            raise ConfigurationError(msg, {"errors": e.errors()}) from e

    @property
    def has_credentials(self) -> bool:
        """Whether both user name and password are set."""
        return self.username is not None and self.password is not None

    def problems(self) -> list[str]:
        """Return the reasons this config cannot be used for a call.

        An empty list means the config is usable.
        """
        problems: list[str] = []
        if not self.host:
            problems.append("host is not set")
        if self.port is None:
            problems.append("port is not set")
        if not self.path:
            problems.append("path is not set")
        if (self.username is None) != (self.password is None):
            problems.append("username and password must be set together")
        return problems


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Log level")
    log_file: str | None = Field(None, description="Log file path")
    structured_logging: bool = Field(
        default=False,
        description="Write JSON records to the log file",
    )
    log_correlation_id: bool = Field(
        default=True,
        description="Include correlation IDs",
    )


class Config(BaseModel):
    """Top-level btrpc configuration."""

    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


class RpcReply(BaseModel):
    """Decoded daemon reply."""

    result: str = Field(..., description="'success' or an error message")
    arguments: dict[str, Any] | None = Field(None, description="Reply payload")
    tag: Any = Field(None, description="Echo of the request tag")

    @property
    def succeeded(self) -> bool:
        """Whether the daemon reported success."""
        return self.result == RESULT_SUCCESS

    def raise_for_result(self) -> RpcReply:
        """Raise :class:`RpcResultError` unless the reply is a success.

        Returns:
            The reply itself, for chaining.

        """
        if not self.succeeded:
            raise RpcResultError(self.result, {"tag": self.tag})
        return self
