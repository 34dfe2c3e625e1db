"""Envelope encoding and reply decoding for the JSON-RPC protocol."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from btrpc.exceptions import MessageError
from btrpc.models import RpcReply


@dataclass(frozen=True)
class RpcMessage:
    """One request envelope.

    Args:
        method: Wire method name, e.g. ``"torrent-get"``
        arguments: Ordered argument object; left off the wire when empty
        tag: Correlation value echoed by the daemon; left off when ``None``

    """

    method: str
    arguments: dict[str, Any] | None = None
    tag: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Build the envelope with keys in method, arguments, tag order."""
        envelope: dict[str, Any] = {"method": self.method}
        if self.arguments:
            envelope["arguments"] = self.arguments
        if self.tag is not None:
            envelope["tag"] = self.tag
        return envelope


def encode_message(message: RpcMessage) -> bytes:
    """Serialize *message* to UTF-8 JSON."""
    try:
        return json.dumps(message.to_dict()).encode("utf-8")
    except (TypeError, ValueError) as e:
        msg = f"Cannot encode {message.method} request: {e}"
        raise MessageError(msg) from e


def decode_reply(data: bytes | str) -> RpcReply:
    """Parse a daemon reply.

    Raises:
        MessageError: If *data* is not JSON or lacks a ``result`` string.

    """
    try:
        payload = json.loads(data)
    except ValueError as e:
        msg = f"Reply is not valid JSON: {e}"
        raise MessageError(msg) from e
    if not isinstance(payload, dict):
        msg = f"Reply must be a JSON object, got {type(payload).__name__}"
        raise MessageError(msg)
    try:
        return RpcReply.model_validate(payload)
    except PydanticValidationError as e:
        msg = "Malformed reply"
        raise MessageError(msg, {"errors": e.errors()}) from e
