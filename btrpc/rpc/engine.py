"""Call engine: one RPC invocation from method name to decoded reply."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from btrpc.models import ConnectionConfig, RpcReply
from btrpc.rpc.codec import RpcMessage, decode_reply, encode_message
from btrpc.rpc.session import SessionRenewalHandler
from btrpc.rpc.transport import Transport, UrllibTransport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigInvalid:
    """Outcome of a call abandoned before any I/O.

    Returned instead of a reply when the connection config is unusable
    (missing host, port or path, or a user name without a password). It is
    falsy so ``if not reply:`` catches it.
    """

    problems: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return "invalid configuration: " + "; ".join(self.problems)


class CallEngine:
    """Run RPC calls against one daemon session."""

    def __init__(
        self,
        config: ConnectionConfig | None = None,
        transport: Transport | None = None,
    ):
        """Initialize call engine.

        Args:
            config: Connection settings (defaults to a local daemon)
            transport: HTTP transport (defaults to :class:`UrllibTransport`)

        """
        self.config = config if config is not None else ConnectionConfig()
        self.transport = transport if transport is not None else UrllibTransport()
        self.renewal = SessionRenewalHandler(self.config, self.transport)

    def call(
        self,
        method: str,
        arguments: dict[str, Any] | None = None,
        tag: Any = None,
    ) -> RpcReply | ConfigInvalid:
        """Invoke *method* with a prepared arguments object.

        The config is checked before anything is sent; an unusable config
        yields :class:`ConfigInvalid` and performs no I/O.

        Args:
            method: Wire method name
            arguments: Argument object; an empty mapping means no arguments
            tag: Correlation value for the reply

        Returns:
            The decoded reply, or :class:`ConfigInvalid`

        """
        problems = self.config.problems()
        if problems:
            logger.warning("Not calling %s: %s", method, "; ".join(problems))
            return ConfigInvalid(problems)

        message = RpcMessage(method=method, arguments=dict(arguments) if arguments else None, tag=tag)
        logger.debug("Calling %s with %s", method, sorted(message.arguments or {}))
        reply = decode_reply(self.renewal.send(encode_message(message)))
        if not reply.succeeded:
            logger.debug("%s reported: %s", method, reply.result)
        return reply
