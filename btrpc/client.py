"""High-level client exposing every registered RPC method.

Example::

    from btrpc import RpcClient, TorrentSource

    client = RpcClient()
    client.torrent_add(TorrentSource.filename("magnet:?xt=urn:btih:..."), paused=True)
    reply = client.torrent_get(["id", "name", "percentDone"], ids="recently-active")
"""

from __future__ import annotations

from typing import Any, Callable

from btrpc.models import ConnectionConfig, RpcReply
from btrpc.rpc.engine import CallEngine, ConfigInvalid
from btrpc.rpc.methods import METHODS, MethodDescriptor, get_method
from btrpc.rpc.transport import Transport


class RpcClient:
    """Session context for one daemon.

    Holds the connection config (including the live session token) and the
    transport. Registered methods are available as attributes, e.g.
    ``client.torrent_stop(ids=[1, 2])``.
    """

    def __init__(
        self,
        config: ConnectionConfig | None = None,
        transport: Transport | None = None,
    ):
        """Initialize RPC client.

        Args:
            config: Connection settings (defaults to a local daemon)
            transport: HTTP transport (defaults to urllib)

        """
        self.engine = CallEngine(config, transport)

    @property
    def config(self) -> ConnectionConfig:
        """Connection settings shared by every call of this client."""
        return self.engine.config

    @property
    def session_token(self) -> str:
        """Session id currently sent to the daemon."""
        return self.engine.config.session_token

    @staticmethod
    def methods() -> list[str]:
        """Names of the available RPC methods."""
        return sorted(METHODS)

    def call(
        self,
        method: str,
        arguments: dict[str, Any] | None = None,
        tag: Any = None,
    ) -> RpcReply | ConfigInvalid:
        """Send a raw call, bypassing argument validation."""
        return self.engine.call(method, arguments, tag)

    def invoke(self, name: str, *args: Any, **kwargs: Any) -> RpcReply | ConfigInvalid:
        """Validate arguments for method *name* and call it."""
        descriptor = get_method(name)
        arguments, tag = descriptor.build_arguments(*args, **kwargs)
        return self.engine.call(descriptor.method, arguments, tag)

    def _bind(self, descriptor: MethodDescriptor) -> Callable[..., RpcReply | ConfigInvalid]:
        def rpc_method(*args: Any, **kwargs: Any) -> RpcReply | ConfigInvalid:
            return self.invoke(descriptor.name, *args, **kwargs)

        rpc_method.__name__ = descriptor.name
        rpc_method.__qualname__ = f"{type(self).__name__}.{descriptor.name}"
        rpc_method.__doc__ = descriptor.doc
        rpc_method.__signature__ = descriptor.signature  # type: ignore[attr-defined]
        return rpc_method

    def __getattr__(self, name: str) -> Callable[..., RpcReply | ConfigInvalid]:
        descriptor = METHODS.get(name)
        if descriptor is None:
            msg = f"{type(self).__name__!r} object has no attribute {name!r}"
            raise AttributeError(msg)
        return self._bind(descriptor)

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *METHODS})
