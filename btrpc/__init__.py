"""btrpc - client for the BitTorrent daemon JSON-RPC interface."""

from __future__ import annotations

from btrpc.client import RpcClient
from btrpc.exceptions import (
    ArgumentValidationError,
    BTRPCError,
    ClientError,
    ConfigurationError,
    RpcResultError,
    TransportError,
)
from btrpc.models import ConnectionConfig, RpcReply
from btrpc.rpc.engine import ConfigInvalid
from btrpc.rpc.validators import UNSET, SourceKind, TorrentSource

__version__ = "0.1.0"

__all__ = [
    "UNSET",
    "ArgumentValidationError",
    "BTRPCError",
    "ClientError",
    "ConfigInvalid",
    "ConfigurationError",
    "ConnectionConfig",
    "RpcClient",
    "RpcReply",
    "RpcResultError",
    "SourceKind",
    "TorrentSource",
    "TransportError",
    "__version__",
]
