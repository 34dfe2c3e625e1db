"""JSON-RPC request pipeline: validators, codec, transport and call engine."""

from __future__ import annotations

from btrpc.rpc.codec import RpcMessage, decode_reply, encode_message
from btrpc.rpc.engine import CallEngine, ConfigInvalid
from btrpc.rpc.methods import METHODS, MethodDescriptor, Param, get_method
from btrpc.rpc.session import SessionRenewalHandler
from btrpc.rpc.transport import HttpRequest, Transport, UrllibTransport, build_request
from btrpc.rpc.validators import OMIT, UNSET, Include, SourceKind, TorrentSource

__all__ = [
    "METHODS",
    "OMIT",
    "UNSET",
    "CallEngine",
    "ConfigInvalid",
    "HttpRequest",
    "Include",
    "MethodDescriptor",
    "Param",
    "RpcMessage",
    "SessionRenewalHandler",
    "SourceKind",
    "TorrentSource",
    "Transport",
    "UrllibTransport",
    "build_request",
    "decode_reply",
    "encode_message",
    "get_method",
]
