"""HTTP transport and request building.

The transport is a small seam: anything with a ``send(request, body)`` method
that returns the response body, or raises :class:`ClientError` for an HTTP
error status, can stand in for :class:`UrllibTransport`.
"""

from __future__ import annotations

import base64
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import quote, urlunsplit

from btrpc.exceptions import ClientError, TransportError
from btrpc.models import ConnectionConfig
from btrpc.protocol import CONTENT_TYPE, SESSION_ID_HEADER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpRequest:
    """A POST request ready for the transport."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)
    method: str = "POST"
    timeout: float | None = None


class Transport(Protocol):
    """Transport collaborator contract."""

    def send(self, request: HttpRequest, body: bytes) -> bytes:
        """Send *body* and return the response body."""
        ...


def build_url(config: ConnectionConfig) -> str:
    """Combine scheme, host, port and path into the RPC endpoint URL."""
    scheme = "https" if config.ssl else "http"
    host = config.host
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    path = "/" + "/".join(quote(segment) for segment in config.path)
    return urlunsplit((scheme, f"{host}:{config.port}", path, "", ""))


def build_request(config: ConnectionConfig, token: str | None = None) -> HttpRequest:
    """Build the request for one call.

    Args:
        config: Connection settings
        token: Session token to send instead of ``config.session_token``

    """
    headers = {
        "Content-Type": CONTENT_TYPE,
        SESSION_ID_HEADER: config.session_token if token is None else token,
    }
    if config.has_credentials:
        userpass = f"{config.username}:{config.password}".encode()
        headers["Authorization"] = "Basic " + base64.b64encode(userpass).decode("ascii")
    return HttpRequest(url=build_url(config), headers=headers, timeout=config.timeout)


class UrllibTransport:
    """Blocking transport over :mod:`urllib.request`."""

    def send(self, request: HttpRequest, body: bytes) -> bytes:
        """POST *body* to the request URL.

        Raises:
            ClientError: The server answered with an HTTP error status
            TransportError: The request could not be completed

        """
        req = urllib.request.Request(
            request.url,
            data=body,
            headers=request.headers,
            method=request.method,
        )
        try:
            with urllib.request.urlopen(req, timeout=request.timeout) as response:  # nosec S310 - scheme is http(s) by construction
                return response.read()
        except urllib.error.HTTPError as e:
            headers = list(e.headers.items()) if e.headers is not None else []
            try:
                payload = e.read()
            except OSError:
                payload = b""
            logger.debug("HTTP %s from %s", e.code, request.url)
            raise ClientError(e.code, headers, payload) from e
        except urllib.error.URLError as e:
            reason = str(e.reason) if e.reason else str(e)
            msg = f"Cannot reach daemon at {request.url}: {reason}"
            raise TransportError(msg) from e
        except OSError as e:
            msg = f"Connection to {request.url} failed: {e}"
            raise TransportError(msg) from e
