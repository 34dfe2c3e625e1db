"""Session token renewal.

The daemon rejects a request carrying a stale session id with HTTP 409 and
puts the fresh id in the ``X-Transmission-Session-Id`` response header. The
handler stores the fresh id on the connection config, so every later call
uses it too, and resends the same body exactly once.
"""

from __future__ import annotations

import logging
from enum import Enum

from btrpc.exceptions import ClientError
from btrpc.models import ConnectionConfig
from btrpc.protocol import SESSION_CONFLICT_STATUS, SESSION_ID_HEADER
from btrpc.rpc.transport import Transport, build_request

logger = logging.getLogger(__name__)


class RenewalState(str, Enum):
    """States of one send with renewal."""

    SENT = "sent"
    RENEWING = "renewing"
    RETRIED = "retried"
    DONE = "done"
    FAILED = "failed"


class SessionRenewalHandler:
    """Send a request body, renewing the session token on a 409."""

    def __init__(self, config: ConnectionConfig, transport: Transport):
        """Initialize the handler.

        Args:
            config: Connection settings; its session token is updated in place
            transport: Transport used for both attempts

        """
        self.config = config
        self.transport = transport
        self.state = RenewalState.DONE

    def send(self, body: bytes) -> bytes:
        """Send *body*, retrying once with a fresh token after a 409.

        The outcome of the retry is final, including a second 409.

        Raises:
            ClientError: Any HTTP error other than a renewable 409, or any
                error from the retry
            TransportError: Network failures, unchanged

        """
        self.state = RenewalState.SENT
        try:
            response = self.transport.send(build_request(self.config), body)
        except ClientError as e:
            token = e.header(SESSION_ID_HEADER) if e.status == SESSION_CONFLICT_STATUS else None
            if token is None:
                self.state = RenewalState.FAILED
                raise
            self.state = RenewalState.RENEWING
            logger.info("Session id rejected by %s, renewing", self.config.host)
            self.config.session_token = token
            self.state = RenewalState.RETRIED
            try:
                response = self.transport.send(build_request(self.config, token), body)
            except Exception:
                self.state = RenewalState.FAILED
                raise
        except Exception:
            self.state = RenewalState.FAILED
            raise
        self.state = RenewalState.DONE
        return response
