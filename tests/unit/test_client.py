"""End-to-end tests for RpcClient over a fake transport."""

from __future__ import annotations

import inspect

import pytest

from btrpc import UNSET, RpcClient, TorrentSource
from btrpc.exceptions import ArgumentValidationError, UnknownMethodError
from btrpc.models import ConnectionConfig
from btrpc.rpc.engine import ConfigInvalid

pytestmark = pytest.mark.unit


class TestClientMethods:
    """Registered methods exposed as attributes."""

    def test_torrent_get_envelope(self, client, fake_transport):
        client.torrent_get(["id", "name"], ids=[1, 2])
        assert fake_transport.bodies == [
            {"method": "torrent-get", "arguments": {"fields": ["id", "name"], "ids": [1, 2]}}
        ]

    def test_torrent_add_magnet(self, client, fake_transport):
        client.torrent_add(TorrentSource.filename("magnet:?xt=urn:btih:XYZ"))
        assert fake_transport.bodies[0]["arguments"] == {"filename": "magnet:?xt=urn:btih:XYZ"}

    def test_untagged_source_never_hits_the_wire(self, client, fake_transport):
        with pytest.raises(ArgumentValidationError):
            client.torrent_add("magnet:?xt=urn:btih:XYZ")
        assert fake_transport.calls == []

    def test_stop_all(self, client, fake_transport):
        client.torrent_stop()
        assert fake_transport.bodies == [{"method": "torrent-stop"}]

    def test_recently_active(self, client, fake_transport):
        client.torrent_reannounce(ids="recently-active")
        assert fake_transport.bodies[0]["arguments"] == {"ids": "recently-active"}

    def test_invalid_id_list_is_dropped(self, client, fake_transport):
        client.queue_move_top(ids=[1, "x"])
        assert fake_transport.bodies == [{"method": "queue-move-top"}]

    def test_boolean_presence(self, client, fake_transport):
        client.torrent_remove(ids=[4], delete_local_data=False)
        client.torrent_remove(ids=[4])
        assert fake_transport.bodies[0]["arguments"] == {"ids": [4], "delete-local-data": False}
        assert fake_transport.bodies[1]["arguments"] == {"ids": [4]}

    def test_tag_round_trip(self, client, fake_transport):
        fake_transport.queue({"result": "success", "arguments": {}, "tag": 11})
        reply = client.session_stats(tag=11)
        assert fake_transport.bodies[0] == {"method": "session-stats", "tag": 11}
        assert reply.tag == 11

    def test_unset_tag_is_left_off_the_wire(self, client, fake_transport):
        client.torrent_get(["id"], tag=UNSET)
        assert fake_transport.bodies == [{"method": "torrent-get", "arguments": {"fields": ["id"]}}]

    def test_generic_invoke(self, client, fake_transport):
        client.invoke("free-space", "/downloads")
        assert fake_transport.bodies[0] == {"method": "free-space", "arguments": {"path": "/downloads"}}

    def test_raw_call(self, client, fake_transport):
        client.call("group-get", {"group": ["a"]})
        assert fake_transport.bodies[0] == {"method": "group-get", "arguments": {"group": ["a"]}}

    def test_unknown_attribute(self, client):
        with pytest.raises(AttributeError):
            client.torrent_explode()
        with pytest.raises(UnknownMethodError):
            client.invoke("torrent_explode")

    def test_bound_method_metadata(self, client):
        method = client.torrent_set_location
        assert method.__name__ == "torrent_set_location"
        assert "location" in inspect.signature(method).parameters
        assert "torrent_get" in dir(client)
        assert "session_close" in RpcClient.methods()


class TestClientSession:
    """Shared session state."""

    def test_token_renewal_is_shared_between_calls(self, client, fake_transport, conflict):
        fake_transport.queue(conflict("tok"), {"result": "success"}, {"result": "success"})
        client.session_get()
        client.torrent_start(ids=[1])
        assert fake_transport.tokens == ["", "tok", "tok"]
        assert client.session_token == "tok"

    def test_invalid_config_outcome(self, fake_transport):
        client = RpcClient(ConnectionConfig(password="only"), fake_transport)
        assert isinstance(client.torrent_verify(ids=[1]), ConfigInvalid)
        assert fake_transport.calls == []
