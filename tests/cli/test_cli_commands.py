"""Tests for the btrpc command line."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from btrpc.cli.main import cli

pytestmark = pytest.mark.cli


@pytest.fixture
def run(fake_transport):
    runner = CliRunner()

    def _run(*args: str):
        return runner.invoke(cli, list(args), obj={"transport": fake_transport})

    return _run


def test_methods_lists_registry(run, fake_transport):
    result = run("methods")
    assert result.exit_code == 0, result.output
    assert "torrent-rename-path" in result.output
    assert fake_transport.calls == []


def test_list_torrents(run, fake_transport):
    fake_transport.queue(
        {
            "result": "success",
            "arguments": {
                "torrents": [
                    {"id": 1, "name": "debian.iso", "status": 4, "percentDone": 0.5, "rateDownload": 2048, "rateUpload": 0}
                ]
            },
        }
    )
    result = run("list", "1")
    assert result.exit_code == 0, result.output
    assert "debian.iso" in result.output
    assert "downloading" in result.output
    body = fake_transport.bodies[0]
    assert body["method"] == "torrent-get"
    assert body["arguments"]["ids"] == [1]
    assert "name" in body["arguments"]["fields"]


def test_add_magnet(run, fake_transport):
    fake_transport.queue(
        {"result": "success", "arguments": {"torrent-added": {"id": 7, "name": "XYZ", "hashString": "ab"}}}
    )
    result = run("add", "magnet:?xt=urn:btih:XYZ", "--paused")
    assert result.exit_code == 0, result.output
    assert "Added: XYZ" in result.output
    assert fake_transport.bodies[0]["arguments"] == {"filename": "magnet:?xt=urn:btih:XYZ", "paused": True}


def test_add_metainfo_file(run, fake_transport, tmp_path):
    torrent = tmp_path / "x.torrent"
    torrent.write_bytes(b"d4:infoe")
    result = run("add", "--metainfo", str(torrent), "--started")
    assert result.exit_code == 0, result.output
    assert fake_transport.bodies[0]["arguments"] == {"metainfo": "ZDQ6aW5mb2U=", "paused": False}


def test_stop_without_ids_targets_all(run, fake_transport):
    result = run("stop")
    assert result.exit_code == 0, result.output
    assert fake_transport.bodies == [{"method": "torrent-stop"}]


def test_bad_id_is_rejected_before_calling(run, fake_transport):
    result = run("remove", "1", "oops")
    assert result.exit_code != 0
    assert fake_transport.calls == []


def test_remove_with_data(run, fake_transport):
    result = run("remove", "3", "--delete-data")
    assert result.exit_code == 0, result.output
    assert fake_transport.bodies[0]["arguments"] == {"ids": [3], "delete-local-data": True}


def test_daemon_error_exits_non_zero(run, fake_transport):
    fake_transport.queue({"result": "no such directory"})
    result = run("free-space", "/nope")
    assert result.exit_code == 1
    assert "no such directory" in result.output


def test_invalid_config_exits_non_zero(run, fake_transport):
    result = run("--username", "admin", "stats")
    assert result.exit_code == 1
    assert "username and password" in result.output
    assert fake_transport.calls == []


def test_connection_overrides(run, fake_transport):
    result = run("--host", "seedbox", "--port", "8181", "--path", "/rpc", "port-test")
    assert result.exit_code == 0, result.output
    request, _ = fake_transport.calls[0]
    assert request.url == "http://seedbox:8181/rpc"


def test_raw_call(run, fake_transport):
    fake_transport.queue({"result": "success", "arguments": {"size-bytes": 10}})
    result = run("call", "free-space", '{"path": "/data"}', "--tag", "5")
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"size-bytes": 10}
    assert fake_transport.bodies[0] == {"method": "free-space", "arguments": {"path": "/data"}, "tag": 5}


def test_raw_call_rejects_non_object(run, fake_transport):
    result = run("call", "session-get", "[1]")
    assert result.exit_code == 2
    assert fake_transport.calls == []


def test_session_fields(run, fake_transport):
    fake_transport.queue({"result": "success", "arguments": {"version": "4.0.5"}})
    result = run("session", "--field", "version")
    assert result.exit_code == 0, result.output
    assert "4.0.5" in result.output
    assert fake_transport.bodies[0]["arguments"] == {"fields": ["version"]}


def test_add_duplicate_is_reported(run, fake_transport):
    fake_transport.queue(
        {"result": "success", "arguments": {"torrent-duplicate": {"id": 2, "name": "XYZ"}}}
    )
    result = run("add", "magnet:?xt=urn:btih:XYZ")
    assert result.exit_code == 0, result.output
    assert "Already present: XYZ" in result.output


def test_all_digit_hash_stays_a_hash(run, fake_transport):
    digit_hash = "1234567890" * 4
    result = run("verify", "7", digit_hash)
    assert result.exit_code == 0, result.output
    assert fake_transport.bodies[0]["arguments"] == {"ids": [7, digit_hash]}
