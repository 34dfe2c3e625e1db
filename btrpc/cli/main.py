"""btrpc command line.

Thin click front-end over :class:`btrpc.client.RpcClient`; every command is
one RPC call.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import click
from rich.table import Table

from btrpc.cli.console import create_console, print_mapping, print_success, print_warning
from btrpc.client import RpcClient
from btrpc.config import init_config, parse_path
from btrpc.exceptions import BTRPCError
from btrpc.logging_config import setup_logging
from btrpc.models import LogLevel, RpcReply
from btrpc.protocol import RECENTLY_ACTIVE
from btrpc.rpc.engine import ConfigInvalid
from btrpc.rpc.methods import METHODS
from btrpc.rpc.validators import UNSET, TorrentSource, is_hash_string, is_torrent_id

logger = logging.getLogger(__name__)

LIST_FIELDS = ["id", "name", "status", "percentDone", "rateDownload", "rateUpload"]

# Daemon status codes for torrent-get "status".
STATUS_NAMES = {
    0: "stopped",
    1: "check pending",
    2: "checking",
    3: "download pending",
    4: "downloading",
    5: "seed pending",
    6: "seeding",
}


def _parse_ids(values: tuple[str, ...]) -> list[int | str] | str | None:
    """Turn command line ids into an id selector; no ids means all torrents."""
    if not values:
        return None
    if values == (RECENTLY_ACTIVE,):
        return RECENTLY_ACTIVE
    ids: list[int | str] = []
    for value in values:
        parsed: int | str = value if is_hash_string(value) or not value.isdigit() else int(value)
        if not is_torrent_id(parsed):
            msg = f"{value!r} is not a torrent id or info hash"
            raise click.BadParameter(msg, param_hint="IDS")
        ids.append(parsed)
    return ids


def _run(ctx: click.Context, name: str, *args: Any, **kwargs: Any) -> dict[str, Any]:
    """Invoke an RPC method and return the reply arguments.

    Any failure becomes a :class:`click.ClickException`.
    """
    client: RpcClient = ctx.obj["client"]
    try:
        reply = client.invoke(name, *args, **kwargs)
    except BTRPCError as e:
        raise click.ClickException(str(e)) from e
    return _check(reply)


def _check(reply: RpcReply | ConfigInvalid) -> dict[str, Any]:
    if isinstance(reply, ConfigInvalid):
        raise click.ClickException(str(reply))
    if not reply.succeeded:
        msg = f"Daemon error: {reply.result}"
        raise click.ClickException(msg)
    return reply.arguments or {}


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to btrpc.toml",
)
@click.option("--host", default=None, help="Daemon host")
@click.option("--port", type=int, default=None, help="Daemon RPC port")
@click.option("--path", "rpc_path", default=None, help="RPC path, e.g. /transmission/rpc")
@click.option("--username", default=None, help="RPC user name")
@click.option("--password", default=None, help="RPC password")
@click.option("--ssl/--no-ssl", default=None, help="Use https")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity")
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    host: str | None,
    port: int | None,
    rpc_path: str | None,
    username: str | None,
    password: str | None,
    ssl: bool | None,
    verbose: int,
) -> None:
    """Control a BitTorrent daemon over its JSON-RPC interface."""
    ctx.ensure_object(dict)
    try:
        config = init_config(config_file).config
        connection = config.connection
        overrides = {
            "host": host,
            "port": port,
            "path": parse_path(rpc_path) if rpc_path is not None else None,
            "username": username,
            "password": password,
            "ssl": ssl,
        }
        for field, value in overrides.items():
            if value is not None:
                setattr(connection, field, value)
    except BTRPCError as e:
        raise click.ClickException(str(e)) from e

    if verbose >= 2:
        config.observability.log_level = LogLevel.DEBUG
    elif verbose == 1:
        config.observability.log_level = LogLevel.INFO
    setup_logging(config.observability)
    logger.debug("Daemon at %s:%s/%s", connection.host, connection.port, "/".join(connection.path))

    ctx.obj["client"] = RpcClient(connection, ctx.obj.get("transport"))
    ctx.obj["console"] = create_console()


@cli.command("methods")
@click.pass_context
def list_methods(ctx: click.Context) -> None:
    """List the RPC methods this client knows."""
    table = Table(title="RPC methods")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Wire method", style="magenta", no_wrap=True)
    table.add_column("Description")
    for name in sorted(METHODS):
        descriptor = METHODS[name]
        table.add_row(name, descriptor.method, descriptor.doc)
    ctx.obj["console"].print(table)


@cli.command("list")
@click.argument("ids", nargs=-1)
@click.pass_context
def list_torrents(ctx: click.Context, ids: tuple[str, ...]) -> None:
    """List torrents (all, or the given IDS)."""
    data = _run(ctx, "torrent_get", LIST_FIELDS, ids=_parse_ids(ids))
    table = Table(title="Torrents")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Status", style="yellow")
    table.add_column("Done", justify="right")
    table.add_column("Down (KiB/s)", style="blue", justify="right")
    table.add_column("Up (KiB/s)", style="blue", justify="right")
    for torrent in data.get("torrents", []):
        table.add_row(
            str(torrent.get("id", "")),
            str(torrent.get("name", "")),
            STATUS_NAMES.get(torrent.get("status"), str(torrent.get("status", ""))),
            f"{torrent.get('percentDone', 0) * 100:.1f}%",
            f"{torrent.get('rateDownload', 0) / 1024:.1f}",
            f"{torrent.get('rateUpload', 0) / 1024:.1f}",
        )
    ctx.obj["console"].print(table)


@cli.command("add")
@click.argument("source")
@click.option(
    "--metainfo",
    is_flag=True,
    help="SOURCE is a local .torrent file to upload instead of a path/URL the daemon reads",
)
@click.option("--download-dir", default=None, help="Download directory on the daemon host")
@click.option("--paused/--started", default=None, help="Add in paused state")
@click.pass_context
def add_torrent(
    ctx: click.Context,
    source: str,
    metainfo: bool,
    download_dir: str | None,
    paused: bool | None,
) -> None:
    """Add a torrent from a magnet link, URL or file."""
    if metainfo:
        try:
            torrent_source = TorrentSource.from_file(source)
        except OSError as e:
            raise click.BadParameter(str(e), param_hint="SOURCE") from e
    else:
        torrent_source = TorrentSource.filename(source)
    data = _run(
        ctx,
        "torrent_add",
        torrent_source,
        download_dir=download_dir,
        paused=UNSET if paused is None else paused,
    )
    if "torrent-duplicate" in data:
        torrent = data["torrent-duplicate"]
        print_warning(f"Already present: {torrent.get('name')} (id {torrent.get('id')})", ctx.obj["console"])
    else:
        torrent = data.get("torrent-added", {})
        print_success(f"Added: {torrent.get('name')} (id {torrent.get('id')})", ctx.obj["console"])


def _ids_command(name: str, method: str, verb: str) -> click.Command:
    @click.argument("ids", nargs=-1)
    @click.pass_context
    def command(ctx: click.Context, ids: tuple[str, ...]) -> None:
        _run(ctx, method, ids=_parse_ids(ids))
        print_success(f"{verb} {', '.join(ids) if ids else 'all torrents'}", ctx.obj["console"])

    command.__doc__ = f"{verb.capitalize()} torrents (all, or the given IDS)."
    return cli.command(name)(command)


_ids_command("start", "torrent_start", "started")
_ids_command("stop", "torrent_stop", "stopped")
_ids_command("verify", "torrent_verify", "verifying")
_ids_command("reannounce", "torrent_reannounce", "reannounced")


@cli.command("remove")
@click.argument("ids", nargs=-1, required=True)
@click.option("--delete-data", is_flag=True, help="Also delete downloaded data")
@click.pass_context
def remove_torrents(ctx: click.Context, ids: tuple[str, ...], delete_data: bool) -> None:
    """Remove the given torrents."""
    _run(ctx, "torrent_remove", ids=_parse_ids(ids), delete_local_data=delete_data)
    print_success(f"removed {', '.join(ids)}", ctx.obj["console"])


@cli.command("stats")
@click.pass_context
def session_stats(ctx: click.Context) -> None:
    """Show transfer statistics."""
    data = _run(ctx, "session_stats")
    flat = {k: v for k, v in data.items() if not isinstance(v, dict)}
    print_mapping("Session statistics", flat, ctx.obj["console"])


@cli.command("session")
@click.option("--field", "fields", multiple=True, help="Only fetch this setting (repeatable)")
@click.pass_context
def session_get(ctx: click.Context, fields: tuple[str, ...]) -> None:
    """Show daemon settings."""
    data = _run(ctx, "session_get", fields=list(fields) if fields else None)
    print_mapping("Session", data, ctx.obj["console"])


@cli.command("free-space")
@click.argument("path")
@click.pass_context
def free_space(ctx: click.Context, path: str) -> None:
    """Show free space in PATH on the daemon host."""
    data = _run(ctx, "free_space", path)
    ctx.obj["console"].print(f"{data.get('path', path)}: {data.get('size-bytes')} bytes free")


@cli.command("port-test")
@click.pass_context
def port_test(ctx: click.Context) -> None:
    """Check whether the daemon's peer port is reachable."""
    data = _run(ctx, "port_test")
    state = "open" if data.get("port-is-open") else "closed"
    ctx.obj["console"].print(f"Peer port is {state}")


@cli.command("call")
@click.argument("method")
@click.argument("arguments", required=False)
@click.option("--tag", type=int, default=None, help="Correlation tag")
@click.pass_context
def raw_call(ctx: click.Context, method: str, arguments: str | None, tag: int | None) -> None:
    """Send METHOD with a raw JSON ARGUMENTS object and print the reply."""
    try:
        parsed = json.loads(arguments) if arguments else None
    except ValueError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="ARGUMENTS") from e
    if parsed is not None and not isinstance(parsed, dict):
        raise click.BadParameter("must be a JSON object", param_hint="ARGUMENTS")
    client: RpcClient = ctx.obj["client"]
    try:
        reply = client.call(method, parsed, tag)
    except BTRPCError as e:
        raise click.ClickException(str(e)) from e
    data = _check(reply)
    click.echo(json.dumps(data, indent=2, sort_keys=True))


def main() -> None:
    """Console script entry point."""
    cli(prog_name="btrpc")
