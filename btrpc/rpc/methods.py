"""Method descriptor registry.

Each daemon method is described once, as data: its wire name, the required
parameters (bound positionally) and the optional parameters (keyword only,
each with its default). One generic builder turns a descriptor and the
caller's input into the wire arguments object.

Python parameter names are snake_case; the wire keys keep the daemon's own
spelling, mixed case included (``bandwidthPriority``, ``files-wanted``).
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from functools import cached_property
from typing import Any

from btrpc.exceptions import ArgumentValidationError, UnknownMethodError
from btrpc.rpc import validators as v
from btrpc.rpc.validators import UNSET, Include, Validator


@dataclass(frozen=True)
class Param:
    """One method parameter.

    Args:
        name: Python keyword name
        key: Wire key in the arguments object
        validator: Decides inclusion and coerces the value
        default: Default for optional parameters

    """

    name: str
    key: str
    validator: Validator
    default: Any = None


def opt(name: str, validator: Validator, key: str | None = None, default: Any = None) -> Param:
    """Optional parameter; the wire key defaults to the kebab-case name."""
    return Param(name, key or name.replace("_", "-"), validator, default)


def flag(name: str, key: str | None = None) -> Param:
    """Optional boolean parameter, omitted unless set explicitly."""
    return opt(name, v.boolean, key, UNSET)


def req(name: str, validator: Validator, key: str | None = None) -> Param:
    """Required parameter."""
    return Param(name, key or name.replace("_", "-"), validator)


TAG = opt("tag", v.opaque)
IDS = opt("ids", v.ids)


@dataclass(frozen=True)
class MethodDescriptor:
    """Declarative description of one RPC method."""

    name: str
    method: str
    required: tuple[Param, ...] = ()
    optional: tuple[Param, ...] = ()
    doc: str = ""

    @cached_property
    def signature(self) -> inspect.Signature:
        """Call signature: required params first, then keyword-only options and ``tag``."""
        parameters = [
            inspect.Parameter(p.name, inspect.Parameter.POSITIONAL_OR_KEYWORD)
            for p in self.required
        ]
        parameters.extend(
            inspect.Parameter(p.name, inspect.Parameter.KEYWORD_ONLY, default=p.default)
            for p in (*self.optional, TAG)
        )
        return inspect.Signature(parameters)

    def build_arguments(self, *args: Any, **kwargs: Any) -> tuple[dict[str, Any], Any]:
        """Validate caller input into a wire arguments object.

        Required parameters are checked first and in order; the first one
        whose validator does not include it aborts the call. Optional
        parameters are included or silently omitted.

        Returns:
            ``(arguments, tag)``, arguments ordered by declaration

        Raises:
            TypeError: Missing, surplus or unknown parameters
            ArgumentValidationError: A required parameter was rejected

        """
        bound = self.signature.bind(*args, **kwargs)
        bound.apply_defaults()
        values = bound.arguments

        arguments: dict[str, Any] = {}
        for param in self.required:
            decision = param.validator(values[param.name])
            if not isinstance(decision, Include):
                msg = f"{self.method}: invalid value for {param.name}: {values[param.name]!r}"
                raise ArgumentValidationError(msg, {"parameter": param.name})
            arguments[decision.key or param.key] = decision.value
        for param in self.optional:
            decision = param.validator(values[param.name])
            if isinstance(decision, Include):
                arguments[decision.key or param.key] = decision.value
        tag = TAG.validator(values[TAG.name])
        return arguments, tag.value if isinstance(tag, Include) else None


def simple_ids_methods(*methods: str, doc: str = "") -> dict[str, MethodDescriptor]:
    """Descriptors for methods whose only parameter is an optional ``ids``."""
    return {
        method.replace("-", "_"): MethodDescriptor(
            method.replace("-", "_"),
            method,
            optional=(IDS,),
            doc=doc or f"Invoke ``{method}`` on the selected torrents.",
        )
        for method in methods
    }


# Fields shared by torrent-add and torrent-set.
_FILE_OPTIONS = (
    opt("bandwidth_priority", v.number, "bandwidthPriority"),
    opt("files_wanted", v.array),
    opt("files_unwanted", v.array),
    opt("priority_high", v.array),
    opt("priority_low", v.array),
    opt("priority_normal", v.array),
)

_DESCRIPTORS = (
    MethodDescriptor(
        "torrent_set",
        "torrent-set",
        optional=(
            IDS,
            *_FILE_OPTIONS,
            opt("download_limit", v.number, "downloadLimit"),
            flag("download_limited", "downloadLimited"),
            flag("honors_session_limits", "honorsSessionLimits"),
            opt("labels", v.string_list),
            opt("location", v.string),
            opt("peer_limit", v.number),
            opt("queue_position", v.number, "queuePosition"),
            opt("seed_idle_limit", v.number, "seedIdleLimit"),
            opt("seed_idle_mode", v.number, "seedIdleMode"),
            opt("seed_ratio_limit", v.number, "seedRatioLimit"),
            opt("seed_ratio_mode", v.number, "seedRatioMode"),
            opt("tracker_add", v.array, "trackerAdd"),
            opt("tracker_remove", v.array, "trackerRemove"),
            opt("tracker_replace", v.array, "trackerReplace"),
            opt("upload_limit", v.number, "uploadLimit"),
            flag("upload_limited", "uploadLimited"),
        ),
        doc="Change per-torrent settings.",
    ),
    MethodDescriptor(
        "torrent_get",
        "torrent-get",
        required=(req("fields", v.string_list),),
        optional=(IDS, opt("format", v.string)),
        doc="Fetch the given fields for the selected torrents.",
    ),
    MethodDescriptor(
        "torrent_add",
        "torrent-add",
        required=(req("source", v.torrent_source),),
        optional=(
            opt("cookies", v.string),
            opt("download_dir", v.string),
            opt("labels", v.string_list),
            flag("paused"),
            opt("peer_limit", v.number),
            *_FILE_OPTIONS,
        ),
        doc="Add a torrent from a filename, URL, magnet link or metainfo.",
    ),
    MethodDescriptor(
        "torrent_remove",
        "torrent-remove",
        optional=(IDS, flag("delete_local_data")),
        doc="Remove torrents, optionally deleting their data.",
    ),
    MethodDescriptor(
        "torrent_set_location",
        "torrent-set-location",
        required=(req("location", v.string),),
        optional=(IDS, flag("move")),
        doc="Point torrents at a new download location, optionally moving data.",
    ),
    MethodDescriptor(
        "torrent_rename_path",
        "torrent-rename-path",
        required=(req("ids", v.ids), req("path", v.string), req("name", v.string)),
        doc="Rename a file or directory inside a torrent.",
    ),
    MethodDescriptor(
        "session_set",
        "session-set",
        optional=(
            opt("alt_speed_down", v.number),
            flag("alt_speed_enabled"),
            opt("alt_speed_time_begin", v.number),
            flag("alt_speed_time_enabled"),
            opt("alt_speed_time_end", v.number),
            opt("alt_speed_time_day", v.number),
            opt("alt_speed_up", v.number),
            opt("blocklist_url", v.string),
            flag("blocklist_enabled"),
            opt("cache_size_mb", v.number),
            opt("download_dir", v.string),
            opt("download_queue_size", v.number),
            flag("download_queue_enabled"),
            flag("dht_enabled"),
            opt("encryption", v.string),
            opt("idle_seeding_limit", v.number),
            flag("idle_seeding_limit_enabled"),
            opt("incomplete_dir", v.string),
            flag("incomplete_dir_enabled"),
            flag("lpd_enabled"),
            opt("peer_limit_global", v.number),
            opt("peer_limit_per_torrent", v.number),
            flag("pex_enabled"),
            opt("peer_port", v.number),
            flag("peer_port_random_on_start"),
            flag("port_forwarding_enabled"),
            flag("queue_stalled_enabled"),
            opt("queue_stalled_minutes", v.number),
            flag("rename_partial_files"),
            opt("script_torrent_done_filename", v.string),
            flag("script_torrent_done_enabled"),
            opt("seed_ratio_limit", v.number, "seedRatioLimit"),
            flag("seed_ratio_limited", "seedRatioLimited"),
            opt("seed_queue_size", v.number),
            flag("seed_queue_enabled"),
            opt("speed_limit_down", v.number),
            flag("speed_limit_down_enabled"),
            opt("speed_limit_up", v.number),
            flag("speed_limit_up_enabled"),
            flag("start_added_torrents"),
            flag("trash_original_torrent_files"),
            opt("units", v.opaque),
            flag("utp_enabled"),
        ),
        doc="Change daemon-wide settings.",
    ),
    MethodDescriptor(
        "session_get",
        "session-get",
        optional=(opt("fields", v.string_list),),
        doc="Fetch daemon-wide settings.",
    ),
    MethodDescriptor("session_stats", "session-stats", doc="Fetch transfer statistics."),
    MethodDescriptor("blocklist_update", "blocklist-update", doc="Reload the peer blocklist."),
    MethodDescriptor(
        "port_test",
        "port-test",
        optional=(opt("ip_protocol", v.string, "ipProtocol"),),
        doc="Ask the daemon whether its peer port is reachable.",
    ),
    MethodDescriptor("session_close", "session-close", doc="Shut the daemon down."),
    MethodDescriptor(
        "free_space",
        "free-space",
        required=(req("path", v.string),),
        doc="Report free space in a directory on the daemon host.",
    ),
)

METHODS: dict[str, MethodDescriptor] = {
    **simple_ids_methods(
        "torrent-start",
        "torrent-start-now",
        "torrent-stop",
        "torrent-verify",
        "torrent-reannounce",
    ),
    **simple_ids_methods(
        "queue-move-top",
        "queue-move-up",
        "queue-move-down",
        "queue-move-bottom",
    ),
    **{descriptor.name: descriptor for descriptor in _DESCRIPTORS},
}


def get_method(name: str) -> MethodDescriptor:
    """Look up a descriptor by Python name (``torrent_get``) or wire name (``torrent-get``)."""
    descriptor = METHODS.get(name.replace("-", "_"))
    if descriptor is None:
        msg = f"Unknown RPC method: {name}"
        raise UnknownMethodError(msg)
    return descriptor
