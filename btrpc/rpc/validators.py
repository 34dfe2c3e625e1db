"""Argument validators for RPC calls.

A validator takes the raw value a caller passed for one parameter and decides
whether the parameter goes on the wire. It returns either :class:`Include`
(carrying the coerced value, and optionally the wire key to use) or the
:data:`OMIT` singleton. Optional-parameter validators never raise; the only
validator that does is :func:`torrent_source`, because an add request without
a source is meaningless.

Validators compose with :func:`chain`, which stops at the first stage that
decides to omit.
"""

from __future__ import annotations

import base64
import string as _string
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Final, Union

from btrpc.exceptions import ArgumentValidationError
from btrpc.protocol import HASH_STRING_LENGTH, RECENTLY_ACTIVE


class _Unset:
    """Marker for "caller expressed no opinion"."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


class _Omit:
    """Decision: leave the parameter out of the arguments object."""

    _instance: _Omit | None = None

    def __new__(cls) -> _Omit:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OMIT"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()
OMIT: Final = _Omit()


@dataclass(frozen=True)
class Include:
    """Decision: send *value*, under *key* when the validator picks the key."""

    value: Any
    key: str | None = None


Decision = Union[Include, _Omit]
Validator = Callable[[Any], Decision]


def _absent(raw: Any) -> bool:
    return raw is None or raw is UNSET


def chain(*stages: Validator) -> Validator:
    """Compose validators left to right.

    Each stage receives the value included by the previous one. Once a stage
    returns :data:`OMIT` the remaining stages are skipped.
    """

    def run(raw: Any) -> Decision:
        decision: Decision = Include(raw)
        for stage in stages:
            if not isinstance(decision, Include):
                return OMIT
            decision = stage(decision.value)
        return decision

    return run


def string(raw: Any) -> Decision:
    """Include string values."""
    if isinstance(raw, str):
        return Include(raw)
    return OMIT


def number(raw: Any) -> Decision:
    """Include ints and floats (bools are not numbers here)."""
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return Include(raw)
    return OMIT


def boolean(raw: Any) -> Decision:
    """Include an explicit ``True`` or ``False``.

    Presence decides inclusion, not truthiness: ``False`` is sent, while
    :data:`UNSET` and ``None`` are omitted.
    """
    if raw is True or raw is False:
        return Include(raw)
    return OMIT


def array(raw: Any) -> Decision:
    """Include any non-string sequence, converted to a list."""
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes, bytearray)):
        return Include(list(raw))
    return OMIT


def opaque(raw: Any) -> Decision:
    """Include any present value verbatim."""
    if _absent(raw):
        return OMIT
    return Include(raw)


def string_list(raw: Any) -> Decision:
    """Include a sequence made only of strings."""
    if _absent(raw) or raw is False:
        return OMIT
    return chain(array, _all_strings)(raw)


def _all_strings(items: list[Any]) -> Decision:
    if all(isinstance(item, str) for item in items):
        return Include(items)
    return OMIT


def is_hash_string(value: Any) -> bool:
    """Whether *value* is a 40 character hex info-hash."""
    return (
        isinstance(value, str)
        and len(value) == HASH_STRING_LENGTH
        and all(c in _string.hexdigits for c in value)
    )


def is_torrent_id(value: Any) -> bool:
    """Whether *value* is a local torrent id or an info-hash string."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value >= 0
    return is_hash_string(value)


def single_id(raw: Any) -> Decision:
    """Validate one torrent id.

    Integer ids are wrapped in a one element list; hash strings go through
    unchanged.
    """
    if not is_torrent_id(raw):
        return OMIT
    if isinstance(raw, str):
        return Include(raw)
    return Include([raw])


def ids(raw: Any) -> Decision:
    """Validate an id selector.

    ``None`` omits the argument, which the daemon reads as "all torrents".
    The ``recently-active`` sentinel and single ids are accepted as they are.
    A list is included unchanged only when every element is a valid id; one
    bad element omits the whole argument.
    """
    if _absent(raw):
        return OMIT
    if raw == RECENTLY_ACTIVE:
        return Include(raw)
    if isinstance(raw, (list, tuple)):
        if all(isinstance(single_id(item), Include) for item in raw):
            return Include(list(raw))
        return OMIT
    return single_id(raw)


class SourceKind(str, Enum):
    """How a new torrent is handed to the daemon."""

    FILENAME = "filename"
    METAINFO = "metainfo"


@dataclass(frozen=True)
class TorrentSource:
    """Tagged torrent source.

    ``FILENAME`` carries a path or URL the daemon can read (magnet links
    included); ``METAINFO`` carries base64 encoded ``.torrent`` contents.
    """

    kind: SourceKind
    value: str

    @classmethod
    def filename(cls, value: str) -> TorrentSource:
        """Source read by the daemon from a path, URL or magnet link."""
        return cls(SourceKind.FILENAME, value)

    @classmethod
    def metainfo(cls, value: str) -> TorrentSource:
        """Source given as base64 encoded metainfo."""
        return cls(SourceKind.METAINFO, value)

    @classmethod
    def from_file(cls, path: str | Path) -> TorrentSource:
        """Read a local ``.torrent`` file into a metainfo source."""
        data = Path(path).read_bytes()
        return cls.metainfo(base64.b64encode(data).decode("ascii"))


def torrent_source(raw: Any) -> Decision:
    """Validate a :class:`TorrentSource`.

    The wire key is taken from the source's kind.

    Raises:
        ArgumentValidationError: If *raw* is not a tagged source holding a
            string.

    """
    if (
        not isinstance(raw, TorrentSource)
        or not isinstance(raw.kind, SourceKind)
        or not isinstance(raw.value, str)
    ):
        msg = f"Invalid torrent source: {raw!r}"
        raise ArgumentValidationError(msg)
    return Include(raw.value, key=raw.kind.value)
