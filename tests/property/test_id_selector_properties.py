"""Property-based tests for id selector validation.

Uses Hypothesis to generate mixed id lists and check that a list is either
passed through untouched or dropped as a whole.
"""

from __future__ import annotations

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from btrpc.rpc.codec import RpcMessage, encode_message
from btrpc.rpc.methods import get_method
from btrpc.rpc.validators import OMIT, UNSET, Include, ids

pytestmark = pytest.mark.property

local_ids = st.integers(min_value=0, max_value=2**31)
hash_ids = st.text(alphabet="0123456789abcdefABCDEF", min_size=40, max_size=40)
valid_ids = st.one_of(local_ids, hash_ids)
invalid_ids = st.one_of(
    st.integers(max_value=-1),
    st.text(alphabet="0123456789abcdef", max_size=39),
    st.text(min_size=40, max_size=40).filter(lambda s: any(c not in "0123456789abcdefABCDEF" for c in s)),
    st.floats(allow_nan=False),
    st.booleans(),
    st.none(),
)


class TestIdSelectorProperties:
    """Whole-list inclusion or omission."""

    @given(st.lists(valid_ids))
    def test_valid_lists_pass_unchanged(self, selector):
        assert ids(selector) == Include(selector)

    @given(st.lists(valid_ids), invalid_ids, st.lists(valid_ids))
    def test_one_invalid_element_drops_the_list(self, head, bad, tail):
        assert ids([*head, bad, *tail]) is OMIT

    @given(local_ids)
    def test_local_ids_are_wrapped(self, value):
        assert ids(value) == Include([value])

    @given(hash_ids)
    def test_hash_ids_are_not_wrapped(self, value):
        assert ids(value) == Include(value)


class TestArgumentProperties:
    """Serialized arguments hold exactly the included keys."""

    @given(
        st.one_of(st.just(UNSET), st.booleans()),
        st.one_of(st.none(), st.integers(min_value=0, max_value=10**6)),
        st.one_of(st.none(), st.text(max_size=20)),
    )
    def test_serialized_keys_match_decisions(self, enabled, port, directory):
        arguments, _ = get_method("session_set").build_arguments(
            dht_enabled=enabled, peer_port=port, download_dir=directory
        )
        expected = {}
        if directory is not None:
            expected["download-dir"] = directory
        if enabled is not UNSET:
            expected["dht-enabled"] = enabled
        if port is not None:
            expected["peer-port"] = port
        envelope = json.loads(encode_message(RpcMessage("session-set", arguments)))
        assert envelope.get("arguments", {}) == expected
        if not expected:
            assert envelope == {"method": "session-set"}
