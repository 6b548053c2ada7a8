"""Tests for reducing mappings into a resolved activation state."""
from __future__ import annotations

import pytest

from ..models import HostsMapping, PortForward
from ..parser import parse_profile
from ..resolver import resolve


def test_last_write_wins() -> None:
    mappings = [HostsMapping("h.local", "1.1.1.1"), HostsMapping("h.local", "2.2.2.2")]
    assert resolve([], mappings).hosts_table["h.local"] == "2.2.2.2"


def test_explicit_address_is_honored() -> None:
    state = resolve([], [HostsMapping("db.local", "10.0.0.5")])
    assert state.hosts_table == {"db.local": "10.0.0.5"}


def test_empty_address_resolves_to_loopback() -> None:
    state = resolve([], [HostsMapping("app.local", "")])
    assert state.hosts_table == {"app.local": "127.0.0.1"}


def test_insertion_order_is_first_seen_order() -> None:
    defaults = [HostsMapping("localhost", "127.0.0.1")]
    mappings = [
        HostsMapping("b.local", "10.0.0.1"),
        HostsMapping("a.local", "10.0.0.2"),
        HostsMapping("localhost", "::1"),
    ]
    state = resolve(defaults, mappings)
    assert list(state.hosts_table.items()) == [
        ("localhost", "::1"),
        ("b.local", "10.0.0.1"),
        ("a.local", "10.0.0.2"),
    ]


def test_port_forward_implies_loopback_entry() -> None:
    forward = PortForward("api.local", 8080, 3000)
    state = resolve([], [forward])
    assert state.hosts_table == {"api.local": "127.0.0.1"}
    assert state.port_forwards == (forward,)


def test_port_forward_keeps_explicit_address() -> None:
    state = resolve([], [HostsMapping("api.local", "10.0.0.5"), PortForward("api.local", 80)])
    assert state.hosts_table == {"api.local": "10.0.0.5"}


def test_later_hosts_mapping_overrides_port_forward_entry() -> None:
    state = resolve([], [PortForward("api.local", 80), HostsMapping("api.local", "10.0.0.5")])
    assert state.hosts_table == {"api.local": "10.0.0.5"}
    assert len(state.port_forwards) == 1


def test_port_forwards_are_not_deduplicated() -> None:
    first = PortForward("api.local", 80, 3000)
    second = PortForward("api.local", 80, 4000)
    state = resolve([], [first, second, first])
    assert state.port_forwards == (first, second, first)


def test_resolve_is_pure() -> None:
    defaults = [HostsMapping("localhost", "127.0.0.1")]
    mappings = [HostsMapping("app.local", ""), PortForward("api.local", 8080, 3000)]
    assert resolve(defaults, mappings) == resolve(defaults, mappings)


def test_unknown_mapping_type_is_rejected() -> None:
    with pytest.raises(TypeError):
        resolve([], [("app.local", "127.0.0.1")])


def test_profile_text_end_to_end() -> None:
    text = "app.local 127.0.0.1\napi.local:8080 :3000\n# comment\n"
    state = resolve([], parse_profile(text.splitlines()))
    assert state.hosts_table == {"app.local": "127.0.0.1", "api.local": "127.0.0.1"}
    assert state.port_forwards == (PortForward("api.local", 8080, 3000),)
