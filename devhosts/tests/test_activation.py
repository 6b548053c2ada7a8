"""Tests for hosts/rule rendering and the ordered activation steps."""
from __future__ import annotations

import logging

import pytest

from ..activation import ActivationEngine, render_hosts, render_rules
from ..errors import SystemCommandError
from ..models import PortForward, ResolvedState
from .conftest import RecordingEffects

STATE = ResolvedState(
    hosts_table={"app.local": "127.0.0.1", "api.local": "127.0.0.1"},
    port_forwards=(PortForward("api.local", 8080, 3000), PortForward("web.local", 443)),
)


def _engine(effects: RecordingEffects, logger: logging.Logger, defaults: str = "") -> ActivationEngine:
    return ActivationEngine(effects, lambda: defaults, logger)


def test_render_hosts_prepends_defaults() -> None:
    content = render_hosts("127.0.0.1 localhost", STATE)
    assert content == "127.0.0.1 localhost\n127.0.0.1 app.local\n127.0.0.1 api.local\n"


def test_render_hosts_without_defaults() -> None:
    assert render_hosts("", ResolvedState({"db.local": "10.0.0.5"})) == "10.0.0.5 db.local\n"
    assert render_hosts("", ResolvedState()) == ""


def test_render_rules() -> None:
    assert render_rules(STATE) == (
        "rdr pass inet proto tcp from any to api.local port 8080 -> 127.0.0.1 port 3000\n"
        "rdr pass inet proto tcp from any to web.local port 443 -> 127.0.0.1 port 443\n"
    )
    assert render_rules(ResolvedState()) == ""


def test_activate_runs_steps_in_order(effects: RecordingEffects, logger: logging.Logger) -> None:
    _engine(effects, logger, "127.0.0.1 localhost\n").activate(STATE)

    assert effects.steps == ["hosts", "flush", "load"]
    assert effects.payload("hosts").startswith("127.0.0.1 localhost\n")
    assert effects.payload("load") == render_rules(STATE)


def test_activate_without_forwards_skips_load(effects: RecordingEffects, logger: logging.Logger) -> None:
    _engine(effects, logger).activate(ResolvedState({"app.local": "127.0.0.1"}))
    assert effects.steps == ["hosts", "flush"]


def test_hosts_failure_leaves_firewall_untouched(logger: logging.Logger) -> None:
    effects = RecordingEffects(fail_at="hosts")
    with pytest.raises(SystemCommandError) as excinfo:
        _engine(effects, logger).activate(STATE)

    assert excinfo.value.step == "hosts"
    assert effects.steps == ["hosts"]


def test_flush_failure_keeps_hosts_and_skips_load(logger: logging.Logger) -> None:
    effects = RecordingEffects(fail_at="flush")
    with pytest.raises(SystemCommandError) as excinfo:
        _engine(effects, logger).activate(STATE)

    assert excinfo.value.step == "flush"
    assert effects.steps == ["hosts", "flush"]


def test_load_failure_is_reported(logger: logging.Logger) -> None:
    effects = RecordingEffects(fail_at="load")
    with pytest.raises(SystemCommandError) as excinfo:
        _engine(effects, logger).activate(STATE)
    assert excinfo.value.step == "load"


def test_os_error_is_wrapped_with_step(logger: logging.Logger) -> None:
    class BrokenEffects(RecordingEffects):
        def flush_rules(self) -> None:
            raise PermissionError("denied")

    effects = BrokenEffects()
    with pytest.raises(SystemCommandError) as excinfo:
        _engine(effects, logger).activate(STATE)
    assert excinfo.value.step == "flush"
    assert effects.steps == ["hosts"]
