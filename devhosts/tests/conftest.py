from __future__ import annotations

import logging
from pathlib import Path

import pytest

from ..config import Config
from ..errors import SystemCommandError
from ..profiles import ProfileStore


class RecordingEffects:
    """Records every system call; optionally fails at a given step."""

    def __init__(self, fail_at: str | None = None) -> None:
        self.fail_at = fail_at
        self.calls: list[tuple[str, str | None]] = []

    def _record(self, step: str, payload: str | None) -> None:
        self.calls.append((step, payload))
        if step == self.fail_at:
            raise SystemCommandError(step, "forced failure", returncode=1)

    def write_hosts(self, content: str) -> None:
        self._record("hosts", content)

    def flush_rules(self) -> None:
        self._record("flush", None)

    def load_rules(self, rules: str) -> None:
        self._record("load", rules)

    @property
    def steps(self) -> list[str]:
        return [step for step, _ in self.calls]

    def payload(self, step: str) -> str | None:
        for name, payload in self.calls:
            if name == step:
                return payload
        return None


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("devhosts.tests")


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    root = tmp_path / "config"
    (root / "profiles").mkdir(parents=True)
    return root


@pytest.fixture
def store(config_dir: Path, logger: logging.Logger) -> ProfileStore:
    return ProfileStore(str(config_dir), logger)


@pytest.fixture
def config(config_dir: Path, tmp_path: Path) -> Config:
    return Config(
        config_dir=str(config_dir),
        hosts_file_path=str(tmp_path / "hosts"),
        use_sudo=False,
    )


@pytest.fixture
def effects() -> RecordingEffects:
    return RecordingEffects()
