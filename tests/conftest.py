"""Test harness configuration.

The bridge uses a flat layout; make sure the in-repo modules win over any
installed copy.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List

import pytest


def pytest_configure() -> None:
    repo_root = str(Path(__file__).resolve().parents[1])
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


class StubExecutor:
    def __init__(self, status: str = "idle", changed: bool = False) -> None:
        self.current = status
        self.changed = changed
        self.flag_checks = 0

    def status(self) -> str:
        return self.current

    def clear_status_flag(self) -> bool:
        self.flag_checks += 1
        changed, self.changed = self.changed, False
        return changed


@pytest.fixture()
def executor() -> StubExecutor:
    return StubExecutor()


@pytest.fixture()
def sound_file(tmp_path: Path) -> Path:
    path = tmp_path / "ding.mp3"
    path.write_bytes(b"ID3fake-audio")
    return path


@pytest.fixture()
def make_config() -> Callable:
    from control_plane.config import NotificationConfig

    def _make(sound: dict | None = None, ntfy: dict | None = None):
        return NotificationConfig.model_validate({"sound": sound or {}, "ntfy": ntfy or {}})

    return _make


@pytest.fixture()
def recorded_commands() -> List:
    return []


@pytest.fixture()
def make_executor() -> Callable[..., StubExecutor]:
    return StubExecutor
