from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from control_plane.config import ConfigError, NotificationConfig, load_notification_config


def test_missing_file_returns_defaults(tmp_path: Path, caplog) -> None:
    caplog.set_level(logging.INFO, logger="control_plane.config")

    config = load_notification_config(tmp_path / "absent.json")

    assert config == NotificationConfig()
    assert config.ntfy.server == "https://ntfy.sh"
    assert config.ntfy.topic == "goconvey-notifications"
    assert config.ntfy.timeout == 30
    assert config.ntfy.auth_header == ""
    assert config.sound.file_path == ""
    assert "using defaults" in caplog.text


def test_partial_file_keeps_defaults(tmp_path: Path) -> None:
    path = tmp_path / "notify.json"
    path.write_text(json.dumps({"ntfy": {"topic": "my-builds"}}))

    config = load_notification_config(path)

    assert config.ntfy.topic == "my-builds"
    assert config.ntfy.server == "https://ntfy.sh"
    assert config.ntfy.timeout == 30


def test_full_file(tmp_path: Path) -> None:
    path = tmp_path / "notify.json"
    path.write_text(
        json.dumps(
            {
                "sound": {
                    "file_path": "/tmp/a.mp3",
                    "success_file_path": "/tmp/ok.wav",
                    "failure_file_path": "/tmp/fail.wav",
                },
                "ntfy": {
                    "server": "http://localhost:2586",
                    "topic": "ci",
                    "timeout": 5,
                    "auth_header": "Bearer tk_123",
                },
            }
        )
    )

    config = load_notification_config(str(path))

    assert config.sound.success_path() == "/tmp/ok.wav"
    assert config.sound.failure_path() == "/tmp/fail.wav"
    assert config.ntfy.timeout == 5
    assert config.ntfy.auth_header == "Bearer tk_123"


def test_legacy_sound_path_is_logged(tmp_path: Path, caplog) -> None:
    caplog.set_level(logging.INFO, logger="control_plane.config")
    path = tmp_path / "notify.json"
    path.write_text(json.dumps({"sound": {"file_path": "/tmp/a.mp3"}}))

    config = load_notification_config(path)

    assert config.sound.success_path() == "/tmp/a.mp3"
    assert config.sound.failure_path() == "/tmp/a.mp3"
    assert "legacy sound config" in caplog.text


def test_malformed_json_is_an_error(tmp_path: Path) -> None:
    path = tmp_path / "notify.json"
    path.write_text("{ not json")

    with pytest.raises(ConfigError, match="failed to parse"):
        load_notification_config(path)


def test_wrong_field_type_is_an_error(tmp_path: Path) -> None:
    path = tmp_path / "notify.json"
    path.write_text(json.dumps({"ntfy": {"timeout": "soon"}}))

    with pytest.raises(ConfigError):
        load_notification_config(path)


def test_directory_instead_of_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="failed to read"):
        load_notification_config(tmp_path)


def test_config_is_read_only() -> None:
    config = NotificationConfig()
    with pytest.raises(Exception):
        config.ntfy.topic = "changed"
