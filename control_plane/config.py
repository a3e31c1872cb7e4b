"""
Control Plane — Configuration
Environment settings for the bridge plus the notification config file loader.
"""
import logging
import os
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

# ─── Environment ──────────────────────────────────────────────────────────────
CONFIG_PATH = Path(os.environ.get("CONVEY_NOTIFY_CONFIG", "notification_config.json"))
HOST = os.environ.get("CONVEY_BRIDGE_HOST", "0.0.0.0")
PORT = int(os.environ.get("CONVEY_BRIDGE_PORT", 8080))
WATCH_ROOT = os.environ.get("CONVEY_WATCH_ROOT", os.getcwd())

# ─── Notification defaults ────────────────────────────────────────────────────
DEFAULT_NTFY_SERVER = "https://ntfy.sh"
DEFAULT_NTFY_TOPIC = "goconvey-notifications"
DEFAULT_NTFY_TIMEOUT = 30  # seconds


class ConfigError(RuntimeError):
    """The notification config file exists but cannot be used."""


class SoundConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_path: str = ""          # legacy, shared by success and failure
    success_file_path: str = ""
    failure_file_path: str = ""

    def success_path(self) -> str:
        return self.success_file_path or self.file_path

    def failure_path(self) -> str:
        return self.failure_file_path or self.file_path


class NtfyConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    server: str = DEFAULT_NTFY_SERVER
    topic: str = DEFAULT_NTFY_TOPIC
    timeout: int = DEFAULT_NTFY_TIMEOUT
    auth_header: str = ""


class NotificationConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    sound: SoundConfig = SoundConfig()
    ntfy: NtfyConfig = NtfyConfig()


def load_notification_config(path: Union[str, Path]) -> NotificationConfig:
    """
    Load the notification config from a JSON file.

    A missing file is not an error: the defaults are returned. A file that
    exists but cannot be read or parsed raises ConfigError.
    """
    path = Path(path)
    if not path.exists():
        logger.info("[config] Notification config file not found: %s, using defaults", path)
        return NotificationConfig()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read config file: {e}") from e

    try:
        config = NotificationConfig.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigError(f"failed to parse config file: {e}") from e

    sound = config.sound
    if sound.file_path and not sound.success_file_path and not sound.failure_file_path:
        logger.info(
            "[config] Using legacy sound config - applying '%s' to both success and failure",
            sound.file_path,
        )

    logger.info("[config] Loaded notification config from: %s", path)
    return config
