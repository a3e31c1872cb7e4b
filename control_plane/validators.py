"""
Control Plane — Config validation.
Decides whether the sound and push channels are usable. Every check reads the
config and the filesystem afresh; nothing is cached.
"""
import os
import re

import httpx

from .config import NotificationConfig
from .models import ConfigStatus

SOUND_EXTENSIONS = (".mp3", ".wav", ".ogg", ".m4a", ".webm")
RE_TOPIC = re.compile(r"^[A-Za-z0-9_-]+$")


def is_valid_sound_file(path: str) -> bool:
    if not path:
        return False
    if not os.path.isfile(path):
        return False
    return os.path.splitext(path)[1].lower() in SOUND_EXTENSIONS


def is_valid_push_server(server: str) -> bool:
    if not server:
        return False
    try:
        url = httpx.URL(server)
    except httpx.InvalidURL:
        return False
    return url.scheme in ("http", "https") and bool(url.host)


def is_valid_push_topic(topic: str) -> bool:
    return bool(topic) and RE_TOPIC.fullmatch(topic) is not None


def success_sound_enabled(config: NotificationConfig) -> bool:
    return is_valid_sound_file(config.sound.success_path())


def failure_sound_enabled(config: NotificationConfig) -> bool:
    return is_valid_sound_file(config.sound.failure_path())


def sound_enabled(config: NotificationConfig) -> bool:
    return success_sound_enabled(config) or failure_sound_enabled(config)


def push_enabled(config: NotificationConfig) -> bool:
    return is_valid_push_server(config.ntfy.server) and is_valid_push_topic(config.ntfy.topic)


def config_status(config: NotificationConfig) -> ConfigStatus:
    """Summarize which notification channels are usable. Never exposes paths or secrets."""
    return ConfigStatus(
        soundConfigured=sound_enabled(config),
        successSoundConfigured=success_sound_enabled(config),
        failureSoundConfigured=failure_sound_enabled(config),
        pushConfigured=push_enabled(config),
    )
