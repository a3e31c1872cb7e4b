"""
Control Plane — operator commands, status long-poll and run notifications for
a background file-watching test runner.
"""
from .commands import CommandBridge, RootNotFound
from .config import ConfigError, NotificationConfig, load_notification_config
from .executor import StatusBoard
from .longpoll import LongPollCoordinator
from .models import RunResult, WatchCommand, WatchInstruction
from .notifier import Notifier
from .router import build_router, mount_control_plane
from .surface import ControlSurface

__all__ = [
    "CommandBridge",
    "ConfigError",
    "ControlSurface",
    "LongPollCoordinator",
    "NotificationConfig",
    "Notifier",
    "RootNotFound",
    "RunResult",
    "StatusBoard",
    "WatchCommand",
    "WatchInstruction",
    "build_router",
    "load_notification_config",
    "mount_control_plane",
]
