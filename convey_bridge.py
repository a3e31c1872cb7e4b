"""
Convey Bridge — control and status plane for a background file-watching test runner.

Usage:
    python convey_bridge.py                          # serve on port 8080
    python convey_bridge.py --root ./src --port 9090
    python convey_bridge.py --config notify.json     # sound / ntfy settings

Environment variables:
    CONVEY_NOTIFY_CONFIG   Path to the notification config JSON
    CONVEY_BRIDGE_HOST     Bind address (default 0.0.0.0)
    CONVEY_BRIDGE_PORT     HTTP port (default 8080)
    CONVEY_WATCH_ROOT      Initial watched root (default cwd)
"""
import argparse
import asyncio
import contextlib
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from control_plane import config as settings
from control_plane.commands import CommandHandler
from control_plane.config import load_notification_config
from control_plane.executor import StatusBoard
from control_plane.models import WatchCommand
from control_plane.router import VERSION, mount_control_plane
from control_plane.surface import ControlSurface

logger = logging.getLogger("convey_bridge")


def log_command(command: WatchCommand) -> None:
    logger.info("[watcher] %s %s", command.instruction.value, command.details)


def create_app(surface: ControlSurface, command_handler: Optional[CommandHandler] = None) -> FastAPI:
    """
    Build the app around `surface`. While the app runs, commands sent through
    the bridge are fed to `command_handler`, standing in for the watcher.
    """
    handler = command_handler or log_command

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        consumer = asyncio.create_task(surface.bridge.consume(handler))
        if isinstance(surface.executor, StatusBoard):
            surface.executor.attach(surface.longpoll, asyncio.get_running_loop())
        try:
            yield
        finally:
            if isinstance(surface.executor, StatusBoard):
                surface.executor.detach()
            consumer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await consumer
            await surface.bridge.close()

    app = FastAPI(title="Convey Bridge", version=VERSION, lifespan=lifespan)
    app.state.surface = surface
    mount_control_plane(app, surface)
    return app


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Convey Bridge")
    parser.add_argument("--host", default=settings.HOST, help="Bind address")
    parser.add_argument("--port", type=int, default=settings.PORT, help="HTTP port")
    parser.add_argument("--root", default=settings.WATCH_ROOT, help="Initial watched root")
    parser.add_argument("--config", default=str(settings.CONFIG_PATH), help="Notification config JSON")
    parser.add_argument("--log-level", default="info", help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_notification_config(args.config)
    surface = ControlSurface(root=args.root, executor=StatusBoard(), config=config)
    app = create_app(surface)

    logger.info("[bridge] Watching %s, serving at http://%s:%s", args.root, args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
