"""
Control Plane — FastAPI router.
Mount with:
    from control_plane.router import mount_control_plane
    mount_control_plane(app, surface)

Endpoints:
    GET|POST /watch               current root / adjust root (?root=)
    GET|POST /ignore              ignore paths (?paths=)
    GET|POST /reinstate           reinstate paths (?paths=)
    POST     /execute             trigger a run, fire-and-forget
    POST     /pause               toggle pause, returns true|false
    GET      /status              executor status
    GET      /longpoll            next status change (?timeout=ms)
    GET      /results             latest run result (JSON)
    GET      /config-status       which notification channels are usable
    GET      /sound[/success|/failure]
    POST     /notify              push notification (form: title, body)
    GET      /health
"""
import asyncio
import logging
import os
from typing import Optional

from fastapi import APIRouter, FastAPI, Form, Query, Request
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response

from .commands import RootNotFound
from .longpoll import parse_timeout
from .surface import ControlSurface

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

DISCONNECT_POLL_SECONDS = 0.5


def _query_value(key: str, value: Optional[str]):
    """The value of a required query parameter, or the 400 response explaining what is wrong."""
    if value is None:
        return None, PlainTextResponse(
            f"No '{key}' query string parameter included!", status_code=400
        )
    if value == "":
        return None, PlainTextResponse("You must provide a non-blank path.", status_code=400)
    return value, None


async def _wait_for_disconnect(request: Request) -> None:
    while not await request.is_disconnected():
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)


def build_router(surface: ControlSurface) -> APIRouter:
    router = APIRouter(tags=["control"])

    # ─── Watcher commands ─────────────────────────────────────────────────────

    @router.api_route("/watch", methods=["GET", "POST"], response_class=PlainTextResponse)
    async def watch(request: Request, root: Optional[str] = Query(None)):
        if request.method == "GET":
            return PlainTextResponse(surface.watched_root())

        root, error = _query_value("root", root)
        if error is not None:
            return error
        try:
            await surface.adjust_root(root)
        except RootNotFound as e:
            return PlainTextResponse(str(e), status_code=404)
        return Response()

    @router.api_route("/ignore", methods=["GET", "POST"])
    async def ignore(paths: Optional[str] = Query(None)):
        paths, error = _query_value("paths", paths)
        if error is not None:
            return error
        await surface.ignore(paths)
        return Response()

    @router.api_route("/reinstate", methods=["GET", "POST"])
    async def reinstate(paths: Optional[str] = Query(None)):
        paths, error = _query_value("paths", paths)
        if error is not None:
            return error
        await surface.reinstate(paths)
        return Response()

    @router.post("/execute")
    async def execute():
        surface.execute()
        return Response()

    @router.post("/pause", response_class=PlainTextResponse)
    async def toggle_pause():
        paused = await surface.toggle_pause()
        return PlainTextResponse("true" if paused else "false")

    # ─── Status & results ─────────────────────────────────────────────────────

    @router.get("/status", response_class=PlainTextResponse)
    async def status():
        return PlainTextResponse(surface.status())

    @router.get("/longpoll", response_class=PlainTextResponse,
                summary="Block until the executor status changes or the timeout elapses")
    async def long_poll(request: Request, timeout: Optional[str] = Query(None)):
        timeout_ms = parse_timeout(timeout)
        poll = asyncio.ensure_future(surface.wait_for_status(timeout_ms))
        gone = asyncio.ensure_future(_wait_for_disconnect(request))
        try:
            await asyncio.wait({poll, gone}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            gone.cancel()
            if not poll.done():
                poll.cancel()
                # the wait withdraws its offer before anyone is answered
                await asyncio.wait({poll})
        if poll.cancelled():
            logger.debug("[longpoll] client went away after %sms timeout request", timeout_ms)
            return PlainTextResponse("")
        return PlainTextResponse(poll.result())

    @router.get("/results")
    async def results():
        snapshot = surface.results()
        content = None if snapshot is None else snapshot.model_dump(mode="json", by_alias=True)
        return JSONResponse(content=content, headers=NO_CACHE_HEADERS)

    # ─── Notifications ────────────────────────────────────────────────────────

    @router.get("/config-status")
    async def get_config_status():
        return JSONResponse(surface.config_status().model_dump())

    def _sound(kind: str, label: str):
        path = surface.sound_path(kind)
        if not path:
            return PlainTextResponse(f"No {label}sound file configured", status_code=404)
        if not os.path.isfile(path):
            return PlainTextResponse(f"{label}sound file not found".capitalize(), status_code=404)
        return FileResponse(path)

    @router.get("/sound")
    async def sound():
        return _sound("generic", "")

    @router.get("/sound/success")
    async def success_sound():
        return _sound("success", "success ")

    @router.get("/sound/failure")
    async def failure_sound():
        return _sound("failure", "failure ")

    @router.post("/notify")
    async def notify(title: Optional[str] = Form(None), body: Optional[str] = Form(None)):
        if not title or not body:
            return PlainTextResponse("Missing title or body", status_code=400)
        await surface.send_push(title, body)
        return Response()

    @router.get("/health")
    async def health():
        return {"status": "ok", "version": VERSION}

    return router


def mount_control_plane(app: FastAPI, surface: ControlSurface) -> None:
    """Mount the control routes onto an existing FastAPI app."""
    app.include_router(build_router(surface))
    logger.info("[bridge] Control plane mounted")
