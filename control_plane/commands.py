"""
Control Plane — Command bridge.
Turns operator actions into WatchCommands and hands them, one at a time and in
call order, to the watcher over an unbuffered channel.
"""
import asyncio
import logging
import os
from typing import Awaitable, Callable, Set, Union

from .channels import Rendezvous
from .models import WatchCommand, WatchInstruction

logger = logging.getLogger(__name__)

CommandHandler = Callable[[WatchCommand], Union[None, Awaitable[None]]]


class RootNotFound(LookupError):
    def __init__(self, root: str, reason: str):
        super().__init__(f"{root}: {reason}")
        self.root = root
        self.reason = reason


class CommandBridge:
    def __init__(self):
        self._channel: Rendezvous[WatchCommand] = Rendezvous()
        self._background: Set[asyncio.Task] = set()

    # ─── Producer side ────────────────────────────────────────────────────────

    async def dispatch(self, instruction: WatchInstruction, details: str = "") -> WatchCommand:
        """Block until the watcher has taken the command."""
        command = WatchCommand(instruction=instruction, details=details)
        await self._channel.send(command)
        logger.debug("[bridge] delivered %s %r", command.instruction.value, command.details)
        return command

    async def adjust_root(self, root: str) -> None:
        if not os.path.exists(root):
            raise RootNotFound(root, "no such file or directory")
        if not os.path.isdir(root):
            raise RootNotFound(root, "not a directory")
        await self.dispatch(WatchInstruction.ADJUST_ROOT, root)

    async def ignore(self, paths: str) -> None:
        if paths:
            await self.dispatch(WatchInstruction.IGNORE, paths)

    async def reinstate(self, paths: str) -> None:
        if paths:
            await self.dispatch(WatchInstruction.REINSTATE, paths)

    async def execute(self) -> None:
        await self.dispatch(WatchInstruction.EXECUTE)

    async def pause(self) -> None:
        await self.dispatch(WatchInstruction.PAUSE)

    async def resume(self) -> None:
        await self.dispatch(WatchInstruction.RESUME)

    def execute_in_background(self) -> asyncio.Task:
        """
        Queue an Execute command without waiting for the watcher to take it.
        The task's outcome is deliberately discarded; failures are only logged.
        """
        task = asyncio.get_running_loop().create_task(self.execute())
        self._background.add(task)
        task.add_done_callback(self._forget)
        return task

    def _forget(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("[bridge] background execute failed", exc_info=exc)

    async def close(self) -> None:
        """Cancel background dispatches the watcher never picked up."""
        tasks = list(self._background)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # ─── Watcher side ─────────────────────────────────────────────────────────

    async def receive(self) -> WatchCommand:
        return await self._channel.receive()

    async def consume(self, handler: CommandHandler) -> None:
        """Feed every command to `handler` until cancelled. A failing handler does not stop the loop."""
        while True:
            command = await self.receive()
            try:
                result = handler(command)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception("[bridge] handler failed for %s", command.instruction.value)
