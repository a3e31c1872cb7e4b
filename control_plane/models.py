"""
Control Plane — Pydantic models.
"""
from enum import Enum
from typing import Any, List, Protocol

from pydantic import BaseModel, ConfigDict, Field


class WatchInstruction(str, Enum):
    ADJUST_ROOT = "adjust_root"
    IGNORE = "ignore"
    REINSTATE = "reinstate"
    EXECUTE = "execute"
    PAUSE = "pause"
    RESUME = "resume"


class WatchCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    instruction: WatchInstruction
    details: str = ""


class RunResult(BaseModel):
    """Latest run output as reported by the watcher. Unknown fields pass through."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    revision: str = Field(default="", alias="Revision")
    packages: List[Any] = Field(default_factory=list, alias="Packages")
    paused: bool = Field(default=False, alias="Paused")


class ConfigStatus(BaseModel):
    soundConfigured: bool
    successSoundConfigured: bool
    failureSoundConfigured: bool
    pushConfigured: bool


class Executor(Protocol):
    def status(self) -> str: ...

    def clear_status_flag(self) -> bool: ...
