from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    WEB = "web"
    PROXY = "auto.proxy"
    UNKNOWN = "unknown"


class RunState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"

    @staticmethod
    def from_docker(value: object) -> RunState:
        """Map a docker `State.Status` (or `State.Running` bool) onto RunState."""
        if isinstance(value, bool):
            return RunState.RUNNING if value else RunState.STOPPED
        return RunState.RUNNING if str(value or "").strip().lower() == "running" else RunState.STOPPED
