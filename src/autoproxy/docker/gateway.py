from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import Any, Protocol

from ..configmanager import ConfigManager
from ..errors import AutoproxyError, ContainerNotFoundError, EventStreamError, SignalError
from ..models import ContainerRecord, ContainerSummary, LifecycleEvent, RunState

logger = ConfigManager.get_logger(__name__)

SUBSCRIBED_ACTIONS = ("start", "die")


class RuntimeGateway(Protocol):
    def list_labeled_containers(self) -> list[ContainerSummary]: ...

    def inspect(self, container_id: str) -> ContainerRecord: ...

    def signal(self, container_id: str, signal_name: str) -> None: ...

    def subscribe_events(
        self, cancel: threading.Event | None = None, *, since: int | None = None
    ) -> Iterator[LifecycleEvent]: ...

    def close(self) -> None: ...


def event_filters(role_label: str) -> dict[str, Any]:
    return {
        "type": "container",
        "event": list(SUBSCRIBED_ACTIONS),
        "label": [role_label],
    }


class DockerGateway:
    """Runtime gateway backed by the Python Docker SDK.

    Uses `docker.from_env()`, so DOCKER_HOST and friends are respected; if not
    set, connects to the local Docker socket.
    """

    def __init__(
        self,
        *,
        role_label: str,
        hostname_label: str,
        api_version: str | None = None,
        client: Any = None,
    ) -> None:
        self.role_label = role_label
        self.hostname_label = hostname_label
        self._stream: Any = None
        if client is not None:
            self.client = client
            return
        try:
            import docker  # type: ignore[import-not-found]
        except Exception as e:
            raise RuntimeError("Python docker module not installed; install 'docker' package") from e

        try:
            self.client = docker.from_env(version=api_version or ConfigManager.docker_api_version())
        except Exception as e:
            raise RuntimeError("Failed to initialize Docker client from environment") from e

    def list_labeled_containers(self) -> list[ContainerSummary]:
        try:
            containers = self.client.containers.list(all=True, filters={"label": [self.role_label]})
        except Exception as e:
            raise AutoproxyError(f"Failed to list docker containers: {e}") from e
        return [ContainerSummary(id=str(c.id), state=RunState.from_docker(getattr(c, "status", None))) for c in containers]

    def inspect(self, container_id: str) -> ContainerRecord:
        from docker.errors import NotFound  # type: ignore[import-not-found]

        try:
            container = self.client.containers.get(container_id)
        except NotFound as e:
            raise ContainerNotFoundError(f"No such container: {container_id}") from e
        except Exception as e:
            raise AutoproxyError(f"Unable to inspect container {container_id}: {e}") from e
        attrs = getattr(container, "attrs", None) or {}
        return ContainerRecord.from_inspect(
            attrs,
            role_label=self.role_label,
            hostname_label=self.hostname_label,
        )

    def signal(self, container_id: str, signal_name: str) -> None:
        try:
            self.client.api.kill(container_id, signal=signal_name)
        except Exception as e:
            raise SignalError(str(e)) from e

    def subscribe_events(
        self, cancel: threading.Event | None = None, *, since: int | None = None
    ) -> Iterator[LifecycleEvent]:
        """Yield container lifecycle events until cancelled.

        With `since` (unix seconds) the daemon first replays events from that
        point. Any stream failure that is not caused by cancellation raises
        EventStreamError.
        """
        if cancel is not None and cancel.is_set():
            return
        kwargs: dict[str, Any] = {"decode": True, "filters": event_filters(self.role_label)}
        if since is not None:
            kwargs["since"] = since
        try:
            self._stream = self.client.events(**kwargs)
        except Exception as e:
            raise EventStreamError(f"Unable to subscribe to docker events: {e}") from e

        try:
            for raw in self._stream:
                if cancel is not None and cancel.is_set():
                    return
                if not isinstance(raw, dict):
                    continue
                event = LifecycleEvent.from_json(raw)
                if not event.id:
                    logger.debug("Ignoring event without container id: %s", raw)
                    continue
                yield event
        except Exception as e:
            if cancel is not None and cancel.is_set():
                return
            raise EventStreamError(f"Docker event stream failed: {e}") from e
        if cancel is None or not cancel.is_set():
            raise EventStreamError("Docker event stream ended unexpectedly")

    def close(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            try:
                stream.close()
            except Exception as e:
                logger.debug("Closing docker event stream failed (%s)", str(e))
