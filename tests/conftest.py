from __future__ import annotations

import threading
import uuid
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from autoproxy.engine import ReconciliationEngine
from autoproxy.errors import ContainerNotFoundError, SignalError
from autoproxy.models import ContainerRecord, ContainerSummary, LifecycleEvent, RunState

ROLE_LABEL = "function"
HOSTNAME_LABEL = "hostname"


def make_inspect(
    container_id: str,
    name: str,
    *,
    role: str | None = "web",
    aliases: list[str] | None = None,
    networks: dict[str, list[str]] | None = None,
    hostnames: str | None = None,
    running: bool = True,
) -> dict[str, Any]:
    """Minimal `docker inspect` payload."""
    labels: dict[str, str] = {}
    if role is not None:
        labels[ROLE_LABEL] = role
    if hostnames is not None:
        labels[HOSTNAME_LABEL] = hostnames
    if networks is None:
        networks = {"bridge": list(aliases or [])}
    return {
        "Id": container_id,
        "Name": f"/{name}",
        "Config": {"Labels": labels},
        "State": {"Status": "running" if running else "exited", "Running": running},
        "NetworkSettings": {"Networks": {net: {"Aliases": list(a)} for net, a in networks.items()}},
    }


def container_id(seed: str) -> str:
    return (seed * 64)[:64]


class FakeGateway:
    """In-memory runtime gateway; events are replayed in order, then the stream ends."""

    def __init__(self) -> None:
        self.containers: dict[str, dict[str, Any]] = {}
        self.events: list[LifecycleEvent] = []
        self.signals: list[tuple[str, str]] = []
        self.fail_signal = False
        self.closed = False
        self.subscriptions: list[int | None] = []

    def add(self, payload: dict[str, Any]) -> str:
        self.containers[payload["Id"]] = payload
        return payload["Id"]

    def emit(self, container_id: str, action: str) -> None:
        self.events.append(LifecycleEvent(id=container_id, action=action))

    def list_labeled_containers(self) -> list[ContainerSummary]:
        out: list[ContainerSummary] = []
        for cid, payload in self.containers.items():
            if ROLE_LABEL not in payload["Config"]["Labels"]:
                continue
            out.append(ContainerSummary(id=cid, state=RunState.from_docker(payload["State"]["Status"])))
        return out

    def inspect(self, container_id: str) -> ContainerRecord:
        payload = self.containers.get(container_id)
        if payload is None:
            raise ContainerNotFoundError(f"No such container: {container_id}")
        return ContainerRecord.from_inspect(payload, role_label=ROLE_LABEL, hostname_label=HOSTNAME_LABEL)

    def signal(self, container_id: str, signal_name: str) -> None:
        if self.fail_signal:
            raise SignalError("container is not running")
        self.signals.append((container_id, signal_name))

    def subscribe_events(
        self, cancel: threading.Event | None = None, *, since: int | None = None
    ) -> Iterator[LifecycleEvent]:
        self.subscriptions.append(since)
        for event in list(self.events):
            if cancel is not None and cancel.is_set():
                return
            yield event

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def conf_dir(tmp_path: Path) -> Path:
    d = tmp_path / "conf"
    d.mkdir()
    return d


@pytest.fixture
def ssl_root(tmp_path: Path) -> Path:
    d = tmp_path / "ssl"
    d.mkdir()
    return d


@pytest.fixture
def engine(gateway: FakeGateway, conf_dir: Path, ssl_root: Path) -> ReconciliationEngine:
    return ReconciliationEngine(
        gateway,  # type: ignore[arg-type]
        base_domain="test.local",
        conf_dir=conf_dir,
        ssl_root=ssl_root,
    )


@pytest.fixture
def unique_suffix() -> str:
    return uuid.uuid4().hex[:12]


def docker_available() -> bool:
    try:
        import docker

        client = docker.from_env()
        client.ping()
        return True
    except Exception:
        return False


@pytest.fixture(scope="session")
def require_docker() -> bool:
    if not docker_available():
        pytest.skip("Docker daemon not available")
    return True
