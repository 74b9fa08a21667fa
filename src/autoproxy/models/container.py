from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .. import utils
from .kinds import Role, RunState


@dataclass(frozen=True)
class ContainerRole:
    """Closed role variant: Web, Proxy or Unknown(raw).

    `raw` is None when the role label is missing altogether.
    """

    kind: Role
    raw: str | None = None

    @property
    def label_missing(self) -> bool:
        return self.kind is Role.UNKNOWN and self.raw is None

    @classmethod
    def from_label(cls, value: str | None) -> ContainerRole:
        if value is None:
            return cls(kind=Role.UNKNOWN, raw=None)
        if value == Role.WEB.value:
            return cls(kind=Role.WEB, raw=value)
        if value == Role.PROXY.value:
            return cls(kind=Role.PROXY, raw=value)
        return cls(kind=Role.UNKNOWN, raw=value)


def classify_role(labels: Mapping[str, str] | None, role_label: str) -> ContainerRole:
    labels = labels or {}
    return ContainerRole.from_label(labels.get(role_label))


def _first_level(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


def network_aliases_from_inspect(data: Mapping[str, Any]) -> list[str]:
    """Collect aliases across networks in reported order.

    The first element is the canonical upstream target; order is never changed.
    """
    networks = _first_level(_first_level(data, "NetworkSettings"), "Networks")
    aliases: list[str] = []
    for net in networks.values():
        if not isinstance(net, Mapping):
            continue
        for alias in net.get("Aliases") or []:
            s = str(alias or "").strip()
            if s:
                aliases.append(s)
    return aliases


@dataclass(frozen=True)
class ContainerRecord:
    id: str
    name: str
    role: ContainerRole
    network_aliases: list[str] = field(default_factory=list)
    label_hostnames: list[str] = field(default_factory=list)
    state: RunState = RunState.RUNNING

    @property
    def short_id(self) -> str:
        return utils.short_id(self.id)

    @classmethod
    def from_inspect(
        cls,
        data: Mapping[str, Any],
        *,
        role_label: str,
        hostname_label: str,
    ) -> ContainerRecord:
        config = _first_level(data, "Config")
        labels = config.get("Labels") or {}
        if not isinstance(labels, Mapping):
            labels = {}
        labels = {str(k): str(v) for k, v in labels.items() if k is not None and v is not None}
        state = _first_level(data, "State")
        return cls(
            id=str(data.get("Id") or "").strip(),
            name=utils.container_name(data.get("Name")),
            role=classify_role(labels, role_label),
            network_aliases=network_aliases_from_inspect(data),
            label_hostnames=utils.parse_hostnames(labels.get(hostname_label)),
            state=RunState.from_docker(state.get("Status", state.get("Running"))),
        )


@dataclass(frozen=True)
class ContainerSummary:
    id: str
    state: RunState

    @property
    def running(self) -> bool:
        return self.state is RunState.RUNNING


@dataclass(frozen=True)
class LifecycleEvent:
    id: str
    action: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> LifecycleEvent:
        actor = _first_level(data, "Actor")
        container_id = str(data.get("id") or actor.get("ID") or "").strip()
        action = str(data.get("Action") or data.get("status") or "").strip()
        return cls(id=container_id, action=action)
