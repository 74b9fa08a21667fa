from __future__ import annotations

from autoproxy.models import (
    ContainerRecord,
    ContainerRole,
    LifecycleEvent,
    ProxyReference,
    Role,
    RunState,
    classify_role,
)
from tests.conftest import HOSTNAME_LABEL, ROLE_LABEL, container_id, make_inspect


def test_classify_role_variants() -> None:
    assert classify_role({"function": "web"}, "function") == ContainerRole(Role.WEB, "web")
    assert classify_role({"function": "auto.proxy"}, "function") == ContainerRole(Role.PROXY, "auto.proxy")
    unknown = classify_role({"function": "Web"}, "function")
    assert unknown.kind is Role.UNKNOWN
    assert unknown.raw == "Web"
    assert not unknown.label_missing
    missing = classify_role({"other": "web"}, "function")
    assert missing.label_missing
    assert classify_role(None, "function").label_missing


def test_record_from_inspect() -> None:
    payload = make_inspect(
        container_id("a"),
        "app1",
        networks={"front": ["b", "a"], "back": ["c"]},
        hostnames="x.com,y.com",
    )
    record = ContainerRecord.from_inspect(payload, role_label=ROLE_LABEL, hostname_label=HOSTNAME_LABEL)
    assert record.id == container_id("a")
    assert record.short_id == "aaaaaaaaaaaa"
    assert record.name == "app1"
    assert record.role.kind is Role.WEB
    assert record.network_aliases == ["b", "a", "c"]
    assert record.label_hostnames == ["x.com", "y.com"]
    assert record.state is RunState.RUNNING


def test_record_from_sparse_inspect() -> None:
    record = ContainerRecord.from_inspect(
        {"Id": "abc", "NetworkSettings": {"Networks": {"bridge": {"Aliases": None}}}},
        role_label=ROLE_LABEL,
        hostname_label=HOSTNAME_LABEL,
    )
    assert record.name == ""
    assert record.network_aliases == []
    assert record.label_hostnames == []
    assert record.role.label_missing
    assert record.state is RunState.STOPPED


def test_run_state_from_docker() -> None:
    assert RunState.from_docker("running") is RunState.RUNNING
    assert RunState.from_docker("exited") is RunState.STOPPED
    assert RunState.from_docker(True) is RunState.RUNNING
    assert RunState.from_docker(None) is RunState.STOPPED


def test_lifecycle_event_from_json() -> None:
    event = LifecycleEvent.from_json({"Type": "container", "Action": "die", "Actor": {"ID": "abc"}})
    assert event == LifecycleEvent(id="abc", action="die")
    legacy = LifecycleEvent.from_json({"status": "start", "id": "def"})
    assert legacy == LifecycleEvent(id="def", action="start")


def test_proxy_reference_matches_full_id_only() -> None:
    ref = ProxyReference(container_id("p"))
    assert ref.present
    assert ref.matches(container_id("p"))
    assert not ref.matches(container_id("p")[:12])
    assert not ProxyReference.empty().present
    assert not ProxyReference.empty().matches("")
