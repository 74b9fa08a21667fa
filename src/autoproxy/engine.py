from __future__ import annotations

import threading
import time
from enum import Enum
from pathlib import Path

from . import utils
from .configmanager import ConfigManager
from .docker.gateway import RuntimeGateway
from .errors import AutoproxyError, ContainerNotFoundError, MissingAliasError
from .filemanager import ConfigStore
from .models import ContainerRecord, LifecycleEvent, ProxyReference, Role, RoutingRecord
from .notifier import ProxyNotifier
from .renderer import render_config
from .routes import derive_route

logger = ConfigManager.get_logger(__name__)

START_ACTION = "start"


class EngineState(str, Enum):
    UNCLASSIFIED = "unclassified"
    WEB_ACTIVE = "web-active"
    PROXY_ACTIVE = "proxy-active"
    IGNORED = "ignored"
    REMOVED = "removed"


class ReconciliationEngine:
    """Keeps the managed config directory in line with running web containers.

    Events are handled one at a time, in arrival order. Only the literal
    `start` action takes the start path; every other action is a removal.
    """

    def __init__(
        self,
        gateway: RuntimeGateway,
        *,
        base_domain: str,
        conf_dir: Path,
        ssl_root: Path,
        signal_name: str = "HUP",
    ) -> None:
        self.gateway = gateway
        self.base_domain = base_domain
        self.ssl_root = Path(ssl_root)
        self.store = ConfigStore(conf_dir)
        self.notifier = ProxyNotifier(gateway, signal_name=signal_name)
        self.states: dict[str, EngineState] = {}
        self._cancel = threading.Event()
        self._since: int | None = None

    @property
    def proxy_reference(self) -> ProxyReference:
        return self.notifier.reference

    def state_of(self, container_id: str) -> EngineState:
        return self.states.get(container_id, EngineState.UNCLASSIFIED)

    def routing_for(self, record: ContainerRecord) -> RoutingRecord:
        return derive_route(record, self.base_domain, ssl_root=self.ssl_root)

    def render(self, record: ContainerRecord) -> str:
        return render_config(self.routing_for(record), self.base_domain)

    def startup(self) -> int:
        """Clean the store, classify every running labeled container, notify once.

        Returns the number of web containers configured. ConfigStoreError from
        the clean propagates and is fatal.
        """
        self.store.clean()
        # watch() replays events from this second on
        self._since = int(time.time())
        summaries = self.gateway.list_labeled_containers()
        logger.info("Found %d labeled container(s)", len(summaries))
        web = 0
        for summary in summaries:
            if not summary.running:
                continue
            if self.classify(summary.id, notify=False) is EngineState.WEB_ACTIVE:
                web += 1
        if web:
            self.notifier.notify()
        return web

    def classify(self, container_id: str, *, notify: bool = True) -> EngineState:
        logger.info("Checking container: %s", utils.short_id(container_id))
        try:
            record = self.gateway.inspect(container_id)
        except ContainerNotFoundError:
            logger.error("Container %s vanished before it could be inspected", utils.short_id(container_id))
            return self._transition(container_id, EngineState.IGNORED)
        except AutoproxyError as e:
            logger.error("Unable to inspect container %s: %s", utils.short_id(container_id), e)
            return self._transition(container_id, EngineState.IGNORED)

        role = record.role
        if role.kind is Role.WEB:
            state = self._apply_web(record)
            if notify and state is EngineState.WEB_ACTIVE:
                self.notifier.notify()
            return state
        if role.kind is Role.PROXY:
            self.notifier.track(record.id)
            return self._transition(record.id, EngineState.PROXY_ACTIVE)
        if role.label_missing:
            logger.error("Unable to read role label for container: %s", record.short_id)
        else:
            logger.error("Unknown container-label type %s on container: %s", role.raw, record.short_id)
        return self._transition(record.id, EngineState.IGNORED)

    def _apply_web(self, record: ContainerRecord) -> EngineState:
        logger.info("Updating config for web-container: %s", record.name)
        try:
            routing = self.routing_for(record)
        except MissingAliasError as e:
            logger.error("%s; skipping", e)
            return self._transition(record.id, EngineState.IGNORED)

        content = render_config(routing, self.base_domain)
        try:
            path = self.store.write(routing.config_key, content)
        except OSError as e:
            logger.error("Unable to write config for %s to %s: %s", record.short_id, self.store.conf_dir, e)
            return self._transition(record.id, EngineState.IGNORED)
        logger.info("Wrote config-file: %s%s", path, " (tls)" if routing.tls is not None else "")
        return self._transition(record.id, EngineState.WEB_ACTIVE)

    def remove(self, container_id: str) -> EngineState:
        if self.notifier.forget(container_id):
            return self._transition(container_id, EngineState.REMOVED)

        key = utils.short_id(container_id)
        if self.store.exists(key):
            try:
                self.store.remove(key)
            except OSError as e:
                logger.error("Unable to remove config-file %s: %s", self.store.path_for(key), e)
            else:
                logger.info("Removed config-file: %s", self.store.path_for(key))
                self.notifier.notify()
        return self._transition(container_id, EngineState.REMOVED)

    def handle_event(self, event: LifecycleEvent) -> EngineState:
        if event.action == START_ACTION:
            return self.classify(event.id)
        state = self.remove(event.id)
        logger.info("Stopped container: %s (%s)", utils.short_id(event.id), event.action or "unknown")
        return state

    def watch(self, cancel: threading.Event | None = None) -> None:
        """Consume lifecycle events until cancelled.

        EventStreamError propagates; the process is expected to exit and be restarted.
        """
        if cancel is not None:
            self._cancel = cancel
        if self._cancel.is_set():
            return
        for event in self.gateway.subscribe_events(self._cancel, since=self._since):
            if self._cancel.is_set():
                break
            self.handle_event(event)

    def run(self, cancel: threading.Event | None = None) -> None:
        if cancel is not None:
            self._cancel = cancel
        self.startup()
        self.watch()

    def stop(self) -> None:
        self._cancel.set()
        self.gateway.close()

    def _transition(self, container_id: str, state: EngineState) -> EngineState:
        previous = self.states.get(container_id, EngineState.UNCLASSIFIED)
        if previous is not state:
            logger.debug("Container %s: %s -> %s", utils.short_id(container_id), previous.value, state.value)
        self.states[container_id] = state
        return state
