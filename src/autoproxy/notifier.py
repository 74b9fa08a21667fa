from __future__ import annotations

from typing import TYPE_CHECKING

from . import utils
from .configmanager import ConfigManager
from .errors import SignalError
from .models import ProxyReference

if TYPE_CHECKING:
    from .docker.gateway import RuntimeGateway

logger = ConfigManager.get_logger(__name__)


class ProxyNotifier:
    """Signals the tracked proxy container to reload its configuration."""

    def __init__(self, gateway: RuntimeGateway, *, signal_name: str = "HUP") -> None:
        self.gateway = gateway
        self.signal_name = signal_name
        self.reference = ProxyReference.empty()

    def track(self, container_id: str) -> None:
        logger.info("Updating proxy-container to: %s", utils.short_id(container_id))
        self.reference = ProxyReference(container_id)

    def forget(self, container_id: str) -> bool:
        if not self.reference.matches(container_id):
            return False
        logger.info("Proxy-container %s stopped; no proxy tracked", utils.short_id(container_id))
        self.reference = ProxyReference.empty()
        return True

    def notify(self) -> bool:
        """Send the reload signal. Returns True if the proxy was signalled."""
        proxy_id = self.reference.container_id
        if proxy_id is None:
            logger.info(
                "No proxy-container detected, not sending reload signal (SIG%s)",
                self.signal_name,
            )
            return False
        try:
            self.gateway.signal(proxy_id, self.signal_name)
        except SignalError as e:
            logger.error("Unable to signal proxy-container %s: %s", utils.short_id(proxy_id), e)
            return False
        logger.info("Signaled proxy-container %s to reload (SIG%s)", utils.short_id(proxy_id), self.signal_name)
        return True
