"""Docker integration: runtime gateway over the Docker SDK."""

from .gateway import DockerGateway, RuntimeGateway, event_filters

__all__ = [
    "DockerGateway",
    "RuntimeGateway",
    "event_filters",
]
