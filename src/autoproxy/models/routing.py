from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

CERTIFICATE_FILE = "fullchain.pem"
PRIVATE_KEY_FILE = "privkey.pem"


@dataclass(frozen=True)
class CertificateBundle:
    hostname: str
    directory: Path

    @property
    def certificate_path(self) -> Path:
        return self.directory / CERTIFICATE_FILE

    @property
    def key_path(self) -> Path:
        return self.directory / PRIVATE_KEY_FILE


@dataclass(frozen=True)
class RoutingRecord:
    config_key: str
    upstream_target: str
    server_names: list[str] = field(default_factory=list)
    tls: CertificateBundle | None = None

    def to_json(self) -> dict[str, object]:
        return {
            "config_key": self.config_key,
            "upstream_target": self.upstream_target,
            "server_names": list(self.server_names),
            "tls": None
            if self.tls is None
            else {
                "hostname": self.tls.hostname,
                "certificate": str(self.tls.certificate_path),
                "key": str(self.tls.key_path),
            },
        }


@dataclass(frozen=True)
class ProxyReference:
    """At most one tracked proxy container id; empty means no proxy seen yet."""

    container_id: str | None = None

    @property
    def present(self) -> bool:
        return self.container_id is not None

    def matches(self, container_id: str) -> bool:
        return self.container_id is not None and self.container_id == container_id

    @classmethod
    def empty(cls) -> ProxyReference:
        return cls()
