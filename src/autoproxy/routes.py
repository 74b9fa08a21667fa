from __future__ import annotations

from pathlib import Path

from . import utils
from .certificates import locate_certificate
from .configmanager import ConfigManager
from .errors import MissingAliasError
from .models import ContainerRecord, RoutingRecord

logger = ConfigManager.get_logger(__name__)


def canonical_alias(record: ContainerRecord) -> str:
    if not record.network_aliases:
        raise MissingAliasError(f"Container {record.short_id} ({record.name}) has no network alias")
    return record.network_aliases[0]


def derive_server_names(record: ContainerRecord, base_domain: str) -> list[str]:
    """Hostname-label entries first, then `<name>.<base_domain>` for plain names."""
    names = list(record.label_hostnames)
    if utils.is_simple_name(record.name):
        names.append(f"{record.name}.{base_domain}")
    return names


def derive_route(
    record: ContainerRecord,
    base_domain: str,
    *,
    ssl_root: Path | None = None,
) -> RoutingRecord:
    """Build the routing record for a web container.

    With `ssl_root` set the first server name with a certificate directory
    becomes the TLS bundle.
    """
    upstream = canonical_alias(record)
    server_names = derive_server_names(record, base_domain)
    if record.label_hostnames:
        logger.info("Found additional hostnames for %s: %s", record.short_id, ",".join(record.label_hostnames))
    tls = locate_certificate(server_names, ssl_root) if ssl_root is not None else None
    return RoutingRecord(
        config_key=record.short_id,
        upstream_target=upstream,
        server_names=server_names,
        tls=tls,
    )
