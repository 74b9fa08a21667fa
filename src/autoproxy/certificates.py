from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .configmanager import ConfigManager
from .models import CertificateBundle

logger = ConfigManager.get_logger(__name__)


def locate_certificate(server_names: Sequence[str], ssl_root: Path) -> CertificateBundle | None:
    """Return the bundle of the first server name with a directory under ssl_root.

    Only directory presence is checked; certificate files are not read.
    """
    for name in server_names:
        candidate = Path(ssl_root) / name
        if candidate.is_dir():
            logger.debug("Using certificate directory %s", candidate)
            return CertificateBundle(hostname=name, directory=candidate)
    return None
