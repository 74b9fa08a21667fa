from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .configmanager import ConfigManager
from .errors import ConfigStoreError

logger = ConfigManager.get_logger(__name__)

MANAGED_PREFIX = "_"
CONFIG_SUFFIX = ".conf"


def config_filename(config_key: str) -> str:
    return f"{MANAGED_PREFIX}{config_key}{CONFIG_SUFFIX}"


def _atomic_write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=path.name + ".", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, 0o644)
        Path(tmp_path).replace(path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except Exception:
            pass
        raise


class ConfigStore:
    """Managed nginx config files in one directory, one `_<key>.conf` per web container."""

    def __init__(self, conf_dir: Path) -> None:
        self.conf_dir = Path(conf_dir)

    def path_for(self, config_key: str) -> Path:
        return self.conf_dir / config_filename(config_key)

    def exists(self, config_key: str) -> bool:
        return self.path_for(config_key).is_file()

    def read(self, config_key: str) -> str:
        return self.path_for(config_key).read_text(encoding="utf-8")

    def write(self, config_key: str, content: str) -> Path:
        """Write and fsync the config; raises OSError on failure."""
        path = self.path_for(config_key)
        _atomic_write_text(path, content)
        return path

    def remove(self, config_key: str) -> bool:
        path = self.path_for(config_key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def managed_files(self) -> list[Path]:
        try:
            entries = sorted(os.listdir(self.conf_dir))
        except OSError as e:
            raise ConfigStoreError(f"Unable to read config directory {self.conf_dir}: {e}") from e
        return [self.conf_dir / name for name in entries if name.startswith(MANAGED_PREFIX)]

    def clean(self) -> int:
        """Delete every managed file left by a previous run.

        Any failure raises ConfigStoreError: stale files would break the
        one-file-per-running-container guarantee.
        """
        removed = 0
        for path in self.managed_files():
            if path.is_dir():
                logger.warning("Skipping directory with managed prefix in config dir: %s", path)
                continue
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise ConfigStoreError(f"Unable to remove stale config file {path}: {e}") from e
            removed += 1
            logger.debug("Removed stale config-file: %s", path)
        logger.info("Cleaned %d managed config file(s) from %s", removed, self.conf_dir)
        return removed
