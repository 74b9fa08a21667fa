from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

DEFAULT_ENV_FILE = ".env"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE_NAME = "autoproxy.log"
DEFAULT_BASE_DOMAIN = "localhost"
DEFAULT_CONF_DIR = "./config"
DEFAULT_SSL_DIR = "./ssl"
DEFAULT_ROLE_LABEL = "function"
DEFAULT_HOSTNAME_LABEL = "hostname"
DEFAULT_RELOAD_SIGNAL = "HUP"
DEFAULT_DOCKER_API_VERSION = "1.35"


class ConfigManager:
    """Centralized configuration.

    - Loads `.env` (or `AUTOPROXY_ENV_FILE`) best-effort via python-dotenv.
    - Reads runtime config from environment variables.
    - Assigns project defaults consistently.
    """

    @staticmethod
    def _env_str(name: str, default: str) -> str:
        v = os.getenv(name)
        return v.strip() if v and v.strip() else default

    @staticmethod
    def load_dotenv(path: str | None = None) -> None:
        """Load env file into process env.

        Best-effort: missing python-dotenv or missing file does not break the CLI.
        """
        try:
            from dotenv import load_dotenv  # type: ignore[import-not-found]

            load_dotenv(dotenv_path=path or os.getenv("AUTOPROXY_ENV_FILE") or DEFAULT_ENV_FILE)
        except Exception:
            return

    @staticmethod
    def base_domain() -> str:
        return ConfigManager._env_str("AUTOPROXY_DOMAIN", DEFAULT_BASE_DOMAIN).strip(".")

    @staticmethod
    def conf_dir() -> Path:
        return Path(os.path.expanduser(ConfigManager._env_str("AUTOPROXY_CONF_DIR", DEFAULT_CONF_DIR)))

    @staticmethod
    def ssl_dir() -> Path:
        return Path(os.path.expanduser(ConfigManager._env_str("AUTOPROXY_SSL_DIR", DEFAULT_SSL_DIR)))

    @staticmethod
    def role_label() -> str:
        return ConfigManager._env_str("AUTOPROXY_ROLE_LABEL", DEFAULT_ROLE_LABEL)

    @staticmethod
    def hostname_label() -> str:
        return ConfigManager._env_str("AUTOPROXY_HOSTNAME_LABEL", DEFAULT_HOSTNAME_LABEL)

    @staticmethod
    def reload_signal() -> str:
        return ConfigManager._env_str("AUTOPROXY_RELOAD_SIGNAL", DEFAULT_RELOAD_SIGNAL).upper()

    @staticmethod
    def docker_api_version() -> str:
        return ConfigManager._env_str("AUTOPROXY_DOCKER_API_VERSION", DEFAULT_DOCKER_API_VERSION)

    @staticmethod
    def _parse_log_level(level: str) -> int:
        normalized = (level or DEFAULT_LOG_LEVEL).strip().upper()
        try:
            logging_level = getattr(logging, normalized)
            if not isinstance(logging_level, int):
                raise AttributeError
        except Exception as e:
            raise ValueError("log_level must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL") from e
        return logging_level

    @staticmethod
    def _resolve_log_file_path(value: str | os.PathLike[str] | None) -> Path | None:
        if value is None:
            return None
        raw = str(value).strip()
        if not raw:
            return None

        p = Path(os.path.expanduser(raw))
        # A directory gets the default file name.
        if p.exists() and p.is_dir():
            return p / DEFAULT_LOG_FILE_NAME
        if raw.endswith(("/", os.sep)):
            return p / DEFAULT_LOG_FILE_NAME
        return p

    @staticmethod
    def configure_logging(console_level: str, *, log_file: str | os.PathLike[str] | None = None) -> None:
        """Configure logging.

        Always logs to stderr. If log_file is set, also logs to that file at the same level.
        """

        logging_level = ConfigManager._parse_log_level(console_level)
        file_path = ConfigManager._resolve_log_file_path(log_file)

        console_formatter = logging.Formatter(
            "%(asctime)s %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        file_formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

        root = logging.getLogger()
        for h in list(root.handlers):
            root.removeHandler(h)

        root.setLevel(logging_level)

        console_handler = logging.StreamHandler(stream=sys.stderr)
        console_handler.setLevel(logging_level)
        console_handler.setFormatter(console_formatter)
        root.addHandler(console_handler)

        if file_path is not None:
            try:
                file_path.parent.mkdir(parents=True, exist_ok=True)
                fh = logging.FileHandler(file_path, encoding="utf-8")
                fh.setLevel(logging_level)
                fh.setFormatter(file_formatter)
                root.addHandler(fh)
            except Exception as e:
                root.warning("Failed to enable file logging to %s (%s)", file_path, str(e))

        # The Docker SDK logs every HTTP round-trip at DEBUG.
        logging.getLogger("docker").setLevel(logging.WARNING)
        logging.getLogger("urllib3").setLevel(logging.WARNING)

    @staticmethod
    def get_logger(name: str) -> logging.Logger:
        return logging.getLogger(name)
