from __future__ import annotations

import re
from collections.abc import Sequence

SHORT_ID_LENGTH = 12

_SIMPLE_NAME_RE = re.compile(r"^[A-Za-z0-9]+$")


def short_id(container_id: str) -> str:
    return (container_id or "")[:SHORT_ID_LENGTH]


def is_simple_name(value: str) -> bool:
    return bool(_SIMPLE_NAME_RE.match(value or ""))


def parse_hostnames(value: str | Sequence[str] | None) -> list[str]:
    """Split a comma-separated hostname label, keeping order and dropping empties."""
    if value is None:
        return []
    if isinstance(value, str):
        return [h for part in value.split(",") if (h := part.strip())]
    return [s for h in value if (s := str(h).strip())]


def container_name(value: object) -> str:
    return str(value or "").strip().lstrip("/")
