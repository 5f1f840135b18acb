import shlex
from typing import List, Optional


def split_multiline_input(raw: Optional[str]) -> List[str]:
    """Split a newline-separated input into stripped, non-empty entries."""
    if not raw:
        return []
    return [line.strip() for line in raw.splitlines() if line.strip()]


def normalize_multiline(raw: str) -> str:
    """Joins lines with trailing backslashes into one line."""
    return raw.replace("\\\n", " ").replace("\\\r\n", " ")  # handle both \n and \r\n


def split_kaniko_args(raw: Optional[str]) -> List[str]:
    """Split extra executor arguments the way a shell would."""
    if not raw:
        return []
    return shlex.split(normalize_multiline(raw))


def parse_bool(raw: Optional[str], default: bool = False) -> bool:
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("true", "1", "yes", "on")
