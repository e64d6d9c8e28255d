"""Environment loading helpers for server configuration."""

from __future__ import annotations

import os
from pathlib import Path

_DOTENV_LOADED = False


def _parse_dotenv_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if not line or line.startswith("#"):
        return None
    line = line.removeprefix("export ").strip()
    if "=" not in line:
        return None
    key, value = (part.strip() for part in line.split("=", 1))
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        value = value[1:-1]
    return key, value


def load_dotenv(path: str | Path = ".env", *, force: bool = False) -> dict[str, str]:
    """Load a .env file into the environment without overriding existing values.

    Returns the key/value pairs read from the file. The file is read once per
    process unless ``force`` is set.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED and not force:
        return {}
    _DOTENV_LOADED = True

    dotenv_path = Path(path)
    if not dotenv_path.is_file():
        return {}

    loaded: dict[str, str] = {}
    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        parsed = _parse_dotenv_line(raw_line)
        if parsed is None:
            continue
        key, value = parsed
        loaded[key] = value
        os.environ.setdefault(key, value)
    return loaded


def getenv_any(*names: str, default: str | None = None) -> str | None:
    """Return first non-empty env var from a list of candidate names."""
    load_dotenv()
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


def getenv_int(*names: str, default: int) -> int:
    """Return first defined env var parsed as int, or raise a readable error."""
    raw = getenv_any(*names)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        joined = ", ".join(names)
        raise ValueError(f"Environment variable {joined} must be an integer; received {raw!r}.") from exc
