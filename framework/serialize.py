"""Wire (de)serialization helpers: deterministic JSON out, object-only JSON in."""

from __future__ import annotations

import dataclasses
from enum import Enum
import json
from typing import Any, Mapping

from .errors import MalformedMessageError


def to_serializable(value: Any) -> Any:
    """Convert Python objects into JSON-serializable primitives."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "to_dict") and callable(value.to_dict):
        return to_serializable(value.to_dict())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {key: to_serializable(field_value) for key, field_value in dataclasses.asdict(value).items()}
    if isinstance(value, Mapping):
        return {str(key): to_serializable(field_value) for key, field_value in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_serializable(item) for item in value]
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable.")


def json_dumps(value: Any, *, indent: int | None = None) -> str:
    """Serialize any supported value to a deterministic JSON string."""
    separators = (",", ":") if indent is None else None
    return json.dumps(
        to_serializable(value),
        sort_keys=True,
        ensure_ascii=True,
        separators=separators,
        indent=indent,
    )


def json_loads_object(raw: str | bytes) -> dict[str, Any]:
    """Decode an inbound wire message that must be a JSON object."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as exc:
        raise MalformedMessageError(f"Message is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedMessageError(f"Message must be a JSON object, not {type(data).__name__}.")
    return data
