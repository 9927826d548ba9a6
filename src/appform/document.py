"""JSON-like configuration documents."""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Union

from .consts import JSON_INDENT
from .errors import DocumentError
from .path import MISSING, FieldPath, delete_value, get_value, set_value

logger = logging.getLogger(__name__)

JsonValue = Union[None, bool, int, float, str, list["JsonValue"], dict[str, "JsonValue"]]


def to_json_value(value: Any) -> JsonValue:
    """Return ``value`` as a tree made only of JSON shapes.

    Tuples become lists. Anything that is not null, bool, number, string,
    list or string-keyed dict raises :class:`DocumentError`, as does a tree
    nested too deeply to walk.
    """
    try:
        return _convert(value)
    except RecursionError as e:
        raise DocumentError("Value is nested too deeply") from e


def _convert(value: Any) -> JsonValue:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [_convert(item) for item in value]
    if isinstance(value, dict):
        out = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise DocumentError(f"Object keys must be strings, got {type(key).__name__}")
            out[key] = _convert(item)
        return out
    raise DocumentError(f"Unsupported value type: {type(value).__name__}")


class ConfigDocument:
    """Mutable configuration tree owned by a single editing session."""

    def __init__(self, data: dict | None = None):
        self.data: dict[str, JsonValue] = to_json_value(data) if data else {}

    @classmethod
    def from_json(cls, text: str) -> "ConfigDocument":
        if not text or not text.strip():
            return cls()

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentError(f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}") from e
        except RecursionError as e:
            raise DocumentError("Invalid JSON: nested too deeply") from e

        if not isinstance(data, dict):
            raise DocumentError(f"Configuration root must be a JSON object, got {type(data).__name__}")

        return cls(data)

    @classmethod
    def from_json_or_empty(cls, text: str) -> "ConfigDocument":
        try:
            return cls.from_json(text)
        except DocumentError as e:
            logger.warning(f"Falling back to an empty configuration: {e}")
            return cls()

    def to_json(self, indent: int | None = JSON_INDENT, sort_keys: bool = True) -> str:
        return json.dumps(self.data, indent=indent, sort_keys=sort_keys, ensure_ascii=False)

    def get(self, path: FieldPath | str, default: Any = MISSING) -> Any:
        value = get_value(self.data, path)
        return default if value is MISSING else value

    def set(self, path: FieldPath | str, value: Any) -> None:
        set_value(self.data, path, to_json_value(value))

    def delete(self, path: FieldPath | str) -> bool:
        return delete_value(self.data, path)

    def __contains__(self, path: FieldPath | str) -> bool:
        return get_value(self.data, path) is not MISSING

    def copy(self) -> "ConfigDocument":
        return ConfigDocument(copy.deepcopy(self.data))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConfigDocument):
            return self.data == other.data
        return NotImplemented

    def __repr__(self) -> str:
        return f"ConfigDocument({self.data!r})"
