"""Dotted/bracketed path expressions into JSON-like configuration trees.

A path such as ``groups[2].blockListUrls[0]`` parses into an ordered sequence
of :class:`Key` and :class:`Index` components. :func:`get_value` walks a tree
along those components and :func:`set_value` writes into it, creating missing
intermediate containers on the way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Union

from .errors import PathError

logger = logging.getLogger(__name__)


class _Missing:
    """Marker for a value that is absent from a document."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class Key:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Index:
    position: int

    def __post_init__(self):
        if isinstance(self.position, bool) or not isinstance(self.position, int) or self.position < 0:
            raise PathError(f"Index position must be a non-negative integer, got {self.position!r}")

    def __str__(self) -> str:
        return f"[{self.position}]"


PathComponent = Union[Key, Index]


@dataclass(frozen=True)
class FieldPath:
    """Parsed addressing expression into a configuration document."""

    components: tuple[PathComponent, ...] = ()

    @classmethod
    def parse(cls, text: str, strict: bool = False) -> "FieldPath":
        """Parse a path string.

        Best-effort parsing never raises: empty segments are dropped, bracket
        contents that are not a non-negative integer are dropped, and an
        unterminated ``[`` is skipped so the characters after it continue the
        current key. With ``strict=True`` each of those cases raises
        :class:`PathError` instead.
        """
        if strict and not text:
            raise PathError("Path is empty")

        components: list[PathComponent] = []
        current = ""
        i = 0

        while i < len(text):
            char = text[i]

            if char == ".":
                if current:
                    components.append(Key(current))
                    current = ""
                elif strict and (i == 0 or text[i - 1] == "."):
                    raise PathError(f"Empty segment at position {i} in path '{text}'")
            elif char == "[":
                if current:
                    components.append(Key(current))
                    current = ""

                end = text.find("]", i + 1)
                if end == -1:
                    if strict:
                        raise PathError(f"Unterminated '[' at position {i} in path '{text}'")
                    logger.debug(f"Unterminated '[' in path '{text}', treating rest as key")
                else:
                    inner = text[i + 1 : end]
                    if inner.isascii() and inner.isdigit():
                        components.append(Index(int(inner)))
                        if strict and end + 1 < len(text) and text[end + 1] not in ".[":
                            raise PathError(f"Expected '.' or '[' after index at position {end + 1} in path '{text}'")
                    elif strict:
                        raise PathError(f"Invalid index '[{inner}]' in path '{text}'")
                    else:
                        logger.debug(f"Dropping invalid index '[{inner}]' in path '{text}'")
                    i = end
            elif char == "]" and strict:
                raise PathError(f"Unexpected ']' at position {i} in path '{text}'")
            else:
                current += char

            i += 1

        if current:
            components.append(Key(current))
        elif strict and text.endswith("."):
            raise PathError(f"Path '{text}' ends with an empty segment")

        return cls(tuple(components))

    @classmethod
    def coerce(cls, path: "FieldPath | str") -> "FieldPath":
        if isinstance(path, FieldPath):
            return path
        return cls.parse(path)

    def child(self, *components: PathComponent | str | int) -> "FieldPath":
        extra = []
        for component in components:
            if isinstance(component, bool):
                raise TypeError("Path components must be str, int, Key or Index")
            if isinstance(component, int):
                component = Index(component)
            elif isinstance(component, str):
                component = Key(component)
            extra.append(component)
        return FieldPath(self.components + tuple(extra))

    def join(self, other: "FieldPath | str") -> "FieldPath":
        return FieldPath(self.components + FieldPath.coerce(other).components)

    @property
    def parent(self) -> "FieldPath":
        return FieldPath(self.components[:-1])

    @property
    def last(self) -> PathComponent | None:
        return self.components[-1] if self.components else None

    def __iter__(self) -> Iterator[PathComponent]:
        return iter(self.components)

    def __len__(self) -> int:
        return len(self.components)

    def __getitem__(self, item):
        return self.components[item]

    def __str__(self) -> str:
        out = ""
        for component in self.components:
            if isinstance(component, Index):
                out += str(component)
            elif out:
                out += f".{component.name}"
            else:
                out = component.name
        return out


def get_value(document: Any, path: FieldPath | str) -> Any:
    """Return the value at ``path``, or :data:`MISSING` on any shape mismatch."""
    current = document

    for component in FieldPath.coerce(path):
        if isinstance(component, Key):
            if not isinstance(current, dict) or component.name not in current:
                return MISSING
            current = current[component.name]
        else:
            if not isinstance(current, list) or component.position >= len(current):
                return MISSING
            current = current[component.position]

    return current


def set_value(document: dict, path: FieldPath | str, value: Any) -> dict:
    """Write ``value`` at ``path`` inside ``document`` and return the document.

    Intermediate keys whose value is missing or not an object are replaced by
    an empty object. Index components are writable too: a missing or non-list
    value becomes a list, which is padded with ``None`` up to the index.
    """
    path = FieldPath.coerce(path)

    if not path:
        logger.debug("Ignoring write to an empty path")
        return document
    if isinstance(path[0], Index):
        logger.debug(f"Ignoring write to '{path}': the document root is an object")
        return document

    _assign(document, path.components, value)
    return document


def delete_value(document: dict, path: FieldPath | str) -> bool:
    """Remove the key or list element at ``path``. Returns whether anything was removed."""
    path = FieldPath.coerce(path)
    if not path:
        return False

    parent = get_value(document, path.parent)
    last = path.last

    if isinstance(last, Key):
        if isinstance(parent, dict) and last.name in parent:
            del parent[last.name]
            return True
    elif isinstance(parent, list) and last.position < len(parent):
        del parent[last.position]
        return True

    return False


def _assign(container: dict | list, components: tuple[PathComponent, ...], value: Any) -> None:
    head, rest = components[0], components[1:]

    if not rest:
        _put(container, head, value)
        return

    child = _slot(container, head)
    wanted = dict if isinstance(rest[0], Key) else list
    if not isinstance(child, wanted):
        child = wanted()
        _put(container, head, child)

    _assign(child, rest, value)


def _slot(container: dict | list, component: PathComponent) -> Any:
    if isinstance(component, Key):
        return container.get(component.name, MISSING)
    if component.position < len(container):
        return container[component.position]
    return MISSING


def _put(container: dict | list, component: PathComponent, value: Any) -> None:
    if isinstance(component, Key):
        container[component.name] = value
        return

    if component.position >= len(container):
        container.extend([None] * (component.position + 1 - len(container)))
    container[component.position] = value
