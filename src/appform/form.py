"""Form session: the contract between a schema, a live document and a renderer.

A renderer asks :meth:`FormSession.visible_sections` for what to draw, reads
each control's value with :meth:`FormSession.value_of` and writes edits back
with :meth:`FormSession.set`. Nothing is cached; visibility is recomputed from
the document on every call so dependent fields appear and disappear live.
"""

from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Callable, Iterator, Optional

from .conditions import is_empty, is_visible
from .consts import NEW_TAB_NAME
from .document import ConfigDocument
from .enums import FieldType
from .errors import DocumentError, SchemaError
from .path import MISSING, FieldPath, set_value
from .schema import (
    ItemSchema,
    SchemaField,
    SchemaSection,
    TabsOptions,
    UISchema,
    expand_composite,
    load_schema,
    type_default,
)

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str, Any], None]

STRING_LIST_TYPES = (FieldType.LIST, FieldType.URL_LIST)
OBJECT_LIST_TYPES = (FieldType.OBJECT_ARRAY, FieldType.TABS, FieldType.TABLE)
TEXT_TYPES = (FieldType.TEXT, FieldType.TEXTAREA, FieldType.SELECT)


@dataclass
class VisibleSection:
    section: SchemaSection
    fields: list[SchemaField] = dataclass_field(default_factory=list)

    @property
    def title(self) -> str:
        return self.section.title


@dataclass
class FieldIssue:
    field_id: str
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def value_matches(field: SchemaField, value: Any) -> bool:
    """Whether ``value`` has the shape the control for ``field`` expects."""
    if value is MISSING or value is None:
        return False

    if field.type == FieldType.SWITCH:
        return isinstance(value, bool)
    if field.type == FieldType.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if field.type in TEXT_TYPES:
        return isinstance(value, str)
    if field.type in STRING_LIST_TYPES:
        return isinstance(value, list) and all(isinstance(item, str) for item in value)
    if field.type in OBJECT_LIST_TYPES:
        return isinstance(value, list) and all(isinstance(item, dict) for item in value)
    if field.type in (FieldType.KEY_VALUE, FieldType.GROUP):
        return isinstance(value, dict)
    if field.type == FieldType.CLIENT_SELECTOR:
        if field.multiple_clients:
            return isinstance(value, list) and all(isinstance(item, str) for item in value)
        return isinstance(value, str)
    return False


def schema_defaults(item_schema: Optional[ItemSchema]) -> dict:
    """Build a new element populated with the declared defaults of a sub-schema."""
    item: dict = {}
    if item_schema is None:
        return item

    for child in item_schema.fields:
        if child.default is not None:
            set_value(item, child.path, copy.deepcopy(child.default))
    return item


class FormSession:
    """One editing session over one configuration document."""

    def __init__(
        self,
        schema: UISchema,
        document: ConfigDocument,
        on_change: Optional[ChangeCallback] = None,
        degraded: bool = False,
    ):
        self.schema = schema
        self.document = document
        self.on_change = on_change
        self.degraded = degraded
        self.dirty = False

    @classmethod
    def open(
        cls,
        config_text: str,
        schema_text: Optional[str] = None,
        on_change: Optional[ChangeCallback] = None,
    ) -> "FormSession":
        """Build a session from raw texts, degrading to empty structures on parse failure.

        ``degraded`` is set when either text could not be parsed, so callers can
        offer a raw text editor instead of the structured form.
        """
        degraded = False

        try:
            document = ConfigDocument.from_json(config_text)
        except DocumentError as e:
            logger.warning(f"Cannot parse app configuration, starting from an empty document: {e}")
            document = ConfigDocument()
            degraded = True

        schema = UISchema()
        if schema_text and schema_text.strip():
            try:
                schema = load_schema(schema_text)
            except SchemaError as e:
                logger.warning(f"Cannot parse UI schema, starting from an empty schema: {e}")
                degraded = True

        return cls(schema, document, on_change=on_change, degraded=degraded)

    # ---------- visibility ----------

    def visible_sections(self) -> list[VisibleSection]:
        sections = []
        for section in self.schema.sections:
            if not is_visible(section.show_if, None, self.document):
                continue
            sections.append(VisibleSection(section, self.visible_fields(section.fields)))
        return sections

    def visible_fields(self, fields: list[SchemaField]) -> list[SchemaField]:
        return [f for f in fields if is_visible(f.show_if, f.hide_if, self.document)]

    def is_field_visible(self, field: SchemaField) -> bool:
        return is_visible(field.show_if, field.hide_if, self.document)

    # ---------- values ----------

    def value_of(self, field: SchemaField) -> Any:
        """Backing value of ``field``, or its declared default, or the type default."""
        value = self.document.get(field.path)
        if value_matches(field, value):
            return value

        if value is not MISSING:
            logger.debug(f"Value at '{field.path}' does not fit a {field.type.value} field, using default")

        if value_matches(field, field.default):
            return copy.deepcopy(field.default)
        return type_default(field)

    def set(self, target: SchemaField | FieldPath | str, value: Any) -> None:
        path = target.path if isinstance(target, SchemaField) else str(target)
        self.document.set(path, value)
        self.dirty = True
        logger.debug(f"Set '{path}'")

        if self.on_change is not None:
            self.on_change(path, value)

    # ---------- composite fields (objectArray, tabs) ----------

    def items(self, field: SchemaField) -> list[dict]:
        self._require(field, OBJECT_LIST_TYPES)
        return self.value_of(field)

    def item_title(self, field: SchemaField, index: int) -> str:
        items = self.items(field)
        item = items[index] if 0 <= index < len(items) else {}

        if field.type == FieldType.TABS:
            name = item.get(self._tabs_options(field).name_field)
            return name if isinstance(name, str) else f"Tab {index + 1}"

        title_field = field.item_schema.title_field if field.item_schema else None
        title = item.get(title_field) if title_field else None
        return title if isinstance(title, str) else f"Item {index + 1}"

    def item_fields(self, field: SchemaField, index: int) -> list[SchemaField]:
        """Visible sub-fields of element ``index`` bound to ``path[index].child``."""
        self._require(field, (FieldType.OBJECT_ARRAY, FieldType.TABS))
        child_schema = field.child_schema
        if child_schema is None:
            return []

        expanded = [expand_composite(field, child, index) for child in child_schema.fields]
        return self.visible_fields(expanded)

    def add_item(self, field: SchemaField) -> Optional[int]:
        """Append a new element; returns its index, or None when adding is not allowed."""
        self._require(field, (FieldType.OBJECT_ARRAY, FieldType.TABS))
        items = list(self.items(field))

        if field.max_items is not None and len(items) >= field.max_items:
            logger.debug(f"'{field.path}' already holds the maximum of {field.max_items} items")
            return None

        if field.type == FieldType.TABS:
            options = self._tabs_options(field)
            if not options.allow_add:
                return None
            item = copy.deepcopy(options.default_item)
            item[options.name_field] = NEW_TAB_NAME
        else:
            item = schema_defaults(field.item_schema)

        items.append(item)
        self.set(field, items)
        return len(items) - 1

    def remove_item(self, field: SchemaField, index: int) -> bool:
        self._require(field, (FieldType.OBJECT_ARRAY, FieldType.TABS))
        items = list(self.items(field))

        if not 0 <= index < len(items):
            return False

        minimum = field.min_items or 0
        if field.type == FieldType.TABS:
            options = self._tabs_options(field)
            if not options.allow_delete:
                return False
            minimum = max(minimum, options.min_tabs)

        if len(items) <= minimum:
            logger.debug(f"'{field.path}' cannot drop below {minimum} items")
            return False

        del items[index]
        self.set(field, items)
        return True

    def group_fields(self, field: SchemaField) -> list[SchemaField]:
        self._require(field, (FieldType.GROUP,))
        return self.visible_fields(field.group_fields or [])

    # ---------- string lists (list, urlList, clientSelector) ----------

    def add_list_item(self, field: SchemaField, text: str) -> bool:
        self._require(field, STRING_LIST_TYPES + (FieldType.CLIENT_SELECTOR,))
        if not text:
            return False

        if field.type == FieldType.CLIENT_SELECTOR and not field.multiple_clients:
            self.set(field, text)
        else:
            self.set(field, list(self.value_of(field)) + [text])
        return True

    def remove_list_item(self, field: SchemaField, index: int) -> bool:
        self._require(field, STRING_LIST_TYPES + (FieldType.CLIENT_SELECTOR,))

        if field.type == FieldType.CLIENT_SELECTOR and not field.multiple_clients:
            if index != 0 or not self.value_of(field):
                return False
            self.set(field, "")
            return True

        items = list(self.value_of(field))
        if not 0 <= index < len(items):
            return False
        del items[index]
        self.set(field, items)
        return True

    # ---------- keyValue ----------

    def entry_keys(self, field: SchemaField) -> list[str]:
        self._require(field, (FieldType.KEY_VALUE,))
        return sorted(self.value_of(field))

    def add_entry(self, field: SchemaField, key: str) -> bool:
        self._require(field, (FieldType.KEY_VALUE,))
        entries = dict(self.value_of(field))
        if not key or key in entries:
            return False

        entries[key] = schema_defaults(field.value_schema)
        self.set(field, entries)
        return True

    def remove_entry(self, field: SchemaField, key: str) -> bool:
        self._require(field, (FieldType.KEY_VALUE,))
        entries = dict(self.value_of(field))
        if key not in entries:
            return False

        del entries[key]
        self.set(field, entries)
        return True

    # ---------- validation & save ----------

    def validate(self) -> list[FieldIssue]:
        issues = []
        for visible in self.visible_sections():
            for field in self._walk(visible.fields):
                issues.extend(self._check(field))
        return issues

    def to_json(self) -> str:
        return self.document.to_json()

    def mark_saved(self) -> None:
        self.dirty = False

    # ---------- internals ----------

    def _walk(self, fields: list[SchemaField]) -> Iterator[SchemaField]:
        for field in fields:
            yield field
            if field.type == FieldType.GROUP:
                yield from self._walk(self.group_fields(field))
            elif field.type in (FieldType.OBJECT_ARRAY, FieldType.TABS):
                for index in range(len(self.items(field))):
                    yield from self._walk(self.item_fields(field, index))

    def _check(self, field: SchemaField) -> list[FieldIssue]:
        issues = []
        label = field.label or field.id
        raw = self.document.get(field.path)

        def issue(message: str):
            issues.append(FieldIssue(field.id, field.path, message))

        if field.required and is_empty(raw):
            issue(f"{label} is required")
            return issues

        value = self.value_of(field)

        if isinstance(value, str) and value:
            if field.pattern and not re.fullmatch(field.pattern, value):
                issue(field.pattern_message or f"{label} does not match the expected format")
            if field.max_length is not None and len(value) > field.max_length:
                issue(f"{label} must be at most {field.max_length} characters")

        if field.type == FieldType.NUMBER and value_matches(field, raw):
            if field.min is not None and raw < field.min:
                issue(f"{label} must be at least {field.min}")
            if field.max is not None and raw > field.max:
                issue(f"{label} must be at most {field.max}")

        if isinstance(value, list):
            if field.min_items is not None and len(value) < field.min_items:
                issue(f"{label} needs at least {field.min_items} items")
            if field.max_items is not None and len(value) > field.max_items:
                issue(f"{label} allows at most {field.max_items} items")

        return issues

    @staticmethod
    def _tabs_options(field: SchemaField) -> TabsOptions:
        return field.tabs_options or TabsOptions()

    @staticmethod
    def _require(field: SchemaField, types: tuple[FieldType, ...]) -> None:
        if field.type not in types:
            allowed = ", ".join(t.value for t in types)
            raise ValueError(f"Field '{field.id}' is a {field.type.value} field, expected one of: {allowed}")
