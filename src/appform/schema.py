"""UI schema models decoded from the JSON schema documents apps ship."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .conditions import Condition
from .consts import DEFAULT_TAB_NAME_FIELD, ICON_MAP
from .enums import FieldType
from .errors import SchemaError
from .path import FieldPath
from .utils import format_validation_error

logger = logging.getLogger(__name__)

Number = Union[int, float]


class _SchemaModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class SelectOption(_SchemaModel):
    label: str
    value: Any

    @model_validator(mode="before")
    @classmethod
    def from_plain_value(cls, values):
        if isinstance(values, (str, int, float)) and not isinstance(values, bool):
            return {"label": str(values), "value": values}
        if isinstance(values, dict) and "label" not in values and "value" in values:
            return {**values, "label": str(values["value"])}
        return values


class ItemSchema(_SchemaModel):
    title_field: Optional[str] = None
    fields: list[SchemaField] = []


class TabsOptions(_SchemaModel):
    name_field: str = DEFAULT_TAB_NAME_FIELD
    allow_add: bool = True
    allow_delete: bool = True
    min_tabs: int = 0
    default_item: dict[str, Any] = {}
    item_schema: Optional[ItemSchema] = None


class ClientSelectorOptions(_SchemaModel):
    multiple: bool = False
    allow_manual_entry: bool = True


class SchemaField(_SchemaModel):
    id: str
    path: str
    type: FieldType
    label: str = ""
    description: Optional[str] = None
    default: Any = None

    # number
    min: Optional[Number] = None
    max: Optional[Number] = None
    suffix: Optional[str] = None
    step: Optional[Number] = None

    # text / textarea / select
    placeholder: Optional[str] = None
    max_length: Optional[int] = None
    rows: Optional[int] = None
    options: Optional[list[SelectOption]] = None
    allow_custom: Optional[bool] = None

    # list / urlList / keyValue
    item_type: Optional[str] = None
    item_placeholder: Optional[str] = None
    url_list_options: Optional[dict[str, Any]] = None
    key_label: Optional[str] = None
    key_placeholder: Optional[str] = None
    value_schema: Optional[ItemSchema] = None

    # objectArray / tabs / clientSelector / group
    item_schema: Optional[ItemSchema] = None
    add_label: Optional[str] = None
    empty_message: Optional[str] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    tabs_options: Optional[TabsOptions] = None
    client_selector_options: Optional[ClientSelectorOptions] = None
    options_from: Optional[str] = None
    group_fields: Optional[list[SchemaField]] = None
    group_layout: Optional[str] = None
    group_columns: Optional[int] = None

    show_if: Optional[Condition] = None
    hide_if: Optional[Condition] = None

    required: bool = False
    pattern: Optional[str] = None
    pattern_message: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def default_id(cls, values):
        if isinstance(values, dict) and not values.get("id") and values.get("path"):
            values = {**values, "id": values["path"]}
        return values

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid pattern '{v}': {e}")
        return v

    @property
    def field_path(self) -> FieldPath:
        return FieldPath.parse(self.path)

    @property
    def is_composite(self) -> bool:
        return self.type in (FieldType.OBJECT_ARRAY, FieldType.TABS)

    @property
    def multiple_clients(self) -> bool:
        return bool(self.client_selector_options and self.client_selector_options.multiple)

    @property
    def child_schema(self) -> Optional[ItemSchema]:
        """Sub-schema rendered for each element of a composite field."""
        if self.type == FieldType.TABS:
            return self.tabs_options.item_schema if self.tabs_options else None
        if self.type == FieldType.OBJECT_ARRAY:
            return self.item_schema
        return None


class SchemaSection(_SchemaModel):
    id: str
    title: str
    icon: Optional[str] = None
    description: Optional[str] = None
    collapsible: bool = False
    collapsed: bool = False
    show_if: Optional[Condition] = None
    fields: list[SchemaField] = []

    @model_validator(mode="before")
    @classmethod
    def default_id(cls, values):
        if isinstance(values, dict) and not values.get("id") and values.get("title"):
            values = {**values, "id": slugify(values["title"])}
        return values


class UISchema(_SchemaModel):
    description: Optional[str] = None
    sections: list[SchemaSection] = Field(default_factory=list)

    @field_validator("sections", mode="before")
    @classmethod
    def coerce_null_sections(cls, v):
        return [] if v is None else v

    def find_field(self, field_id: str) -> Optional[SchemaField]:
        for section in self.sections:
            for field in section.fields:
                if field.id == field_id:
                    return field
                for child in field.group_fields or []:
                    if child.id == field_id:
                        return child
        return None


ItemSchema.model_rebuild()
TabsOptions.model_rebuild()
SchemaField.model_rebuild()
SchemaSection.model_rebuild()
UISchema.model_rebuild()


def load_schema(text: str) -> UISchema:
    """Decode a UI schema from JSON text, raising :class:`SchemaError` on failure."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid schema JSON at line {e.lineno}, column {e.colno}: {e.msg}") from e
    except RecursionError as e:
        raise SchemaError("Invalid schema JSON: nested too deeply") from e

    try:
        return UISchema.model_validate(data)
    except ValidationError as e:
        raise SchemaError(format_validation_error(e, "Schema validation failed:")) from e
    except RecursionError as e:
        raise SchemaError("Schema validation failed: nested too deeply") from e


def load_schema_or_empty(text: str | None) -> UISchema:
    if not text or not text.strip():
        return UISchema()

    try:
        return load_schema(text)
    except SchemaError as e:
        logger.warning(f"Falling back to an empty schema: {e}")
        return UISchema()


def expand_composite(template: SchemaField, child: SchemaField, index: int) -> SchemaField:
    """Bind a sub-schema field to element ``index`` of a composite field.

    Pure: returns a new field whose id and path are prefixed by the template's,
    e.g. ``groups[2].name`` for child path ``name`` at index 2.
    """
    return child.model_copy(
        update={
            "id": f"{template.id}_{index}_{child.id}",
            "path": f"{template.path}[{index}].{child.path}",
        }
    )


def type_default(field: SchemaField) -> Any:
    if field.type == FieldType.SWITCH:
        return False
    if field.type == FieldType.NUMBER:
        return 0
    if field.type in (FieldType.TEXT, FieldType.TEXTAREA, FieldType.SELECT):
        return ""
    if field.type == FieldType.CLIENT_SELECTOR:
        return [] if field.multiple_clients else ""
    if field.type in (FieldType.KEY_VALUE, FieldType.GROUP):
        return {}
    return []


def icon_name(icon: str) -> str:
    return ICON_MAP.get(icon, icon)


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_") or "section"
