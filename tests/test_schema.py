"""UI schema module unit tests"""

import json

import pytest
from pydantic import ValidationError

from appform.enums import FieldType
from appform.errors import SchemaError
from appform.path import Index, Key
from appform.schema import (
    SchemaField,
    SchemaSection,
    UISchema,
    expand_composite,
    icon_name,
    load_schema,
    load_schema_or_empty,
    type_default,
)


def test_field_with_required_fields():
    field = SchemaField(id="enableBlocking", path="enableBlocking", type="switch", label="Enable Blocking")

    assert field.type == FieldType.SWITCH
    assert field.path == "enableBlocking"
    assert field.label == "Enable Blocking"
    assert field.description is None
    assert field.required is False
    assert field.default is None
    assert field.options is None
    assert field.show_if is None
    assert field.hide_if is None


def test_field_decodes_camel_case_attributes():
    field = SchemaField.model_validate(
        {
            "id": "groups",
            "path": "groups",
            "type": "objectArray",
            "label": "Groups",
            "addLabel": "Add Group",
            "emptyMessage": "No groups",
            "minItems": 1,
            "itemSchema": {
                "titleField": "name",
                "fields": [{"id": "name", "path": "name", "type": "text", "label": "Name"}],
            },
            "showIf": {"field": "enableBlocking", "operator": "eq", "value": True},
        }
    )

    assert field.add_label == "Add Group"
    assert field.empty_message == "No groups"
    assert field.min_items == 1
    assert field.item_schema.title_field == "name"
    assert field.item_schema.fields[0].type == FieldType.TEXT
    assert field.show_if.field == "enableBlocking"
    assert field.is_composite is True
    assert field.child_schema is field.item_schema


def test_field_id_defaults_to_path():
    field = SchemaField.model_validate({"path": "dnsServer", "type": "text", "label": "DNS Server"})
    assert field.id == "dnsServer"


def test_field_path_is_parsed():
    field = SchemaField(id="x", path="groups[1].name", type="text", label="Name")
    assert field.field_path.components == (Key("groups"), Index(1), Key("name"))


def test_select_options_accept_plain_strings():
    field = SchemaField.model_validate(
        {
            "id": "mode",
            "path": "mode",
            "type": "select",
            "label": "Mode",
            "options": ["nxDomain", {"label": "Custom Address", "value": "customAddress"}, {"value": "anyAddress"}],
        }
    )

    assert [(o.label, o.value) for o in field.options] == [
        ("nxDomain", "nxDomain"),
        ("Custom Address", "customAddress"),
        ("anyAddress", "anyAddress"),
    ]


def test_unknown_attributes_are_ignored():
    field = SchemaField.model_validate(
        {"id": "a", "path": "a", "type": "text", "label": "A", "futureAttribute": 1}
    )
    assert not hasattr(field, "futureAttribute")


def test_field_missing_type():
    with pytest.raises(ValidationError) as exc_info:
        SchemaField(id="a", path="a", label="A")

    errors = exc_info.value.errors()
    assert any(error["loc"] == ("type",) for error in errors)


def test_field_unknown_type():
    with pytest.raises(ValidationError):
        SchemaField(id="a", path="a", type="slider", label="A")


def test_field_invalid_pattern():
    with pytest.raises(ValidationError, match="Invalid pattern"):
        SchemaField(id="a", path="a", type="text", label="A", pattern="[unclosed")


def test_field_is_immutable():
    field = SchemaField(id="a", path="a", type="text", label="A")
    with pytest.raises(ValidationError):
        field.label = "B"


def test_section_defaults():
    section = SchemaSection(title="Block List Settings", fields=[])

    assert section.id == "block_list_settings"
    assert section.collapsible is False
    assert section.collapsed is False
    assert section.show_if is None


def test_section_missing_title():
    with pytest.raises(ValidationError) as exc_info:
        SchemaSection(id="general", fields=[])

    errors = exc_info.value.errors()
    assert any(error["loc"] == ("title",) for error in errors)


def test_schema_from_fixture(ui_schema):
    assert ui_schema.description == "Block domain names per client group"
    assert [s.title for s in ui_schema.sections] == ["General", "Groups", "Local Endpoints"]
    assert ui_schema.sections[1].show_if.value is True

    groups = ui_schema.find_field("groups")
    assert groups.tabs_options.min_tabs == 1
    assert groups.child_schema.fields[1].type == FieldType.URL_LIST
    assert ui_schema.find_field("network.subnet").pattern_message == "Use CIDR notation"
    assert ui_schema.find_field("nope") is None


def test_schema_serialization_uses_aliases(ui_schema):
    data = ui_schema.model_dump(by_alias=True, exclude_none=True)

    field = data["sections"][0]["fields"][1]
    assert field["showIf"] == {"field": "enableBlocking", "operator": "eq", "value": True}
    assert UISchema.model_validate(data) == ui_schema


class TestLoadSchema:
    def test_load_schema(self, schema_data):
        schema = load_schema(json.dumps(schema_data))
        assert len(schema.sections) == 3

    def test_load_schema_invalid_json(self):
        with pytest.raises(SchemaError, match="Invalid schema JSON"):
            load_schema("{")

    def test_load_schema_invalid_shape(self):
        with pytest.raises(SchemaError, match="Schema validation failed"):
            load_schema('{"sections": [{"fields": []}]}')

    def test_load_schema_null_sections(self):
        assert load_schema('{"sections": null}').sections == []

    def test_load_schema_deeply_nested(self):
        with pytest.raises(SchemaError, match="nested too deeply"):
            load_schema('{"sections":' + "[" * 100000)

    @pytest.mark.parametrize("text", [None, "", "{", '{"sections": 5}'])
    def test_load_schema_or_empty(self, text):
        assert load_schema_or_empty(text) == UISchema()


class TestExpandComposite:
    def test_expand_binds_child_to_index(self):
        template = SchemaField(id="groups", path="groups", type="tabs", label="Groups")
        child = SchemaField(
            id="name",
            path="name",
            type="text",
            label="Name",
            show_if={"field": "enableBlocking", "operator": "eq", "value": True},
        )

        expanded = expand_composite(template, child, 2)

        assert expanded.id == "groups_2_name"
        assert expanded.path == "groups[2].name"
        assert expanded.label == "Name"
        assert expanded.show_if == child.show_if

    def test_expand_is_pure(self):
        template = SchemaField(id="eps", path="a.eps", type="objectArray", label="Endpoints")
        child = SchemaField(id="ep", path="endpoint", type="text", label="Endpoint")

        first = expand_composite(template, child, 0)
        second = expand_composite(template, child, 0)

        assert first == second
        assert child.path == "endpoint"
        assert expand_composite(template, child, 1).path == "a.eps[1].endpoint"


@pytest.mark.parametrize(
    "field_type,extra,expected",
    [
        ("switch", {}, False),
        ("number", {}, 0),
        ("text", {}, ""),
        ("textarea", {}, ""),
        ("select", {}, ""),
        ("list", {}, []),
        ("urlList", {}, []),
        ("keyValue", {}, {}),
        ("objectArray", {}, []),
        ("tabs", {}, []),
        ("table", {}, []),
        ("group", {}, {}),
        ("clientSelector", {}, ""),
        ("clientSelector", {"clientSelectorOptions": {"multiple": True}}, []),
    ],
)
def test_type_default(field_type, extra, expected):
    field = SchemaField.model_validate({"id": "f", "path": "f", "type": field_type, "label": "F", **extra})
    assert type_default(field) == expected


def test_icon_name():
    assert icon_name("users") == "person.2"
    assert icon_name("custom.symbol") == "custom.symbol"
