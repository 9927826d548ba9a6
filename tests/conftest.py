import json

import pytest

from appform.document import ConfigDocument
from appform.form import FormSession
from appform.schema import UISchema


BLOCKING_SCHEMA = {
    "description": "Block domain names per client group",
    "sections": [
        {
            "title": "General",
            "icon": "settings",
            "fields": [
                {
                    "id": "enableBlocking",
                    "path": "enableBlocking",
                    "type": "switch",
                    "label": "Enable Blocking",
                    "default": True,
                },
                {
                    "id": "blockListUrlUpdateIntervalHours",
                    "path": "blockListUrlUpdateIntervalHours",
                    "type": "number",
                    "label": "Update Interval",
                    "default": 24,
                    "min": 1,
                    "max": 168,
                    "suffix": "hours",
                    "showIf": {"field": "enableBlocking", "operator": "eq", "value": True},
                },
                {
                    "id": "blockingAnswerTtl",
                    "path": "blockingAnswerTtl",
                    "type": "number",
                    "label": "Answer TTL",
                    "hideIf": {"field": "enableBlocking", "operator": "eq", "value": False},
                },
            ],
        },
        {
            "title": "Groups",
            "icon": "users",
            "showIf": {"field": "enableBlocking", "operator": "eq", "value": True},
            "fields": [
                {
                    "id": "groups",
                    "path": "groups",
                    "type": "tabs",
                    "label": "Groups",
                    "tabsOptions": {
                        "nameField": "name",
                        "minTabs": 1,
                        "defaultItem": {"enableBlocking": True, "allowed": []},
                        "itemSchema": {
                            "fields": [
                                {"id": "name", "path": "name", "type": "text", "label": "Name", "required": True},
                                {
                                    "id": "blockListUrls",
                                    "path": "blockListUrls",
                                    "type": "urlList",
                                    "label": "Block List URLs",
                                },
                            ]
                        },
                    },
                },
                {
                    "id": "networkGroupMap",
                    "path": "networkGroupMap",
                    "type": "keyValue",
                    "label": "Network Group Map",
                },
            ],
        },
        {
            "title": "Local Endpoints",
            "fields": [
                {
                    "id": "localEndPointGroupMap",
                    "path": "localEndPointGroupMap",
                    "type": "objectArray",
                    "label": "Endpoints",
                    "maxItems": 2,
                    "itemSchema": {
                        "titleField": "endpoint",
                        "fields": [
                            {"id": "endpoint", "path": "endpoint", "type": "text", "label": "Endpoint"},
                            {"id": "group", "path": "group", "type": "text", "label": "Group", "default": "default"},
                        ],
                    },
                },
                {
                    "id": "clients",
                    "path": "clients",
                    "type": "clientSelector",
                    "label": "Clients",
                    "clientSelectorOptions": {"multiple": True},
                },
                {
                    "id": "network",
                    "path": "network",
                    "type": "group",
                    "label": "Network",
                    "groupFields": [
                        {
                            "id": "network.subnet",
                            "path": "network.subnet",
                            "type": "text",
                            "label": "Subnet",
                            "pattern": "[0-9.]+/[0-9]+",
                            "patternMessage": "Use CIDR notation",
                        }
                    ],
                },
            ],
        },
    ],
}


BLOCKING_CONFIG = {
    "enableBlocking": True,
    "blockListUrlUpdateIntervalHours": 24,
    "networkGroupMap": {"0.0.0.0/0": "everyone"},
    "groups": [
        {"name": "everyone", "enableBlocking": True, "blockListUrls": ["https://example.com/hosts.txt"]},
        {"name": "kids", "enableBlocking": True, "blockListUrls": []},
    ],
}


@pytest.fixture
def schema_data():
    return json.loads(json.dumps(BLOCKING_SCHEMA))


@pytest.fixture
def config_data():
    return json.loads(json.dumps(BLOCKING_CONFIG))


@pytest.fixture
def ui_schema(schema_data):
    return UISchema.model_validate(schema_data)


@pytest.fixture
def session(ui_schema, config_data):
    return FormSession(ui_schema, ConfigDocument(config_data))
