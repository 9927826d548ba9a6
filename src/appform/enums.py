"""Enumeration type definitions"""

from enum import Enum


class FieldType(str, Enum):
    """Form control types a schema field can declare"""

    SWITCH = "switch"
    NUMBER = "number"
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    LIST = "list"
    URL_LIST = "urlList"
    KEY_VALUE = "keyValue"
    OBJECT_ARRAY = "objectArray"
    TABS = "tabs"
    CLIENT_SELECTOR = "clientSelector"
    GROUP = "group"
    TABLE = "table"


class Operator(str, Enum):
    """Comparison operators understood by visibility conditions"""

    EQ = "eq"
    NEQ = "neq"
    CONTAINS = "contains"
    EMPTY = "empty"
    NOT_EMPTY = "notEmpty"


class ResponseStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
    INVALID_TOKEN = "invalid-token"
