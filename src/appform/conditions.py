"""Visibility conditions for schema sections and fields."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from .document import ConfigDocument
from .enums import Operator
from .path import MISSING, get_value

logger = logging.getLogger(__name__)


class Condition(BaseModel):
    """Predicate over a document value: ``field`` compared with ``value`` via ``operator``.

    ``operator`` is kept as a plain string so that schemas written for newer
    evaluators still decode; unknown operators evaluate to true.
    """

    model_config = ConfigDict(frozen=True)

    field: str
    operator: str
    value: Any = None


def values_equal(a: Any, b: Any) -> bool:
    if _is_null(a) and _is_null(b):
        return True
    if _is_null(a) or _is_null(b):
        return False

    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(values_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(values_equal(a[key], b[key]) for key in a)
    if isinstance(a, (list, dict)) or isinstance(b, (list, dict)):
        return False

    if isinstance(a, bool) or isinstance(b, bool):
        if isinstance(a, bool) and isinstance(b, bool):
            return a == b
    elif isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    elif isinstance(a, str) and isinstance(b, str):
        return a == b

    return _string_form(a) == _string_form(b)


def is_empty(value: Any) -> bool:
    if _is_null(value):
        return True
    if isinstance(value, (str, list, dict)):
        return len(value) == 0
    return False


def evaluate(condition: Condition, document: ConfigDocument | dict) -> bool:
    data = document.data if isinstance(document, ConfigDocument) else document
    value = get_value(data, condition.field)

    operator = condition.operator

    if operator == Operator.EQ.value:
        return values_equal(value, condition.value)
    if operator == Operator.NEQ.value:
        return not values_equal(value, condition.value)
    if operator == Operator.CONTAINS.value:
        if isinstance(value, list) and condition.value is not None:
            return any(values_equal(item, condition.value) for item in value)
        return False
    if operator == Operator.EMPTY.value:
        return is_empty(value)
    if operator == Operator.NOT_EMPTY.value:
        return not is_empty(value)

    logger.debug(f"Unknown condition operator '{operator}', treating as visible")
    return True


def is_visible(
    show_if: Optional[Condition],
    hide_if: Optional[Condition],
    document: ConfigDocument | dict,
) -> bool:
    if show_if is not None and not evaluate(show_if, document):
        return False
    if hide_if is not None and evaluate(hide_if, document):
        return False
    return True


def _is_null(value: Any) -> bool:
    return value is None or value is MISSING


def _string_form(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)
