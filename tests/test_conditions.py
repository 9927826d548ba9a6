"""Condition evaluator unit tests"""

import pytest

from appform.conditions import Condition, evaluate, is_empty, is_visible, values_equal
from appform.document import ConfigDocument


def cond(field, operator, value=None):
    return Condition(field=field, operator=operator, value=value)


class TestEq:
    @pytest.mark.parametrize(
        "document,expected",
        [
            ({"enableBlocking": True}, True),
            ({"enableBlocking": False}, False),
            ({}, False),
        ],
    )
    def test_eq_true_literal(self, document, expected):
        assert evaluate(cond("enableBlocking", "eq", True), document) is expected

    def test_eq_accepts_config_document(self):
        doc = ConfigDocument({"mode": "strict"})
        assert evaluate(cond("mode", "eq", "strict"), doc) is True

    def test_eq_nested_path(self):
        doc = {"groups": [{"name": "kids"}]}
        assert evaluate(cond("groups[0].name", "eq", "kids"), doc) is True

    def test_neq_is_negation_of_eq(self):
        for doc in ({"a": 1}, {"a": 2}, {}):
            assert evaluate(cond("a", "neq", 1), doc) is not evaluate(cond("a", "eq", 1), doc)

    def test_eq_missing_equals_null_literal(self):
        assert evaluate(cond("a", "eq", None), {}) is True
        assert evaluate(cond("a", "eq", None), {"a": None}) is True
        assert evaluate(cond("a", "eq", None), {"a": 0}) is False


class TestValuesEqual:
    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("x", "x", True),
            ("x", "y", False),
            (1, 1.0, True),
            (3, 4, False),
            (True, True, True),
            (True, False, False),
            (True, 1, False),
            (0, False, False),
            (5, "5", True),
            (True, "true", True),
            ([1, 2], [1, 2], True),
            ({"a": 1, "b": 2}, {"b": 2, "a": 1}, True),
            ([1], "x", False),
            ([1], [1.0], True),
            ([1, 2], [1], False),
            ([True], [1], False),
            ([1, 2], "[1,2]", False),
            ({"a": 1}, {"a": 1.0}, True),
            ({"a": 1}, {"a": 1, "b": None}, False),
            ({"a": [1]}, '{"a":[1]}', False),
        ],
    )
    def test_values_equal(self, a, b, expected):
        assert values_equal(a, b) is expected


class TestContains:
    @pytest.mark.parametrize(
        "document,expected",
        [
            ({"tags": ["prod", "dev"]}, True),
            ({"tags": []}, False),
            ({}, False),
            ({"tags": "prod"}, False),
        ],
    )
    def test_contains(self, document, expected):
        assert evaluate(cond("tags", "contains", "prod"), document) is expected

    def test_contains_null_literal_is_false(self):
        assert evaluate(cond("tags", "contains"), {"tags": [None]}) is False

    def test_contains_uses_loose_equality(self):
        assert evaluate(cond("ports", "contains", "53"), {"ports": [53, 853]}) is True


class TestEmpty:
    @pytest.mark.parametrize(
        "document,expected",
        [
            ({}, True),
            ({"v": None}, True),
            ({"v": ""}, True),
            ({"v": []}, True),
            ({"v": {}}, True),
            ({"v": "x"}, False),
            ({"v": [0]}, False),
            ({"v": {"k": 1}}, False),
            ({"v": 0}, False),
            ({"v": False}, False),
        ],
    )
    def test_empty_and_not_empty_are_negations(self, document, expected):
        assert evaluate(cond("v", "empty"), document) is expected
        assert evaluate(cond("v", "notEmpty"), document) is (not expected)

    def test_is_empty_helper(self):
        assert is_empty("") is True
        assert is_empty("a") is False


@pytest.mark.parametrize("operator", ["gt", "matches", "", "EQ", "startsWith"])
def test_unknown_operator_is_permissive(operator):
    assert evaluate(cond("anything", operator, 1), {}) is True
    assert evaluate(cond("anything", operator, 1), {"anything": 2}) is True


class TestIsVisible:
    def test_no_conditions_is_visible(self):
        assert is_visible(None, None, {}) is True

    def test_show_if(self):
        show = cond("on", "eq", True)
        assert is_visible(show, None, {"on": True}) is True
        assert is_visible(show, None, {"on": False}) is False

    def test_hide_if(self):
        hide = cond("on", "eq", False)
        assert is_visible(None, hide, {"on": False}) is False
        assert is_visible(None, hide, {"on": True}) is True

    def test_hide_if_wins_over_show_if(self):
        show = cond("mode", "notEmpty")
        hide = cond("mode", "eq", "off")
        assert is_visible(show, hide, {"mode": "on"}) is True
        assert is_visible(show, hide, {"mode": "off"}) is False
        assert is_visible(show, hide, {}) is False


def test_condition_decodes_from_json_shape():
    condition = Condition.model_validate({"field": "tags", "operator": "contains", "value": "prod"})
    assert condition.field == "tags"
    assert condition.operator == "contains"
    assert condition.value == "prod"
