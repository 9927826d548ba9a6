from appform.enums import FieldType, Operator, ResponseStatus


def test_field_type_wire_values():
    assert FieldType.URL_LIST.value == "urlList"
    assert FieldType.KEY_VALUE.value == "keyValue"
    assert FieldType.OBJECT_ARRAY.value == "objectArray"
    assert FieldType.CLIENT_SELECTOR.value == "clientSelector"
    assert len(FieldType) == 13


def test_operator_is_string_enum():
    assert isinstance(Operator.NOT_EMPTY, str)
    assert Operator.NOT_EMPTY == "notEmpty"
    assert Operator("eq") is Operator.EQ


def test_response_status_values():
    assert ResponseStatus("invalid-token") is ResponseStatus.INVALID_TOKEN
