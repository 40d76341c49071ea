# tests/test_json_naming_converter.py
from __future__ import annotations

import pytest

from functions.utils.json_naming_converter import (
    CaseDirection,
    camel_to_snake,
    convert_keys,
    convert_keys_camel_to_snake,
    convert_keys_snake_to_camel,
    snake_to_camel,
)


def test_snake_to_camel_basic() -> None:
    assert snake_to_camel("brand_type_id") == "brandTypeId"
    assert snake_to_camel("stock_count") == "stockCount"
    assert snake_to_camel("x") == "x"  # unchanged when no underscore


def test_snake_to_camel_only_rewrites_underscore_before_lowercase_letter() -> None:
    assert snake_to_camel("address_2") == "address_2"
    assert snake_to_camel("weird_Key") == "weird_Key"
    assert snake_to_camel("trailing_") == "trailing_"
    assert snake_to_camel("_private") == "Private"
    assert snake_to_camel("a__b") == "a_B"


def test_camel_to_snake_basic() -> None:
    assert camel_to_snake("brandTypeId") == "brand_type_id"
    assert camel_to_snake("mimeType") == "mime_type"
    assert camel_to_snake("name") == "name"


def test_camel_to_snake_leading_uppercase_gets_leading_underscore() -> None:
    # current contract, see module docstring
    assert camel_to_snake("Name") == "_name"
    assert camel_to_snake("URL") == "_u_r_l"


def test_convert_keys_examples() -> None:
    assert convert_keys({"brand_type_id": 1}, CaseDirection.TO_CAMEL) == {"brandTypeId": 1}
    assert convert_keys({"brandTypeId": 1}, CaseDirection.TO_SNAKE) == {"brand_type_id": 1}
    assert convert_keys({"Name": 1}, CaseDirection.TO_SNAKE) == {"_name": 1}


def test_convert_keys_accepts_direction_value() -> None:
    assert convert_keys({"car_model_id": 6}, "to_camel") == {"carModelId": 6}

    with pytest.raises(ValueError):
        convert_keys({}, "sideways")


def test_convert_keys_snake_to_camel_converts_nested_dict_and_list_keys() -> None:
    row = {
        "id": 6,
        "brand_id": 16,
        "brand": {"name": "Ford", "brand_type_id": 1},
        "car_models": [
            {"car_model_id": 6, "initial_year": 2011, "last_year": 2014},
        ],
    }

    out = convert_keys_snake_to_camel(row)

    assert out == {
        "id": 6,
        "brandId": 16,
        "brand": {"name": "Ford", "brandTypeId": 1},
        "carModels": [{"carModelId": 6, "initialYear": 2011, "lastYear": 2014}],
    }


def test_convert_keys_preserves_values_order_and_key_order() -> None:
    inp = {"z_last": "keep_this_value", "a_first": [3, 1, 2], "m_mid": None}

    out = convert_keys_snake_to_camel(inp)

    assert list(out.keys()) == ["zLast", "aFirst", "mMid"]
    assert out["zLast"] == "keep_this_value"  # values never rewritten
    assert out["aFirst"] == [3, 1, 2]
    assert out["mMid"] is None


def test_convert_keys_leaves_primitives_intact() -> None:
    for value in ("snake_value", 123, 1.5, None, True):
        assert convert_keys_snake_to_camel(value) == value
        assert convert_keys_camel_to_snake(value) == value


def test_convert_keys_does_not_mutate_input() -> None:
    inp = {"person": {"last_name": "Pérez"}, "items": [{"order_id": 1}]}

    convert_keys_snake_to_camel(inp)

    assert inp == {"person": {"last_name": "Pérez"}, "items": [{"order_id": 1}]}


def test_convert_keys_keeps_non_string_keys() -> None:
    assert convert_keys_snake_to_camel({1: {"file_type_id": 2}}) == {1: {"fileTypeId": 2}}


def test_round_trip_restores_lowercase_snake_keys() -> None:
    inp = {"product_type_id": 1, "files": [{"storage_path": "/a.png", "mime_type": "image/png"}]}

    assert convert_keys_camel_to_snake(convert_keys_snake_to_camel(inp)) == inp


def test_round_trip_is_not_guaranteed_for_leading_uppercase_keys() -> None:
    inp = {"Name": "Acura"}

    assert convert_keys_camel_to_snake(convert_keys_snake_to_camel(inp)) == {"_name": "Acura"}
