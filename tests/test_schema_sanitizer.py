import copy

import pytest
from bedrock_chat_lib.llm_impl.bedrock import schema_sanitizer
from bedrock_chat_lib.llm_impl.bedrock.schema_sanitizer import (
    sanitize_function_name,
    sanitize_schema,
    sanitize_tool_schema,
    try_parse_json_object,
)


def test_unknown_keywords_are_dropped():
    """Tests that only allow-listed keywords survive."""
    schema = {
        "type": "object",
        "title": "Params",
        "$schema": "http://json-schema.org/draft-07/schema#",
        "properties": {"q": {"type": "string", "title": "Query", "examples": ["x"], "minLength": 1}},
        "required": ["q"],
    }

    sanitized = sanitize_schema(schema)

    assert sanitized == {
        "type": "object",
        "properties": {"q": {"type": "string", "minLength": 1}},
        "required": ["q"],
    }


@pytest.mark.parametrize("bad_input", [None, "string", 42, [], ["type", "object"]])
def test_malformed_input_degrades_to_empty_object(bad_input):
    assert sanitize_schema(bad_input) == {"type": "object", "properties": {}}


def test_missing_type_defaults_to_object():
    assert sanitize_schema({"description": "no type"}) == {
        "description": "no type",
        "type": "object",
        "properties": {},
    }


def test_composite_prefers_string_branch():
    schema = {"anyOf": [{"type": "number"}, {"type": "string", "format": "date"}, {"type": "null"}]}

    assert sanitize_schema(schema) == {"type": "string", "format": "date"}


def test_composite_without_string_takes_first_branch():
    schema = {"oneOf": [{"type": "boolean"}, {"type": "number"}]}

    assert sanitize_schema(schema) == {"type": "boolean"}


def test_all_of_is_collapsed_too():
    schema = {"allOf": [{"type": "object", "properties": {"a": {"type": "string"}}}]}

    assert sanitize_schema(schema) == {"type": "object", "properties": {"a": {"type": "string"}}}


@pytest.mark.parametrize("name", ["id", "user_id", "maxResults", "pageSize", "offset", "ROW_COUNT", "cellId"])
def test_identifier_like_numbers_become_integers(name):
    schema = {"type": "object", "properties": {name: {"type": "number"}}}

    assert sanitize_schema(schema)["properties"][name]["type"] == "integer"


def test_other_numbers_stay_numbers():
    schema = {"type": "object", "properties": {"temperature": {"type": "number"}}}

    assert sanitize_schema(schema)["properties"]["temperature"]["type"] == "number"


def test_top_level_number_without_name_is_untouched():
    assert sanitize_schema({"type": "number"}) == {"type": "number"}


def test_required_keeps_only_strings():
    schema = {"type": "object", "properties": {"a": {"type": "string"}}, "required": ["a", 1, None]}

    assert sanitize_schema(schema)["required"] == ["a"]


def test_non_list_required_becomes_empty():
    schema = {"type": "object", "properties": {}, "required": "a"}

    assert sanitize_schema(schema)["required"] == []


def test_non_boolean_additional_properties_is_dropped():
    schema = {
        "type": "object",
        "properties": {
            "strict": {"type": "object", "additionalProperties": False},
            "loose": {"type": "object", "additionalProperties": {"type": "string"}},
        },
    }

    sanitized = sanitize_schema(schema)

    assert sanitized["properties"]["strict"]["additionalProperties"] is False
    assert "additionalProperties" not in sanitized["properties"]["loose"]


def test_array_items_handling():
    schema = {
        "type": "object",
        "properties": {
            "tuple": {"type": "array", "items": [{"type": "integer"}, {"type": "string"}]},
            "single": {"type": "array", "items": {"type": "string", "title": "x"}},
            "missing": {"type": "array"},
        },
    }

    props = sanitize_schema(schema)["properties"]

    assert props["tuple"]["items"] == {"type": "integer"}
    assert props["single"]["items"] == {"type": "string"}
    assert props["missing"]["items"] == {"type": "string"}


def test_input_is_not_modified():
    schema = {"type": "object", "properties": {"count": {"type": "number", "title": "Count"}}}
    original = copy.deepcopy(schema)

    sanitize_schema(schema)

    assert schema == original


def test_circular_schema_does_not_recurse_forever():
    schema: dict = {"type": "object", "properties": {}}
    schema["properties"]["self"] = schema

    sanitized = sanitize_schema(schema)

    assert sanitized["properties"]["self"] == {"type": "object", "properties": {}}


IDEMPOTENCE_CASES = [
    {},
    {"type": "object", "properties": {"id": {"type": "number"}}, "required": ["id", 3]},
    {"anyOf": [{"type": "null"}, {"type": "object", "properties": {"limit": {"type": "number"}}}]},
    {"type": "array", "items": [{"oneOf": [{"type": "integer"}, {"type": "string"}]}]},
    {"type": "object", "properties": {"nested": {"properties": {"x": {"$ref": "#/$defs/X"}}}}, "additionalProperties": {}},
    {"type": ["string", "null"], "items": {"anyOf": []}, "enum": ["a", "b"]},
    {"type": "object", "properties": [1, 2], "required": "nope"},
]


@pytest.mark.parametrize("schema", IDEMPOTENCE_CASES)
def test_sanitize_is_idempotent(schema):
    once = sanitize_schema(schema)

    assert sanitize_schema(once) == once


def test_local_refs_are_resolved_before_sanitizing():
    schema = {
        "type": "object",
        "properties": {"address": {"$ref": "#/$defs/Address"}},
        "$defs": {
            "Address": {
                "type": "object",
                "title": "Address",
                "properties": {"street": {"type": "string"}, "zip_id": {"type": "number"}},
            }
        },
    }

    sanitized = sanitize_tool_schema(schema)

    assert "$defs" not in sanitized
    assert sanitized["properties"]["address"] == {
        "type": "object",
        "properties": {"street": {"type": "string"}, "zip_id": {"type": "integer"}},
    }


def test_recursive_refs_are_left_unresolved():
    schema = {
        "type": "object",
        "properties": {"node": {"$ref": "#/$defs/Node"}},
        "$defs": {"Node": {"type": "object", "properties": {"child": {"$ref": "#/$defs/Node"}}}},
    }

    assert schema_sanitizer.resolve_refs(schema) is schema
    assert sanitize_tool_schema(schema)["properties"]["node"] == {"type": "object", "properties": {}}


def test_missing_tool_schema_is_empty_object():
    assert sanitize_tool_schema(None) == {"type": "object", "properties": {}}


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("get_weather", "get_weather"),
        ("search-files", "search-files"),
        ("my tool!", "my_tool_"),
        ("1st_tool", "tool_1st_tool"),
        ("_private", "tool_private"),
        ("a__b___c", "a_b_c"),
        ("", "tool"),
        (None, "tool"),
        (123, "tool"),
    ],
)
def test_sanitize_function_name(raw, expected):
    assert sanitize_function_name(raw) == expected


def test_sanitize_function_name_truncates_to_64_chars():
    assert len(sanitize_function_name("x" * 100)) == 64


@pytest.mark.parametrize(
    "text, expected",
    [
        ('{"a": 1}', {"a": 1}),
        ("{}", {}),
        ('{"a": ', None),
        ("[1, 2]", None),
        ('"{"', None),
        ("42", None),
        ("", None),
    ],
)
def test_try_parse_json_object(text, expected):
    assert try_parse_json_object(text) == expected
