"""
A module for sanitizing tool schemas for the Bedrock Converse API.

This module centralizes the logic for reducing an arbitrary JSON schema to the
restricted dialect Bedrock accepts for tool inputs. Sanitization is pure and
total: malformed input degrades to an empty object schema instead of raising,
and sanitizing an already sanitized schema returns it unchanged.
"""

import json
import re
from functools import singledispatch
from typing import Any, Dict, Optional, Set, cast

import jsonref  # type: ignore

from bedrock_chat_lib.llm_core.logger import get_logger

logger = get_logger(__name__)

ALLOWED_KEYWORDS = frozenset(
    {
        "type",
        "properties",
        "required",
        "additionalProperties",
        "description",
        "enum",
        "default",
        "items",
        "minLength",
        "maxLength",
        "minimum",
        "maximum",
        "pattern",
        "format",
    }
)

COMPOSITE_KEYWORDS = ("anyOf", "oneOf", "allOf")

INTEGER_NAME_MARKERS = (
    "id",
    "limit",
    "count",
    "index",
    "size",
    "offset",
    "length",
    "results_limit",
    "maxresults",
    "debugsessionid",
    "cellid",
)

MAX_FUNCTION_NAME_LENGTH = 64

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_-]")
_REPEATED_UNDERSCORES = re.compile(r"_+")


def empty_object_schema() -> Dict[str, Any]:
    return {"type": "object", "properties": {}}


def sanitize_schema(schema: Any, prop_name: Optional[str] = None) -> Dict[str, Any]:
    """
    Performs all necessary, recursive sanitization steps on a tool schema.

    Args:
        schema: The tool input schema to sanitize. Anything that is not a dict
            yields an empty object schema.
        prop_name: Name of the property this schema describes, used to coerce
            identifier-like numbers to integers.

    Returns:
        A sanitized schema dictionary ready for the Bedrock API.
    """
    return cast(Dict[str, Any], _recursive_sanitize(schema, prop_name, set()))


def sanitize_tool_schema(schema: Any) -> Dict[str, Any]:
    """Resolves local ``$ref`` pointers and sanitizes a top-level tool input schema."""
    if schema is None:
        return empty_object_schema()
    return sanitize_schema(resolve_refs(schema))


@singledispatch
def _recursive_sanitize(schema: Any, prop_name: Optional[str], seen: Set[int]) -> Dict[str, Any]:
    """
    Recursively sanitizes a schema object. The implementation is chosen
    based on the object's type; anything but a dict is not a schema.
    """
    return empty_object_schema()


@_recursive_sanitize.register(dict)
def _(schema: dict, prop_name: Optional[str], seen: Set[int]) -> Dict[str, Any]:
    obj_id = id(schema)
    if obj_id in seen:
        # Circular reference, cut it off
        return empty_object_schema()
    seen.add(obj_id)
    try:
        return _sanitize_level(_collapse_composite(schema), prop_name, seen)
    finally:
        seen.discard(obj_id)


def _collapse_composite(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Replaces an anyOf/oneOf/allOf schema by a single branch.

    The first branch of type ``string`` wins, otherwise the first branch.
    """
    for keyword in COMPOSITE_KEYWORDS:
        branches = schema.get(keyword)
        if isinstance(branches, list) and branches:
            preferred = next(
                (b for b in branches if isinstance(b, dict) and b.get("type") == "string"),
                branches[0],
            )
            return dict(preferred) if isinstance(preferred, dict) else {}
    return schema


def _sanitize_level(schema: Dict[str, Any], prop_name: Optional[str], seen: Set[int]) -> Dict[str, Any]:
    result = {key: value for key, value in schema.items() if key in ALLOWED_KEYWORDS}

    schema_type = result.get("type")
    if schema_type is None:
        schema_type = "object"
        result["type"] = schema_type

    if schema_type == "number" and _is_integer_like_name(prop_name):
        schema_type = "integer"
        result["type"] = schema_type

    if schema_type == "object":
        properties = result.get("properties")
        if not isinstance(properties, dict):
            properties = {}
        result["properties"] = {
            str(key): _recursive_sanitize(value, str(key), seen) for key, value in properties.items()
        }

        if "required" in result:
            required = result["required"]
            result["required"] = [r for r in required if isinstance(r, str)] if isinstance(required, list) else []

        if "additionalProperties" in result and not isinstance(result["additionalProperties"], bool):
            del result["additionalProperties"]

    elif schema_type == "array":
        items = result.get("items")
        if isinstance(items, list) and items:
            result["items"] = _recursive_sanitize(items[0], None, seen)
        elif isinstance(items, dict):
            result["items"] = _recursive_sanitize(items, None, seen)
        else:
            result["items"] = {"type": "string"}

    return result


def _is_integer_like_name(prop_name: Optional[str]) -> bool:
    if not prop_name:
        return False
    lowered = prop_name.lower()
    return any(marker in lowered for marker in INTEGER_NAME_MARKERS) or lowered.endswith("_id")


def resolve_refs(schema: Any) -> Any:
    """Inlines local ``$ref`` pointers using jsonref.

    Schemas without refs are returned untouched. Recursive, remote or
    unresolvable refs are left in place; the sanitizer drops them later.
    """
    if not isinstance(schema, dict):
        return schema

    refs: Set[str] = set()
    _collect_refs(schema, refs)
    if not refs:
        return schema

    if any(not ref.startswith("#") for ref in refs):
        logger.warning("Schema contains non-local $ref pointers; leaving them unresolved.")
        return schema

    if _has_recursive_refs(schema):
        logger.warning("Schema contains recursive $ref pointers; leaving them unresolved.")
        return schema

    try:
        return jsonref.replace_refs(schema, proxies=False)
    except jsonref.JsonRefError as e:
        logger.warning(f"Failed to resolve schema references: {e}")
        return schema


def _collect_refs(node: Any, refs: Set[str]) -> None:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            refs.add(ref)
        for value in node.values():
            _collect_refs(value, refs)
    elif isinstance(node, list):
        for item in node:
            _collect_refs(item, refs)


def _has_recursive_refs(schema: Dict[str, Any]) -> bool:
    """Follows local refs through ``$defs``/``definitions`` looking for a cycle."""
    defs = schema.get("$defs") or schema.get("definitions") or {}

    def check(node: Any, path: Set[str]) -> bool:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str):
                if ref in path:
                    return True
                def_name = ref.split("/")[-1]
                if isinstance(defs, dict) and def_name in defs:
                    return check(defs[def_name], path | {ref})
                return False
            return any(check(value, path) for value in node.values())
        if isinstance(node, list):
            return any(check(item, path) for item in node)
        return False

    return check(schema, set())


def sanitize_function_name(name: Any) -> str:
    """Reduces a tool name to ``[A-Za-z0-9_-]``, starting with a letter, at most 64 chars.

    Args:
        name: The raw tool name.

    Returns:
        The sanitized name, or ``"tool"`` for empty or non-string input.
    """
    if not isinstance(name, str) or not name:
        return "tool"
    sanitized = _INVALID_NAME_CHARS.sub("_", name)
    if not sanitized[0].isascii() or not sanitized[0].isalpha():
        sanitized = f"tool_{sanitized}"
    sanitized = _REPEATED_UNDERSCORES.sub("_", sanitized)
    return sanitized[:MAX_FUNCTION_NAME_LENGTH]


def try_parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Parses ``text`` as a JSON object.

    Returns:
        The parsed dict, or None if the text is not (yet) a complete JSON object.
    """
    if not text or "{" not in text:
        return None
    try:
        value = json.loads(text)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None
