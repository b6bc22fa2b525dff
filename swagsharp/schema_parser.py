"""Classify schema nodes and map them to C# type names.

Handles:
- Classification of top-level definitions (enum / object / simple / fallback)
- $ref resolution by name only (last path segment, sanitized)
- string/integer/number formats
- Arrays, one `items` hop deep
- Maps via `additionalProperties`
- Parameter types (Swagger 2.0 inline types and `schema` wrappers)
- Operation return types (Swagger 2.0 `schema`, OpenAPI 3 `content`)
"""

from __future__ import annotations

import re
from typing import Any

from .models import ModelKind
from .naming import sanitize_type_name
from .schema_node import SchemaNode

OBJECT = "object"
VOID = "void"

# C# types that never name a generated model
BUILTIN_TYPES: frozenset[str] = frozenset({
    "string", "int", "long", "decimal", "float", "double", "bool", "byte",
    "short", "char", "object", "void", "DateTime", "Guid", "List",
    "Dictionary", "Task",
})

_SUCCESS_STATUSES = ("200", "201")
_JSON_CONTENT_TYPES = ("application/json", "text/json", "*/*")

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _node(value: Any) -> SchemaNode:
    return value if isinstance(value, SchemaNode) else SchemaNode(value)


def classify(node: SchemaNode | dict) -> ModelKind:
    """Decide how a top-level definition is emitted. First match wins."""
    node = _node(node)
    if node.has("enum"):
        return ModelKind.ENUM
    if node.has("properties"):
        return ModelKind.OBJECT
    if node.has("type"):
        return ModelKind.SIMPLE_WRAPPER
    return ModelKind.FALLBACK


def ref_type_name(ref: str | None) -> str:
    """Type name for a ``$ref`` pointer: its sanitized last segment."""
    if not ref:
        return OBJECT
    return sanitize_type_name(ref.rsplit("/", 1)[-1])


def _scalar_type(schema_type: str | None, fmt: str | None) -> str | None:
    """C# name for a primitive schema type, or None if not primitive."""
    if schema_type == "string":
        if fmt in ("date-time", "date"):
            return "DateTime"
        if fmt in ("byte", "binary"):
            return "byte[]"
        return "string"
    if schema_type == "integer":
        return "long" if fmt == "int64" else "int"
    if schema_type == "number":
        if fmt == "float":
            return "float"
        if fmt == "double":
            return "double"
        return "decimal"
    if schema_type == "boolean":
        return "bool"
    return None


def resolve_type(node: SchemaNode | dict) -> str:
    """Resolve a property or definition schema to a C# type name."""
    node = _node(node)

    ref = node.get_str("$ref")
    if ref is not None:
        return ref_type_name(ref)

    if not node.has("type"):
        return OBJECT

    schema_type = node.get_str("type")
    scalar = _scalar_type(schema_type, node.get_str("format"))
    if scalar is not None:
        return scalar
    if schema_type == "array":
        return f"List<{resolve_item_type(node.try_get('items'))}>"
    if schema_type == "object":
        return resolve_map_type(node)
    return OBJECT


def resolve_item_type(items: SchemaNode | None) -> str:
    """Element type of an array; nested containers are not followed."""
    if items is None:
        return OBJECT
    ref = items.get_str("$ref")
    if ref is not None:
        return ref_type_name(ref)
    scalar = _scalar_type(items.get_str("type"), items.get_str("format"))
    return scalar if scalar is not None else OBJECT


def resolve_map_type(node: SchemaNode) -> str:
    """``Dictionary<string, T>`` for maps, ``object`` for anything else."""
    additional = node.try_get("additionalProperties")
    if additional is None or additional.value is False:
        return OBJECT
    if not additional.is_object:
        return f"Dictionary<string, {OBJECT}>"
    return f"Dictionary<string, {resolve_type(additional)}>"


def get_description(node: SchemaNode | dict) -> str:
    return _node(node).get_str("description") or ""


def resolve_parameter_type(parameter: SchemaNode | dict) -> str:
    """Type of an operation parameter.

    OpenAPI 3 and Swagger 2.0 body parameters carry a ``schema``; Swagger 2.0
    path/query/header parameters put ``type``/``format``/``items`` inline.
    """
    parameter = _node(parameter)
    schema = parameter.try_get("schema")
    if schema is not None:
        return resolve_type(schema)
    return resolve_type(parameter)


def _success_response(operation: SchemaNode) -> SchemaNode | None:
    responses = operation.try_get("responses")
    if responses is None:
        return None
    for status in _SUCCESS_STATUSES:
        response = responses.try_get(status)
        if response is not None:
            return response
    return None


def _json_schema(holder: SchemaNode) -> SchemaNode | None:
    """The schema of a response or request body, in either spec version."""
    schema = holder.try_get("schema")
    if schema is not None:
        return schema
    content = holder.try_get("content")
    if content is None:
        return None
    for content_type in _JSON_CONTENT_TYPES:
        media = content.try_get(content_type)
        if media is not None and media.has("schema"):
            return media.try_get("schema")
    for _, media in content.children():
        if media.has("schema"):
            return media.try_get("schema")
    return None


def get_return_type(operation: SchemaNode | dict) -> str:
    """Return type of an operation; ``void`` when no success schema exists."""
    response = _success_response(_node(operation))
    if response is None:
        return VOID
    schema = _json_schema(response)
    if schema is None:
        return VOID
    return resolve_type(schema)


def get_request_body(operation: SchemaNode | dict) -> tuple[SchemaNode, bool] | None:
    """OpenAPI 3 ``requestBody``: (schema, required), or None."""
    body = _node(operation).try_get("requestBody")
    if body is None:
        return None
    schema = _json_schema(body)
    if schema is None:
        return None
    return schema, body.is_true("required")


def referenced_type_names(type_name: str) -> list[str]:
    """Model names mentioned in a resolved type, in order, without builtins.

    ``Dictionary<string, List<Order>>`` -> ``["Order"]``.
    """
    names: list[str] = []
    for match in _IDENTIFIER_RE.findall(type_name):
        if match not in BUILTIN_TYPES and match not in names:
            names.append(match)
    return names
