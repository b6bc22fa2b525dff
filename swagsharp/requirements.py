"""Decide whether a model property is mandatory.

Rules are checked in order and the first one that applies decides:

1. the parent's ``required`` list names the property        -> required
2. the property has ``required: true``                      -> required
3. the property has ``nullable: true``                      -> optional
4. integer/number/boolean without ``x-nullable: true``      -> required
5. any validation constraint (length, range, pattern, enum) -> required
6. otherwise                                                -> optional

Rule 3 must run before rule 4: a nullable number is optional.
"""

from __future__ import annotations

from .schema_node import SchemaNode

_VALUE_TYPES = frozenset({"integer", "number", "boolean"})
_CONSTRAINT_KEYS = ("minLength", "maxLength", "minimum", "maximum", "pattern", "enum")


def _listed_in_parent(property_name: str, parent: SchemaNode) -> bool:
    required = parent.try_get("required")
    if required is None:
        return False
    return any(item.value == property_name for item in required.elements())


def has_validation_constraints(prop: SchemaNode) -> bool:
    return any(prop.has(key) for key in _CONSTRAINT_KEYS)


def is_required(prop: SchemaNode | dict, property_name: str, parent: SchemaNode | dict) -> bool:
    prop = prop if isinstance(prop, SchemaNode) else SchemaNode(prop)
    parent = parent if isinstance(parent, SchemaNode) else SchemaNode(parent)

    if _listed_in_parent(property_name, parent):
        return True
    if prop.is_true("required"):
        return True
    if prop.is_true("nullable"):
        return False
    if prop.get_str("type") in _VALUE_TYPES:
        return not prop.is_true("x-nullable")
    return has_validation_constraints(prop)
