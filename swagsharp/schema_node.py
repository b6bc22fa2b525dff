"""Read-only accessor over one node of a loaded OpenAPI document.

Schema nodes are plain JSON values (dicts, lists, strings, ...). The accessor
gives classification and type resolution a small, typed surface instead of
probing dicts with ``.get`` everywhere.
"""

from __future__ import annotations

import json
from typing import Any, Iterator


class SchemaNode:
    """Wrap a JSON value and expose optional children."""

    __slots__ = ("_value",)

    def __init__(self, value: Any) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f"SchemaNode({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SchemaNode):
            return self._value == other._value
        return NotImplemented

    @property
    def value(self) -> Any:
        return self._value

    @property
    def is_object(self) -> bool:
        return isinstance(self._value, dict)

    @property
    def is_array(self) -> bool:
        return isinstance(self._value, list)

    def has(self, key: str) -> bool:
        return self.is_object and key in self._value

    def try_get(self, key: str) -> SchemaNode | None:
        """Return the child under ``key``, or None when absent."""
        if not self.has(key):
            return None
        return SchemaNode(self._value[key])

    def get_str(self, key: str) -> str | None:
        """Return a string child; non-string children count as absent."""
        child = self._value.get(key) if self.is_object else None
        return child if isinstance(child, str) else None

    def is_true(self, key: str) -> bool:
        """True only when the child is the JSON boolean ``true``."""
        return self.is_object and self._value.get(key) is True

    def children(self) -> Iterator[tuple[str, SchemaNode]]:
        """Iterate (key, node) pairs of an object node in document order."""
        if self.is_object:
            for key, value in self._value.items():
                yield key, SchemaNode(value)

    def elements(self) -> Iterator[SchemaNode]:
        """Iterate the elements of an array node."""
        if self.is_array:
            for value in self._value:
                yield SchemaNode(value)

    def as_text(self) -> str:
        """Render a scalar the way it should appear in generated code.

        Strings are returned as-is; anything else uses its JSON text.
        """
        if isinstance(self._value, str):
            return self._value
        return json.dumps(self._value)
