"""Group schema definitions into entity families.

A definition's category becomes its folder and namespace segment
(pluralized), so ``CreateOrderRequest``, ``OrderDto`` and ``OrderStatus`` all
land in ``Models/Orders``.
"""

from __future__ import annotations

from typing import Any, Iterable

from .naming import split_camel_case

DEFAULT_CATEGORY = "Common"

# Removed wherever they occur, in this order
_NOISE_TOKENS = (
    "Dto", "DTO", "Request", "Response", "Proxy",
    "Create", "Update", "Delete", "Filter", "Paged",
)

_COMMON_WORDS: frozenset[str] = frozenset({
    "and", "or", "the", "of", "in", "to", "for", "by", "with",
    "on", "at", "from", "as", "is", "are", "was", "were", "be",
    "has", "have", "had", "do", "does", "did", "get", "set",
    "add", "remove", "update", "delete", "create", "new", "old",
    "current", "previous", "next", "first", "last", "multiple",
    "single", "all", "any", "each", "every", "some", "no", "not",
    "type", "status", "category", "filter", "search", "find",
    "list", "page", "paged", "count", "total", "sum", "average",
    "min", "max", "value", "values", "data", "info", "detail",
    "details", "item", "items", "element", "elements", "object",
    "objects", "entity", "entities", "model", "models", "class",
    "record", "struct", "enum", "interface", "base", "abstract",
    "virtual", "override", "static", "public", "private", "protected",
    "internal", "sealed", "partial", "async", "await", "task",
})


def is_common_word(word: str) -> bool:
    return word.lower() in _COMMON_WORDS


def strip_noise_tokens(model_name: str) -> str:
    for token in _NOISE_TOKENS:
        model_name = model_name.replace(token, "")
    return model_name


def main_entity_name(name: str) -> str:
    words = split_camel_case(name)
    if not words:
        return DEFAULT_CATEGORY
    for word in words:
        if len(word) > 2 and not is_common_word(word):
            return word
    return words[0]


def categorize(model_name: str) -> str:
    """Entity family of a definition name.

    >>> categorize("CreateOrderRequest")
    'Order'
    >>> categorize("UserFilterDto")
    'User'
    """
    return main_entity_name(strip_noise_tokens(model_name))


def categorize_definitions(
    definitions: Iterable[tuple[str, Any]],
) -> dict[str, list[tuple[str, Any]]]:
    """Bucket (name, definition) pairs by category, keeping document order."""
    categories: dict[str, list[tuple[str, Any]]] = {}
    for name, definition in definitions:
        categories.setdefault(categorize(name), []).append((name, definition))
    return categories
