"""Turn arbitrary schema names into C# identifiers.

Every identifier that ends up in generated code passes through here:

  Definition key      "Page«Order»"      -> type name   PageOrder
  Property name       "order_id"         -> property    Order_id
  Property == owner   Order.order        -> property    OrderValue
  Duplicate property  id, Id             -> properties  Id, Id1
  Parameter name      "PageSize"         -> parameter   pageSize
  Parameter keyword   "class"            -> parameter   @class
  Operation id        "getOrderUsingGET" -> method      GetOrderAsync
  Tag                 "order-resource-v2"-> service     IOrderService
  Category            "Category"         -> folder      Categories
"""

from __future__ import annotations

import re
from typing import AbstractSet

UNKNOWN_MODEL = "UnknownModel"
UNKNOWN_PROPERTY = "UnknownProperty"
DEFAULT_PARAMETER = "param"
DEFAULT_SERVICE = "General"
MODEL_PREFIX = "Model"
OWNER_COLLISION_SUFFIX = "Value"

_VOWELS = frozenset("aeiou")

# Words that have no plural form
_UNCOUNTABLE: frozenset[str] = frozenset({
    "equipment", "information", "rice", "money", "news", "feedback",
    "software", "hardware", "metadata", "staff", "luggage", "furniture",
})

# Irregular plurals, keyed by lower-case singular
_IRREGULAR: dict[str, str] = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "tooth": "teeth",
    "foot": "feet",
    "mouse": "mice",
    "goose": "geese",
    "ox": "oxen",
    "fish": "fish",
    "sheep": "sheep",
    "deer": "deer",
    "series": "series",
    "species": "species",
    "criterion": "criteria",
    "phenomenon": "phenomena",
    "analysis": "analyses",
    "crisis": "crises",
    "datum": "data",
}

_CSHARP_KEYWORDS: frozenset[str] = frozenset({
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch",
    "char", "checked", "class", "const", "continue", "decimal", "default",
    "delegate", "do", "double", "else", "enum", "event", "explicit",
    "extern", "false", "finally", "fixed", "float", "for", "foreach", "goto",
    "if", "implicit", "in", "int", "interface", "internal", "is", "lock",
    "long", "namespace", "new", "null", "object", "operator", "out",
    "override", "params", "private", "protected", "public", "readonly",
    "ref", "return", "sbyte", "sealed", "short", "sizeof", "stackalloc",
    "static", "string", "struct", "switch", "this", "throw", "true", "try",
    "typeof", "uint", "ulong", "unchecked", "unsafe", "ushort", "using",
    "virtual", "void", "volatile", "while",
})


def _filter_word_chars(raw: str | None) -> str:
    """Keep letters, digits and underscores."""
    if not raw:
        return ""
    return "".join(c for c in raw if c.isalnum() or c == "_")


def sanitize_type_name(raw: str | None) -> str:
    """Make a schema name usable as a C# type name."""
    cleaned = _filter_word_chars(raw)
    if not cleaned:
        return UNKNOWN_MODEL
    if not cleaned[0].isalpha():
        cleaned = MODEL_PREFIX + cleaned
    return cleaned


def to_pascal_case(raw: str | None) -> str:
    cleaned = _filter_word_chars(raw)
    if not cleaned:
        return UNKNOWN_PROPERTY
    return cleaned[0].upper() + cleaned[1:]


def to_camel_case(raw: str | None) -> str:
    cleaned = _filter_word_chars(raw)
    if not cleaned:
        return DEFAULT_PARAMETER
    return cleaned[0].lower() + cleaned[1:]


def to_valid_class_name(raw: str | None) -> str:
    """Letters and digits only, first letter upper-cased."""
    cleaned = "".join(c for c in raw or "" if c.isalnum())
    if not cleaned:
        return DEFAULT_SERVICE
    return cleaned[0].upper() + cleaned[1:]


def escape_identifier(name: str) -> str:
    """Make an already-cased name legal as a C# identifier."""
    if name in _CSHARP_KEYWORDS:
        return "@" + name
    if name[:1].isdigit():
        return "_" + name
    return name


def resolve_property_identifier(
    raw_name: str,
    owner_type_name: str,
    used_names: AbstractSet[str],
) -> str:
    """Pick a member name that differs from its owner type and its siblings.

    ``used_names`` is read, never written: the caller adds the returned name
    before resolving the next member.
    """
    name = to_pascal_case(raw_name)
    if name in (owner_type_name, sanitize_type_name(owner_type_name)):
        name += OWNER_COLLISION_SUFFIX
    name = escape_identifier(name)

    if name in used_names:
        counter = 1
        while f"{name}{counter}" in used_names:
            counter += 1
        name = f"{name}{counter}"
    return name


def unique_name(name: str, used_names: AbstractSet[str], ignore_case: bool = False) -> str:
    """Append 1, 2, 3... to ``name`` until it is not in ``used_names``.

    With ``ignore_case`` the check is made on lower-case names and
    ``used_names`` must hold lower-case entries.
    """
    def taken(candidate: str) -> bool:
        return (candidate.lower() if ignore_case else candidate) in used_names

    if not taken(name):
        return name
    counter = 1
    while taken(f"{name}{counter}"):
        counter += 1
    return f"{name}{counter}"


def enum_member_name(value: str) -> str:
    """Name of an enum member for one ``enum`` entry."""
    for ch in ("-", " ", "."):
        value = value.replace(ch, "_")
    return to_pascal_case(value)


def _match_case(source: str, target: str) -> str:
    if len(source) > 1 and source.isupper():
        return target.upper()
    if source[:1].isupper():
        return target[:1].upper() + target[1:]
    return target


def pluralize(word: str) -> str:
    """Rule-based English plural, used for category folders."""
    if not word:
        return word

    lower = word.lower()
    if lower in _UNCOUNTABLE:
        return word
    if lower in _IRREGULAR:
        return _match_case(word, _IRREGULAR[lower])

    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    if lower.endswith("y") and len(lower) > 1:
        if lower[-2] in _VOWELS:
            return word + "s"
        return word[:-1] + "ies"
    if lower.endswith("fe"):
        return word[:-2] + "ves"
    if lower.endswith("f"):
        return word[:-1] + "ves"
    if lower.endswith("o") and len(lower) > 1 and lower[-2] not in _VOWELS:
        return word + "es"
    return word + "s"


def split_camel_case(name: str) -> list[str]:
    """Split where an upper-case letter follows a non-upper-case character.

    Runs of capitals stay together: ``HTTPServerConfig`` -> ``HTTPServer``,
    ``Config``.
    """
    words: list[str] = []
    current = ""
    for ch in name:
        if ch.isupper() and current and not current[-1].isupper():
            words.append(current)
            current = ""
        current += ch
    if current:
        words.append(current)
    return words


def clean_operation_id(operation_id: str) -> str:
    """Drop springfox-style ``...UsingGET`` suffixes.

    Everything from the first ``using`` (any case) is cut. An id that starts
    with ``using`` is returned unchanged.
    """
    index = operation_id.lower().find("using")
    if index > 0:
        return operation_id[:index]
    return operation_id


def clean_interface_name(
    name: str,
    remove_resource: bool = True,
    remove_version: bool = True,
) -> str:
    """Strip ``resource`` and version tokens (``v2``) from a service name.

    Matching is case-insensitive and never touches the first character.
    """
    if not name:
        return name

    patterns = []
    if remove_resource:
        patterns.append("resource")
    if remove_version:
        patterns.append(r"v\d+")
    if not patterns:
        return name

    pattern = r"(?<!^)(?:" + "|".join(patterns) + ")"
    return re.sub(pattern, "", name, flags=re.IGNORECASE)


def service_base_name(tag: str, remove_resource: bool = True, remove_version: bool = True) -> str:
    """Service name for a tag, without the ``I`` prefix or ``Service`` suffix."""
    cleaned = clean_interface_name(to_valid_class_name(tag), remove_resource, remove_version)
    return cleaned or DEFAULT_SERVICE
