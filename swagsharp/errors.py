"""Exceptions raised by the generator."""

from __future__ import annotations


class SwagSharpError(Exception):
    """Base class for generator errors."""


class SpecError(SwagSharpError):
    """The input document cannot be used for generation at all.

    Raised for unparseable input, a root that is not an object, or missing
    mandatory root keys (``paths`` and a schema container).
    """
