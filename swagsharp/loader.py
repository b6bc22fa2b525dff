"""Load and validate an OpenAPI / Swagger document.

Reads JSON (or YAML) and extracts paths and schema definitions. Swagger 2.0
keeps schemas under ``definitions``; OpenAPI 3 under ``components.schemas``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .errors import SpecError

SPEC_PATH = Path(__file__).parent.parent / "spec" / "openapi.json"

_YAML_SUFFIXES = {".yaml", ".yml"}


def parse_spec_text(text: str, suffix: str = ".json") -> dict[str, Any]:
    """Parse document text and check its root keys."""
    suffix = suffix.lower()
    try:
        if suffix in _YAML_SUFFIXES:
            doc = yaml.safe_load(text)
        elif suffix == ".json":
            doc = json.loads(text)
        else:
            # YAML is a superset of JSON
            doc = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SpecError(f"document is not valid structured data: {exc}") from exc
    return validate_spec(doc)


def load_spec(path: Path | None = None) -> dict[str, Any]:
    """Load the OpenAPI spec from disk."""
    spec_file = Path(path) if path is not None else SPEC_PATH
    try:
        text = spec_file.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SpecError(f"{spec_file} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise SpecError(f"cannot read {spec_file}: {exc}") from exc
    return parse_spec_text(text, spec_file.suffix)


def validate_spec(doc: Any) -> dict[str, Any]:
    """Reject documents that cannot be generated from at all."""
    if not isinstance(doc, dict):
        raise SpecError("document root must be an object")
    if not isinstance(doc.get("paths"), dict):
        raise SpecError("document has no 'paths' object")
    if not isinstance(_schema_container(doc), dict):
        raise SpecError("document has neither 'definitions' nor 'components.schemas'")
    return doc


def _schema_container(spec: dict[str, Any]) -> Any:
    if "definitions" in spec:
        return spec["definitions"]
    components = spec.get("components")
    if isinstance(components, dict):
        return components.get("schemas")
    return None


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    return spec.get("paths") or {}


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract schema definitions (Swagger 2.0 or OpenAPI 3).

    Keys are returned as strings; YAML may load names like ``404`` as ints.
    """
    return {str(name): schema for name, schema in (_schema_container(spec) or {}).items()}
