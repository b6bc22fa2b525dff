"""Shared fixtures for generator tests.

``scenario_spec`` is the smallest useful document: one enum, one object and
one tagged GET endpoint. The bundled ``spec/openapi.json`` covers the rest.
"""

from __future__ import annotations

import copy
from typing import Any

import pytest

from swagsharp.config import GeneratorConfig
from swagsharp.loader import load_spec
from swagsharp.models import GenerationReport

SCENARIO_SPEC: dict[str, Any] = {
    "swagger": "2.0",
    "info": {"title": "Orders", "version": "1"},
    "paths": {
        "/orders/{id}": {
            "get": {
                "tags": ["Orders"],
                "operationId": "getOrderUsingGET",
                "parameters": [
                    {"name": "id", "in": "path", "required": True, "type": "integer"},
                ],
                "responses": {
                    "200": {"description": "OK", "schema": {"$ref": "#/definitions/Order"}},
                },
            },
        },
    },
    "definitions": {
        "Status": {"type": "string", "enum": ["active", "inactive"]},
        "Order": {
            "type": "object",
            "required": ["id"],
            "properties": {
                "id": {"type": "integer"},
                "note": {"type": "string"},
            },
        },
    },
}


@pytest.fixture
def scenario_spec() -> dict[str, Any]:
    """A fresh copy of the minimal document; tests may mutate it."""
    return copy.deepcopy(SCENARIO_SPEC)


@pytest.fixture(scope="session")
def sample_spec() -> dict[str, Any]:
    """The bundled sample document, loaded once."""
    return load_spec()


@pytest.fixture
def config() -> GeneratorConfig:
    return GeneratorConfig()


@pytest.fixture
def report() -> GenerationReport:
    return GenerationReport()
