"""Group API operations into services by their first tag.

Each (path, method) pair with ``tags`` and a non-empty ``operationId``
becomes an EndpointInfo; anything else is skipped with a warning.
"""

from __future__ import annotations

import logging
from typing import Any

from .models import EndpointInfo, GenerationReport, ParameterInfo, ServiceGroup, Skipped
from .naming import DEFAULT_SERVICE
from .schema_node import SchemaNode
from .schema_parser import get_request_body, get_return_type, resolve_parameter_type, resolve_type

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

BODY_PARAMETER = "body"


def _parameter_nodes(path_item: SchemaNode, operation: SchemaNode) -> list[SchemaNode]:
    """Path-level parameters first, replaced by same name+location overrides."""
    merged: dict[tuple[str | None, str | None], SchemaNode] = {}
    for holder in (path_item, operation):
        params = holder.try_get("parameters")
        if params is None:
            continue
        for param in params.elements():
            merged[(param.get_str("name"), param.get_str("in"))] = param
    return list(merged.values())


def parse_parameters(
    operation: SchemaNode | dict,
    path_item: SchemaNode | dict | None = None,
    item: str = "",
    report: GenerationReport | None = None,
) -> list[ParameterInfo]:
    """Parameters of one operation in declaration order."""
    operation = operation if isinstance(operation, SchemaNode) else SchemaNode(operation)
    path_item = path_item if isinstance(path_item, SchemaNode) else SchemaNode(path_item or {})

    params: list[ParameterInfo] = []
    for param in _parameter_nodes(path_item, operation):
        name = param.get_str("name")
        location = param.get_str("in")
        if not name or not location:
            if report is not None:
                report.warn(item, "parameter without 'name' or 'in' ignored")
            continue
        params.append(ParameterInfo(
            name=name,
            location=location,
            resolved_type=resolve_parameter_type(param),
            required=param.is_true("required"),
            description=param.get_str("description") or "",
        ))

    request_body = get_request_body(operation)
    if request_body is not None and not any(p.location == "body" for p in params):
        schema, required = request_body
        params.append(ParameterInfo(
            name=BODY_PARAMETER,
            location="body",
            resolved_type=resolve_type(schema),
            required=required,
            description=operation.try_get("requestBody").get_str("description") or "",
        ))

    return params


def _first_tag(tags: SchemaNode) -> str:
    for tag in tags.elements():
        if isinstance(tag.value, str) and tag.value.strip():
            return tag.value
    return DEFAULT_SERVICE


def build_endpoint(
    url: str,
    method: str,
    operation: SchemaNode,
    path_item: SchemaNode,
    report: GenerationReport,
) -> EndpointInfo | Skipped:
    item = f"{method.upper()} {url}"
    tags = operation.try_get("tags")
    if tags is None or not operation.has("operationId"):
        return Skipped(item, "missing 'tags' or 'operationId'")

    operation_id = operation.get_str("operationId")
    if not operation_id:
        return Skipped(item, "empty 'operationId'")

    return EndpointInfo(
        url=url,
        http_method=method.upper(),
        operation_id=operation_id,
        summary=operation.get_str("summary") or "",
        parameters=parse_parameters(operation, path_item, item, report),
        return_type=get_return_type(operation),
        tag=_first_tag(tags),
    )


def group_endpoints_by_tag(
    paths: dict[str, Any],
    report: GenerationReport | None = None,
) -> ServiceGroup:
    """Bucket operations by first tag, in discovery order."""
    report = report if report is not None else GenerationReport()
    services: ServiceGroup = {}

    for url, raw_item in paths.items():
        path_item = SchemaNode(raw_item)
        for method, operation in path_item.children():
            if method.lower() not in HTTP_METHODS:
                continue
            result = build_endpoint(url, method, operation, path_item, report)
            if isinstance(result, Skipped):
                logger.debug("Skipping %s: %s", result.item, result.reason)
                report.record(result)
                continue
            services.setdefault(result.tag, []).append(result)

    logger.debug("Found %d service groups", len(services))
    return services
