"""Render templates and collect the generated C# sources.

Takes the contexts from context_builder and produces one artifact per model,
service interface and service implementation. A failure in one item is
recorded in the report and never stops the others.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import jinja2

from .config import GeneratorConfig
from .context_builder import (
    build_method_context,
    build_model_context,
    build_model_inventory,
    build_service_context,
)
from .endpoints import group_endpoints_by_tag
from .loader import get_paths, get_schemas
from .models import (
    Artifact,
    EndpointInfo,
    Failed,
    Generated,
    GenerationReport,
    ItemResult,
    ModelDescriptor,
    ModelKind,
    ModelNamespaceIndex,
    ServiceGroup,
)
from .naming import service_base_name, unique_name

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

MODEL_TEMPLATES: dict[ModelKind, str] = {
    ModelKind.ENUM: "enum.cs.j2",
    ModelKind.OBJECT: "record.cs.j2",
    ModelKind.SIMPLE_WRAPPER: "wrapper.cs.j2",
    ModelKind.FALLBACK: "fallback.cs.j2",
}
INTERFACE_TEMPLATE = "service_interface.cs.j2"
IMPLEMENTATION_TEMPLATE = "service_implementation.cs.j2"


@lru_cache(maxsize=None)
def template_environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )


def render(template_name: str, context: dict[str, Any]) -> str:
    return template_environment().get_template(template_name).render(**context)


def generate_model(descriptor: ModelDescriptor, index: ModelNamespaceIndex) -> ItemResult:
    """Render one model; errors come back as Failed."""
    try:
        context = build_model_context(descriptor, index)
        content = render(MODEL_TEMPLATES[descriptor.kind], context)
    except Exception as exc:
        logger.debug("Model %s failed", descriptor.source_name, exc_info=True)
        return Failed(descriptor.source_name, f"model generation failed: {exc}")

    path = f"{descriptor.folder}/{descriptor.name}.cs"
    logger.debug("Generated %s (%s)", path, descriptor.kind.value)
    return Generated(Artifact(path=path, content=content, kind=descriptor.kind.value))


def build_methods(
    tag: str,
    owner: str,
    endpoints: list[EndpointInfo],
    report: GenerationReport,
) -> list[dict[str, Any]]:
    """Method contexts for a service; failed endpoints are left out."""
    methods: list[dict[str, Any]] = []
    used: set[str] = set()
    for endpoint in endpoints:
        item = f"{tag}: {endpoint.http_method} {endpoint.url}"
        try:
            method = build_method_context(endpoint, owner, used)
        except Exception as exc:
            logger.debug("Method for %s failed", item, exc_info=True)
            report.record(Failed(item, f"method generation failed for {endpoint.operation_id}: {exc}"))
            continue
        if method["client_call"] is None:
            report.warn(item, f"HTTP method {endpoint.http_method} has no client call; method throws")
        used.add(method["base_name"])
        methods.append(method)
    return methods


def generate_service(
    service_name: str,
    tag: str,
    endpoints: list[EndpointInfo],
    config: GeneratorConfig,
    index: ModelNamespaceIndex,
    report: GenerationReport,
) -> list[ItemResult]:
    """Render the interface and implementation of one service group."""
    try:
        methods = build_methods(tag, f"{service_name}Service", endpoints, report)
        context = build_service_context(service_name, tag, methods, endpoints, config, index)
        interface = render(INTERFACE_TEMPLATE, context)
        implementation = render(IMPLEMENTATION_TEMPLATE, context)
    except Exception as exc:
        logger.debug("Service %s failed", tag, exc_info=True)
        return [Failed(tag, f"service generation failed: {exc}")]

    return [
        Generated(Artifact(
            path=f"Services/Interfaces/{context['interface_name']}.cs",
            content=interface,
            kind="interface",
        )),
        Generated(Artifact(
            path=f"Services/Implementations/{context['class_name']}.cs",
            content=implementation,
            kind="implementation",
        )),
    ]


def generate_models(
    schemas: dict[str, Any],
    config: GeneratorConfig,
    report: GenerationReport,
) -> ModelNamespaceIndex:
    descriptors, index = build_model_inventory(schemas, config, report)
    logger.info("Found %d definitions", len(descriptors))
    for descriptor in descriptors:
        report.record(generate_model(descriptor, index))
    return index


def generate_services(
    services: ServiceGroup,
    config: GeneratorConfig,
    index: ModelNamespaceIndex,
    report: GenerationReport,
) -> None:
    logger.info("Found %d service groups", len(services))
    used: set[str] = set()
    for tag, endpoints in services.items():
        base = service_base_name(tag, config.remove_resource, config.remove_version)
        service_name = unique_name(base, used, ignore_case=True)
        if service_name != base:
            report.warn(tag, f"service name {base} already used, emitted as {service_name}")
        used.add(service_name.lower())
        for result in generate_service(service_name, tag, endpoints, config, index, report):
            report.record(result)


def generate(spec: dict[str, Any], config: GeneratorConfig | None = None) -> GenerationReport:
    """Generate models and services for a loaded, validated document."""
    config = config or GeneratorConfig()
    report = GenerationReport()

    index = generate_models(get_schemas(spec), config, report)
    services = group_endpoints_by_tag(get_paths(spec), report)
    generate_services(services, config, index, report)

    return report


def write_artifacts(report: GenerationReport, output_root: Path) -> list[Path]:
    """Write every artifact under ``output_root``."""
    written: list[Path] = []
    for artifact in report.artifacts:
        target = output_root / artifact.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(artifact.content, encoding="utf-8")
        written.append(target)
    return written
