"""Build Jinja2 template contexts from classified schemas and endpoints.

Builds the model inventory (descriptors plus the namespace index), then one
context dict per model, service interface and service implementation. The
templates only lay the fragments out; every name, type and directive is
decided here.
"""

from __future__ import annotations

import re
from typing import Any, Iterable
from xml.sax.saxutils import escape

from .categorizer import categorize_definitions
from .config import GeneratorConfig
from .models import (
    EndpointInfo,
    GenerationReport,
    ModelDescriptor,
    ModelKind,
    ModelNamespaceIndex,
    ParameterInfo,
)
from .naming import (
    clean_operation_id,
    enum_member_name,
    escape_identifier,
    pluralize,
    resolve_property_identifier,
    sanitize_type_name,
    to_camel_case,
    unique_name,
)
from .requirements import is_required
from .schema_node import SchemaNode
from .schema_parser import VOID, classify, get_description, referenced_type_names, resolve_type

SYSTEM = "System"
COLLECTIONS = "System.Collections.Generic"
TASKS = "System.Threading.Tasks"
JSON_SERIALIZATION = "System.Text.Json.Serialization"

# Calls understood by the HTTP client: method -> client call
_CLIENT_CALLS: dict[str, str] = {
    "GET": "GetAsync",
    "POST": "PostAsync",
    "PUT": "PutAsync",
    "DELETE": "DeleteAsync",
}
_BODY_METHODS = {"POST", "PUT"}

_PLACEHOLDER_RE = re.compile(r"\{([^{}]*)\}")


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def summary_block(text: str) -> list[str]:
    """``/// <summary>`` comment lines for a description, or nothing."""
    text = text.strip()
    if not text:
        return []
    body = [f"/// {escape(line.strip())}".rstrip() for line in text.splitlines()]
    return ["/// <summary>", *body, "/// </summary>"]


def single_line(text: str) -> str:
    """Join a multi-line description into one line."""
    return " ".join(line.strip() for line in text.splitlines() if line.strip())


def method_docs(summary: str, parameters: list[dict[str, str]]) -> list[str]:
    lines = summary_block(summary)
    for param in parameters:
        if param["description"]:
            lines.append(f'/// <param name="{param["name"].lstrip("@")}">{param["description"]}</param>')
    return lines


def csharp_string(value: str) -> str:
    """Contents of a regular C# string literal."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def is_container(type_name: str) -> bool:
    return type_name.startswith(("List<", "Dictionary<"))


def using_directives(
    type_names: Iterable[str],
    own_namespace: str,
    index: ModelNamespaceIndex,
    extra: Iterable[str] = (),
) -> list[str]:
    """Namespaces a unit must import: System ones first, then the rest."""
    namespaces: set[str] = set(extra)
    for type_name in type_names:
        if "DateTime" in type_name:
            namespaces.add(SYSTEM)
        if "<" in type_name:
            namespaces.add(COLLECTIONS)
        for name in referenced_type_names(type_name):
            namespace = index.lookup(name)
            if namespace and namespace != own_namespace:
                namespaces.add(namespace)
    system = sorted(n for n in namespaces if n == SYSTEM or n.startswith(SYSTEM + "."))
    return system + sorted(namespaces.difference(system))


# ---------------------------------------------------------------------------
# Model inventory
# ---------------------------------------------------------------------------

def model_namespace(config: GeneratorConfig, category: str, kind: ModelKind) -> str:
    folder = sanitize_type_name(pluralize(category))
    folder = folder[0].upper() + folder[1:]
    namespace = f"{config.models_namespace}.{folder}"
    if kind is ModelKind.ENUM:
        namespace += ".Enums"
    return namespace


def build_model_inventory(
    schemas: dict[str, Any],
    config: GeneratorConfig,
    report: GenerationReport | None = None,
) -> tuple[list[ModelDescriptor], ModelNamespaceIndex]:
    """Classify every definition and index its namespace.

    The returned index is frozen: emission only reads from it.
    """
    report = report if report is not None else GenerationReport()
    index = ModelNamespaceIndex()
    descriptors: list[ModelDescriptor] = []
    # lower-case: emitted file names must not differ only by case
    used_names: set[str] = set()

    for category, models in categorize_definitions(schemas.items()).items():
        for source_name, definition in models:
            node = SchemaNode(definition)
            kind = classify(node)
            base_name = sanitize_type_name(source_name)
            name = unique_name(base_name, used_names, ignore_case=True)
            if name != base_name:
                report.warn(source_name, f"type name {base_name} already used, emitted as {name}")
            used_names.add(name.lower())

            namespace = model_namespace(config, category, kind)
            descriptors.append(ModelDescriptor(
                name=name,
                kind=kind,
                category=category,
                namespace=namespace,
                source_name=source_name,
                node=node,
                resolved_type=resolve_type(node) if kind is ModelKind.SIMPLE_WRAPPER else None,
            ))
            index.add(name, namespace)

    index.freeze()
    return descriptors, index


# ---------------------------------------------------------------------------
# Model contexts
# ---------------------------------------------------------------------------

def _model_base(descriptor: ModelDescriptor) -> dict[str, Any]:
    return {
        "name": descriptor.name,
        "namespace": descriptor.namespace,
        "summary": summary_block(get_description(descriptor.node)),
    }


def build_enum_context(descriptor: ModelDescriptor) -> dict[str, Any]:
    members: list[dict[str, Any]] = []
    used: set[str] = set()
    values = descriptor.node.try_get("enum")
    for entry in values.elements() if values is not None else ():
        text = entry.as_text()
        if not text.strip():
            continue
        member = resolve_property_identifier(enum_member_name(text), descriptor.name, used)
        used.add(member)
        # numbered by emitted members only
        members.append({"name": member, "value": len(members)})

    context = _model_base(descriptor)
    context["members"] = members
    return context


def build_field(
    raw_name: str,
    prop: SchemaNode,
    parent: SchemaNode,
    owner: str,
    used: set[str],
) -> dict[str, Any]:
    raw_name = str(raw_name)
    type_name = resolve_type(prop)
    required = is_required(prop, raw_name, parent)
    identifier = resolve_property_identifier(raw_name, owner, used)
    return {
        "name": identifier,
        "json_name": csharp_string(raw_name),
        "type": type_name,
        "declared_type": type_name if required else f"{type_name}?",
        "required": required,
        "summary": summary_block(get_description(prop)),
    }


def build_record_context(descriptor: ModelDescriptor, index: ModelNamespaceIndex) -> dict[str, Any]:
    node = descriptor.node
    fields: list[dict[str, Any]] = []
    used: set[str] = set()
    properties = node.try_get("properties")
    for raw_name, prop in properties.children() if properties is not None else ():
        field = build_field(raw_name, prop, node, descriptor.name, used)
        used.add(field["name"])
        fields.append(field)

    context = _model_base(descriptor)
    context["fields"] = fields
    context["usings"] = using_directives(
        (f["type"] for f in fields), descriptor.namespace, index, extra=[JSON_SERIALIZATION],
    )
    return context


def build_wrapper_context(descriptor: ModelDescriptor, index: ModelNamespaceIndex) -> dict[str, Any]:
    value_type = descriptor.resolved_type or resolve_type(descriptor.node)
    context = _model_base(descriptor)
    context["value_type"] = value_type
    context["value_name"] = resolve_property_identifier("Value", descriptor.name, set())
    context["usings"] = using_directives(
        [value_type], descriptor.namespace, index, extra=[JSON_SERIALIZATION],
    )
    return context


def build_fallback_context(descriptor: ModelDescriptor) -> dict[str, Any]:
    context = _model_base(descriptor)
    context["usings"] = [JSON_SERIALIZATION]
    return context


def build_model_context(descriptor: ModelDescriptor, index: ModelNamespaceIndex) -> dict[str, Any]:
    if descriptor.kind is ModelKind.ENUM:
        return build_enum_context(descriptor)
    if descriptor.kind is ModelKind.OBJECT:
        return build_record_context(descriptor, index)
    if descriptor.kind is ModelKind.SIMPLE_WRAPPER:
        return build_wrapper_context(descriptor, index)
    return build_fallback_context(descriptor)


# ---------------------------------------------------------------------------
# Service contexts
# ---------------------------------------------------------------------------

def parameter_signature_type(param: ParameterInfo) -> str:
    """Optional scalars become nullable; containers are left alone."""
    if not param.required and not is_container(param.resolved_type):
        return param.resolved_type + "?"
    return param.resolved_type


def build_url_expression(endpoint: EndpointInfo, identifiers: dict[int, str]) -> str:
    """C# string expression for the request URL.

    Path placeholders become interpolations of their parameters; query
    parameters are appended as ``key={value}`` pairs.
    """
    path_params = {
        p.name: identifiers[i]
        for i, p in enumerate(endpoint.parameters)
        if p.location == "path"
    }
    interpolated = False

    def substitute(match: re.Match) -> str:
        nonlocal interpolated
        name = match.group(1)
        if name in path_params:
            interpolated = True
            return "{" + path_params[name] + "}"
        return "{{" + name + "}}"

    url = _PLACEHOLDER_RE.sub(substitute, csharp_string(endpoint.url))

    query = [
        f"{csharp_string(p.name)}={{{identifiers[i]}}}"
        for i, p in enumerate(endpoint.parameters)
        if p.location == "query"
    ]
    if query:
        interpolated = True
        url += ("&" if "?" in url else "?") + "&".join(query)

    if not interpolated:
        # no interpolation: escaped braces must be plain again
        url = url.replace("{{", "{").replace("}}", "}")
        return f'"{url}"'
    return f'$"{url}"'


def build_client_call(
    endpoint: EndpointInfo,
    identifiers: dict[int, str],
    url: str,
) -> str | None:
    """The HTTP-client invocation for one endpoint, or None if unsupported."""
    call = _CLIENT_CALLS.get(endpoint.http_method)
    if call is None:
        return None

    returns_void = endpoint.return_type == VOID
    result_type = "bool" if returns_void else endpoint.return_type

    if endpoint.http_method == "GET":
        generic = "" if returns_void else f"<{endpoint.return_type}>"
        return f"{call}{generic}({url})"

    if endpoint.http_method in _BODY_METHODS:
        body = next(
            ((i, p) for i, p in enumerate(endpoint.parameters) if p.location == "body"),
            None,
        )
        if body is None:
            return f"{call}<{result_type}>({url})"
        position, param = body
        return f"{call}<{param.resolved_type}, {result_type}>({url}, {identifiers[position]})"

    return f"{call}<{result_type}>({url})"


def build_method_context(
    endpoint: EndpointInfo,
    owner: str,
    used: set[str],
) -> dict[str, Any]:
    """Signature and body fragments for one endpoint.

    ``used`` holds the base names (without ``Async``) already taken in the
    service; it is not modified here.
    """
    base_name = resolve_property_identifier(clean_operation_id(endpoint.operation_id), owner, used)
    method_name = f"{base_name}Async"

    identifiers: dict[int, str] = {}
    taken: set[str] = set()
    parameters: list[dict[str, str]] = []
    for position, param in enumerate(endpoint.parameters):
        identifier = unique_name(escape_identifier(to_camel_case(param.name)), taken)
        taken.add(identifier)
        identifiers[position] = identifier
        parameters.append({
            "name": identifier,
            "type": parameter_signature_type(param),
            "description": escape(single_line(param.description)),
        })

    returns_void = endpoint.return_type == VOID
    url = build_url_expression(endpoint, identifiers)

    return {
        "base_name": base_name,
        "name": method_name,
        "http_method": endpoint.http_method,
        "url_literal": csharp_string(endpoint.url),
        "docs": method_docs(endpoint.summary, parameters),
        "parameters": parameters,
        "parameter_list": ", ".join(f"{p['type']} {p['name']}" for p in parameters),
        "return_type": endpoint.return_type,
        "returns_void": returns_void,
        "task_type": "Task" if returns_void else f"Task<{endpoint.return_type}>",
        "client_call": build_client_call(endpoint, identifiers, url),
    }


def endpoint_type_names(endpoint: EndpointInfo) -> list[str]:
    names = [p.resolved_type for p in endpoint.parameters]
    if endpoint.return_type != VOID:
        names.append(endpoint.return_type)
    return names


def build_service_context(
    service_name: str,
    tag: str,
    methods: list[dict[str, Any]],
    endpoints: list[EndpointInfo],
    config: GeneratorConfig,
    index: ModelNamespaceIndex,
) -> dict[str, Any]:
    """Context shared by the interface and implementation templates."""
    interface_name = f"I{service_name}Service"
    class_name = f"{service_name}Service"

    type_names = [t for e in endpoints for t in endpoint_type_names(e)]
    interface_usings = using_directives(
        type_names, config.interfaces_namespace, index, extra=[COLLECTIONS, TASKS],
    )

    extra = [COLLECTIONS, TASKS, config.interfaces_namespace]
    if config.http_client_namespace:
        extra.append(config.http_client_namespace)
    if any(m["client_call"] is None for m in methods):
        extra.append(SYSTEM)
    implementation_usings = using_directives(
        type_names, config.implementations_namespace, index, extra=extra,
    )

    return {
        "tag": escape(tag),
        "service_name": service_name,
        "interface_name": interface_name,
        "class_name": class_name,
        "interfaces_namespace": config.interfaces_namespace,
        "implementations_namespace": config.implementations_namespace,
        "interface_usings": interface_usings,
        "implementation_usings": implementation_usings,
        "http_client": config.http_client_interface,
        "methods": methods,
    }
