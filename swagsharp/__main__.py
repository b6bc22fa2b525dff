"""Entry point: python -m swagsharp

Reads an OpenAPI/Swagger document and writes C# models and services.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from .categorizer import categorize_definitions
from .codegen import generate, write_artifacts
from .config import (
    DEFAULT_HTTP_CLIENT,
    DEFAULT_MODELS_NAMESPACE,
    DEFAULT_OUTPUT_ROOT,
    DEFAULT_SERVICES_NAMESPACE,
    GeneratorConfig,
)
from .endpoints import group_endpoints_by_tag
from .errors import SpecError
from .loader import SPEC_PATH, get_paths, get_schemas, load_spec
from .models import GenerationReport
from .naming import pluralize


def _load(spec_path: Path) -> dict:
    try:
        return load_spec(spec_path)
    except SpecError as exc:
        raise click.ClickException(str(exc)) from exc


def _echo_diagnostics(report: GenerationReport) -> None:
    for diagnostic in report.diagnostics:
        click.echo(f"  ! {diagnostic}", err=True)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log every generated file.")
def main(verbose: bool) -> None:
    """SwagSharp: generate C# models and services from OpenAPI documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("generate")
@click.argument("spec_path", default=SPEC_PATH, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=DEFAULT_OUTPUT_ROOT, envvar="SWAGSHARP_OUTPUT",
              type=click.Path(file_okay=False, path_type=Path), help="Output root directory.")
@click.option("--models-namespace", default=DEFAULT_MODELS_NAMESPACE, envvar="SWAGSHARP_MODELS_NAMESPACE",
              help="Root namespace of generated models.")
@click.option("--services-namespace", default=DEFAULT_SERVICES_NAMESPACE, envvar="SWAGSHARP_SERVICES_NAMESPACE",
              help="Root namespace of generated interfaces and services.")
@click.option("--keep-resource", is_flag=True, help="Keep 'resource' in service names.")
@click.option("--keep-version", is_flag=True, help="Keep version tokens like 'v2' in service names.")
@click.option("--http-client", default=DEFAULT_HTTP_CLIENT, envvar="SWAGSHARP_HTTP_CLIENT",
              help="Interface name of the HTTP client the services call.")
@click.option("--http-client-namespace", default=None, envvar="SWAGSHARP_HTTP_CLIENT_NAMESPACE",
              help="Namespace to import for the HTTP client interface.")
def generate_command(
    spec_path: Path,
    output: Path,
    models_namespace: str,
    services_namespace: str,
    keep_resource: bool,
    keep_version: bool,
    http_client: str,
    http_client_namespace: str | None,
) -> None:
    """Generate C# sources from SPEC_PATH."""
    config = GeneratorConfig(
        models_namespace=models_namespace,
        services_namespace=services_namespace,
        output_root=output,
        remove_resource=not keep_resource,
        remove_version=not keep_version,
        http_client_interface=http_client,
        http_client_namespace=http_client_namespace,
    )

    click.echo(f"Parsing {spec_path}...")
    spec = _load(spec_path)
    report = generate(spec, config)
    written = write_artifacts(report, config.output_root)

    _echo_diagnostics(report)
    click.echo(
        f"Generated {len(written)} files in {config.output_root}"
        f" ({len(report.warnings)} warnings, {len(report.errors)} errors)"
    )


@main.command("inspect")
@click.argument("spec_path", default=SPEC_PATH, type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect_command(spec_path: Path) -> None:
    """List model categories and service groups without writing files."""
    spec = _load(spec_path)

    categories = categorize_definitions(get_schemas(spec).items())
    click.echo(f"Models ({sum(len(m) for m in categories.values())}):")
    for category, models in categories.items():
        click.echo(f"  {pluralize(category)}: {', '.join(name for name, _ in models)}")

    report = GenerationReport()
    services = group_endpoints_by_tag(get_paths(spec), report)
    click.echo(f"Services ({len(services)}):")
    for tag, endpoints in services.items():
        click.echo(f"  {tag}: {len(endpoints)} operations")
    _echo_diagnostics(report)


if __name__ == "__main__":
    main()
