"""Generator settings.

Defaults give the usual GeneratedCode.* layout; the CLI overrides
each field from options or ``SWAGSHARP_*`` environment variables.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_MODELS_NAMESPACE = "GeneratedCode.Models"
DEFAULT_SERVICES_NAMESPACE = "GeneratedCode.Services"
DEFAULT_OUTPUT_ROOT = Path("generated")
DEFAULT_HTTP_CLIENT = "IHttpClientService"


@dataclass(frozen=True)
class GeneratorConfig:
    models_namespace: str = DEFAULT_MODELS_NAMESPACE
    services_namespace: str = DEFAULT_SERVICES_NAMESPACE
    output_root: Path = DEFAULT_OUTPUT_ROOT
    # Interface-name cleanup: drop "resource" and "v2"-style tokens
    remove_resource: bool = True
    remove_version: bool = True
    http_client_interface: str = DEFAULT_HTTP_CLIENT
    http_client_namespace: str | None = None

    @property
    def interfaces_namespace(self) -> str:
        return f"{self.services_namespace}.Interfaces"

    @property
    def implementations_namespace(self) -> str:
        return f"{self.services_namespace}.Implementations"
