"""Records passed between the generator stages.

The loader produces plain dicts; everything derived from them (model
descriptors, endpoints, emitted artifacts, diagnostics) is held in the
dataclasses below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .schema_node import SchemaNode


class ModelKind(str, Enum):
    ENUM = "enum"
    OBJECT = "object"
    SIMPLE_WRAPPER = "simple"
    FALLBACK = "fallback"


@dataclass
class ModelDescriptor:
    """One top-level schema definition after classification."""

    name: str
    kind: ModelKind
    category: str
    namespace: str
    source_name: str
    node: SchemaNode
    resolved_type: str | None = None

    @property
    def folder(self) -> str:
        """Relative directory of the emitted file."""
        parts = self.namespace.split(".")
        # Models/<Plural>[/Enums]
        tail = parts[-2:] if self.kind is ModelKind.ENUM else parts[-1:]
        return "/".join(["Models", *tail])


class ModelNamespaceIndex:
    """Case-insensitive lookup from model name to its namespace.

    Filled while the model inventory is built, then frozen before any
    emission reads from it.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._frozen = False

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(self, name: str, namespace: str) -> None:
        if self._frozen:
            raise RuntimeError("namespace index is frozen")
        self._entries.setdefault(name.lower(), namespace)

    def freeze(self) -> None:
        self._frozen = True

    def lookup(self, name: str) -> str | None:
        return self._entries.get(name.lower())


@dataclass
class ParameterInfo:
    name: str
    location: str  # path / query / body / header / formData
    resolved_type: str
    required: bool
    description: str = ""


@dataclass
class EndpointInfo:
    url: str
    http_method: str  # upper case: GET / POST / ...
    operation_id: str
    summary: str
    parameters: list[ParameterInfo]
    return_type: str
    tag: str


ServiceGroup = dict[str, list[EndpointInfo]]


@dataclass(frozen=True)
class Artifact:
    """One emitted source unit."""

    path: str  # POSIX path relative to the output root
    content: str
    kind: str  # enum / object / simple / fallback / interface / implementation


@dataclass(frozen=True)
class Diagnostic:
    level: str  # warning / error
    item: str
    message: str

    def __str__(self) -> str:
        return f"{self.level}: {self.item}: {self.message}"


@dataclass(frozen=True)
class Generated:
    artifact: Artifact


@dataclass(frozen=True)
class Skipped:
    item: str
    reason: str


@dataclass(frozen=True)
class Failed:
    item: str
    message: str


ItemResult = Union[Generated, Skipped, Failed]


@dataclass
class GenerationReport:
    """Artifacts and diagnostics of one generation run."""

    artifacts: list[Artifact] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def record(self, result: ItemResult) -> None:
        """Fold one per-item result into the report."""
        if isinstance(result, Generated):
            self.artifacts.append(result.artifact)
        elif isinstance(result, Skipped):
            self.warn(result.item, result.reason)
        else:
            self.diagnostics.append(Diagnostic("error", result.item, result.message))

    def warn(self, item: str, message: str) -> None:
        self.diagnostics.append(Diagnostic("warning", item, message))

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.level == "error"]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.level == "warning"]

    def by_path(self) -> dict[str, str]:
        return {a.path: a.content for a in self.artifacts}
