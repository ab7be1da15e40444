"""Data models for the dependency crawler."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Literal

from pydantic import BaseModel, ConfigDict, Field

from dep_crawler.errors import ConsumedRecordError, OwnershipError


class Language(enum.Enum):
    RUST = "rust"
    C_FAMILY = "c"
    JAVASCRIPT_FAMILY = "javascript"
    GO = "go"
    PYTHON = "python"
    JAVA = "java"
    PHP = "php"
    RUBY = "ruby"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[Language, str] = {
    Language.RUST: "Rust",
    Language.C_FAMILY: "C/C++",
    Language.JAVASCRIPT_FAMILY: "JavaScript",
    Language.GO: "Go",
    Language.PYTHON: "Python",
    Language.JAVA: "Java",
    Language.PHP: "PHP",
    Language.RUBY: "Ruby",
}


class Layer(enum.IntEnum):
    """Extraction granularity. The integer value is the exported layer number."""
    MODULE = 0
    STRUCTURE = 1
    METHOD = 2

    @property
    def relationship_type(self) -> str:
        return ("imports", "inherits", "calls")[self.value]


def adopt(owner: object, record: Method | Structure) -> None:
    """Make *owner* the sole owner of *record*."""
    current = record.owner
    if current is not None and current is not owner:
        raise OwnershipError(
            f"{type(record).__name__} {record.name!r} is already owned by "
            f"{type(current).__name__}"
        )
    record.owner = owner


@dataclass
class Parameter:
    name: str
    type: str = ""
    default_value: str | None = None


@dataclass
class Method:
    """A function or method declaration found by the method extractor."""
    name: str
    defined_in: str = ""
    line_number: int = 0
    prefix: str | None = None  # e.g. Go receiver or Type:: qualifier
    return_type: str | None = None
    parameters: list[Parameter] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)
    references: list[str] = field(default_factory=list)  # "called from" locations
    children: list[Method] = field(default_factory=list)  # nested scope only
    owner: object | None = field(default=None, repr=False, compare=False)

    @property
    def dependencies(self) -> str | None:
        if not self.calls:
            return None
        return ", ".join(self.calls)

    @property
    def signature(self) -> str:
        params = ", ".join(_format_parameter(p) for p in self.parameters)
        text = f"{self.name}({params})"
        if self.prefix:
            text = f"{self.prefix} {text}"
        if self.return_type:
            text = f"{text} -> {self.return_type}"
        return text

    def add_call(self, callee: str) -> None:
        if callee and callee not in self.calls:
            self.calls.append(callee)

    def add_reference(self, location: str) -> None:
        if location not in self.references:
            self.references.append(location)

    def add_child(self, child: Method) -> None:
        adopt(self, child)
        self.children.append(child)

    def walk(self) -> Iterator[Method]:
        """Yield this method and every nested method, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


def _format_parameter(param: Parameter) -> str:
    text = param.name
    if param.type:
        text = f"{text}: {param.type}"
    if param.default_value is not None:
        text = f"{text} = {param.default_value}"
    return text


@dataclass
class Structure:
    """A struct, class, interface, trait or similar type declaration."""
    name: str
    kind: str = "struct"
    defined_in: str = ""
    line_number: int = 0
    dependencies: str | None = None  # raw base/parent text, later stamped
    implemented_traits: list[str] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    provenance: str | None = None
    owner: object | None = field(default=None, repr=False, compare=False)

    def add_method(self, method: Method) -> None:
        adopt(self, method)
        self.methods.append(method)

    def walk_methods(self) -> Iterator[Method]:
        for method in self.methods:
            yield from method.walk()


@dataclass
class ReleaseStats:
    """Counts of records dropped by a teardown pass."""
    nodes: int = 0
    structures: int = 0
    methods: int = 0
    parameters: int = 0
    references: int = 0

    @property
    def total(self) -> int:
        return self.nodes + self.structures + self.methods + self.parameters + self.references


def release_method(method: Method, stats: ReleaseStats, seen: set[int]) -> None:
    if id(method) in seen:
        raise OwnershipError(f"Method {method.name!r} released twice")
    seen.add(id(method))
    for child in method.children:
        release_method(child, stats, seen)
    stats.methods += 1
    stats.parameters += len(method.parameters)
    stats.references += len(method.references)
    method.children.clear()
    method.parameters.clear()
    method.references.clear()
    method.calls.clear()
    method.owner = None


def release_structure(structure: Structure, stats: ReleaseStats, seen: set[int]) -> None:
    if id(structure) in seen:
        raise OwnershipError(f"Structure {structure.name!r} released twice")
    seen.add(id(structure))
    for method in structure.methods:
        release_method(method, stats, seen)
    stats.structures += 1
    structure.methods.clear()
    structure.implemented_traits.clear()
    structure.owner = None


class ExtractedDependency:
    """Transient result of one extraction pass over one file for one layer.

    The record owns its structures or methods until the graph takes them.
    Taking them consumes the record: the contents have moved, so reading
    them again (or taking twice) raises ConsumedRecordError, and
    ``release()`` becomes a no-op instead of dropping what was handed over.
    """

    def __init__(
        self,
        file_path: str,
        layer: Layer,
        language: Language,
        target: str | None = None,
        structures: list[Structure] | None = None,
        methods: list[Method] | None = None,
    ):
        self.file_path = file_path
        self.layer = layer
        self.language = language
        self.target = target
        self.consumed = False
        self._structures: list[Structure] = []
        self._methods: list[Method] = []
        for structure in structures or ():
            adopt(self, structure)
            self._structures.append(structure)
        for method in methods or ():
            adopt(self, method)
            self._methods.append(method)

    def __repr__(self) -> str:
        state = "consumed" if self.consumed else "live"
        return (
            f"ExtractedDependency({self.file_path!r}, {self.layer.name}, "
            f"target={self.target!r}, {state})"
        )

    @property
    def structures(self) -> list[Structure]:
        self._check_live()
        return list(self._structures)

    @property
    def methods(self) -> list[Method]:
        self._check_live()
        return list(self._methods)

    def take_structures(self) -> list[Structure]:
        """Move the structures out. The record is consumed afterwards."""
        self._check_live()
        taken, self._structures = self._structures, []
        for structure in taken:
            structure.owner = None
        self.consumed = True
        return taken

    def take_methods(self) -> list[Method]:
        """Move the methods out. The record is consumed afterwards."""
        self._check_live()
        taken, self._methods = self._methods, []
        for method in taken:
            method.owner = None
        self.consumed = True
        return taken

    def consume(self) -> None:
        """Mark a record with nothing to move (module layer) as used."""
        self._check_live()
        self.consumed = True

    def release(self) -> ReleaseStats:
        stats = ReleaseStats()
        if self.consumed:
            return stats
        seen: set[int] = set()
        for structure in self._structures:
            release_structure(structure, stats, seen)
        for method in self._methods:
            release_method(method, stats, seen)
        self._structures = []
        self._methods = []
        self.consumed = True
        return stats

    def _check_live(self) -> None:
        if self.consumed:
            raise ConsumedRecordError(
                f"{self.layer.name} record for {self.file_path} was already consumed"
            )


@dataclass
class Dependency:
    """A persisted node of the dependency graph."""
    source: str
    layer: Layer
    language: Language
    target: str | None = None
    structures: list[Structure] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    method_count: int = 0

    def adopt_structures(self, structures: list[Structure]) -> None:
        for structure in structures:
            adopt(self, structure)
            self.structures.append(structure)

    def adopt_methods(self, methods: list[Method]) -> None:
        for method in methods:
            adopt(self, method)
            self.methods.append(method)
        self.method_count = sum(1 for m in self.methods for _ in m.walk())

    def release(self, stats: ReleaseStats, seen: set[int]) -> None:
        for structure in self.structures:
            release_structure(structure, stats, seen)
        for method in self.methods:
            release_method(method, stats, seen)
        self.structures.clear()
        self.methods.clear()
        self.method_count = 0
        stats.nodes += 1


class Relationship(BaseModel):
    """One exported edge: (from, to, kind, layer)."""
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    type: Literal["imports", "inherits", "calls"]
    layer: int = Field(ge=0, le=2)


class RelationshipGraph(BaseModel):
    """Flattened, export-facing projection of the dependency graph."""
    relationships: list[Relationship] = Field(default_factory=list)

    def payload(self) -> dict:
        return {
            "relationships": [r.model_dump(by_alias=True) for r in self.relationships],
        }


DEFAULT_SKIP_DIRS: list[str] = [
    "node_modules", ".git", "build", "dist", "target", "vendor",
]

DEFAULT_SKIP_EXTENSIONS: list[str] = [
    "txt", "md", "json", "yml", "yaml", "xml", "csv", "log",
    "license", "gitignore", "lock",
]


@dataclass
class CrawlConfig:
    """Configuration for a crawl."""
    roots: list[Path] = field(default_factory=lambda: [Path(".")])
    library_dirs: list[Path] = field(default_factory=list)
    max_depth: int = -1  # -1 means unlimited
    output_format: str = "terminal"
    output_file: Path | None = None
    verbose: bool = False
    analyze_modules: bool = True
    analyze_structures: bool = True
    analyze_methods: bool = True
    skip_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_SKIP_DIRS))
    skip_extensions: list[str] = field(default_factory=lambda: list(DEFAULT_SKIP_EXTENSIONS))
    source_extensions: list[str] | None = None  # None: every extension the classifier knows
    default_language: Language = Language.RUST
