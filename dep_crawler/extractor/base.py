"""Abstract base analyzer with the shared line-oriented extraction passes."""

from __future__ import annotations

import abc
import re

from dep_crawler.errors import ExtractionError
from dep_crawler.models import (
    ExtractedDependency,
    Language,
    Layer,
    Method,
    Parameter,
    Structure,
)
from dep_crawler.patterns import PatternLibrary, PatternMatch
from dep_crawler.patterns.tables import (
    COMMENT_LINES,
    COMMENT_PREFIXES,
    DEFINITION_KEYWORDS,
    STATEMENT_WORDS,
)

_WORD_RE = re.compile(r"[A-Za-z_]\w*")

# Lines that only open a block do not end the enclosing scope.
_OPENERS = ("{", "(", "[")


class BaseAnalyzer(abc.ABC):
    """Extracts module, structure and method records for one language.

    All three passes read the file line by line and consult the pattern
    library for this analyzer's language. Scopes are tracked by
    indentation: a line indented at or left of an open declaration closes
    it, which covers brace languages as well as Python and Ruby.
    """

    language: Language
    # Words stripped from captured return types (C/Java modifiers).
    return_type_modifiers: frozenset[str] = frozenset()

    # ── Module layer ──────────────────────────────────────────

    def extract_modules(
        self, file_path: str, text: str, library: PatternLibrary,
    ) -> list[ExtractedDependency]:
        """One record per import/include/use line, in source order."""
        matchers = library.compile(self.language, Layer.MODULE)
        records: list[ExtractedDependency] = []
        for line in text.splitlines():
            match = library.apply(matchers, line)
            if match is None:
                continue
            target = match.get("target")
            if target:
                records.append(self._module_record(file_path, target))
        return records

    def _module_record(self, file_path: str, target: str) -> ExtractedDependency:
        return ExtractedDependency(
            file_path=file_path,
            layer=Layer.MODULE,
            language=self.language,
            target=target,
        )

    # ── Structure layer ───────────────────────────────────────

    def extract_structures(
        self, file_path: str, text: str, library: PatternLibrary,
    ) -> ExtractedDependency | None:
        """All type declarations of the file, with the methods in their bodies."""
        matchers = library.compile(self.language, Layer.STRUCTURE)
        lines = text.splitlines()
        declared: list[tuple[int, int, PatternMatch]] = []

        for index, line in enumerate(lines):
            if _is_comment(line.strip()):
                continue
            match = library.apply(matchers, line)
            if match is not None:
                declared.append((index, _scope_end(lines, index), match))

        structures: list[Structure] = []
        for index, body_end, match in declared:
            structure = self._build_structure(file_path, index + 1, match)
            # Methods of a nested structure belong to it alone.
            nested = {
                line_index
                for start, end, _ in declared
                if index < start < body_end
                for line_index in range(start, end)
            }
            for method in self._scan_methods(
                file_path, lines, library, index + 1, body_end, skip=nested,
            ):
                structure.add_method(method)
            structures.append(structure)

        if not structures:
            return None
        return ExtractedDependency(
            file_path=file_path,
            layer=Layer.STRUCTURE,
            language=self.language,
            structures=structures,
        )

    def _build_structure(self, file_path: str, line_number: int, match: PatternMatch) -> Structure:
        try:
            base = match.get("base")
            traits = match.get("traits")
            return Structure(
                name=match["name"],
                kind=match.kind,
                defined_in=file_path,
                line_number=line_number,
                dependencies=base or traits,
                implemented_traits=split_top_level(traits) if traits else [],
            )
        except (KeyError, ValueError) as e:
            raise ExtractionError(f"{file_path}:{line_number}: bad structure capture: {e}") from e

    # ── Method layer ──────────────────────────────────────────

    def extract_methods(
        self, file_path: str, text: str, library: PatternLibrary,
    ) -> ExtractedDependency | None:
        """Top-level methods of the file (nested ones hang off their parents)."""
        lines = text.splitlines()
        methods = self._scan_methods(file_path, lines, library, 0, len(lines))
        if not methods:
            return None
        link_local_calls(file_path, methods)
        return ExtractedDependency(
            file_path=file_path,
            layer=Layer.METHOD,
            language=self.language,
            methods=methods,
        )

    def _scan_methods(
        self,
        file_path: str,
        lines: list[str],
        library: PatternLibrary,
        start: int,
        stop: int,
        skip: set[int] | None = None,
    ) -> list[Method]:
        matchers = library.compile(self.language, Layer.METHOD)
        top: list[Method] = []
        open_scopes: list[tuple[int, Method]] = []

        for index in range(start, stop):
            if skip and index in skip:
                continue
            line = lines[index]
            stripped = line.strip()
            if not stripped or _is_comment(stripped) or stripped in _OPENERS:
                continue
            indent = _indent_of(line)
            while open_scopes and indent <= open_scopes[-1][0]:
                open_scopes.pop()

            match = library.apply(matchers, line)
            if match is not None and match.kind == "definition":
                method = self._build_method(file_path, index + 1, match)
                if method is not None:
                    if open_scopes:
                        open_scopes[-1][1].add_child(method)
                    else:
                        top.append(method)
                    open_scopes.append((indent, method))
                    continue

            if not open_scopes:
                continue
            current = open_scopes[-1][1]
            if match is not None and match.kind == "call":
                current.add_call(match["name"])
            else:
                for callee in library.find_calls(line):
                    current.add_call(callee)

        return top

    def _build_method(self, file_path: str, line_number: int, match: PatternMatch) -> Method | None:
        name = match.get("name")
        if not name or name in DEFINITION_KEYWORDS:
            return None
        ret = match.get("ret")
        if ret and any(word in STATEMENT_WORDS for word in _WORD_RE.findall(ret)):
            return None
        try:
            parameters = self.parse_parameters(match.get("params") or "")
        except (ValueError, IndexError) as e:
            raise ExtractionError(f"{file_path}:{line_number}: bad parameter list: {e}") from e
        return Method(
            name=name,
            defined_in=file_path,
            line_number=line_number,
            prefix=self.normalize_prefix(match.get("prefix")),
            return_type=self.normalize_return_type(ret),
            parameters=parameters,
        )

    # ── Per-language hooks ────────────────────────────────────

    def parse_parameters(self, text: str) -> list[Parameter]:
        params: list[Parameter] = []
        for part in split_top_level(text):
            param = self.parse_parameter(part)
            if param is not None:
                params.append(param)
        return params

    @abc.abstractmethod
    def parse_parameter(self, text: str) -> Parameter | None:
        """Parse one trimmed parameter-list entry. None drops the entry."""

    def normalize_prefix(self, prefix: str | None) -> str | None:
        return prefix or None

    def normalize_return_type(self, ret: str | None) -> str | None:
        if not ret:
            return None
        if self.return_type_modifiers:
            words = ret.split()
            ret = " ".join(w for w in words if w not in self.return_type_modifiers)
        return ret.strip() or None


def link_local_calls(file_path: str, methods: list[Method]) -> None:
    """Record back-references for calls between methods of the same file."""
    every = [m for top in methods for m in top.walk()]
    by_name: dict[str, list[Method]] = {}
    for method in every:
        by_name.setdefault(method.name, []).append(method)
    for caller in every:
        for callee in caller.calls:
            for target in by_name.get(callee, ()):
                target.add_reference(f"{file_path}:{caller.name}")


# ── Text helpers ──────────────────────────────────────────────

def parse_colon_parameter(text: str) -> Parameter:
    """`name: Type = default` (Rust, Python, TypeScript)."""
    decl, default = split_default(text)
    colon = find_top_level(decl, ":")
    if colon < 0:
        return Parameter(name=decl.strip(), default_value=default)
    return Parameter(
        name=decl[:colon].strip(),
        type=decl[colon + 1:].strip(),
        default_value=default,
    )


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split on *sep* outside brackets and quotes; parts are trimmed."""
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    quote: str | None = None

    for ch in text:
        if quote:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in "\"'`":
            quote = ch
        elif ch in "([{<":
            depth += 1
        elif ch in ")]}>" and depth > 0:
            depth -= 1
        elif ch == sep and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)

    parts.append("".join(current).strip())
    return [p for p in parts if p]


def find_top_level(text: str, char: str) -> int:
    """Index of the first *char* outside brackets and quotes, or -1."""
    depth = 0
    quote: str | None = None
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'`":
            quote = ch
        elif ch in "([{<":
            depth += 1
        elif ch in ")]}>" and depth > 0:
            depth -= 1
        elif ch == char and depth == 0:
            return i
    return -1


def split_default(text: str) -> tuple[str, str | None]:
    """Split `decl = default` at the first top-level assignment sign."""
    depth = 0
    quote: str | None = None
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'`":
            quote = ch
        elif ch in "([{<":
            depth += 1
        elif ch in ")]}>" and depth > 0:
            depth -= 1
        elif ch == "=" and depth == 0:
            prev = text[i - 1] if i else ""
            nxt = text[i + 1] if i + 1 < len(text) else ""
            if (nxt and nxt in "=>") or (prev and prev in "!<>="):
                continue
            default = text[i + 1:].strip()
            return text[:i].strip(), default or None
    return text.strip(), None


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _is_comment(stripped: str) -> bool:
    return stripped in COMMENT_LINES or stripped.startswith(COMMENT_PREFIXES)


def _scope_end(lines: list[str], index: int) -> int:
    """Exclusive end of the block opened by the declaration at *index*."""
    indent = _indent_of(lines[index])
    for j in range(index + 1, len(lines)):
        stripped = lines[j].strip()
        if not stripped or _is_comment(stripped) or stripped in _OPENERS:
            continue
        if _indent_of(lines[j]) <= indent:
            return j
    return len(lines)


_TYPED_NAME_RE = re.compile(r"^(?P<type>.*?)(?P<name>[A-Za-z_$]\w*)\s*(?P<dims>(?:\[[^\]]*\]\s*)*)$")


def split_type_and_name(decl: str) -> tuple[str, str]:
    """Split a C-style `Type name` declaration into (type, name)."""
    decl = decl.strip()
    m = _TYPED_NAME_RE.match(decl)
    if m is None or not m.group("type").strip():
        return "", decl
    type_text = m.group("type").strip()
    dims = m.group("dims").replace(" ", "")
    if dims:
        type_text = f"{type_text}{dims}"
    return type_text, m.group("name")
