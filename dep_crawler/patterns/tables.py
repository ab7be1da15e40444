"""Per-language, per-layer signature rules.

Rules are tried in order and the first one that matches a line wins, so
more specific rules come before the general ones they overlap with.
Captures use named groups:

* module layer: ``target``
* structure layer: ``name``, optional ``base`` and ``traits``
* method layer, definitions: ``name``, optional ``params``, ``prefix``, ``ret``
* method layer, call sites: ``name``

Every pattern is anchored at the start of a line.
"""

from __future__ import annotations

from dataclasses import dataclass

from dep_crawler.models import Language, Layer


@dataclass(frozen=True)
class PatternRule:
    kind: str  # "import", a structure kind, "definition" or "call"
    pattern: str


_RUST_VIS = r"(?:pub(?:\s*\([^)]*\))?\s+)?"

RUST_PATTERNS: dict[Layer, tuple[PatternRule, ...]] = {
    Layer.MODULE: (
        PatternRule("import", r"^\s*" + _RUST_VIS + r"use\s+(?P<target>[A-Za-z0-9_:]+)"),
        PatternRule("import", r"^\s*extern\s+crate\s+(?P<target>\w+)"),
        PatternRule("import", r"^\s*" + _RUST_VIS + r"mod\s+(?P<target>\w+)"),
        PatternRule("import", r"^\s*include!\s*\(\s*\"(?P<target>[^\"]+)\"\s*\)"),
    ),
    Layer.STRUCTURE: (
        PatternRule("struct", r"^\s*" + _RUST_VIS + r"struct\s+(?P<name>\w+)"),
        PatternRule("enum", r"^\s*" + _RUST_VIS + r"enum\s+(?P<name>\w+)"),
        PatternRule(
            "trait",
            r"^\s*" + _RUST_VIS + r"(?:unsafe\s+)?trait\s+(?P<name>\w+)(?:\s*<[^>]*>)?"
            r"(?:\s*:\s*(?P<base>[^{]+?))?\s*(?:\{|where\b|$)",
        ),
        PatternRule(
            "impl",
            r"^\s*(?:unsafe\s+)?impl(?:\s*<[^>]*>)?\s+(?P<traits>[\w:]+(?:<[^>]*>)?)"
            r"\s+for\s+(?P<name>\w+)",
        ),
        PatternRule("impl", r"^\s*(?:unsafe\s+)?impl(?:\s*<[^>]*>)?\s+(?P<name>\w+)"),
    ),
    Layer.METHOD: (
        PatternRule(
            "definition",
            r"^\s*" + _RUST_VIS + r"(?:const\s+)?(?:async\s+)?(?:unsafe\s+)?"
            r"(?:extern\s+\"[^\"]*\"\s+)?fn\s+(?P<name>\w+)\s*(?:<[^>]*>)?\s*"
            r"\((?P<params>[^)]*)\)(?:\s*->\s*(?P<ret>[^{;]+?))?\s*(?:\{|;|where\b|$)",
        ),
        PatternRule("call", r"^\s*self\.(?P<name>\w+)\s*\("),
        PatternRule("call", r"^\s*\w+::(?P<name>\w+)\s*\("),
    ),
}

C_PATTERNS: dict[Layer, tuple[PatternRule, ...]] = {
    Layer.MODULE: (
        PatternRule("import", r"^\s*#\s*include\s*[<\"](?P<target>[^>\"]+)[>\"]"),
        PatternRule("import", r"^\s*#\s*import\s*[<\"](?P<target>[^>\"]+)[>\"]"),
    ),
    Layer.STRUCTURE: (
        PatternRule("struct", r"^\s*typedef\s+struct\s+(?P<name>\w+)"),
        PatternRule("enum", r"^\s*typedef\s+enum\s+(?P<name>\w+)"),
        PatternRule(
            "class",
            r"^\s*(?:template\s*<[^>]*>\s*)?class\s+(?P<name>\w+)(?:\s+final)?"
            r"(?:\s*:\s*(?P<base>[^{;]+?))?\s*(?:\{|;|$)",
        ),
        PatternRule(
            "struct",
            r"^\s*(?:template\s*<[^>]*>\s*)?struct\s+(?P<name>\w+)"
            r"(?:\s*:\s*(?P<base>[^{;]+?))?\s*(?:\{|;|$)",
        ),
        PatternRule(
            "enum",
            r"^\s*enum\s+(?:class\s+|struct\s+)?(?P<name>\w+)(?:\s*:\s*\w+)?\s*(?:\{|;|$)",
        ),
    ),
    Layer.METHOD: (
        PatternRule(
            "definition",
            r"^\s*(?P<ret>[\w:<>*&]+(?:\s+[\w:<>*&]+)*?)\s+[*&]*(?P<prefix>\w+)::"
            r"(?P<name>~?\w+)\s*\((?P<params>[^)]*)\)\s*(?:const\s*)?(?:\{|$)",
        ),
        PatternRule(
            "definition",
            r"^\s*(?P<ret>[\w:<>]+(?:\s+[\w:<>]+)*?[\s*&]+)(?P<name>\w+)\s*"
            r"\((?P<params>[^)]*)\)\s*(?:const\s*)?(?:\{|$)",
        ),
        PatternRule("call", r"^\s*\w+::(?P<name>\w+)\s*\("),
    ),
}

_JS_EXPORT = r"(?:export\s+)?(?:default\s+)?"

JS_PATTERNS: dict[Layer, tuple[PatternRule, ...]] = {
    Layer.MODULE: (
        PatternRule("import", r"^\s*import\s+.*?\s+from\s+['\"](?P<target>[^'\"]+)['\"]"),
        PatternRule("import", r"^\s*import\s+['\"](?P<target>[^'\"]+)['\"]"),
        PatternRule(
            "import",
            r"^\s*(?:(?:const|let|var)\s+[\w{}\s,:]+=\s*)?require\s*\(\s*"
            r"['\"](?P<target>[^'\"]+)['\"]\s*\)",
        ),
        PatternRule("import", r"^\s*export\s+.*?\s+from\s+['\"](?P<target>[^'\"]+)['\"]"),
    ),
    Layer.STRUCTURE: (
        PatternRule(
            "class",
            r"^\s*" + _JS_EXPORT + r"(?:abstract\s+)?class\s+(?P<name>\w+)(?:\s*<[^>]*>)?"
            r"(?:\s+extends\s+(?P<base>[\w.]+(?:<[^>]*>)?))?"
            r"(?:\s+implements\s+(?P<traits>[^{]+?))?\s*(?:\{|$)",
        ),
        PatternRule(
            "interface",
            r"^\s*(?:export\s+)?interface\s+(?P<name>\w+)(?:\s*<[^>]*>)?"
            r"(?:\s+extends\s+(?P<base>[^{]+?))?\s*(?:\{|$)",
        ),
        PatternRule("type", r"^\s*(?:export\s+)?type\s+(?P<name>\w+)(?:\s*<[^>]*>)?\s*="),
        PatternRule("enum", r"^\s*(?:export\s+)?(?:const\s+)?enum\s+(?P<name>\w+)"),
    ),
    Layer.METHOD: (
        PatternRule(
            "definition",
            r"^\s*" + _JS_EXPORT + r"(?:async\s+)?function\s*\*?\s*(?P<name>\w+)\s*"
            r"(?:<[^>]*>)?\s*\((?P<params>[^)]*)\)(?:\s*:\s*(?P<ret>[^{=]+?))?\s*(?:\{|$)",
        ),
        PatternRule(
            "definition",
            r"^\s*(?:export\s+)?(?:const|let|var)\s+(?P<name>\w+)\s*=\s*(?:async\s+)?"
            r"function\s*\*?\s*\((?P<params>[^)]*)\)",
        ),
        PatternRule(
            "definition",
            r"^\s*(?:export\s+)?(?:const|let|var)\s+(?P<name>\w+)\s*(?::\s*[^=]+)?=\s*"
            r"(?:async\s+)?\((?P<params>[^)]*)\)(?:\s*:\s*(?P<ret>[^=]+?))?\s*=>",
        ),
        PatternRule(
            "definition",
            r"^\s*(?P<name>\w+)\s*[:=]\s*(?:async\s+)?function\s*\((?P<params>[^)]*)\)",
        ),
        PatternRule(
            "definition",
            r"^\s*(?:(?:public|private|protected|static|async|readonly|override|get|set)\s+)*"
            r"(?P<name>\w+)\s*(?:<[^>]*>)?\s*\((?P<params>[^)]*)\)"
            r"(?:\s*:\s*(?P<ret>[^{]+?))?\s*\{\s*$",
        ),
    ),
}

GO_PATTERNS: dict[Layer, tuple[PatternRule, ...]] = {
    Layer.MODULE: (
        PatternRule("import", r"^\s*import\s+(?:[\w.]+\s+)?\"(?P<target>[^\"]+)\""),
        PatternRule("import", r"^\s*package\s+(?P<target>\w+)"),
    ),
    Layer.STRUCTURE: (
        PatternRule("struct", r"^\s*type\s+(?P<name>\w+)(?:\[[^\]]*\])?\s+struct\b"),
        PatternRule("interface", r"^\s*type\s+(?P<name>\w+)(?:\[[^\]]*\])?\s+interface\b"),
    ),
    Layer.METHOD: (
        PatternRule(
            "definition",
            r"^\s*func\s+\((?P<prefix>[^)]*)\)\s*(?P<name>\w+)\s*(?:\[[^\]]*\])?"
            r"\((?P<params>[^)]*)\)\s*(?P<ret>[^{]*?)\s*(?:\{|$)",
        ),
        PatternRule(
            "definition",
            r"^\s*func\s+(?P<name>\w+)\s*(?:\[[^\]]*\])?\((?P<params>[^)]*)\)"
            r"\s*(?P<ret>[^{]*?)\s*(?:\{|$)",
        ),
    ),
}

PYTHON_PATTERNS: dict[Layer, tuple[PatternRule, ...]] = {
    Layer.MODULE: (
        PatternRule("import", r"^\s*import\s+(?P<target>[\w.]+)"),
        PatternRule("import", r"^\s*from\s+(?P<target>\.*[\w.]*)\s+import\b"),
        PatternRule("import", r"^\s*__import__\s*\(\s*['\"](?P<target>[^'\"]+)['\"]"),
        PatternRule(
            "import",
            r"^\s*(?:\w+\s*=\s*)?importlib\.import_module\s*\(\s*['\"](?P<target>[^'\"]+)['\"]",
        ),
    ),
    Layer.STRUCTURE: (
        PatternRule("class", r"^\s*class\s+(?P<name>\w+)\s*(?:\((?P<base>[^)]*)\))?\s*:"),
    ),
    Layer.METHOD: (
        PatternRule(
            "definition",
            r"^\s*(?:async\s+)?def\s+(?P<name>\w+)\s*\((?P<params>[^)]*)\)"
            r"\s*(?:->\s*(?P<ret>[^:]+?))?\s*:",
        ),
        # parameter list continues on the next lines; only the first is kept
        PatternRule(
            "definition",
            r"^\s*(?:async\s+)?def\s+(?P<name>\w+)\s*\((?P<params>[^)]*?),?\s*$",
        ),
    ),
}

_JAVA_MODIFIERS = (
    r"(?:(?:public|protected|private|abstract|final|static|sealed|non-sealed|strictfp)\s+)*"
)

JAVA_PATTERNS: dict[Layer, tuple[PatternRule, ...]] = {
    Layer.MODULE: (
        PatternRule("import", r"^\s*import\s+(?:static\s+)?(?P<target>[\w.]+(?:\.\*)?)\s*;"),
        PatternRule("import", r"^\s*package\s+(?P<target>[\w.]+)\s*;"),
    ),
    Layer.STRUCTURE: (
        PatternRule(
            "class",
            r"^\s*" + _JAVA_MODIFIERS + r"class\s+(?P<name>\w+)(?:\s*<[^>]*>)?"
            r"(?:\s+extends\s+(?P<base>[\w.]+(?:<[^>]*>)?))?"
            r"(?:\s+implements\s+(?P<traits>[^{]+?))?\s*(?:\{|$)",
        ),
        PatternRule(
            "interface",
            r"^\s*" + _JAVA_MODIFIERS + r"interface\s+(?P<name>\w+)(?:\s*<[^>]*>)?"
            r"(?:\s+extends\s+(?P<traits>[^{]+?))?\s*(?:\{|$)",
        ),
        PatternRule(
            "enum",
            r"^\s*" + _JAVA_MODIFIERS + r"enum\s+(?P<name>\w+)"
            r"(?:\s+implements\s+(?P<traits>[^{]+?))?\s*(?:\{|$)",
        ),
        PatternRule(
            "record",
            r"^\s*" + _JAVA_MODIFIERS + r"record\s+(?P<name>\w+)"
            r"(?:\s*<[^>]*>)?\s*\([^)]*\)(?:\s+implements\s+(?P<traits>[^{]+?))?\s*(?:\{|$)",
        ),
    ),
    Layer.METHOD: (
        PatternRule(
            "definition",
            r"^\s*(?:@\w+\s+)*(?:(?:public|private|protected|static|final|abstract|"
            r"synchronized|native|default)\s+)*(?:<[^>]*>\s+)?"
            r"(?P<ret>[\w.<>\[\]?]+(?:[\w.<>\[\],?\s]*[\w>\]])?)"
            r"\s+(?P<name>\w+)\s*\((?P<params>[^)]*)\)"
            r"\s*(?:throws\s+[\w.,\s]+?)?\s*(?:\{|;|$)",
        ),
    ),
}

PHP_PATTERNS: dict[Layer, tuple[PatternRule, ...]] = {
    Layer.MODULE: (
        PatternRule(
            "import",
            r"^\s*(?:require|require_once|include|include_once)\s*\(?\s*"
            r"['\"](?P<target>[^'\"]+)['\"]",
        ),
        PatternRule("import", r"^\s*namespace\s+(?P<target>[\w\\]+)"),
        PatternRule("import", r"^\s*use\s+(?P<target>[\w\\]+)"),
    ),
    Layer.STRUCTURE: (
        PatternRule(
            "class",
            r"^\s*(?:(?:abstract|final|readonly)\s+)*class\s+(?P<name>\w+)"
            r"(?:\s+extends\s+(?P<base>[\w\\]+))?"
            r"(?:\s+implements\s+(?P<traits>[^{]+?))?\s*(?:\{|$)",
        ),
        PatternRule(
            "interface",
            r"^\s*interface\s+(?P<name>\w+)(?:\s+extends\s+(?P<traits>[^{]+?))?\s*(?:\{|$)",
        ),
        PatternRule("trait", r"^\s*trait\s+(?P<name>\w+)"),
        PatternRule("enum", r"^\s*enum\s+(?P<name>\w+)"),
    ),
    Layer.METHOD: (
        PatternRule(
            "definition",
            r"^\s*(?:(?:public|private|protected|static|abstract|final)\s+)*"
            r"function\s+&?(?P<name>\w+)\s*\((?P<params>[^)]*)\)"
            r"(?:\s*:\s*(?P<ret>\??[\w\\|]+))?",
        ),
    ),
}

RUBY_PATTERNS: dict[Layer, tuple[PatternRule, ...]] = {
    Layer.MODULE: (
        PatternRule("import", r"^\s*require(?:_relative)?\s*\(?\s*['\"](?P<target>[^'\"]+)['\"]"),
        PatternRule("import", r"^\s*load\s*\(?\s*['\"](?P<target>[^'\"]+)['\"]"),
        PatternRule("import", r"^\s*module\s+(?P<target>[\w:]+)"),
    ),
    Layer.STRUCTURE: (
        PatternRule("class", r"^\s*class\s+(?P<name>[\w:]+)(?:\s*<\s*(?P<base>[\w:]+))?"),
        PatternRule("module", r"^\s*module\s+(?P<name>[\w:]+)"),
    ),
    Layer.METHOD: (
        PatternRule(
            "definition",
            r"^\s*def\s+(?:(?P<prefix>self|[A-Z]\w*)\.)?(?P<name>[\w?!=]+)"
            r"\s*(?:\((?P<params>[^)]*)\))?",
        ),
        PatternRule("definition", r"^\s*define_method\s*\(?\s*:(?P<name>[\w?!]+)"),
    ),
}

PATTERNS: dict[Language, dict[Layer, tuple[PatternRule, ...]]] = {
    Language.RUST: RUST_PATTERNS,
    Language.C_FAMILY: C_PATTERNS,
    Language.JAVASCRIPT_FAMILY: JS_PATTERNS,
    Language.GO: GO_PATTERNS,
    Language.PYTHON: PYTHON_PATTERNS,
    Language.JAVA: JAVA_PATTERNS,
    Language.PHP: PHP_PATTERNS,
    Language.RUBY: RUBY_PATTERNS,
}

# Language-independent scanner for `name(` call sites on lines no rule matched.
CALL_SITE_PATTERN = r"(?<![\w$])(?P<name>[A-Za-z_]\w*[?!]?)\s*\("

# String literals are blanked before call scanning.
STRING_LITERAL_PATTERN = r"\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*'|`(?:\\.|[^`\\])*`"

# Words that look like `name(` but are control flow or operators.
CALL_KEYWORDS: frozenset[str] = frozenset({
    "if", "elif", "else", "for", "foreach", "while", "until", "unless", "do",
    "switch", "case", "match", "catch", "try", "with", "return", "yield",
    "await", "throw", "sizeof", "typeof", "alignof", "decltype", "instanceof",
    "function", "func", "fn", "def", "lambda", "and", "or", "not", "in", "is",
    "defined", "assert", "elseif", "when",
})

# Names a definition rule may capture from a control-flow line; never methods.
DEFINITION_KEYWORDS: frozenset[str] = frozenset({
    "if", "elif", "else", "elseif", "for", "foreach", "while", "until", "unless",
    "do", "switch", "case", "catch", "try", "with", "return", "yield", "await",
    "throw", "sizeof", "typeof", "alignof", "decltype", "instanceof",
    "function", "func", "fn", "def", "lambda", "and", "or", "not", "in",
})

# A definition whose return-type text contains one of these is a statement.
STATEMENT_WORDS: frozenset[str] = frozenset({
    "return", "else", "new", "delete", "throw", "case", "goto", "typedef",
    "using", "namespace", "sizeof", "await", "yield", "print", "echo",
})

# Line prefixes that mark comments or attributes; skipped by the method scan.
# A bare `*` line is a comment too (see `COMMENT_LINES`), but `*ptr` is code.
COMMENT_PREFIXES: tuple[str, ...] = ("//", "/*", "* ", "*/", "#")
COMMENT_LINES: frozenset[str] = frozenset({"*"})
