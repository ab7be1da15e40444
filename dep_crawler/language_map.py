"""Shared extension-to-language mapping for the crawler and extractors."""

from __future__ import annotations

import logging
import os

from dep_crawler.models import Language

logger = logging.getLogger(__name__)

# Unknown or missing extensions resolve to this language instead of failing.
DEFAULT_LANGUAGE = Language.RUST

EXT_TO_LANGUAGE: dict[str, Language] = {
    ".rs": Language.RUST,
    ".c": Language.C_FAMILY,
    ".h": Language.C_FAMILY,
    ".cpp": Language.C_FAMILY,
    ".hpp": Language.C_FAMILY,
    ".cc": Language.C_FAMILY,
    ".cxx": Language.C_FAMILY,
    ".js": Language.JAVASCRIPT_FAMILY,
    ".jsx": Language.JAVASCRIPT_FAMILY,
    ".mjs": Language.JAVASCRIPT_FAMILY,
    ".ts": Language.JAVASCRIPT_FAMILY,
    ".tsx": Language.JAVASCRIPT_FAMILY,
    ".go": Language.GO,
    ".py": Language.PYTHON,
    ".java": Language.JAVA,
    ".php": Language.PHP,
    ".rb": Language.RUBY,
}

SOURCE_EXTENSIONS: frozenset[str] = frozenset(EXT_TO_LANGUAGE)


def extension_of(path: str | os.PathLike[str]) -> str:
    """Return the lowercased final extension of *path*, with its dot, or ''."""
    name = os.path.basename(os.fspath(path))
    dot = name.rfind(".")
    if dot < 0:
        return ""
    return name[dot:].lower()


def classify(
    path: str | os.PathLike[str],
    default: Language = DEFAULT_LANGUAGE,
) -> Language:
    """Map a file path to a supported language by its final extension."""
    ext = extension_of(path)
    language = EXT_TO_LANGUAGE.get(ext)
    if language is None:
        logger.debug("Unsupported extension %r for %s, using %s", ext, path, default.display_name)
        return default
    return language
