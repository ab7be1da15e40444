"""Stamp structure base/parent text with the module file it came through."""

from __future__ import annotations

import logging

from dep_crawler.extractor.base import BaseAnalyzer
from dep_crawler.models import Structure
from dep_crawler.patterns import PatternLibrary

logger = logging.getLogger(__name__)


def resolve_structures(
    structures: list[Structure],
    path: str,
    text: str,
    library: PatternLibrary,
    analyzer: BaseAnalyzer,
) -> int:
    """Rewrite each structure's dependencies to ``"<file>:<original>"``.

    The module extractor is re-run over *text*. A structure is stamped by
    the first module record whose target occurs in its dependency text.
    Already stamped structures are left alone. Returns the number stamped.
    """
    candidates = [s for s in structures if s.dependencies and s.provenance is None]
    if not candidates:
        return 0

    modules = analyzer.extract_modules(path, text, library)
    stamped = 0
    try:
        for structure in candidates:
            for record in modules:
                if record.target and record.target in structure.dependencies:
                    structure.dependencies = f"{record.file_path}:{structure.dependencies}"
                    structure.provenance = record.file_path
                    stamped += 1
                    break
    finally:
        for record in modules:
            record.release()

    if stamped:
        logger.debug("Resolved %d structure dependencies in %s", stamped, path)
    return stamped
