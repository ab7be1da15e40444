"""Filesystem crawler: walks roots, runs the analyzers and feeds the graph."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from dep_crawler.errors import ExtractionError
from dep_crawler.extractor import get_analyzer
from dep_crawler.graph import DependencyGraph
from dep_crawler.language_map import SOURCE_EXTENSIONS, classify, extension_of
from dep_crawler.models import CrawlConfig, ExtractedDependency
from dep_crawler.patterns import PatternLibrary
from dep_crawler.resolver import resolve_structures

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


@dataclass
class CrawlStats:
    files_processed: int = 0
    files_skipped: int = 0
    paths_failed: int = 0
    directories_visited: int = 0


class Crawler:
    """Walk entry points and merge every analyzed file into a graph."""

    def __init__(
        self,
        config: CrawlConfig,
        library: PatternLibrary,
        graph: DependencyGraph | None = None,
        progress: ProgressCallback | None = None,
    ):
        self.config = config
        self.library = library
        self.graph = graph if graph is not None else DependencyGraph()
        self.stats = CrawlStats()
        self._progress = progress
        self._visited: set[str] = set()
        self._skip_dirs = set(config.skip_dirs)
        self._skip_exts = {e.lower().lstrip(".") for e in config.skip_extensions}
        if config.source_extensions is None:
            self._source_exts = set(SOURCE_EXTENSIONS)
        else:
            self._source_exts = {
                e.lower() if e.startswith(".") else f".{e.lower()}"
                for e in config.source_extensions
            }

    def crawl(self, roots: list[Path] | None = None) -> CrawlStats:
        """Crawl *roots* (the configured roots by default), in order."""
        roots = self.config.roots if roots is None else roots
        logger.info("Starting dependency crawl for %d paths", len(roots))
        for i, root in enumerate(roots):
            if self._progress:
                self._progress("Crawling", i, len(roots))
            self._crawl_path(Path(root), depth=0, explicit=True)
        if self._progress:
            self._progress("Crawling", len(roots), len(roots))
        return self.stats

    # ── Walking ───────────────────────────────────────────────

    def _crawl_path(self, path: Path, depth: int, explicit: bool) -> None:
        try:
            mode = os.stat(path).st_mode
        except OSError as e:
            logger.error("Cannot access %s: %s", path, e)
            self.stats.paths_failed += 1
            return

        if stat.S_ISREG(mode):
            self._crawl_file(path, explicit)
        elif stat.S_ISDIR(mode):
            self._crawl_dir(path, depth)
        else:
            logger.debug("Skipping non-regular path: %s", path)
            self.stats.files_skipped += 1

    def _crawl_dir(self, path: Path, depth: int) -> None:
        if path.name in self._skip_dirs:
            logger.debug("Skipping non-source directory: %s", path)
            return
        canonical = os.path.realpath(path)
        if canonical in self._visited:
            logger.debug("Already visited %s (via %s)", canonical, path)
            return
        self._visited.add(canonical)

        if self.config.max_depth >= 0 and depth > self.config.max_depth:
            logger.debug("Depth limit reached at %s", path)
            return

        try:
            entries = sorted(os.listdir(path))
        except OSError as e:
            logger.error("Cannot list %s: %s", path, e)
            self.stats.paths_failed += 1
            return

        self.stats.directories_visited += 1
        for name in entries:
            if name.startswith("."):
                continue
            self._crawl_path(path / name, depth + 1, explicit=False)

    def _crawl_file(self, path: Path, explicit: bool) -> None:
        ext = extension_of(path)
        if not ext or ext.lstrip(".") in self._skip_exts:
            logger.debug("Skipping non-source file: %s", path)
            self.stats.files_skipped += 1
            return
        if not explicit and ext not in self._source_exts:
            logger.debug("Skipping unsupported file: %s", path)
            self.stats.files_skipped += 1
            return
        canonical = os.path.realpath(path)
        if canonical in self._visited:
            logger.debug("Already processed %s (via %s)", canonical, path)
            return
        self._visited.add(canonical)
        if self.process_file(path):
            self.stats.files_processed += 1
        else:
            self.stats.paths_failed += 1

    # ── Processing ────────────────────────────────────────────

    def process_file(self, path: Path) -> bool:
        """Extract every enabled layer of one file and merge it.

        Returns False when the file could not be read or analyzed; nothing
        from such a file reaches the graph.
        """
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.error("Cannot read %s: %s", path, e)
            return False

        file_path = str(path)
        language = classify(path, default=self.config.default_language)
        analyzer = get_analyzer(language)
        records: list[ExtractedDependency] = []
        logger.debug("Analyzing %s as %s", file_path, language.display_name)

        try:
            if self.config.analyze_modules:
                records.extend(analyzer.extract_modules(file_path, text, self.library))
            if self.config.analyze_structures:
                structures = analyzer.extract_structures(file_path, text, self.library)
                if structures is not None:
                    resolve_structures(structures.structures, file_path, text, self.library, analyzer)
                    records.append(structures)
            if self.config.analyze_methods:
                methods = analyzer.extract_methods(file_path, text, self.library)
                if methods is not None:
                    records.append(methods)
        except (ExtractionError, MemoryError) as e:
            logger.error("Failed to analyze %s: %s", file_path, e)
            for record in records:
                record.release()
            return False

        for record in records:
            self.graph.merge(record)
        return True
