"""Crawl orchestrator: library -> graph -> crawler over entry points and libraries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from dep_crawler.crawler import Crawler, CrawlStats, ProgressCallback
from dep_crawler.graph import DependencyGraph
from dep_crawler.models import CrawlConfig
from dep_crawler.patterns import PatternLibrary

logger = logging.getLogger(__name__)


@dataclass
class CrawlResult:
    graph: DependencyGraph
    library: PatternLibrary
    stats: CrawlStats = field(default_factory=CrawlStats)
    library_roots: list[Path] = field(default_factory=list)


def run_crawl(
    config: CrawlConfig,
    library: PatternLibrary | None = None,
    progress: ProgressCallback | None = None,
) -> CrawlResult:
    """Crawl the configured entry points, then the library directories.

    A PatternCompileError from building the library propagates; nothing is
    crawled in that case.
    """
    if library is None:
        library = PatternLibrary()
    if not library.initialized:
        library.initialize()

    graph = DependencyGraph()
    crawler = Crawler(config, library, graph, progress=progress)
    crawler.crawl(list(config.roots))
    if config.library_dirs:
        logger.info("Crawling %d library directories", len(config.library_dirs))
        crawler.crawl(list(config.library_dirs))

    stats = crawler.stats
    logger.info(
        "Crawl finished: %d files processed, %d skipped, %d failed",
        stats.files_processed, stats.files_skipped, stats.paths_failed,
    )
    return CrawlResult(
        graph=graph,
        library=library,
        stats=stats,
        library_roots=list(config.library_dirs),
    )
