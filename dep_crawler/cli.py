"""Click CLI: crawl entry points and print or export the dependency graph."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from dep_crawler import __version__
from dep_crawler.errors import DepCrawlerError
from dep_crawler.exporter import DOT_FORMATS, JSON_FORMATS, export_graph, render_tree, write_export
from dep_crawler.models import CrawlConfig
from dep_crawler.pipeline import run_crawl

logger = logging.getLogger(__name__)


@click.command()
@click.version_option(version=__version__)
@click.argument("entry_points", nargs=-1, type=click.Path(path_type=Path))
@click.option("-l", "--library", "library_dirs", multiple=True, type=click.Path(path_type=Path),
              help="Library directory to crawl after the entry points (repeatable)")
@click.option("-d", "--depth", "max_depth", type=int, default=-1, show_default=True,
              help="Maximum directory depth, -1 for unlimited")
@click.option("-o", "--output", "output_format", type=str, default="terminal", show_default=True,
              help="terminal, dot, graphviz or json; anything else prints the tree")
@click.option("-f", "--output-file", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the export to this file instead of stdout")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and the tree view")
@click.option("--modules/--no-modules", default=True, help="Analyze module imports")
@click.option("--structures/--no-structures", default=True, help="Analyze type declarations")
@click.option("--methods/--no-methods", default=True, help="Analyze methods and calls")
def cli(
    entry_points: tuple[Path, ...],
    library_dirs: tuple[Path, ...],
    max_depth: int,
    output_format: str,
    output_file: Path | None,
    verbose: bool,
    modules: bool,
    structures: bool,
    methods: bool,
):
    """dep-crawler: map module, type and call dependencies of a source tree."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = CrawlConfig(
        roots=list(entry_points) or [Path(".")],
        library_dirs=list(library_dirs),
        max_depth=max_depth,
        output_format=output_format.lower(),
        output_file=output_file,
        verbose=verbose,
        analyze_modules=modules,
        analyze_structures=structures,
        analyze_methods=methods,
    )

    try:
        result = run_crawl(config)
    except DepCrawlerError as e:
        raise click.ClickException(str(e))

    graph = result.graph
    tree_options = {"modules": modules, "structures": structures, "methods": methods}
    text = export_graph(graph, config.output_format, **tree_options)

    if config.output_file:
        write_export(text, config.output_file)
        click.echo(f"Wrote {config.output_format} output to {config.output_file}")
    else:
        click.echo(text, nl=False)

    if config.verbose and config.output_format in DOT_FORMATS + JSON_FORMATS:
        click.echo(render_tree(graph, **tree_options), nl=False)

    stats = graph.release()
    result.library.teardown()
    logger.debug("Released %d records", stats.total)


if __name__ == "__main__":
    cli()
