"""CLI interface for Sitecontent.

Command-line tool for inspecting and exporting resolved site content.
"""

import json
import logging
import sys
from datetime import UTC
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any, NoReturn

import click

from sitecontent.config import Config
from sitecontent.core.chronology import ChronologicalIndex
from sitecontent.core.props import PropsAssembler, build_app_context
from sitecontent.core.routes import RouteManifest, enumerate_feed_routes, enumerate_routes
from sitecontent.core.store import ContentStore
from sitecontent.errors import ContentError, DefinitionError


def config_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add options shared by every command."""

    @click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, path_type=Path),
        default=None,
        help="Path to configuration file (default: auto-discover sitecontent.toml)",
    )
    @click.option(
        "--source-dir",
        "-s",
        type=click.Path(exists=True, path_type=Path, file_okay=False),
        default=None,
        help="Content source directory (overrides config)",
    )
    @click.option(
        "--verbose",
        "-v",
        is_flag=True,
        help="Enable debug logging",
    )
    @wraps(func)
    def wrapper(*args: Any, verbose: bool, **kwargs: Any) -> Any:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )
        return func(*args, **kwargs)

    return wrapper


@click.group()
def cli() -> None:
    """Sitecontent - build-time content resolution for documentation sites."""


@cli.command()
@config_options
@click.argument("root")
def routes(config_path: Path | None, source_dir: Path | None, root: str) -> None:
    """Print the static route manifest of a section or the feed."""
    config = _load_config(config_path, source_dir=source_dir)
    try:
        if root in config.sections:
            route_list = enumerate_routes(config.get_section(root))
        elif root == config.feed.root:
            store = ContentStore(config.content.source_dir)
            route_list = enumerate_feed_routes(ChronologicalIndex(store), root)
        else:
            _fail(f"No navigation section or feed named {root!r}")
    except (ContentError, DefinitionError) as e:
        _fail(str(e))

    _echo_json(RouteManifest(routes=route_list).to_dict())


@cli.command()
@config_options
@click.argument("root")
@click.argument("segments", nargs=-1, required=True)
def props(
    config_path: Path | None,
    source_dir: Path | None,
    root: str,
    segments: tuple[str, ...],
) -> None:
    """Print the page props of one route, e.g. `props tokio tutorial spawning`."""
    config = _load_config(config_path, source_dir=source_dir)
    store = ContentStore(config.content.source_dir)
    index = ChronologicalIndex(store)
    assembler = PropsAssembler(store)

    try:
        app = build_app_context(index, config.feed.root)
        if root in config.sections:
            result = assembler.assemble(config.get_section(root), root, segments, app)
        elif root == config.feed.root:
            result = assembler.assemble_feed_page(
                index, root, segments, config.feed.menu_size, app
            )
        else:
            _fail(f"No navigation section or feed named {root!r}")
    except (ContentError, DefinitionError) as e:
        _fail(str(e))

    _echo_json(result.to_dict())


@cli.command()
@config_options
@click.option("--root", "feed_root", default=None, help="Dated content root (overrides config)")
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=0),
    default=None,
    help="Number of newest entries to show (overrides config)",
)
def feed(
    config_path: Path | None,
    source_dir: Path | None,
    feed_root: str | None,
    limit: int | None,
) -> None:
    """Print the newest dated entries grouped by year."""
    config = _load_config(
        config_path,
        source_dir=source_dir,
        feed_root=feed_root,
        menu_size=limit,
    )
    index = ChronologicalIndex(ContentStore(config.content.source_dir))

    try:
        groups = index.group_by_year(config.feed.root, config.feed.menu_size)
    except ContentError as e:
        _fail(str(e))

    for year, entries in groups.items():
        click.echo(click.style(str(year), bold=True))
        for entry in entries:
            day = entry.date.astimezone(UTC).date().isoformat()
            click.echo(f"  {day}  {entry.title}  ({entry.href})")


@cli.command()
@config_options
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Output directory (overrides config)",
)
def export(config_path: Path | None, source_dir: Path | None, output_dir: Path | None) -> None:
    """Export route manifests and page props as JSON."""
    from sitecontent.export import SiteExporter

    config = _load_config(config_path, source_dir=source_dir, output_dir=output_dir)
    click.echo(f"Source directory: {config.content.source_dir}")
    click.echo(f"Output directory: {config.content.output_dir}")

    try:
        report = SiteExporter(config).export()
    except (ContentError, DefinitionError) as e:
        _fail(str(e))

    click.echo(f"Exported {len(report.pages)} pages")
    if not report.ok:
        click.echo(
            click.style(f"{len(report.failures)} page(s) failed:", fg="red"),
            err=True,
        )
        for failure in report.failures:
            click.echo(f"  - {failure.path}: {failure.error}", err=True)
        sys.exit(1)

    click.echo(click.style("Export complete", fg="green", bold=True))


@cli.command()
@config_options
@click.option("--host", default=None, help="Host to bind to (overrides config)")
@click.option("--port", "-p", type=int, default=None, help="Port to bind to (overrides config)")
def serve(
    config_path: Path | None,
    source_dir: Path | None,
    host: str | None,
    port: int | None,
) -> None:
    """Start the props preview server."""
    from sitecontent.server import run_server

    config = _load_config(config_path, source_dir=source_dir, host=host, port=port)
    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Source directory: {config.content.source_dir}")
    click.echo(f"Sections: {', '.join(config.sections) or '(none)'}")
    run_server(config)


def _load_config(config_path: Path | None, **overrides: Any) -> Config:
    """Load configuration and apply CLI overrides, exiting on invalid config."""
    try:
        config = Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))
    return config.with_overrides(**overrides)


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _echo_json(data: object) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
