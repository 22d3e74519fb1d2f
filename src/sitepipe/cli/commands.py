"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml

from sitepipe.config import CONFIG_FILE, Settings, load_config
from sitepipe.core.errors import BuildError
from sitepipe.core.models import FeedChannel
from sitepipe.core.pipeline import run_build
from sitepipe.snapshot import SourceNotFoundError, SourceSnapshot, get_snapshot


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _snapshot(settings: Settings) -> SourceSnapshot:
    """Cached snapshot of settings.project_root with the configured filters."""
    return get_snapshot(
        str(Path(settings.project_root).resolve()),
        tuple(settings.source_extensions),
        tuple(settings.source_excludes),
    )


def build_cmd(
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Markdown articles directory")] = None,
    images: Annotated[Optional[str], typer.Option("--image-dir", help="Image tree to mirror")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    site_url: Annotated[Optional[str], typer.Option("--site-url", help="Base URL for feed links")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    ):
    """Compile articles, write blogs.json + rss.xml, and mirror images."""
    settings = _settings(overrides={
        "content_dir": content, "image_dir": images, "output_dir": out, "site_url": site_url,
    })
    if settings.skip_build:
        typer.echo("Build skipped (skip_build is set).")
        raise typer.Exit(0)
    _configure_logging(verbose)

    channel = FeedChannel(
        title=settings.feed_title, link=settings.site_url, description=settings.feed_description,
    )
    output_dir = Path(settings.output_dir)
    try:
        report = run_build(
            Path(settings.content_dir),
            output_dir,
            image_dir=Path(settings.image_dir),
            channel=channel,
            preset=settings.parser_config,
            diagram_languages=settings.diagram_languages,
        )
    except BuildError as e:
        _fail("Build failed", e)

    for article in report.articles:
        typer.echo(f"  {article.date}  {article.slug}")
    for failure in report.failures:
        typer.echo(f"  skipped: {failure.error}", err=True)
    typer.echo(
        f"Built {len(report.articles)} article(s), "
        f"skipped {len(report.failures)}, "
        f"copied {report.images} image(s) to {output_dir}/"
    )


def sources_cmd(
    root: Annotated[Optional[str], typer.Option("--root", help="Project root to index")] = None,
    ):
    """List every path in the source snapshot."""
    snapshot = _snapshot(_settings(overrides={"project_root": root}))
    if not snapshot:
        typer.echo("No source files indexed.")
        raise typer.Exit(1)
    for path in snapshot:
        typer.echo(path)


def source_cmd(
    path: Annotated[str, typer.Argument(help="Relative path of the file to show")],
    root: Annotated[Optional[str], typer.Option("--root", help="Project root to index")] = None,
    ):
    """Print one file from the source snapshot."""
    snapshot = _snapshot(_settings(overrides={"project_root": root}))
    try:
        source = snapshot.lookup(path)
    except SourceNotFoundError as e:
        _fail(f"Not found: {e.path}")
    typer.echo(source.content, nl=False)


def init_cmd(
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing config.yaml")] = False,
    ):
    """Write a config.yaml with default settings."""
    path = Path(CONFIG_FILE)
    if path.exists() and not force:
        typer.echo(f"{CONFIG_FILE} already exists; use --force to overwrite.")
        raise typer.Exit(1)
    data = Settings().model_dump(exclude={"app_name", "skip_build"})
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    typer.echo(f"Wrote {CONFIG_FILE}")
