"""Build orchestration: compile -> index/feed -> assets, published atomically"""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, Optional

from sitepipe.core.assets import mirror_tree
from sitepipe.core.compile import compile_articles
from sitepipe.core.errors import OutputError
from sitepipe.core.export import FEED_NAME, INDEX_NAME, write_feed, write_indexes
from sitepipe.core.models import BuildReport, FeedChannel
from sitepipe.core.render import DIAGRAM_LANGUAGES


logger = logging.getLogger(__name__)

# Top-level entries of output_dir the pipeline writes. Everything else is left alone.
PUBLISHED = ("blog", INDEX_NAME, FEED_NAME, "img")
STAGING_PREFIX = ".sitepipe-staging-"


def _check_sources(output_dir: Path, *sources: Optional[Path]) -> None:
    """Refuse to build when an input lives inside an entry that publishing replaces."""
    for source in sources:
        if source is None:
            continue
        for name in PUBLISHED:
            target = output_dir / name
            if source == target or target in source.parents:
                cause = ValueError(f"{source} would be replaced by the build")
                raise OutputError("staging", target, cause)


def _make_staging(output_dir: Path) -> Path:
    """Create an empty staging directory inside output_dir (same filesystem for rename)."""
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=output_dir))
    except OSError as e:
        raise OutputError("staging", output_dir, e) from e


def _publish(staging: Path, output_dir: Path) -> None:
    """Swap each staged artifact into output_dir, rolling every swap back on failure.

    Previous artifacts are parked under staging/previous and go away with it.
    An artifact the build did not produce (img/ without an image dir) keeps
    whatever output_dir already has.
    """
    previous = staging / "previous"
    swapped = []
    try:
        previous.mkdir()
        for name in PUBLISHED:
            staged, target = staging / name, output_dir / name
            if not staged.exists():
                continue
            if target.exists():
                target.rename(previous / name)
            swapped.append(name)
            staged.rename(target)
    except OSError as e:
        for name in reversed(swapped):
            target, parked = output_dir / name, previous / name
            if target.exists() and not (staging / name).exists():
                target.rename(staging / name)
            if parked.exists():
                parked.rename(target)
        raise OutputError("publish", output_dir, e) from e


def build_into(
    content_dir: Path,
    output_dir: Path,
    image_dir: Optional[Path] = None,
    channel: Optional[FeedChannel] = None,
    preset: str = 'gfm-like',
    diagram_languages: Iterable[str] = DIAGRAM_LANGUAGES,
    ) -> BuildReport:
    """Run every stage writing directly into output_dir. No staging, no cleanup."""
    channel = channel or FeedChannel()

    report = compile_articles(content_dir, output_dir / "blog", preset, diagram_languages)
    articles = report.articles
    write_indexes(articles, output_dir)
    write_feed(articles, channel, output_dir)

    images = mirror_tree(image_dir, output_dir / "img") if image_dir else 0
    return BuildReport(
        output_dir=output_dir,
        articles=articles,
        failures=report.failures,
        images=images,
    )


def run_build(
    content_dir: Path,
    output_dir: Path,
    image_dir: Optional[Path] = None,
    channel: Optional[FeedChannel] = None,
    preset: str = 'gfm-like',
    diagram_languages: Iterable[str] = DIAGRAM_LANGUAGES,
    ) -> BuildReport:
    """Build the site into a staging directory and swap its artifacts into output_dir.

    Only the PUBLISHED entries of output_dir are replaced; other files there
    survive. Any OutputError aborts the build and leaves the previous output
    untouched. The returned report points at the resolved output_dir.
    """
    output_dir = Path(output_dir).resolve()
    content_dir = Path(content_dir).resolve()
    image_dir = Path(image_dir).resolve() if image_dir else None
    _check_sources(output_dir, content_dir, image_dir)

    staging = _make_staging(output_dir)
    logger.debug("staging build in %s", staging)
    try:
        report = build_into(content_dir, staging, image_dir, channel, preset, diagram_languages)
        _publish(staging, output_dir)
    finally:
        shutil.rmtree(staging, ignore_errors=True)

    report.output_dir = output_dir
    logger.info(
        "published %d article(s) to %s (%d skipped, %d image(s))",
        len(report.articles), output_dir, len(report.failures), report.images,
    )
    return report
