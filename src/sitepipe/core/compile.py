"""Content compiler: one markdown article -> one HTML page + ArticleMetadata"""

import logging
from pathlib import Path
from typing import Iterable

from sitepipe.core.errors import DocumentError
from sitepipe.core.models import ArticleMetadata, CompileReport, CompileResult
from sitepipe.core.parse import discover_articles, extract_meta, mtime_date, read_document
from sitepipe.core.render import DIAGRAM_LANGUAGES, render_article
from sitepipe.core.utils.fs import write_text


logger = logging.getLogger(__name__)

PAGE_NAME = 'index.html'


def page_path(blog_dir: Path, slug: str) -> Path:
    """Directory-per-article layout: <blog_dir>/<slug>/index.html."""
    return blog_dir / slug / PAGE_NAME


def compile_document(
    path: Path,
    blog_dir: Path,
    preset: str = 'gfm-like',
    diagram_languages: Iterable[str] = DIAGRAM_LANGUAGES,
    ) -> CompileResult:
    """Compile one article into blog_dir.

    Read and render failures are returned as a failed CompileResult.
    Write failures raise OutputError and abort the build.
    """
    try:
        doc = read_document(path)
        title, date = extract_meta(doc.text)
        if date is None:
            date = mtime_date(path)
        html = render_article(doc.text, preset, diagram_languages)
    except DocumentError as e:
        return CompileResult(path=path, error=str(e))
    except (ValueError, RecursionError) as e:
        return CompileResult(path=path, error=f"{path}: cannot render: {e}")

    page = write_text(page_path(blog_dir, doc.slug), html, stage="compile")
    logger.debug("compiled %s -> %s", path, page)
    return CompileResult(
        path=path,
        metadata=ArticleMetadata(title=title, date=date, slug=doc.slug),
        page=page,
    )


def compile_articles(
    content_dir: Path,
    blog_dir: Path,
    preset: str = 'gfm-like',
    diagram_languages: Iterable[str] = DIAGRAM_LANGUAGES,
    ) -> CompileReport:
    """Compile every article in content_dir; bad documents are logged and skipped."""
    report = CompileReport()
    files = discover_articles(content_dir)
    if not files:
        logger.info("no articles found in %s", content_dir)
        return report

    for path in files:
        result = compile_document(path, blog_dir, preset, diagram_languages)
        if not result.ok:
            logger.warning("skipping article: %s", result.error)
        report.results.append(result)

    logger.info(
        "compiled %d article(s), skipped %d", len(report.articles), len(report.failures)
    )
    return report
