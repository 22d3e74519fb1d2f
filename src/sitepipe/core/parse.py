"""Article discovery, reading, and title/date metadata extraction"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sitepipe.core.errors import DocumentError
from sitepipe.core.models import ContentDocument
from sitepipe.core.utils.fs import walk_files


ARTICLE_EXTENSIONS = {'.md'}
DATE_FMT = '%Y-%m-%d'


def discover_articles(content_dir: Path) -> list[Path]:
    """Return markdown files directly inside content_dir (non-recursive), sorted by name."""
    return list(walk_files(content_dir, ARTICLE_EXTENSIONS, recursive=False))


def read_document(path: Path) -> ContentDocument:
    """Read an article as UTF-8; unreadable or undecodable files raise DocumentError."""
    try:
        return ContentDocument(path=path, text=path.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(path, f"unreadable: {e}") from e


def extract_meta(text: str) -> tuple[str, Optional[str]]:
    """Return (title, date) from the first heading line and the first `date:` line.

    Title is '' when no heading exists; date is None when no `date:` line exists.
    The date value is returned verbatim (trimmed), without validation.
    """
    title = ''
    date = None
    for line in text.splitlines():
        if not title and line.startswith('#'):
            title = line.lstrip('#').strip()
        if date is None and line.lower().startswith('date:'):
            date = line.split(':', 1)[1].strip()
        if title and date is not None:
            break
    return title, date


def mtime_date(path: Path) -> str:
    """Format the file's last-modified time as YYYY-MM-DD in UTC."""
    try:
        modified = path.stat().st_mtime
    except OSError as e:
        raise DocumentError(path, f"cannot stat: {e}") from e
    return datetime.fromtimestamp(modified, tz=timezone.utc).strftime(DATE_FMT)
