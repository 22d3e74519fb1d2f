"""Root test configuration: shared article fixtures and snapshot cache isolation"""

import os
from datetime import datetime, timezone

import pytest

from sitepipe.snapshot import get_snapshot


def _set_mtime(path, year, month, day):
    """Pin a file's modification time to noon UTC on the given day."""
    ts = datetime(year, month, day, 12, tzinfo=timezone.utc).timestamp()
    os.utime(path, (ts, ts))


@pytest.fixture(name="set_mtime")
def set_mtime_fixture():
    return _set_mtime


@pytest.fixture(autouse=True)
def clear_snapshot_cache():
    """get_snapshot is process-cached; keep tests from seeing each other's trees."""
    get_snapshot.cache_clear()
    yield
    get_snapshot.cache_clear()


@pytest.fixture(autouse=True)
def no_skip_env(monkeypatch):
    monkeypatch.delenv("SKIP_BLOG_BUILD", raising=False)
    monkeypatch.delenv("SITEPIPE_SKIP_BUILD", raising=False)


@pytest.fixture(name="content_dir")
def content_dir_fixture(tmp_path):
    """post-a has no date line (mtime 2023-05-01); post-b declares Date: 2024-02-10."""
    content = tmp_path / "content"
    content.mkdir()
    a = content / "post-a.md"
    a.write_text("# Post A\n\nFirst post.\n")
    _set_mtime(a, 2023, 5, 1)
    (content / "post-b.md").write_text("# Post B\n\nDate: 2024-02-10\n\nSecond post.\n")
    return content
