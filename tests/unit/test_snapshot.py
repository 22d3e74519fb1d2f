"""Unit tests for snapshot.py"""

import pytest

from sitepipe.snapshot import (
    CONTENT_TYPE,
    SourceNotFoundError,
    SourceSnapshot,
    collect_sources,
    get_snapshot,
    normalize_path,
)


@pytest.fixture(name="project")
def project_fixture(tmp_path):
    """A small project tree with kept files and every kind of pruned directory."""
    root = tmp_path / "project"
    files = {
        "Cargo.toml": "[workspace]\n",
        "backend/src/lib.rs": "pub fn lib() {}\n",
        "backend/build.rs": "fn main() {}\n",
        "frontend/style.css": "body {}\n",
        "frontend/index.html": "<html></html>\n",
        "frontend/logo.png": "not text",
        "target/debug/out.rs": "generated",
        "dist/blog/x.html": "generated",
        "node_modules/pkg/index.html": "dep",
        ".git/config.toml": "vcs",
        "frontend/.cache/a.rs": "hidden",
        "frontend_rust/src/main.rs": "legacy",
    }
    for rel, text in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text)
    return root


# --- normalize_path ---

@pytest.mark.parametrize("path,expected", [
    ("a/../../etc/passwd", "etc/passwd"),
    ("a/b/../c.rs", "a/c.rs"),
    ("../../etc/passwd", "etc/passwd"),
    ("/backend//src/lib.rs", "backend/src/lib.rs"),
    ("backend\\src\\lib.rs", "backend/src/lib.rs"),
    ("..", ""),
])
def test_normalize_path(path, expected):
    """Empty segments are dropped, .. never climbs above the root, separators are unified."""
    assert normalize_path(path) == expected


# --- collect_sources ---

def test_collect_sources_filters_and_sorts(project):
    """Only allowed extensions outside pruned directories are kept, sorted by path."""
    rels = [rel for rel, _ in collect_sources(project)]
    assert rels == [
        "Cargo.toml",
        "backend/build.rs",
        "backend/src/lib.rs",
        "frontend/index.html",
        "frontend/style.css",
    ]


def test_collect_sources_absolute_paths(project):
    """Each pair carries the absolute path of the file."""
    for rel, abs_path in collect_sources(project):
        assert abs_path.is_absolute()
        assert abs_path == project.resolve() / rel


def test_collect_sources_custom_sets(project):
    """Extension and exclusion sets are configurable."""
    rels = [rel for rel, _ in collect_sources(project, [".rs"], ["backend"])]
    assert rels == ["frontend_rust/src/main.rs", "target/debug/out.rs"]


# --- SourceSnapshot ---

def test_lookup_returns_exact_content(project):
    """An indexed path returns the original text as plain text."""
    snap = SourceSnapshot.build(project)
    hit = snap.lookup("backend/src/lib.rs")
    assert hit.content == "pub fn lib() {}\n"
    assert hit.content_type == CONTENT_TYPE
    assert hit.content_type.startswith("text/plain")


def test_lookup_traversal_is_not_found(project):
    """Traversal is normalized away and the normalized path is looked up."""
    snap = SourceSnapshot.build(project)
    with pytest.raises(SourceNotFoundError) as exc:
        snap.lookup("a/../../etc/passwd")
    assert exc.value.path == "etc/passwd"


def test_lookup_traversal_resolves_to_indexed_path(project):
    """A traversal attempt that normalizes to an indexed key returns that key only."""
    snap = SourceSnapshot.build(project)
    assert snap.lookup("../../backend/src/lib.rs").path == "backend/src/lib.rs"


def test_lookup_no_prefix_match(project):
    """Directory prefixes and extensionless names are misses."""
    snap = SourceSnapshot.build(project)
    for path in ("backend", "backend/src", "backend/src/lib"):
        with pytest.raises(SourceNotFoundError):
            snap.lookup(path)


def test_lookup_miss_is_key_error(project):
    snap = SourceSnapshot.build(project)
    with pytest.raises(KeyError):
        snap.lookup("nope.rs")


def test_snapshot_is_read_only(project):
    """The snapshot exposes no way to mutate its mapping."""
    snap = SourceSnapshot.build(project)
    with pytest.raises(TypeError):
        snap["new.rs"] = "x"
    with pytest.raises(TypeError):
        snap._files["new.rs"] = "x"


def test_snapshot_enumerates_keys(project):
    """keys() lists every indexed path in sorted order."""
    snap = SourceSnapshot.build(project)
    assert list(snap.keys()) == [rel for rel, _ in collect_sources(project)]
    assert len(snap) == 5
    assert "Cargo.toml" in snap


def test_snapshot_skips_undecodable_file(project):
    """Files that are not UTF-8 are left out rather than failing the snapshot."""
    (project / "binary.rs").write_bytes(b"\xff\xfe\x00")
    snap = SourceSnapshot.build(project)
    assert "binary.rs" not in snap
    assert len(snap) == 5


def test_snapshot_missing_root(tmp_path):
    assert len(SourceSnapshot.build(tmp_path / "missing")) == 0


# --- get_snapshot ---

def test_get_snapshot_built_once(project):
    """Later source edits are not observed by the cached snapshot."""
    first = get_snapshot(str(project))
    (project / "backend" / "src" / "lib.rs").write_text("changed")
    (project / "new.rs").write_text("new")
    second = get_snapshot(str(project))
    assert second is first
    assert second.lookup("backend/src/lib.rs").content == "pub fn lib() {}\n"
    assert "new.rs" not in second
