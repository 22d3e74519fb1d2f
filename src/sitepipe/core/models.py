"""Data models for the article compile, index, and feed stages"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pydantic import BaseModel


class ArticleMetadata(BaseModel):
    """Public listing entry for one compiled article (field order is the JSON order)."""
    title: str = ""
    date: str
    slug: str


class FeedChannel(BaseModel):
    """Fixed RSS channel header; item links are built as {link}/blog/{slug}."""
    title: str = "stovoy.dev Blog"
    link: str = "https://stovoy.dev"
    description: str = "Articles from stovoy.dev"


@dataclass(frozen=True)
class ContentDocument:
    """One article source file, read once per build."""
    path: Path
    text: str

    @property
    def slug(self) -> str:
        return self.path.stem


@dataclass
class CompileResult:
    """Outcome of compiling a single document: metadata on success, error otherwise."""
    path:     Path
    metadata: Optional[ArticleMetadata] = None
    error:    Optional[str] = None
    page:     Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.metadata is not None


@dataclass
class CompileReport:
    """Aggregated compile outcomes in discovery order."""
    results: list[CompileResult] = field(default_factory=list)

    @property
    def articles(self) -> list[ArticleMetadata]:
        return [r.metadata for r in self.results if r.ok]

    @property
    def failures(self) -> list[CompileResult]:
        return [r for r in self.results if not r.ok]


@dataclass
class BuildReport:
    """Summary of a completed build."""
    output_dir: Path
    articles:   list[ArticleMetadata]
    failures:   list[CompileResult]
    images:     int = 0
