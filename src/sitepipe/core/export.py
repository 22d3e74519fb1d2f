"""Index and feed generation: sorted JSON listings and the RSS 2.0 channel"""

import json
from pathlib import Path
from xml.sax.saxutils import escape

from sitepipe.core.models import ArticleMetadata, FeedChannel
from sitepipe.core.utils.fs import write_text


INDEX_NAME = "blogs.json"
FEED_NAME = "rss.xml"
XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def sort_articles(articles: list[ArticleMetadata]) -> list[ArticleMetadata]:
    """Newest first by YYYY-MM-DD string; stable for equal dates."""
    return sorted(articles, key=lambda a: a.date, reverse=True)


def build_index_json(articles: list[ArticleMetadata]) -> str:
    """Compact JSON array of {title, date, slug} in the given order."""
    return json.dumps(
        [a.model_dump() for a in articles], ensure_ascii=False, separators=(",", ":")
    )


def write_indexes(articles: list[ArticleMetadata], output_dir: Path) -> tuple[Path, Path]:
    """Write byte-identical listings to <output>/blogs.json and <output>/blog/blogs.json.

    Returns (root_index, blog_index).
    """
    text = build_index_json(sort_articles(articles))
    root_index = write_text(output_dir / INDEX_NAME, text, stage="index")
    blog_index = write_text(output_dir / "blog" / INDEX_NAME, text, stage="index")
    return root_index, blog_index


def escape_xml(text: str) -> str:
    """Escape &, <, >, double and single quotes for XML text."""
    return escape(text, XML_ENTITIES)


def build_item(article: ArticleMetadata, channel: FeedChannel) -> str:
    link = f"{channel.link.rstrip('/')}/blog/{article.slug}"
    return (
        f"<item><title>{escape_xml(article.title)}</title>"
        f"<link>{escape_xml(link)}</link>"
        f"<pubDate>{escape_xml(article.date)}</pubDate></item>"
    )


def build_rss(articles: list[ArticleMetadata], channel: FeedChannel) -> str:
    """Render the RSS 2.0 document with one <item> per article, newest first."""
    items = "".join(build_item(a, channel) for a in sort_articles(articles))
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel>'
        f"<title>{escape_xml(channel.title)}</title>"
        f"<link>{escape_xml(channel.link)}</link>"
        f"<description>{escape_xml(channel.description)}</description>"
        f"{items}</channel></rss>"
    )


def write_feed(articles: list[ArticleMetadata], channel: FeedChannel, output_dir: Path) -> Path:
    """Write <output>/rss.xml."""
    return write_text(output_dir / FEED_NAME, build_rss(articles, channel), stage="feed")
