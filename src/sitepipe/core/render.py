"""Markdown-to-HTML rendering and the diagram/image output transforms"""

import re
from typing import Iterable

from markdown_it import MarkdownIt


DIAGRAM_LANGUAGES = ('mermaid', 'dolphin')
IMG_ROOT = '/img/'

IMG_SRC_RE = re.compile(r'(<img\b[^>]*?(?<![\w-])src=")([^"]+)(")', re.IGNORECASE)
SCHEME_RE = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*:')
ENTITY_RE = re.compile(r'&(?:amp|lt|gt|quot|#39);')
ENTITIES = {
    '&amp;':  '&',
    '&lt;':   '<',
    '&gt;':   '>',
    '&quot;': '"',
    '&#39;':  "'",
}


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def markdown_to_html(text: str, preset: str = 'gfm-like') -> str:
    """Render a markdown body to an HTML fragment."""
    return _make_parser(preset).render(text)


def unescape_entities(text: str) -> str:
    """Replace the five standard HTML entities in a single pass (never double-unescapes)."""
    return ENTITY_RE.sub(lambda m: ENTITIES[m.group(0)], text)


def _diagram_re(languages: Iterable[str]) -> re.Pattern:
    aliases = '|'.join(re.escape(lang) for lang in languages)
    return re.compile(rf'<pre><code class="language-(?:{aliases})">([\s\S]*?)</code></pre>')


def transform_diagrams(html: str, languages: Iterable[str] = DIAGRAM_LANGUAGES) -> str:
    """Rewrite diagram code fences into <pre class="mermaid"> containers with raw source."""
    languages = tuple(languages)
    if not languages:
        return html
    return _diagram_re(languages).sub(
        lambda m: f'<pre class="mermaid">{unescape_entities(m.group(1))}</pre>', html
    )


def is_absolute_src(src: str) -> bool:
    """True for URLs with a scheme (http:, data:, ...) and root-relative paths."""
    return src.startswith(('http', '/')) or bool(SCHEME_RE.match(src))


def transform_img_paths(html: str) -> str:
    """Root every relative <img src> under /img/; absolute and root-relative srcs are kept."""
    def repl(m: re.Match) -> str:
        src = m.group(2)
        if is_absolute_src(src):
            return m.group(0)
        return f'{m.group(1)}{IMG_ROOT}{src}{m.group(3)}'

    return IMG_SRC_RE.sub(repl, html)


def render_article(
    text: str,
    preset: str = 'gfm-like',
    diagram_languages: Iterable[str] = DIAGRAM_LANGUAGES,
    ) -> str:
    """Full article body rendering: markdown -> HTML -> diagram blocks -> image paths."""
    html = markdown_to_html(text, preset)
    html = transform_diagrams(html, diagram_languages)
    return transform_img_paths(html)
