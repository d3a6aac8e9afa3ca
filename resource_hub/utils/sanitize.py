"""
Sanitising for stored article bodies and for URLs placed in href/src.

Article bodies come from editors and are rendered inside the full view, so
they go through a bleach allow-list. Everything else is rendered as text by
the Jinja2 templates and only needs tags stripped.
"""

import html
import re
from typing import Optional

import bleach

ARTICLE_TAGS = frozenset({
    'p', 'br', 'hr', 'strong', 'em', 'u', 'code', 'pre', 'blockquote',
    'h2', 'h3', 'h4', 'h5', 'h6', 'ul', 'ol', 'li', 'a', 'img',
    'figure', 'figcaption', 'table', 'thead', 'tbody', 'tr', 'th', 'td', 'div', 'span',
})

ARTICLE_ATTRIBUTES = {
    'a': ['href', 'title', 'target', 'rel'],
    'img': ['src', 'alt', 'title', 'width', 'height'],
    **{tag: ['class'] for tag in ('code', 'pre', 'div', 'span', 'table', 'figure')},
}

LINK_PROTOCOLS = frozenset({'http', 'https', 'mailto'})

_UNSAFE_SCHEMES = re.compile(r'^\s*(?:javascript|vbscript|data|file):', re.IGNORECASE)
_WHITESPACE = re.compile(r'\s+')

_article_cleaner = bleach.Cleaner(
    tags=ARTICLE_TAGS,
    attributes=ARTICLE_ATTRIBUTES,
    protocols=LINK_PROTOCOLS,
    strip=True,
)
_text_cleaner = bleach.Cleaner(tags=set(), strip=True)


def sanitize_rich_content(text: Optional[str]) -> str:
    """Clean an article body; disallowed tags are dropped and their text kept."""
    if not text:
        return ""
    return _article_cleaner.clean(text)


def sanitize_plain_text(text: Optional[str]) -> str:
    """
    Strip every tag and collapse whitespace.

    The result is unescaped text, meant for text nodes that the template
    layer escapes on output (headings, excerpts, titles).
    """
    if not text:
        return ""
    stripped = _text_cleaner.clean(text)
    return html.unescape(_WHITESPACE.sub(' ', stripped).strip())


def sanitize_url(url: Optional[str]) -> Optional[str]:
    """Return the trimmed URL, or None when empty or using a script-capable scheme."""
    if url is None:
        return None
    url = str(url).strip()
    if not url or _UNSAFE_SCHEMES.match(url):
        return None
    return url


def word_excerpt(text: Optional[str], words: int, more: str = "...") -> str:
    parts = sanitize_plain_text(text).split()
    if len(parts) <= words:
        return " ".join(parts)
    return " ".join(parts[:words]) + more
