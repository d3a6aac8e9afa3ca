"""
Table of Contents

Finds h2-h4 headings in article HTML, gives each a stable anchor id and
returns the list of entries alongside the rewritten HTML.
"""

import re
from dataclasses import dataclass

from resource_hub.utils.sanitize import sanitize_plain_text
from resource_hub.utils.slugify import slugify

HEADING_PATTERN = re.compile(r'<h([2-4])[^>]*>(.*?)</h[2-4]>', re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class TocEntry:
    level: int
    text: str
    anchor: str


def generate_toc(html: str) -> tuple[list[TocEntry], str]:
    """
    Build table-of-contents entries for ``html``.

    Anchors are ``<slug>-<n>`` where n counts headings from 1, so repeated
    heading texts still get distinct ids.

    Returns:
        (entries, html with id attributes on the headings). With no headings
        the entry list is empty and the html is returned untouched.
    """
    entries: list[TocEntry] = []

    def _tag(match: re.Match) -> str:
        level, inner = int(match.group(1)), match.group(2)
        text = sanitize_plain_text(inner)
        anchor = f"{slugify(text)}-{len(entries) + 1}"
        entries.append(TocEntry(level=level, text=text, anchor=anchor))
        return f'<h{level} id="{anchor}">{inner}</h{level}>'

    rewritten = HEADING_PATTERN.sub(_tag, html or "")
    if not entries:
        return [], html or ""
    return entries, rewritten
