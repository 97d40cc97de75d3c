"""Text normalization shared by the posting and CV fetch paths.

- :func:`clean_html` turns an HTML fragment into Markdown.
- :func:`clean_text` flattens a fragment to a single line of plain text.
- :func:`sanitize_filename` slugs text into a filesystem-safe name.
"""

from __future__ import annotations

import re
from typing import Iterator

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

# Tag name → (opening marker, closing marker).  Tags not listed here are
# dropped but their text is kept.
_MARKDOWN_MARKERS: dict[str, tuple[str, str]] = {
    "h1": ("\n# ", "\n"),
    "h2": ("\n## ", "\n"),
    "h3": ("\n### ", "\n"),
    "h4": ("\n#### ", "\n"),
    "li": ("\n- ", ""),
    "p": ("\n\n", "\n"),
    "strong": ("**", "**"),
    "b": ("**", "**"),
    "em": ("*", "*"),
    "i": ("*", "*"),
}

# Void elements rendered as a fixed marker.
_VOID_MARKERS = {
    "br": "\n",
    "hr": "\n---\n",
}

_DROPPED_TAGS = ["script", "style"]

_FILENAME_DENYLIST = set("/\\:*?\"<>|',.()&@#$%^+=[]{}")

_SPACE_RUN_RE = re.compile(r"[ \t]+")
_LINE_EDGE_SPACE_RE = re.compile(r"^ +| +$", re.MULTILINE)
_NEWLINE_RUN_RE = re.compile(r"\n{3,}")
_DASH_RUN_RE = re.compile(r"-+")
_WHITESPACE_RE = re.compile(r"\s+")
# "&" that does not start a terminated entity reference ("AT&T", "Q&A").
_BARE_AMPERSAND_RE = re.compile(r"&(?!#?\w+;)")


def _parse(html: str) -> BeautifulSoup:
    """Parse *html*, keeping bare ampersands literal.

    ``html.parser`` otherwise reads ``&T`` in ``AT&T`` as an unknown entity
    and drops the ``&``.
    """
    return BeautifulSoup(_BARE_AMPERSAND_RE.sub("&amp;", html), "html.parser")


def _render(node: Tag) -> Iterator[str]:
    """Yield the Markdown pieces for every child of *node*, depth first."""
    for child in node.children:
        if isinstance(child, PreformattedString):
            # Comments, doctypes, CDATA, processing instructions.
            continue
        if isinstance(child, NavigableString):
            yield str(child)
            continue
        if not isinstance(child, Tag):
            continue

        name = child.name.lower()
        if name in _VOID_MARKERS:
            yield _VOID_MARKERS[name]
            continue

        opening, closing = _MARKDOWN_MARKERS.get(name, ("", ""))
        yield opening
        yield from _render(child)
        yield closing


def _collapse_whitespace(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n").replace("\xa0", " ")
    text = _SPACE_RUN_RE.sub(" ", text)
    text = _LINE_EDGE_SPACE_RE.sub("", text)
    text = _NEWLINE_RUN_RE.sub("\n\n", text)
    return text.strip()


def clean_html(html: str) -> str:
    """Convert an HTML fragment to Markdown.

    Walks the parsed tree instead of rewriting the markup with regular
    expressions, so nested or unclosed tags cannot corrupt the output.

    Rules:
        - ``<script>`` and ``<style>`` blocks are removed with their content.
        - ``h1``-``h4`` become ``#``-``####`` headings on their own line.
        - ``li`` becomes a ``- `` bullet; ``p`` becomes a paragraph break.
        - ``br`` becomes a newline, ``hr`` a ``---`` rule.
        - ``strong``/``b`` wrap in ``**``, ``em``/``i`` wrap in ``*``.
        - Every other tag is dropped, keeping its text.
        - Entities are decoded (``&nbsp;`` becomes a plain space).
        - Space runs collapse to one, 3+ newlines collapse to 2, and the
          result is trimmed.

    Already-clean Markdown passes through unchanged, so
    ``clean_html(clean_html(x)) == clean_html(x)``.
    """
    if not html:
        return ""

    soup = _parse(html)
    for tag in soup(_DROPPED_TAGS):
        tag.decompose()

    return _collapse_whitespace("".join(_render(soup)))


def clean_text(text: str) -> str:
    """Strip tags, decode entities and collapse whitespace to a single line."""
    if not text:
        return ""
    flat = _parse(text).get_text()
    return _WHITESPACE_RE.sub(" ", flat.replace("\xa0", " ")).strip()


def sanitize_filename(text: str) -> str:
    """Slug *text* into a lower-case, dash-separated, filesystem-safe name.

    Never raises; returns ``""`` when nothing usable is left.

    Example:
        >>> sanitize_filename("Sr. Engineer (Remote)")
        'sr-engineer-remote'
    """
    slug = text.lower().replace(" ", "-")
    slug = "".join(ch for ch in slug if ch not in _FILENAME_DENYLIST)
    slug = _DASH_RUN_RE.sub("-", slug)
    return slug.strip("-")
