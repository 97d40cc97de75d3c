"""Descriptive file names for fetched job postings.

:func:`generate_filename` tries four tiers in order and never fails:

1. ``<company>-<position>-posting``
2. ``<position>-at-<host>-posting``
3. ``<last path segment>-posting``
4. ``<host>-<YYYY-MM-DD>-posting``

A tier is skipped when its name would consist only of opaque identifiers
(numeric IDs, UUIDs, long hex hashes).
"""

from __future__ import annotations

import re
from datetime import date
from typing import Iterator, Optional
from urllib.parse import unquote, urlsplit

from ghosted.fetch.hostname import extract_clean_hostname
from ghosted.fetch.identifiers import looks_like_id
from ghosted.fetch.logger import _log_debug
from ghosted.fetch.text import sanitize_filename

POSTING_SUFFIX = "-posting"
MARKDOWN_SUFFIX = ".md"

_PAGE_EXTENSION_RE = re.compile(r"\.(html?|php|aspx?|jsp)$", re.IGNORECASE)


def is_descriptive(stem: str) -> bool:
    """Return ``True`` if *stem* carries at least one human-meaningful token."""
    if not stem or looks_like_id(stem):
        return False
    return any(token and not looks_like_id(token) for token in stem.split("-"))


def _strip_suffixes(name: str) -> str:
    if name.endswith(MARKDOWN_SUFFIX):
        name = name[: -len(MARKDOWN_SUFFIX)]
    if name.endswith(POSTING_SUFFIX):
        name = name[: -len(POSTING_SUFFIX)]
    return name


def validate_filename(name: str) -> None:
    """Raise ``ValueError`` if *name* is empty or describes nothing but an identifier.

    ``microsoft-2026-01-16-posting`` passes; ``1970393556641191-posting`` and
    ``a1b2c3d4-e5f6-7890-abcd-ef1234567890-posting`` do not.
    """
    if not name:
        raise ValueError("filename is empty")
    stem = _strip_suffixes(name)
    if not is_descriptive(stem):
        raise ValueError(f"filename {name!r} contains only an opaque identifier")


def _last_path_segment(path: str) -> str:
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return ""
    return _PAGE_EXTENSION_RE.sub("", unquote(segments[-1]))


def _candidates(
    company: str, position: str, host: str, path: str
) -> Iterator[tuple[int, str]]:
    company_slug = sanitize_filename(company)
    position_slug = sanitize_filename(position)

    if company_slug and position_slug:
        yield 1, f"{company_slug}-{position_slug}"

    if position_slug and not company_slug:
        yield 2, f"{position_slug}-at-{host}" if host else position_slug

    if not company_slug and not position_slug and host:
        segment = _last_path_segment(path)
        if segment and not looks_like_id(segment):
            yield 3, sanitize_filename(segment)


def generate_filename(
    company: str,
    position: str,
    url: str,
    today: Optional[date] = None,
) -> str:
    """Build a ``-posting`` file stem for a job posting fetched from *url*.

    Args:
        company: Hiring organization, possibly empty.
        position: Job title, possibly empty.
        url: Source URL; supplies the hostname and path fallbacks.
        today: Date used by the last-resort tier (defaults to today).

    Returns:
        A filesystem-safe stem without the ``.md`` extension.
    """
    try:
        parts = urlsplit(url)
        hostname, path = parts.hostname or "", parts.path
    except ValueError:
        hostname, path = "", ""
    host = sanitize_filename(extract_clean_hostname(hostname))

    for tier, stem in _candidates(company, position, host, path):
        if is_descriptive(stem):
            _log_debug(f"filename tier {tier}: {stem}{POSTING_SUFFIX}")
            return stem + POSTING_SUFFIX
        _log_debug(f"filename tier {tier} rejected: {stem!r}")

    stamp = (today or date.today()).isoformat()
    stem = f"{host or 'posting'}-{stamp}"
    _log_debug(f"filename tier 4: {stem}{POSTING_SUFFIX}")
    return stem + POSTING_SUFFIX
