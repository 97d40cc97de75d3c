"""Job posting extraction: turns fetched HTML into an :class:`Extraction`.

Each job board gets a :class:`SiteStrategy`.  A strategy tries the board's own
markup first, then the page's Open Graph tags, and otherwise leaves the field
empty.  :func:`select_strategy` walks :data:`STRATEGIES` in order and falls
back to :class:`GenericStrategy`; adding a board means adding one class and
one entry in that tuple.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Optional

import trafilatura
from bs4 import BeautifulSoup

from ghosted.fetch.identifiers import is_numeric
from ghosted.fetch.logger import _log_debug, _log_info
from ghosted.fetch.models import Extraction
from ghosted.fetch.text import clean_html, clean_text


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def meta_content(soup: BeautifulSoup, prop: str) -> str:
    """Return the ``content`` of the ``<meta>`` whose ``property`` or ``name`` is *prop*.

    Attribute order inside the tag does not matter.
    """
    for attr in ("property", "name"):
        tag = soup.find("meta", attrs={attr: prop})
        if tag is not None and tag.get("content"):
            return str(tag["content"]).strip()
    return ""


def _select_html(soup: BeautifulSoup, selector: str) -> str:
    """Return the inner HTML of the first match for *selector* if it has any text."""
    element = soup.select_one(selector)
    if element is None or not element.get_text(strip=True):
        return ""
    return element.decode_contents()


def _title_text(soup: BeautifulSoup) -> str:
    if soup.title is None:
        return ""
    return soup.title.get_text().strip()


def _readable_text(html: str) -> str:
    """Whole-page readability extraction, used when no container matched."""
    text: Optional[str] = trafilatura.extract(
        html,
        include_links=False,
        include_images=False,
        include_tables=True,
        no_fallback=False,
    )
    return text or ""


# ---------------------------------------------------------------------------
# Strategy interface
# ---------------------------------------------------------------------------

class SiteStrategy(ABC):
    """Extraction rules for one job board."""

    #: Short name used in log lines.
    name: str = ""
    #: Host substrings that select this strategy (matched case-insensitively).
    host_markers: tuple[str, ...] = ()

    def matches(self, host: str) -> bool:
        host = host.lower()
        return any(marker in host for marker in self.host_markers)

    @abstractmethod
    def extract(self, soup: BeautifulSoup, html: str) -> Extraction:
        """Pull the raw (uncleaned) content, company and position out of a page."""


# ---------------------------------------------------------------------------
# Job boards
# ---------------------------------------------------------------------------

class LeverStrategy(SiteStrategy):
    name = "lever"
    host_markers = ("lever.co",)

    def extract(self, soup: BeautifulSoup, html: str) -> Extraction:
        position = _select_html(soup, "h2") or meta_content(soup, "og:title")
        company = _select_html(soup, "div.main-header-content") or meta_content(
            soup, "og:site_name"
        )

        # The closing section holds the apply button and links.
        for section in soup.select("div.section-wrapper.page-full-width div.section.last"):
            section.decompose()

        content = _select_html(soup, "div.section-wrapper.page-full-width") or _select_html(
            soup, "div.content"
        )
        return Extraction(content=content, company=company, position=position)


class GreenhouseStrategy(SiteStrategy):
    name = "greenhouse"
    host_markers = ("greenhouse.io",)

    def extract(self, soup: BeautifulSoup, html: str) -> Extraction:
        position = meta_content(soup, "og:title")
        company = _select_html(soup, "span.company-name") or meta_content(soup, "og:site_name")

        # The legacy board renders the application form inside #content.
        for form in soup.select("div#content #application"):
            form.decompose()

        content = (
            _select_html(soup, "div#content")
            or _select_html(soup, "div.job__description")
            or _select_html(soup, "div.content")
        )
        return Extraction(content=content, company=company, position=position)


class WorkdayStrategy(SiteStrategy):
    name = "workday"
    host_markers = ("workday.com", "myworkdayjobs.com")

    def extract(self, soup: BeautifulSoup, html: str) -> Extraction:
        # Workday renders most of the page client-side; take what the server sent.
        content = _select_html(
            soup, 'div[data-automation-id="jobPostingDescription"]'
        ) or meta_content(soup, "og:description")
        return Extraction(
            content=content,
            company=meta_content(soup, "og:site_name"),
            position=meta_content(soup, "og:title"),
        )


_LINKEDIN_COMPANY_RE = re.compile(r'"companyName":"([^"]*)"')


class LinkedInStrategy(SiteStrategy):
    name = "linkedin"
    host_markers = ("linkedin.com",)

    def extract(self, soup: BeautifulSoup, html: str) -> Extraction:
        company = _select_html(soup, "a.topcard__org-name-link")
        if not company:
            match = _LINKEDIN_COMPANY_RE.search(html)
            company = match.group(1) if match else ""

        content = _select_html(soup, "div.description__text") or meta_content(
            soup, "og:description"
        )
        return Extraction(
            content=content,
            company=company,
            position=meta_content(soup, "og:title"),
        )


class AshbyStrategy(SiteStrategy):
    name = "ashby"
    host_markers = ("ashbyhq.com",)

    def extract(self, soup: BeautifulSoup, html: str) -> Extraction:
        content = _select_html(soup, "div.ashby-job-posting-description") or meta_content(
            soup, "og:description"
        )
        return Extraction(
            content=content,
            company=meta_content(soup, "og:site_name"),
            position=meta_content(soup, "og:title"),
        )


# ---------------------------------------------------------------------------
# Next.js preload JSON
# ---------------------------------------------------------------------------

# Where the job object may live under ``props.pageProps``; ``()`` means
# pageProps itself.
_JOB_PATHS: tuple[tuple[str, ...], ...] = (("job",), ("jobDetail",), ("data",), ())
_TITLE_KEYS = ("title", "jobTitle", "name", "positionTitle")
_DESCRIPTION_KEYS = ("description", "jobDescription", "fullDescription", "summary")
_SECTION_KEYS = (("qualifications", "Qualifications"), ("responsibilities", "Responsibilities"))


def _first_str(job: dict[str, Any], keys: tuple[str, ...]) -> str:
    for key in keys:
        value = job.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _section(heading: str, value: Any) -> list[str]:
    """Render a string or list-of-strings field as a Markdown section."""
    if isinstance(value, str) and value:
        return [f"\n\n## {heading}\n\n{value}"]
    if isinstance(value, list):
        bullets = [f"- {item}" for item in value if isinstance(item, str) and item]
        if bullets:
            return [f"\n\n## {heading}\n", *bullets]
    return []


def render_job_data(job: dict[str, Any]) -> tuple[str, str]:
    """Return ``(content, position)`` built from a Next.js job object."""
    position = _first_str(job, _TITLE_KEYS)

    parts: list[str] = []
    for key in _DESCRIPTION_KEYS:
        value = job.get(key)
        if isinstance(value, str) and value:
            parts.append(value)

    for key, heading in _SECTION_KEYS:
        parts.extend(_section(heading, job.get(key)))

    location = _first_str(job, ("location", "primaryLocation"))
    if location:
        parts.append(f"\n\n**Location:** {location}")

    employment_type = _first_str(job, ("employmentType",))
    if employment_type:
        parts.append(f"\n\n**Employment Type:** {employment_type}")

    return "\n".join(parts), position


def find_job_data(data: Any) -> Optional[dict[str, Any]]:
    """Locate the job object inside a parsed ``__NEXT_DATA__`` payload."""
    if not isinstance(data, dict):
        return None
    props = data.get("props")
    if not isinstance(props, dict):
        return None
    page_props = props.get("pageProps")
    if not isinstance(page_props, dict):
        return None

    for path in _JOB_PATHS:
        node: Any = page_props
        for key in path:
            node = node.get(key) if isinstance(node, dict) else None
        if isinstance(node, dict):
            return node
    return None


class NextDataStrategy(SiteStrategy):
    """Career sites built on Next.js that ship the job as preload JSON.

    The job object is read from ``<script id="__NEXT_DATA__">``.  The brand
    name doubles as the default company, applied before any Open Graph
    fallback.
    """

    def __init__(self, name: str, brand: str, host_markers: tuple[str, ...]):
        self.name = name
        self.brand = brand
        self.host_markers = host_markers

    def _preload_json(self, soup: BeautifulSoup) -> Any:
        script = soup.find("script", id="__NEXT_DATA__")
        if script is None or not script.string:
            return None
        try:
            return json.loads(script.string)
        except ValueError:
            _log_debug(f"{self.name}: __NEXT_DATA__ is not valid JSON")
            return None

    def validate(self, extraction: Extraction) -> Extraction:
        """Blank out positions that are too short or numeric; replace numeric companies."""
        position = extraction.position
        if len(position.strip()) < 3 or is_numeric(position):
            position = ""

        company = extraction.company
        if is_numeric(company):
            company = self.brand

        return Extraction(content=extraction.content, company=company, position=position)

    def extract(self, soup: BeautifulSoup, html: str) -> Extraction:
        content, position = "", ""
        job = find_job_data(self._preload_json(soup))
        if job is not None:
            content, position = render_job_data(job)

        if not position:
            _log_debug(f"{self.name}: no title in preload JSON, using og:title")
            # "Job Title | Brand Careers"
            position = meta_content(soup, "og:title").split(" | ", 1)[0]

        if not content:
            content = meta_content(soup, "og:description")

        return self.validate(Extraction(content=content, company=self.brand, position=position))


# ---------------------------------------------------------------------------
# Generic fallback
# ---------------------------------------------------------------------------

# Tried in order; the first one with text wins.
CONTENT_CONTAINERS = (
    "div.job-description",
    "div#job-description",
    "div.description",
    "article",
    "main",
)


class GenericStrategy(SiteStrategy):
    name = "generic"

    def matches(self, host: str) -> bool:
        return True

    def extract(self, soup: BeautifulSoup, html: str) -> Extraction:
        position = meta_content(soup, "og:title") or _title_text(soup)
        company = meta_content(soup, "og:site_name")

        content = ""
        for selector in CONTENT_CONTAINERS:
            content = _select_html(soup, selector)
            if content:
                _log_debug(f"generic: content from {selector!r}")
                break

        if not content:
            content = meta_content(soup, "og:description")
        if not content:
            _log_debug("generic: no container or og:description, using readability extraction")
            content = _readable_text(html)

        return Extraction(content=content, company=company, position=position)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

GENERIC = GenericStrategy()

STRATEGIES: tuple[SiteStrategy, ...] = (
    LeverStrategy(),
    GreenhouseStrategy(),
    WorkdayStrategy(),
    LinkedInStrategy(),
    AshbyStrategy(),
    NextDataStrategy("microsoft", "Microsoft", ("careers.microsoft.com",)),
)


def select_strategy(host: str) -> SiteStrategy:
    """Return the first strategy whose host markers match *host*, else the generic one."""
    for strategy in STRATEGIES:
        if strategy.matches(host):
            return strategy
    return GENERIC


def extract_job_posting(html: str, host: str) -> Extraction:
    """Extract and clean the content, company and position of a job posting.

    The strategy is chosen once from *host*; a strategy that finds nothing
    yields empty strings rather than an error.
    """
    strategy = select_strategy(host)
    _log_info(f"Using {strategy.name} extraction for {host or '(no host)'}")

    soup = BeautifulSoup(html, "html.parser")
    raw = strategy.extract(soup, html)

    extraction = Extraction(
        content=clean_html(raw.content),
        company=clean_text(raw.company),
        position=clean_text(raw.position),
    )
    if not extraction.content:
        _log_debug(f"{strategy.name}: no content extracted")
    return extraction
