"""Data models for the fetch pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit


class FetchType(Enum):
    """What kind of document a fetch target points at."""

    JOB_POSTING = "job-posting"
    CV = "cv"


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int
    content: bytes = b""

    @property
    def host(self) -> str:
        """Lower-cased host of the effective URL, used for strategy dispatch."""
        return (urlsplit(self.url).hostname or "").lower()


@dataclass
class Extraction:
    """What a site strategy pulled out of a page.  Any field may be empty."""

    content: str = ""
    company: str = ""
    position: str = ""


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a job-posting fetch."""

    url: str
    output_path: str
    company: str
    position: str
    content_size: int


@dataclass(frozen=True)
class CVResult:
    """Outcome of a CV (JSON Resume) fetch."""

    url: str
    output_path: str
    name: str
    label: str
    content_size: int
