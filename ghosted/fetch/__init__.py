"""Fetch package — job posting / CV retrieval and normalization."""

from ghosted.fetch.classify import detect_fetch_type
from ghosted.fetch.errors import (
    FetchCancelledError,
    FetchError,
    FilesystemError,
    HTTPStatusError,
    InvalidURLError,
    NetworkError,
    ValidationError,
)
from ghosted.fetch.models import CVResult, Extraction, FetchResult, FetchType, RawPage
from ghosted.fetch.service import BackgroundFetch, fetch_cv, fetch_posting, fetch_target

__all__ = [
    "detect_fetch_type",
    "fetch_posting",
    "fetch_cv",
    "fetch_target",
    "BackgroundFetch",
    "FetchType",
    "FetchResult",
    "CVResult",
    "Extraction",
    "RawPage",
    "FetchError",
    "InvalidURLError",
    "NetworkError",
    "HTTPStatusError",
    "ValidationError",
    "FilesystemError",
    "FetchCancelledError",
]
