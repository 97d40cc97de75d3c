"""Decide whether a fetch target is a CV or a job posting, and shape its URL."""

from __future__ import annotations

from urllib.parse import urlsplit

from ghosted.fetch.models import FetchType

CV_FILENAME = "cv.json"


def is_url(target: str) -> bool:
    """Return ``True`` if *target* carries an explicit http(s) scheme."""
    return target.startswith("http://") or target.startswith("https://")


def ensure_scheme(target: str) -> str:
    """Prefix ``https://`` to a bare domain or scheme-less URL."""
    target = target.strip()
    if is_url(target):
        return target
    return "https://" + target


def detect_fetch_type(target: str) -> FetchType:
    """Classify *target* as a CV document or a job posting.

    Rules, in order:

    - path (trailing slashes trimmed) ends with ``/cv.json`` → ``CV``
    - bare domain, with or without scheme → ``CV``
    - everything else → ``JOB_POSTING``

    Input that cannot be parsed is treated as a job posting.
    """
    try:
        parts = urlsplit(ensure_scheme(target))
    except ValueError:
        return FetchType.JOB_POSTING

    path = parts.path.rstrip("/")

    if path.endswith("/" + CV_FILENAME):
        return FetchType.CV
    if path == "":
        return FetchType.CV
    return FetchType.JOB_POSTING


def build_cv_url(target: str) -> str:
    """Return the URL of the JSON Resume for *target*.

    ``cello.design`` → ``https://cello.design/cv.json``; full URLs already
    ending in ``/cv.json`` are returned unchanged.
    """
    url = ensure_scheme(target).rstrip("/")
    if url.endswith("/" + CV_FILENAME):
        return url
    return url + "/" + CV_FILENAME
