"""HTTP transport: a single bounded GET with browser-like headers.

No retries, no session reuse and no headless-browser fallback; the engine
only ever sees server-delivered HTML or JSON.
"""

from __future__ import annotations

import threading
from typing import Optional
from urllib.parse import urlsplit

import httpx

from ghosted.config import settings
from ghosted.fetch.errors import (
    FetchCancelledError,
    HTTPStatusError,
    InvalidURLError,
    NetworkError,
)
from ghosted.fetch.logger import _log_debug, _log_warning
from ghosted.fetch.models import RawPage

ACCEPT_HTML = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
ACCEPT_JSON = "application/json, */*"


def validate_url(url: str) -> None:
    """Raise :class:`InvalidURLError` unless *url* is an http(s) URL with a host."""
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise InvalidURLError(f"invalid URL: {url!r}") from exc

    if parts.scheme not in ("http", "https"):
        raise InvalidURLError(f"URL must be http or https: {url!r}")
    if not parts.hostname:
        raise InvalidURLError(f"URL has no host: {url!r}")


def raise_if_cancelled(cancel: Optional[threading.Event], url: str) -> None:
    """Raise :class:`FetchCancelledError` if *cancel* has been set."""
    if cancel is not None and cancel.is_set():
        raise FetchCancelledError(f"fetch cancelled: {url}")


def _decode(content: bytes, encoding: Optional[str]) -> str:
    try:
        return content.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        # Server advertised a charset Python does not know.
        return content.decode("utf-8", errors="replace")


def fetch_url(
    url: str,
    *,
    accept: str = ACCEPT_HTML,
    cancel: Optional[threading.Event] = None,
) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    The body is streamed so that *cancel*, when given, can abandon the fetch
    between chunks.  The call is otherwise bounded by
    ``settings.request_timeout``.

    Raises:
        InvalidURLError: If *url* is not an http(s) URL with a host.
        HTTPStatusError: If the server returns a non-2xx status code.
        NetworkError: On DNS, connection, read or timeout failures.
        FetchCancelledError: If *cancel* is set before the body is complete.
    """
    validate_url(url)
    raise_if_cancelled(cancel, url)

    headers = {"User-Agent": settings.user_agent, "Accept": accept}
    _log_debug(f"GET {url} (timeout={settings.request_timeout:g}s)")

    try:
        with httpx.Client(
            headers=headers,
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            with client.stream("GET", url) as response:
                if not response.is_success:
                    _log_warning(f"HTTP {response.status_code} from {response.url}")
                    raise HTTPStatusError(
                        response.status_code,
                        response.reason_phrase,
                        str(response.url),
                    )

                chunks: list[bytes] = []
                for chunk in response.iter_bytes():
                    raise_if_cancelled(cancel, url)
                    chunks.append(chunk)

                content = b"".join(chunks)
                effective_url = str(response.url)
                status_code = response.status_code
                encoding = response.charset_encoding
    except httpx.TimeoutException as exc:
        _log_warning(f"Timed out fetching {url}")
        raise NetworkError(
            f"timed out after {settings.request_timeout:g}s fetching {url}"
        ) from exc
    except httpx.RequestError as exc:
        _log_warning(f"Network error fetching {url}: {exc}")
        raise NetworkError(f"failed to fetch {url}: {exc}") from exc
    except httpx.InvalidURL as exc:
        raise InvalidURLError(f"invalid URL: {url!r}") from exc

    _log_debug(f"HTTP {status_code} from {effective_url} ({len(content)} bytes)")

    return RawPage(
        url=effective_url,
        html=_decode(content, encoding),
        status_code=status_code,
        content=content,
    )
