"""Error taxonomy for the fetch engine.

Every failure a caller can see is a :class:`FetchError`.  None of them are
retried; the message is meant to be shown to the user verbatim.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class FetchError(Exception):
    """Base class for all fetch failures."""


class InvalidURLError(FetchError, ValueError):
    """The target is not an http(s) URL with a host, or cannot be parsed."""


class NetworkError(FetchError):
    """DNS, connection, read or timeout failure talking to the remote host."""


class HTTPStatusError(FetchError):
    """
    The server answered with a non-2xx status.

    Attributes:
        status_code: HTTP status code returned by the server
        reason: Reason phrase, when the server sent one
        url: URL that produced the response
    """

    def __init__(self, status_code: int, reason: str = "", url: str = ""):
        self.status_code = status_code
        self.reason = reason
        self.url = url

        message = f"HTTP {status_code}"
        if reason:
            message += f": {reason}"
        if url:
            message += f" ({url})"
        super().__init__(message)


class ValidationError(FetchError, ValueError):
    """The fetched body does not have the required shape (CV must be a JSON object)."""


class FilesystemError(FetchError, OSError):
    """
    Creating the output directory or writing the output file failed.

    Attributes:
        path: Path that could not be created or written
    """

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"{message}: {path}"
        super().__init__(message)


class FetchCancelledError(FetchError):
    """The caller's cancellation event fired before the fetch completed."""
