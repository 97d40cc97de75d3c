"""Fetch pipelines — job posting and CV variants.

``fetch_posting`` orchestrates a job posting from URL to Markdown file:

    fetch → select strategy → extract + clean → name file → format → write

``fetch_cv`` fetches a JSON Resume from ``<domain>/cv.json`` and stores it at
the fixed CV path.  ``fetch_target`` picks one of the two from the shape of
the input, and :class:`BackgroundFetch` runs it off the caller's thread.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Optional, Union

from ghosted.config import settings
from ghosted.fetch.classify import build_cv_url, detect_fetch_type, ensure_scheme
from ghosted.fetch.errors import FetchCancelledError, FilesystemError, ValidationError
from ghosted.fetch.extractor import extract_job_posting
from ghosted.fetch.fetcher import (
    ACCEPT_HTML,
    ACCEPT_JSON,
    fetch_url,
    raise_if_cancelled,
    validate_url,
)
from ghosted.fetch.filename import MARKDOWN_SUFFIX, generate_filename, validate_filename
from ghosted.fetch.formatter import format_output
from ghosted.fetch.logger import _log_info, _log_success, _log_warning
from ghosted.fetch.models import CVResult, FetchResult, FetchType

AnyResult = Union[FetchResult, CVResult]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_atomic(path: Path, data: bytes) -> None:
    """Write *data* to *path* so that readers see either the old or the new file.

    Raises:
        FilesystemError: If the directory cannot be created or the write fails.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError("failed to create output directory", path.parent) from exc

    tmp_name: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(data)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
        raise FilesystemError("failed to write file", path) from exc


def get_nested_str(data: Any, *keys: str) -> str:
    """Follow *keys* through nested dicts and return the string found, else ``""``.

    Example:
        >>> get_nested_str({"basics": {"name": "Ada"}}, "basics", "name")
        'Ada'
    """
    node = data
    for key in keys:
        if not isinstance(node, dict):
            return ""
        node = node.get(key)
    return node if isinstance(node, str) else ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def fetch_posting(
    url: str,
    output_name: Optional[str] = None,
    *,
    output_dir: Optional[Path] = None,
    cancel: Optional[threading.Event] = None,
) -> FetchResult:
    """Fetch a job posting and save it as Markdown.

    Pipeline:
        1. :func:`~ghosted.fetch.fetcher.fetch_url`: one bounded GET.
        2. :func:`~ghosted.fetch.extractor.extract_job_posting`: site
           strategy chosen from the response host, then HTML → Markdown.
        3. :func:`~ghosted.fetch.filename.generate_filename` unless
           *output_name* is given; ``.md`` is appended when missing.
        4. :func:`~ghosted.fetch.formatter.format_output`: front matter and
           headings.
        5. Atomic write into *output_dir*.

    Args:
        url: Absolute http(s) URL of the posting.
        output_name: File name to use instead of the generated one.
        output_dir: Target directory (defaults to ``settings.postings_dir``).
        cancel: Event that abandons the fetch when set.

    Returns:
        A :class:`~ghosted.fetch.models.FetchResult`; ``content_size`` is the
        UTF-8 byte length of the written document.
    """
    validate_url(url)
    _log_info(f"Fetching job posting {url}")

    raw = fetch_url(url, accept=ACCEPT_HTML, cancel=cancel)
    extraction = extract_job_posting(raw.html, raw.host)

    if output_name:
        try:
            validate_filename(output_name)
        except ValueError as exc:
            _log_warning(f"Using output name as given: {exc}")
    else:
        output_name = generate_filename(extraction.company, extraction.position, url)
    if not output_name.endswith(MARKDOWN_SUFFIX):
        output_name += MARKDOWN_SUFFIX

    output_path = Path(output_dir or settings.postings_dir) / output_name
    document = format_output(extraction.content, url, extraction.company, extraction.position)
    data = document.encode("utf-8")

    raise_if_cancelled(cancel, url)
    _write_atomic(output_path, data)
    _log_success(f"Saved {output_path} ({len(data)} bytes)")

    return FetchResult(
        url=url,
        output_path=str(output_path),
        company=extraction.company,
        position=extraction.position,
        content_size=len(data),
    )


def fetch_cv(
    target: str,
    *,
    output_path: Optional[Path] = None,
    cancel: Optional[threading.Event] = None,
) -> CVResult:
    """Fetch a JSON Resume from ``<target>/cv.json`` and save it pretty-printed.

    There is no extraction cascade for a CV: a body that is not a JSON object
    is an error.

    Args:
        target: Bare domain or URL; ``/cv.json`` is appended when missing.
        output_path: Destination (defaults to ``settings.cv_path``, which is
            overwritten on every fetch).
        cancel: Event that abandons the fetch when set.

    Raises:
        ValidationError: If the response is not a JSON object.
    """
    cv_url = build_cv_url(target)
    _log_info(f"Fetching CV {cv_url}")

    raw = fetch_url(cv_url, accept=ACCEPT_JSON, cancel=cancel)

    try:
        cv_data = json.loads(raw.content or raw.html)
    except ValueError as exc:
        _log_warning(f"CV at {cv_url} is not valid JSON")
        raise ValidationError(f"response is not valid JSON: {exc}") from exc
    if not isinstance(cv_data, dict):
        raise ValidationError(
            f"response is not a JSON object (got {type(cv_data).__name__})"
        )

    data = (json.dumps(cv_data, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
    destination = Path(output_path or settings.cv_path)

    raise_if_cancelled(cancel, cv_url)
    _write_atomic(destination, data)
    _log_success(f"Saved {destination} ({len(data)} bytes)")

    return CVResult(
        url=cv_url,
        output_path=str(destination),
        name=get_nested_str(cv_data, "basics", "name"),
        label=get_nested_str(cv_data, "basics", "label"),
        content_size=len(data),
    )


def fetch_target(
    target: str,
    *,
    output_name: Optional[str] = None,
    output_dir: Optional[Path] = None,
    cancel: Optional[threading.Event] = None,
) -> AnyResult:
    """Fetch *target* as a CV or a job posting depending on its shape.

    Bare domains and ``…/cv.json`` URLs are CVs; anything else is a posting
    (``https://`` is added when the scheme is missing).
    """
    if detect_fetch_type(target) is FetchType.CV:
        if output_name or output_dir:
            _log_warning(f"Ignoring output name/directory for CV target {target}")
        return fetch_cv(target, cancel=cancel)
    return fetch_posting(
        ensure_scheme(target), output_name, output_dir=output_dir, cancel=cancel
    )


class BackgroundFetch:
    """Run :func:`fetch_target` on a worker thread.

    Interactive callers start one of these, keep their UI responsive, and
    either collect :meth:`result` or call :meth:`cancel` to abandon it.
    Cancellation is cooperative: it takes effect before the request, between
    body chunks, or before the file is written.  A stalled connection is still
    bounded by ``settings.request_timeout``.
    """

    def __init__(
        self,
        target: str,
        *,
        output_name: Optional[str] = None,
        output_dir: Optional[Path] = None,
    ):
        self.target = target
        self._cancel = threading.Event()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="fetch")
        self.future: Future[AnyResult] = executor.submit(
            fetch_target,
            target,
            output_name=output_name,
            output_dir=output_dir,
            cancel=self._cancel,
        )
        # Lets the worker thread exit once the fetch finishes.
        executor.shutdown(wait=False)

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        """Ask the fetch to stop; a fetch that has not started yet never runs."""
        self._cancel.set()
        self.future.cancel()

    def done(self) -> bool:
        return self.future.done()

    def add_done_callback(self, fn: Callable[["BackgroundFetch"], None]) -> None:
        """Call *fn* with this object once the fetch finishes, fails or is cancelled."""
        self.future.add_done_callback(lambda _future: fn(self))

    def result(self, timeout: Optional[float] = None) -> AnyResult:
        """Block until the fetch finishes and return its result.

        Raises:
            FetchError: Whatever the fetch raised; a cancelled fetch raises
                :class:`FetchCancelledError`.
            TimeoutError: If *timeout* elapses first.
        """
        try:
            return self.future.result(timeout)
        except CancelledError as exc:
            raise FetchCancelledError(f"fetch cancelled: {self.target}") from exc
