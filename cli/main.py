"""ghosted CLI — fetch job postings and CVs into the local workspace.

Usage:
    python cli/main.py --help

Commands:
    fetch     → job posting (URL) or CV (bare domain / …/cv.json)
    fetch-cv  → CV only
    detect    → print what `fetch` would do with a target
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from ghosted.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import NoReturn, Optional

import typer

from ghosted.config import settings
from ghosted.fetch import (
    CVResult,
    FetchError,
    FetchResult,
    FetchType,
    detect_fetch_type,
    fetch_cv,
    fetch_target,
)
from ghosted.logger import setup_logger

app = typer.Typer(
    name="ghosted",
    help="Fetch job postings and CVs for the application tracker.",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: str = typer.Option(
        settings.log_level, "--log-level", help="Console log level (DEBUG, INFO, WARNING …)."
    ),
) -> None:
    """Configure logging before any command runs."""
    setup_logger(log_level)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _echo_posting(result: FetchResult) -> None:
    typer.echo(f"Saved to: {result.output_path}")
    if result.company:
        typer.echo(f"Company:  {result.company}")
    if result.position:
        typer.echo(f"Position: {result.position}")
    typer.echo(f"Size:     {result.content_size} bytes")
    typer.echo(f"\nNext step: ghosted apply {result.output_path}")


def _echo_cv(result: CVResult) -> None:
    typer.echo(f"Saved to: {result.output_path}")
    if result.name:
        typer.echo(f"Name:     {result.name}")
    if result.label:
        typer.echo(f"Label:    {result.label}")
    typer.echo(f"Size:     {result.content_size} bytes")


def _fail(exc: FetchError) -> NoReturn:
    typer.echo(f"Error fetching URL: {exc}", err=True)
    raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command("fetch")
def fetch(
    target: str = typer.Argument(..., help="Job posting URL, or a domain to fetch its cv.json."),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="File name for the posting (default: generated)."
    ),
    postings_dir: Optional[Path] = typer.Option(
        None, "--postings-dir", help="Directory for postings (default: local/postings)."
    ),
) -> None:
    """Fetch a job posting (or a CV, for bare domains) and save it locally."""
    typer.echo(f"Fetching: {target}")
    if (output or postings_dir) and detect_fetch_type(target) is FetchType.CV:
        typer.echo(
            "Warning: --output and --postings-dir do not apply to CVs; "
            f"saving to {settings.cv_path}",
            err=True,
        )
    try:
        result = fetch_target(target, output_name=output, output_dir=postings_dir)
    except FetchError as exc:
        _fail(exc)

    if isinstance(result, CVResult):
        _echo_cv(result)
    else:
        _echo_posting(result)


@app.command("fetch-cv")
def fetch_cv_cmd(
    target: str = typer.Argument(..., help="Domain or URL serving a JSON Resume."),
) -> None:
    """Fetch a JSON Resume into local/cv.json."""
    typer.echo(f"Fetching CV: {target}")
    try:
        result = fetch_cv(target)
    except FetchError as exc:
        _fail(exc)
    _echo_cv(result)


@app.command("detect")
def detect(
    target: str = typer.Argument(..., help="URL or bare domain."),
) -> None:
    """Print whether TARGET would be fetched as a CV or a job posting."""
    typer.echo(detect_fetch_type(target).value)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
