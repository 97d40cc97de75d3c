"""Render an extracted job posting as a Markdown document with front matter."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_output(
    content: str,
    source_url: str,
    company: str,
    position: str,
    fetched: Optional[datetime] = None,
) -> str:
    """Wrap *content* in front matter and headings.

    ``company``/``position`` lines, the ``# position`` heading and the
    ``**Company:**`` line are only written when the value is non-empty.
    """
    fetched = fetched or datetime.now()

    lines = [
        "---",
        f"source: {source_url}",
        f"fetched: {fetched.strftime(TIMESTAMP_FORMAT)}",
    ]
    if company:
        lines.append(f"company: {company}")
    if position:
        lines.append(f"position: {position}")
    lines.extend(["---", ""])

    if position:
        lines.extend([f"# {position}", ""])
    if company:
        lines.extend([f"**Company:** {company}", ""])

    lines.extend(["## Job Description", "", content])
    return "\n".join(lines) + "\n"
