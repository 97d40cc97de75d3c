"""Centralised settings for the ghosted fetch engine.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Local storage
    # ------------------------------------------------------------------
    data_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("GHOSTED_LOCAL_DIR", "local"))
    )
    postings_dir_override: str | None = field(
        default_factory=lambda: os.environ.get("GHOSTED_POSTINGS_DIR")
    )
    cv_path_override: str | None = field(
        default_factory=lambda: os.environ.get("GHOSTED_CV_PATH")
    )

    @property
    def postings_dir(self) -> Path:
        """Directory that fetched job postings are written to."""
        if self.postings_dir_override:
            return Path(self.postings_dir_override)
        return self.data_dir / "postings"

    @property
    def cv_path(self) -> Path:
        """Fixed location of the fetched CV; overwritten on every fetch."""
        if self.cv_path_override:
            return Path(self.cv_path_override)
        return self.data_dir / "cv.json"

    # ------------------------------------------------------------------
    # HTTP transport
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("GHOSTED_USER_AGENT", _DEFAULT_USER_AGENT)
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("GHOSTED_LOG_LEVEL", "INFO")
    )


# Module-level singleton — import this everywhere:
#   from ghosted.config import settings
settings = Settings()
