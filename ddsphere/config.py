"""Centralised settings for the DD Sphere SEO backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from the package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("DDSPHERE_WORKSPACE", Path.home() / ".ddsphere_data")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "seo.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # Page fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "10.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "SEO_USER_AGENT", "Mozilla/5.0 (compatible; DD-Sphere-SEO-Analyzer/1.0)"
        )
    )

    # ------------------------------------------------------------------
    # Batch analysis
    # ------------------------------------------------------------------
    batch_size: int = field(
        default_factory=lambda: int(os.environ.get("BATCH_SIZE", "5"))
    )
    batch_delay: float = field(
        default_factory=lambda: float(os.environ.get("BATCH_DELAY", "1.0"))
    )
    batch_max_urls: int = field(
        default_factory=lambda: int(os.environ.get("BATCH_MAX_URLS", "50"))
    )

    # ------------------------------------------------------------------
    # Analysis cache (calling layer)
    # ------------------------------------------------------------------
    cache_ttl_hours: int = field(
        default_factory=lambda: int(os.environ.get("CACHE_TTL_HOURS", "24"))
    )

    # ------------------------------------------------------------------
    # External integrations
    # ------------------------------------------------------------------
    google_api_key: str = field(
        default_factory=lambda: os.environ.get("GOOGLE_API_KEY", "")
    )
    webhook_secret: str = field(
        default_factory=lambda: os.environ.get("SEO_WEBHOOK_SECRET", "")
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    @property
    def cache_ttl_seconds(self) -> int:
        return self.cache_ttl_hours * 60 * 60

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from ddsphere.config import settings
settings = Settings()
