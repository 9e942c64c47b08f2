"""Logging setup shared by the CLI and the HTTP app."""

from __future__ import annotations

import logging
from typing import Optional

from ddsphere.config import settings

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Install a root handler once.  Later calls only adjust the level."""
    resolved = (level or settings.log_level).upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=_FORMAT)
    else:
        root.setLevel(resolved)
