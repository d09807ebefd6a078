from __future__ import annotations

import logging

from .settings import settings


def setup_logging(level: str | None = None) -> None:
    """Configure root logger."""
    log_level = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
