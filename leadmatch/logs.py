from __future__ import annotations

import logging

from .config import settings


def quiet_logging(level: str | None = None) -> None:
    """Root handler at LOG_LEVEL; chatty third-party loggers pinned to WARNING."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s:%(name)s:%(message)s",
    )

    # Quiet the usual offenders
    for name in ("httpx", "httpcore", "apscheduler", "uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)
