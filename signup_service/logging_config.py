from __future__ import annotations

import logging


def configure_logging(level: str | int = logging.INFO) -> None:
    """Dev-friendly root logging setup.

    Uvicorn installs its own handlers for its access/error loggers; this only
    covers the ``signup_service.*`` loggers when nothing else configured them.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper().strip())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
