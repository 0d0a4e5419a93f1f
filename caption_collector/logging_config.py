"""Root logger setup from LOG_LEVEL / LOG_FILE settings. Called once at app startup."""
from __future__ import annotations

import logging
import os

from caption_collector.config import get_settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None, log_file: str | None = None) -> None:
    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL or "INFO").strip().upper()
    path = log_file if log_file is not None else settings.LOG_FILE

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if path:
        directory = os.path.dirname(path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            handlers.append(logging.FileHandler(path, encoding="utf-8"))
        except OSError as e:
            logging.getLogger(__name__).warning("Log file unavailable %s: %s", path, e)

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=_FORMAT,
        handlers=handlers,
        force=True,
    )
