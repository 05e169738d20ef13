import logging
import sys
from typing import Optional

from shipquote.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# third-party loggers that flood INFO with per-request / per-statement lines
QUIET_LOGGERS = ("sqlalchemy.engine", "alembic.runtime.migration", "httpx")


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Give the root logger a stdout handler once and apply the level from LOG_LEVEL.
    Under uvicorn the handlers already exist; scripts start with none.
    """
    resolved_level = (level or settings.LOG_LEVEL or "INFO").upper()
    root_logger = logging.getLogger()

    if not root_logger.handlers:
        logging.basicConfig(
            level=resolved_level,
            format=LOG_FORMAT,
            handlers=[logging.StreamHandler(sys.stdout)],
        )
    else:
        root_logger.setLevel(resolved_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    return logging.getLogger("shipquote")
