"""Process-wide logging setup; called once when the API module is imported."""

import logging
import time

from storefront.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%SZ"


def configure_logging(settings: Settings) -> None:
    """Configure the root logger (left alone if it already has handlers) and UTC timestamps."""
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
    # LOG_DATEFMT ends in Z; render asctime in UTC.
    logging.Formatter.converter = time.gmtime
    # SQL echo is controlled by DEBUG via the engine; keep the pool quiet otherwise.
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
