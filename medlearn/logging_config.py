import logging
import sys

from medlearn.config import settings

LOG_FORMAT = (
    '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s - %(message)s'
)
# libraries that are chatty at INFO
QUIET_LOGGERS = ('httpx', 'httpcore', 'sqlalchemy.engine', 'asyncio')


def configure_logging(level: str = settings.log_level) -> None:
    """
    Sends every record to stdout through one root handler. Debug mode
    forces DEBUG for the application and lets library loggers through.
    """
    log_level = logging.DEBUG if settings.debug else level.upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)

    if not settings.debug:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
