import logging
import sys

from urlshort.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"

# third party loggers that only matter when something is wrong
NOISY_LOGGERS = ("sqlalchemy.engine", "redis", "httpx")


def configure_logging(level: str = None) -> logging.Logger:
    """Send all records to stdout and return the application logger.

    Safe to call more than once; the handler is only installed the first time.
    """
    root = logging.getLogger()
    if not any(getattr(h, "_urlshort", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler._urlshort = True
        root.addHandler(handler)
    root.setLevel((level or settings.LOG_LEVEL).upper())

    # request lines are logged by the redirect/shorten handlers themselves
    logging.getLogger("uvicorn.access").disabled = True
    logging.getLogger("uvicorn.error").propagate = True

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger("urlshort")
