# app/core/logging.py
import logging
import sys
import colorlog

LOG_FORMAT = "%(log_color)s%(asctime)s %(levelname)-8s [%(name)s]%(reset)s %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

# Third-party loggers that only matter when something goes wrong
QUIET_LOGGERS = ("pymongo", "motor", "redis", "httpx")


def configure_logging(level=logging.INFO, *, fmt: str = LOG_FORMAT) -> None:
    """
    Install one colored stdout handler on the root logger.
    Called once at import time of app.main; safe to call again (handlers are replaced).
    """
    handler = colorlog.StreamHandler(sys.stdout)
    handler.setFormatter(colorlog.ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=LOG_COLORS))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # uvicorn follows the app level
    for name in ("uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
