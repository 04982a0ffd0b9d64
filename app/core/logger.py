"""
Loguru setup shared by the API server, the streamlit page and verify_db.py.

Library loggers (uvicorn, pymongo) write through the stdlib `logging`
module; `BridgeHandler` forwards those records so everything ends up in
the same sinks with the same format.
"""
import logging
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

QUIET_LOGGERS = ("uvicorn.access", "pymongo")


class BridgeHandler(logging.Handler):
    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the real call site
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", error_log: str = "logs/errors.log"):
    """
    Console sink at `level`, plus a rotating file for errors.
    Pass `error_log=""` for short-lived processes that should not touch disk.
    """
    logger.remove()
    logger.add(sys.stdout, level=level, format=CONSOLE_FORMAT)

    if error_log:
        logger.add(
            error_log,
            level="ERROR",
            rotation="10 MB",
            retention="1 month",
            compression="zip",
            format=FILE_FORMAT,
        )

    logging.basicConfig(handlers=[BridgeHandler()], level=0, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["logger", "setup_logging"]
