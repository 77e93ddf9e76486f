from __future__ import annotations

import logging
import os

from .secret_detector import SecretDetector

LOG_FORMAT = "%(asctime)s - %(threadName)s %(filename)s:%(lineno)d - %(funcName)s() - %(levelname)s - %(message)s"
PACKAGE_LOGGER_NAME = "awsauth"


def configure_logging(
    level: int | str = logging.DEBUG, path: str | None = None
) -> logging.Handler:
    """Send awsauth log records to a stream, or to ``path`` when given.

    Every record goes through ``SecretDetector`` so that secret keys, session
    tokens and signatures never reach the output in full.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    if path is not None:
        path = os.path.expanduser(path)
        log_dir = os.path.dirname(path)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)
        elif log_dir and not os.access(log_dir, os.R_OK | os.W_OK):
            raise PermissionError(f"log path: {log_dir} is not accessible")
        handler: logging.Handler = logging.FileHandler(path)
    else:
        handler = logging.StreamHandler()

    handler.setLevel(level)
    handler.setFormatter(SecretDetector(LOG_FORMAT))

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(level)
    logger.addHandler(handler)
    return handler
