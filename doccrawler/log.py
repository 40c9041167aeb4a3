from __future__ import annotations

import logging
import sys
from typing import Union

LOGGER_NAME = "doccrawler"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure(level: Union[int, str] = "INFO") -> logging.Logger:
    """(Re)configure the package logger with a single stdout handler."""
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    lg.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    lg.addHandler(handler)
    lg.propagate = False
    return lg
