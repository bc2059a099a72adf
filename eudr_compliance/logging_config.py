# eudr_compliance/logging_config.py
"""Shared logging setup.

Call ``configure_logging()`` once from an entry point. It does nothing when
the root logger already has handlers, so repeated calls are harmless.
"""
import logging
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
