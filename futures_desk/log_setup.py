import logging
import os
from typing import Optional, Union

from . import config

FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: Union[int, str, None] = None, log_path: Optional[str] = None) -> None:
    """Configure the root logger; optionally also log to ``log_path``.

    Safe to call more than once: handlers are only added if missing.
    """
    level = level if level is not None else getattr(config, "LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    log_path = log_path if log_path is not None else getattr(config, "LOG_FILE", None)

    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(FORMAT)

    if log_path:
        directory = os.path.dirname(log_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        target = os.path.abspath(log_path)
        has_file = any(
            isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", "") == target
            for h in root.handlers
        )
        if not has_file:
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    has_stream = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in root.handlers
    )
    if not has_stream:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)
