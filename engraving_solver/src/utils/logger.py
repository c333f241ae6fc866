"""Simple logging wrapper supporting optional file logging."""

from __future__ import annotations

import logging
from pathlib import Path


def get_logger(name: str, file_path: str | None = None, level: str | None = None) -> logging.Logger:
    """Return configured logger, attaching ``file_path`` handler if provided.

    ``level`` defaults to the ``logging.level`` entry of the solver config.
    """

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        if file_path:
            Path(file_path).parent.mkdir(parents=True, exist_ok=True)
            f_handler = logging.FileHandler(file_path, encoding="utf-8")
            f_handler.setFormatter(formatter)
            logger.addHandler(f_handler)
    if level is None:
        from engraving_solver.src.utils import config_loader

        level = config_loader.LOG_LEVEL
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    return logger
