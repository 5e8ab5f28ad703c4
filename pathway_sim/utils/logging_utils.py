"""Logging setup for the pathway simulation package.

Configures the shared ``"pathway_sim"`` logger with a file handler that
records timestamps and call sites. Library modules fetch the same logger with
``logging.getLogger("pathway_sim")`` and never add handlers themselves.
"""

from __future__ import annotations

from pathlib import Path
import logging

LOGGER_NAME = "pathway_sim"


def setup_logging(log_file: str | Path, level: int | str = logging.INFO, to_stdout: bool = False) -> logging.Logger:
    """Configure and return the shared "pathway_sim" logger.

    Parameters
    ----------
    log_file:
        Destination log file path.
    level:
        Logging level, numeric or name such as ``"DEBUG"`` (default INFO).
    to_stdout:
        If True, also echo logs to stderr/console.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    log_path = str(Path(log_file).resolve())
    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(module)s:%(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    def _has_file_handler() -> bool:
        for h in logger.handlers:
            if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == log_path:
                return True
        return False

    if not _has_file_handler():
        fh = logging.FileHandler(log_path)
        fh.setLevel(level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    # FileHandler subclasses StreamHandler, so exclude it when looking for a console handler
    if to_stdout and not any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    ):
        sh = logging.StreamHandler()
        sh.setLevel(level)
        sh.setFormatter(fmt)
        logger.addHandler(sh)

    logger.propagate = False
    return logger


def close_file_handlers(log_file: str | Path) -> None:
    """Detach and close the handler writing to ``log_file``, if any."""
    logger = logging.getLogger(LOGGER_NAME)
    log_path = str(Path(log_file).resolve())
    for h in list(logger.handlers):
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == log_path:
            logger.removeHandler(h)
            h.close()
