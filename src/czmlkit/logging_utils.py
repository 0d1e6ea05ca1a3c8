"""Log setup for the czmlkit command line.

The library modules only create ``logging.getLogger(__name__)`` loggers; the
CLI decides where records go. Console output goes to stderr so that JSON
written to stdout stays machine readable. A log file is written only when the
caller names a directory (``--log-dir``) or ``CZMLKIT_LOG_DIR`` is set.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

__all__ = ["LOG_DIR_ENV", "configure_logging", "resolve_log_dir"]

LOG_DIR_ENV = "CZMLKIT_LOG_DIR"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"

_HANDLER_MARK = "_czmlkit_handler"


def resolve_log_dir(log_dir: Optional[Path] = None) -> Optional[Path]:
    """Explicit directory first, then ``CZMLKIT_LOG_DIR``; ``None`` means no file."""

    if log_dir:
        return Path(log_dir).expanduser()
    env_dir = os.environ.get(LOG_DIR_ENV)
    return Path(env_dir).expanduser() if env_dir else None


def _install(root: logging.Logger, handler: logging.Handler, fmt: str, level: int):
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
    setattr(handler, _HANDLER_MARK, True)
    root.addHandler(handler)


def configure_logging(
    *,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    log_dir: Optional[Path] = None,
    log_name: str = "czmlkit",
) -> Optional[Path]:
    """Attach czmlkit's handlers to the root logger and return the log file path.

    Handlers from an earlier call are removed first. Returns ``None`` when no
    log directory was configured.
    """

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)
            handler.close()

    _install(root, logging.StreamHandler(), CONSOLE_FORMAT, console_level)

    log_path = None
    directory = resolve_log_dir(log_dir)
    if directory is not None:
        directory.mkdir(parents=True, exist_ok=True)
        log_path = directory / f"{log_name}.log"
        _install(
            root, logging.FileHandler(log_path, encoding="utf-8"), LOG_FORMAT, file_level
        )

    root.setLevel(min(console_level, file_level) if log_path else console_level)
    return log_path
