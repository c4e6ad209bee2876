from __future__ import annotations

import logging
import sys
from pathlib import Path

_CONFIGURED_TARGET: str | None = None
_DEVSERVE_HANDLER: logging.Handler | None = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(*, level: str = "WARNING", log_path: Path | None = None) -> None:
    """Install a single devserve handler on the ``devserve`` logger.

    Logs go to ``log_path`` when given, otherwise to stderr. Idempotent
    per-process: if already configured for the same target, only the level
    is updated.
    """
    global _CONFIGURED_TARGET, _DEVSERVE_HANDLER

    logger = logging.getLogger("devserve")
    logger.setLevel(_level_from_name(level))

    target = str(Path(log_path).resolve()) if log_path is not None else "<stderr>"
    if _CONFIGURED_TARGET == target and _DEVSERVE_HANDLER is not None:
        _DEVSERVE_HANDLER.setLevel(_level_from_name(level))
        return

    # Replace the previously installed handler when switching targets.
    if _DEVSERVE_HANDLER is not None:
        logger.removeHandler(_DEVSERVE_HANDLER)
        _DEVSERVE_HANDLER.close()
        _DEVSERVE_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    _DEVSERVE_HANDLER = handler
    _CONFIGURED_TARGET = target


def reset_logging_for_tests() -> None:
    """Test-only: remove the handler installed by :func:`configure_logging`."""
    global _CONFIGURED_TARGET, _DEVSERVE_HANDLER
    logger = logging.getLogger("devserve")
    if _DEVSERVE_HANDLER is not None:
        logger.removeHandler(_DEVSERVE_HANDLER)
        _DEVSERVE_HANDLER.close()
    logger.setLevel(logging.NOTSET)
    _CONFIGURED_TARGET = None
    _DEVSERVE_HANDLER = None


__all__ = ["LOG_FORMAT", "configure_logging", "reset_logging_for_tests"]
