"""
cob_scenes/shared/logging_setup.py
----------------------------------

Central logging configuration for the scene loader.

Library modules never configure logging themselves; they just do:

    import structlog

    logger = structlog.get_logger()
    logger.info("scene_asset_loaded", path=str(path), scenes=3)

Entry points (the CLI, a host application, tests) call `init_logging()` once.

Overrides via environment variables:
    COB_LOG_LEVEL    (e.g. DEBUG, INFO, WARNING, ERROR)
    COB_LOG_FORMAT   ("console" or "json")

Implementation notes
====================

- structlog is routed through the stdlib `logging` module so that host
  applications keep control of handlers.
- `init_logging` is idempotent; calling it multiple times is safe.
- Output goes to stderr so that CLI results on stdout stay machine-readable.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

from cob_scenes.shared.config import LogFormat, settings

# Internal flag to avoid re-configuring logging multiple times
_INITIALIZED = False

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Optional[int]) -> int:
    if level is not None:
        return level
    return getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO)


def init_logging(
    level: Optional[int] = None,
    log_format: Optional[LogFormat] = None,
    *,
    force: bool = False,
) -> None:
    """
    Initialize stdlib logging and structlog.

    Args:
        level:
            Logging level (e.g. logging.DEBUG). If None, it is read from
            settings.LOG_LEVEL (COB_LOG_LEVEL), defaulting to INFO.
        log_format:
            Renderer to use. If None, settings.LOG_FORMAT is used.
        force:
            If True, reconfigure logging even if it was already initialized.
    """
    global _INITIALIZED

    if _INITIALIZED and not force:
        return

    level = _resolve_level(level)
    log_format = LogFormat(log_format or settings.LOG_FORMAT)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)

    if log_format == LogFormat.JSON:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt=DEFAULT_DATE_FORMAT),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    _INITIALIZED = True


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger, ensuring logging is initialized.

    Args:
        name:
            Logger name, usually __name__ of the calling module.
    """
    if not _INITIALIZED:
        init_logging()
    return structlog.get_logger(name)


__all__ = ["init_logging", "get_logger"]
