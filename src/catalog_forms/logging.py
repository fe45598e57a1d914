"""Logging setup hook for applications embedding the form engine.

The engine itself only writes to stdlib loggers under ``catalog_forms`` with
dotted event names and ``extra`` fields. The host calls
:func:`configure_logging` once at startup to render those records through
structlog. Context bound with ``structlog.contextvars`` (the session binds
``entity_id`` and ``folder`` during submit) is merged into every record.
"""

from __future__ import annotations

import logging

import structlog

from .core.config import EngineConfig

PACKAGE_LOGGER = "catalog_forms"


def configure_logging(config: EngineConfig | None = None) -> logging.Handler:
    """Attach a structlog-rendering handler to the ``catalog_forms`` logger.

    Returns the installed handler so the host can remove or redirect it.
    """

    config = config or EngineConfig.build_default()
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer = (
        structlog.processors.JSONRenderer()
        if config.log_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[*shared_processors, structlog.stdlib.ExtraAdder()],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(config.log_level.upper())
    package_logger.propagate = False

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return handler


__all__ = ["PACKAGE_LOGGER", "configure_logging"]
