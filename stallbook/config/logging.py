"""
Logging Configuration for Stallbook

Structured logging through structlog on top of the stdlib root logger.
Events render as JSON lines (``log_format=json``) or coloured console
lines (``log_format=text``). Every event carries the app name and
environment; API requests additionally carry their request id through
structlog's context variables.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import add_log_level, ProcessorFormatter

from stallbook.config.settings import Settings, get_settings

# Third-party loggers that are chatty below WARNING
QUIET_LOGGERS = ["faker", "faker.factory", "multipart", "redis"]


def _renderer(log_format: str):
    if log_format == "text":
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return JSONRenderer()


def configure_logging(
    log_level: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> None:
    """
    Configure structured logging for the application.

    Safe to call more than once; handlers on the root logger are replaced.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
        settings: Application settings (defaults to the cached settings)
    """
    settings = settings or get_settings()
    level = (log_level or settings.monitoring.log_level).upper()
    numeric_level = getattr(logging, level, logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(
        ProcessorFormatter(
            processor=_renderer(settings.monitoring.log_format),
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(numeric_level)

    # uvicorn shares the handler; request lines come from RequestLoggingMiddleware
    for name in ["uvicorn", "uvicorn.error"]:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True
        uvicorn_logger.setLevel(numeric_level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        app=settings.app_name,
        environment=settings.app_env,
    )

    structlog.get_logger(__name__).info(
        "Logging configured",
        level=level,
        format=settings.monitoring.log_format,
        storage=settings.storage.backend,
    )
