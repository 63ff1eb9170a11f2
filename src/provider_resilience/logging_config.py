"""Structured logging configuration using structlog.

JSON output in production (one event per line for log shippers), coloured
console output everywhere else. Retry decisions are logged through
``LoggingRetryObserver``, so they pick up whatever this module configures.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from provider_resilience.config import Settings


def app_context_processor(app_name: str) -> Processor:
    """Build a processor stamping every event with the application name."""

    def add_app_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("app", app_name)
        return event_dict

    return add_app_context


def configure_logging(settings: Settings) -> None:
    """Configure structlog and the stdlib root logger from settings.

    Args:
        settings: Uses LOG_LEVEL, ENVIRONMENT and APP_NAME.

    Production (``ENVIRONMENT=production``):
        - JSON renderer
        - exception info formatted into the event

    Anything else:
        - console renderer with colours
    """
    log_level_int = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    is_production = settings.ENVIRONMENT.lower() == "production"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        app_context_processor(settings.APP_NAME),
    ]

    if is_production:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level_int)

    root_logger = logging.getLogger()
    # Replace, don't stack, handlers on repeated configuration
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level_int)

    logging.getLogger("asyncio").setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=settings.LOG_LEVEL,
        environment=settings.ENVIRONMENT,
        renderer="json" if is_production else "console",
    )
