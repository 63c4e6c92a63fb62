"""
Logging configuration for the application.

The API, the Celery worker and the crawl CLI share one structlog setup; each
entry point passes its own component name so their lines can be told apart
in a shared log stream.
"""
import logging
import sys

import structlog

from ga_meta.core.config import settings

# Libraries that log per request; the clients log every probe themselves
NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "celery.redirected")


def resolve_log_level() -> int:
    """Level from LOG_LEVEL, else DEBUG in debug mode and INFO otherwise."""
    if settings.log_level:
        level = logging.getLevelName(settings.log_level.upper())
        if isinstance(level, int):
            return level
    return logging.DEBUG if settings.api_debug else logging.INFO


def add_component(component: str):
    """Processor stamping every event with the emitting component."""
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("component", component)
        return event_dict
    return processor


def setup_logging(component: str = "api"):
    """
    Configure structured logging for one process.

    Args:
        component: "api", "worker" or "cli"
    """
    log_level = resolve_log_level()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_component(component),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
            if settings.api_debug
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
