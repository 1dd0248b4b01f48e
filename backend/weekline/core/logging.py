"""structlog setup for the Weekline API.

Every record, whether emitted through structlog or a stdlib logger
(uvicorn, SQLAlchemy, stripe, WeasyPrint), goes through one
ProcessorFormatter: JSON lines in production, ConsoleRenderer in debug.
Request-scoped records carry the X-Request-ID as ``correlation_id``.
"""

import logging
import logging.config

import structlog
from asgi_correlation_id.context import correlation_id

SERVICE_NAME = "weekline-backend"

# Third-party loggers that are only interesting when something breaks
QUIET_LOGGERS = ("uvicorn.access", "stripe", "fontTools", "weasyprint")


def add_correlation_id(logger, method, event_dict):
    cid = correlation_id.get(None)
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def add_service(logger, method, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service,
        add_correlation_id,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _stdlib_config(log_level: str, renderer, pre_chain: list) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
                "foreign_pre_chain": pre_chain,
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"handlers": ["stdout"], "level": log_level},
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
    }


def configure_structlog(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Install the processor chain for structlog and the stdlib root logger.

    Must run before the first ``structlog.get_logger()`` call is used, since
    loggers cache their chain on first use.

    Args:
        log_level: Root level name, e.g. "INFO"
        json_logs: JSON lines when True, colored console output otherwise
    """
    processors = _shared_processors()
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    logging.config.dictConfig(_stdlib_config(log_level, renderer, processors))

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
