"""
Structured logging for the console back end.

Everything, including uvicorn and redis records, goes through one stdout
handler that renders with structlog: JSON when ENVIRONMENT is production,
coloured key/value lines otherwise.

Context carried on every line through contextvars:
  request_id   bound per HTTP request (api.middleware)
  admin        bound when a console session opens (services.session_service)
"""

import logging
import sys

import structlog

from courtsync.core.config import get_settings

QUIET_LOGGERS = ("uvicorn.access", "redis")


def _processor_chain(json_output: bool) -> list:
    chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        chain.append(structlog.processors.format_exc_info)
    return chain


def _console_handler(renderer) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))
    return handler


def setup_logging() -> None:
    settings = get_settings()
    json_output = settings.ENVIRONMENT == "production"
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=[
            *_processor_chain(json_output),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    # Each app lifespan calls this; replace our handler rather than stacking another
    for existing in list(root.handlers):
        if isinstance(existing.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(existing)
    root.addHandler(_console_handler(renderer))
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
