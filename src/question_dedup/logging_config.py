"""Unified structlog + stdlib logging configuration.

Routes both ``structlog.get_logger()`` and plain ``logging.getLogger``
calls through one processor chain, rendered either as JSON lines or
with structlog's coloured console renderer.
"""

import logging
import sys

import structlog

from question_dedup.config.settings import Settings


def configure_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """Configure unified logging for both structlog and stdlib.

    Logs go to stderr so that commands writing JSON results to stdout
    stay machine-readable.

    Args:
        json_output: Render log records as JSON lines instead of the
            development console format.
        log_level: Root log level (``"DEBUG"``, ``"INFO"``, ...).
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper()))


def configure_from_settings(settings: Settings) -> None:
    """Apply the logging options carried by ``settings``."""
    configure_logging(json_output=settings.log_json, log_level=settings.log_level)
