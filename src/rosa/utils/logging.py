"""structlog setup for diagnostics.

Diagnostics are kept apart from the `I:`/`E:` lines printed by the reporter:
they go to their own stream (stderr unless configured) and are filtered by
level before rendering.
"""

import logging
import sys
from typing import Any, TextIO

import structlog

DEFAULT_LEVEL = logging.WARNING

_SHARED_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else DEFAULT_LEVEL


def _renderers(format: str) -> list[Any]:
    if format == "json":
        return [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=False)]


def setup_logging(level: str = "WARNING", format: str = "console", output: str = "stderr") -> None:
    """Route diagnostics for this invocation.

    Args:
        level: Minimum level name; unknown names fall back to WARNING
        format: `console` or `json`
        output: `stderr` or `stdout`
    """
    log_level = _level(level)
    stream: TextIO = sys.stdout if output == "stdout" else sys.stderr

    # botocore and httpx log through the standard library
    logging.basicConfig(format="%(message)s", stream=stream, level=log_level, force=True)

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, *_renderers(format)],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def log_error(
    logger: structlog.BoundLogger,
    error: Exception,
    operation: str | None = None,
    **kwargs: Any,
) -> None:
    """Log a failed operation.

    The OCM status code and the AWS error code are added when the error
    carries them.
    """
    context: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        **kwargs,
    }
    for attr in ("status_code", "error_code"):
        value = getattr(error, attr, None)
        if value is not None:
            context[attr] = value
    if operation:
        context["operation"] = operation

    logger.error("command_failed", **context)
