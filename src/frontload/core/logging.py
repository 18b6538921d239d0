# src/frontload/core/logging.py
"""Structured logging configuration for frontload.

structlog and stdlib records share one ProcessorFormatter, so a module using
logging.getLogger(__name__) renders exactly like the engine modules that use
structlog.get_logger(__name__). Every line carries the emitting module
(`logger`), and engine lines carry `provider` when the provider was named.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

# asyncio reports slow callbacks at DEBUG and dynaconf traces every file it
# probes; neither goes below WARNING.
_QUIET_LOGGERS: tuple[str, ...] = ("asyncio", "dynaconf")


def _drop_unnamed_provider(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Providers are bound with provider=None unless ProviderSettings.name is set."""
    if event_dict.get("provider", ...) is None:
        del event_dict["provider"]
    return event_dict


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
) -> None:
    """Route structlog and stdlib logging to stdout.

    Args:
        json_output: One JSON object per line instead of console rendering
        level: DEBUG, INFO, WARNING or ERROR
    """
    log_level = logging.getLevelNamesMapping()[level.upper()]

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _drop_unnamed_provider,
    ]

    final_processors: list[Any] = [ProcessorFormatter.remove_processors_meta]
    if json_output:
        final_processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        final_processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests and the CLI callback reconfigure; cached loggers would not follow.
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ProcessorFormatter(
            processors=final_processors,
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    quiet_level = max(log_level, logging.WARNING)
    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(quiet_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
