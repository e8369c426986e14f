"""Engine logging.

structlog on top of stdlib logging:
- Human-readable console lines, or JSON when ``log_format == "json"``
- JSON log files (all events and errors only) when ``log_to_file`` is set
- Viewer session context merged into every event
- Bearer tokens and payment references masked before rendering
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor

from lecturemate.core.context import get_context


if TYPE_CHECKING:
    from lecturemate.config.settings import Settings


_MASKED_KEYS = ("password", "secret", "token", "authorization", "payment_id", "card_number")

# Values up to this length are fully hidden, longer ones keep 2 chars per side
_FULL_MASK_LENGTH = 4

_QUIET_LOGGERS = ("httpx", "httpcore")


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Merge session_id, student_id and course_id of the current scope."""
    event_dict.update(get_context())
    return event_dict


def _mask(key: str, value: Any) -> Any:
    if isinstance(value, dict):
        return {nested_key: _mask(nested_key, item) for nested_key, item in value.items()}
    if not isinstance(value, str):
        return value
    if not any(masked in key.lower() for masked in _MASKED_KEYS):
        return value
    if len(value) <= _FULL_MASK_LENGTH:
        return "***"
    return f"{value[:2]}{'*' * (len(value) - 4)}{value[-2:]}"


def filter_sensitive_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask tokens and payment references in log events."""
    return {key: _mask(key, value) for key, value in event_dict.items()}


def setup_file_handler(
    path: Path,
    level: str,
    settings: "Settings",
) -> RotatingFileHandler:
    """Create a size-rotated log file handler.

    Args:
        path: Log file path (parent directories are created)
        level: Minimum level written to the file
        settings: Source of rotation size and backup count
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=settings.log_file_max_bytes,
        backupCount=settings.log_file_backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level.upper())
    return handler


def _pre_chain(settings: "Settings") -> list[Processor]:
    """Processors applied to structlog and foreign stdlib records alike."""
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_context_processor,
        filter_sensitive_data,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.log_include_caller_info:
        chain.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            )
        )
    return chain


def _console_renderer(settings: "Settings") -> Processor:
    if settings.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_structlog(
    settings: "Settings",
    log_dir: Path | str | None = None,
) -> None:
    """Route engine logs through structlog.

    Replaces the root logger handlers, so calling it again reconfigures
    logging from scratch.

    Args:
        settings: Engine settings
        log_dir: Overrides ``settings.log_dir`` for log files
    """
    pre_chain = _pre_chain(settings)

    def formatted(handler: logging.Handler, renderer: Processor) -> logging.Handler:
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=renderer, foreign_pre_chain=pre_chain
            )
        )
        return handler

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(settings.log_level)
    handlers = [formatted(console, _console_renderer(settings))]

    if settings.log_to_file:
        directory = Path(log_dir or settings.log_dir)
        files = (
            (directory / f"{settings.app_name}.log", settings.log_level),
            (directory / f"{settings.app_name}.error.log", "ERROR"),
        )
        handlers.extend(
            formatted(
                setup_file_handler(path, level, settings),
                structlog.processors.JSONRenderer(),
            )
            for path, level in files
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(settings.log_level)
    for handler in handlers:
        root.addHandler(handler)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)
