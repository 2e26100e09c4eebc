"""
Structured logging for photoshelf.

Both the Streamlit app and the export job log through structlog on top of the
standard library. Events are snake_case names with keyword context, e.g.
``logger.error("image_download_failed", filename=..., error=...)``.

Settings come straight from the environment because this module is imported
before configuration is loaded:

    LOG_LEVEL     DEBUG, INFO (default), WARNING, ERROR or CRITICAL
    ENVIRONMENT   development (default), dev or local render for the console;
                  anything else renders one JSON object per line
"""

import logging
import os
import sys
from typing import Any

import structlog

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}
DEVELOPMENT_ENVIRONMENTS = ("development", "dev", "local")

_configured = False


def get_log_level() -> int:
    """Level named by LOG_LEVEL, INFO when unset or unknown."""
    return LOG_LEVELS.get(os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)


def is_development_environment() -> bool:
    return os.getenv("ENVIRONMENT", "development").lower() in DEVELOPMENT_ENVIRONMENTS


def _build_processors(is_dev: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if is_dev:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    else:
        processors.append(structlog.processors.JSONRenderer())

    return processors


def configure_structured_logging(force: bool = False) -> None:
    """
    Route structlog through stdlib logging on stderr.

    Streamlit reruns the main script on every interaction, so repeated calls
    are no-ops unless ``force`` is set.
    """
    global _configured
    if _configured and not force:
        return

    log_level = get_log_level()
    is_dev = is_development_environment()

    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(log_level)

    structlog.configure(
        processors=_build_processors(is_dev),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _configured = True

    get_logger("photoshelf.logging").info(
        "logging_configured",
        log_level=logging.getLevelName(log_level),
        environment="development" if is_dev else "production",
    )


def get_logger(name: str = "photoshelf") -> Any:
    """Structlog logger bound to ``name`` (pass ``__name__``)."""
    return structlog.get_logger(name)


def log_user_action(user_id: str, action: str, **context: Any) -> None:
    """Audit trail entry for something a signed-in user did."""
    get_logger("photoshelf.user_actions").info("user_action", user_id=user_id, action=action, **context)


def log_error(error: Exception, context: dict[str, Any] | None = None) -> None:
    """
    Log an exception with its type, message and extra context.

    Args:
        error: Exception that occurred
        context: Additional key/value context merged into the event
    """
    get_logger("photoshelf.errors").error(
        "error_occurred",
        error_type=type(error).__name__,
        error_message=str(error),
        **(context or {}),
    )


def log_security_event(event_type: str, user_id: str | None = None, **context: Any) -> None:
    """Log a security-relevant event such as a failed sign-in."""
    get_logger("photoshelf.security").warning("security_event", event_type=event_type, user_id=user_id, **context)
