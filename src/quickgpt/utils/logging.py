"""Structured logging setup for quickgpt."""

import structlog
from pathlib import Path
from typing import Any
import os


REDACTED = "<redacted>"
SECRET_KEYS = frozenset({"api_key", "authorization"})
URL_KEYS = frozenset({"endpoint", "probe_url", "url"})


def _redact(key: str, value: Any) -> Any:
    if key.lower() in SECRET_KEYS:
        return REDACTED
    if isinstance(value, dict):
        return {k: _redact(str(k), v) for k, v in value.items()}
    if key in URL_KEYS and isinstance(value, str) and "?" in value:
        # Query strings may carry credentials
        return value.split("?", 1)[0] + "?" + REDACTED
    return value


def redact_secrets(logger: Any, method_name: str, event_dict: dict) -> dict:
    """
    structlog processor that masks API keys and Authorization headers.

    Keys named api_key or authorization (at any depth of nested dicts) are
    replaced, and query strings are cut from endpoint/probe_url/url values.
    """
    return {key: _redact(key, value) for key, value in event_dict.items()}


def configure_logging() -> None:
    """
    Configure structlog for JSON logging to ~/.cache/quickgpt/logs/quickgpt.log.

    Log level can be controlled via QUICKGPT_LOG_LEVEL environment variable:
    - Set to "DEBUG" to see request payloads and retry timing
    - Defaults to "INFO" if not set

    Log levels:
    - DEBUG: Request payloads, raw response bodies, parsed blocks
    - INFO: Commands, request summaries, history updates
    - WARNING: Retry attempts, unreadable history files
    - ERROR: Terminal request failures, config errors

    API keys and Authorization headers are redacted before rendering.

    Example:
        # View logs with jq for readability:
        tail -f ~/.cache/quickgpt/logs/quickgpt.log | jq .
    """
    log_dir = Path.home() / ".cache" / "quickgpt" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "quickgpt.log"

    log_level = os.environ.get("QUICKGPT_LOG_LEVEL", "INFO").upper()

    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
    if log_level not in valid_levels:
        log_level = "INFO"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            redact_secrets,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=open(log_file, "a")),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)
