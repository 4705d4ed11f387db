"""Structured logging for the scanner: structlog events rendered through stdlib handlers."""

from __future__ import annotations

import logging
import logging.config
import os
import re
from typing import Any

import structlog

# Third-party loggers that are chatty at DEBUG.
_QUIET_LOGGERS = ("httpx", "httpcore")

# Credentials that may end up in event values (config dumps, error messages).
_TOKEN_RE = re.compile(
    r"\b(?:gh[pousr]_[A-Za-z0-9]{36}|github_pat_[A-Za-z0-9_]{82}|npm_[A-Za-z0-9]{36})\b"
)
_SECRET_KEYS = frozenset({"token", "authorization", "github_token"})


def mask_token(token: str) -> str:
    """Keep the first 4 and last 8 characters; short tokens are hidden entirely."""
    if len(token) < 16:
        return "****"
    return f"{token[:4]}****{token[-8:]}"


def mask_secrets(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """structlog processor: mask tokens before anything is rendered."""
    for key, value in event_dict.items():
        if not isinstance(value, str):
            continue
        if key.lower() in _SECRET_KEYS:
            event_dict[key] = mask_token(value)
        else:
            event_dict[key] = _TOKEN_RE.sub(lambda m: mask_token(m.group(0)), value)
    return event_dict


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        mask_secrets,
    ]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure structlog and stdlib logging for a CLI run.

    Environment:
        PKGHEALTH_LOG_LEVEL: threshold when *level* is not given (default WARNING)
        PKGHEALTH_LOG_FORMAT: console or json when *log_format* is not given

    Everything is written to stderr; stdout carries the JSON report.
    """
    log_level = (level or os.environ.get("PKGHEALTH_LOG_LEVEL") or "WARNING").upper()
    fmt = (log_format or os.environ.get("PKGHEALTH_LOG_FORMAT") or "console").lower()
    processors = _shared_processors()

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    loggers: dict[str, dict[str, str]] = {"pkghealth": {"level": log_level}}
    loggers.update({name: {"level": "WARNING"} for name in _QUIET_LOGGERS})

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "pkghealth": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(fmt),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "pkghealth",
                },
            },
            "root": {"handlers": ["stderr"], "level": log_level},
            "loggers": loggers,
        }
    )
