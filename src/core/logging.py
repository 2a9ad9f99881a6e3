"""Structured logging setup using structlog.

Every log line written while alert metadata is bound (see
``src.notifier.context.bind_metadata``) carries that metadata under the
``alert_meta`` key, so delivery failures can be traced back to the sending
application instance.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

from src.core.config import LoggingConfig, get_settings
from src.notifier.context import current_scope, metadata_from_scope

_RENDERERS: dict[str, type] = {
    "json": structlog.processors.JSONRenderer,
    "console": structlog.dev.ConsoleRenderer,
}


def add_alert_metadata(
    _logger: Any,
    _method: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """structlog processor: attach the currently bound alert metadata."""
    metadata = metadata_from_scope(current_scope())
    if metadata is not None:
        meta = metadata.to_dict()
        if meta:
            event_dict.setdefault("alert_meta", meta)
    return event_dict


def setup_logging(
    level: str | None = None,
    fmt: str | None = None,
    config: LoggingConfig | None = None,
) -> None:
    """Route structlog through stdlib logging to stderr.

    Args:
        level: Log level override (e.g. "DEBUG"). Uses config if None.
        fmt: Renderer override ("json" or "console"). Uses config if None.
            Unknown names fall back to JSON.
        config: Logging section to read defaults from. Falls back to the
            cached settings.
    """
    cfg = config or get_settings().logging
    log_level = getattr(logging, (level or cfg.level).upper(), logging.INFO)
    renderer_cls = _RENDERERS.get(fmt or cfg.format, structlog.processors.JSONRenderer)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_alert_metadata,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Alerts may be written to stdout; logs stay on stderr.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer_cls(),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # aiohttp access noise is never useful for a one-shot sender.
    logging.getLogger("aiohttp").setLevel(max(log_level, logging.WARNING))
