"""Convenience factory for wiring notifiers from settings."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

import structlog

from src.notifier.notifiers import (
    MultiNotifier,
    Notifier,
    StreamNotifier,
    TelegramNotifier,
)

if TYPE_CHECKING:
    from src.core.config import AlertsConfig

logger = structlog.get_logger(__name__)


async def create_notifier(
    config: AlertsConfig,
    stream: TextIO | None = None,
) -> MultiNotifier:
    """Build a multi notifier over every enabled destination.

    Args:
        config: Alert destinations section of the settings.
        stream: Where the stream destination writes. Defaults to stdout.

    Raises:
        EmptyNotifiersError: No destination is enabled.
        NotifierError: A Telegram destination failed validation.
    """
    notifiers: list[Notifier] = []

    try:
        for tg in config.telegram:
            if not tg.enabled:
                continue
            notifiers.append(
                await TelegramNotifier.create(
                    tg.bot_token.get_secret_value(),
                    tg.chat_id,
                    api_url=tg.api_url,
                )
            )
    except Exception:
        for n in notifiers:
            await n.close()
        raise

    if config.stream.enabled:
        notifiers.append(
            StreamNotifier(stream if stream is not None else sys.stdout, *config.stream.labels)
        )

    multi = MultiNotifier(*notifiers)
    logger.info("notifier_created", kind=multi.kind)
    return multi
