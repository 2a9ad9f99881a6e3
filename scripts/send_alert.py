#!/usr/bin/env python3
"""Send a single alert to every configured destination.

Usage::

    # Send with default config
    python scripts/send_alert.py --severity WARNING --message "disk almost full"

    # Custom config file
    python scripts/send_alert.py --config config/settings.yaml -s CRITICAL -m "db down"

    # Override log level
    python scripts/send_alert.py -m "deploy finished" --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog

from src.core.config import load_settings
from src.core.logging import setup_logging
from src.notifier.context import bind_metadata
from src.notifier.exceptions import NotifierError
from src.notifier.factory import create_notifier
from src.notifier.severity import ALLOWED_SEVERITIES, Severity

logger = structlog.get_logger(__name__)


async def run(args: argparse.Namespace) -> int:
    """Load settings, build the notifier stack and send one alert."""
    settings = load_settings(args.config)
    setup_logging(level=args.log_level, config=settings.logging)

    try:
        notifier = await create_notifier(settings.alerts)
    except NotifierError as err:
        logger.error("notifier_setup_failed", error=str(err))
        return 1

    try:
        with bind_metadata(settings.metadata.to_metadata()):
            await notifier.alert(Severity[args.severity], args.message)
    except NotifierError as err:
        logger.error("alert_failed", kind=notifier.kind, error=str(err))
        return 1
    finally:
        await notifier.close()

    logger.info("alert_delivered", kind=notifier.kind, severity=args.severity)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Send an alert")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "-s",
        "--severity",
        choices=list(ALLOWED_SEVERITIES),
        default="INFO",
        help="Alert severity (default: INFO)",
    )
    parser.add_argument(
        "-m",
        "--message",
        required=True,
        help="Alert message text",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override log level (DEBUG, INFO, WARNING, ERROR)",
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
