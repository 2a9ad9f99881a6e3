"""Severity-tagged alert delivery to Telegram, text streams, or both."""

from src.notifier.context import (
    Metadata,
    bind_metadata,
    current_scope,
    metadata_from_scope,
    with_metadata,
)
from src.notifier.exceptions import (
    AlertDeliveryError,
    ChatIDParseError,
    EmptyMessageError,
    EmptyNotifiersError,
    EmptyTelegramChatIDError,
    EmptyTelegramTokenError,
    FormatAlertError,
    InvalidSeverityError,
    InvalidTokenError,
    MultiNotifierError,
    NotifierError,
    SendError,
    TelegramAPIError,
    TelegramClientError,
    WriteError,
)
from src.notifier.factory import create_notifier
from src.notifier.formatter import format_alert
from src.notifier.notifiers import (
    MultiNotifier,
    Notifier,
    StreamNotifier,
    TelegramNotifier,
)
from src.notifier.severity import ALLOWED_SEVERITIES, Severity, severity_label
from src.notifier.telegram import TelegramClient

__all__ = [
    "ALLOWED_SEVERITIES",
    "AlertDeliveryError",
    "ChatIDParseError",
    "EmptyMessageError",
    "EmptyNotifiersError",
    "EmptyTelegramChatIDError",
    "EmptyTelegramTokenError",
    "FormatAlertError",
    "InvalidSeverityError",
    "InvalidTokenError",
    "Metadata",
    "MultiNotifier",
    "MultiNotifierError",
    "Notifier",
    "NotifierError",
    "SendError",
    "Severity",
    "StreamNotifier",
    "TelegramAPIError",
    "TelegramClient",
    "TelegramClientError",
    "TelegramNotifier",
    "WriteError",
    "bind_metadata",
    "create_notifier",
    "current_scope",
    "format_alert",
    "metadata_from_scope",
    "severity_label",
    "with_metadata",
]
