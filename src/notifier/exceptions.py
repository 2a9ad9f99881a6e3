"""Exception hierarchy for alert notifiers."""

from __future__ import annotations


class NotifierError(Exception):
    """Base exception for all notifier errors."""


class EmptyTelegramTokenError(NotifierError):
    """The Telegram bot token is empty."""

    def __init__(self) -> None:
        super().__init__("telegram token is empty")


class EmptyTelegramChatIDError(NotifierError):
    """The Telegram chat id is empty."""

    def __init__(self) -> None:
        super().__init__("telegram chat id is empty")


class FormatAlertError(NotifierError):
    """A destination could not render the alert; the cause says why."""


class TelegramClientError(NotifierError):
    """The Telegram client could not be created."""


class InvalidTokenError(TelegramClientError):
    """Telegram rejected the bot token."""

    def __init__(self) -> None:
        super().__init__("create telegram client: invalid token")


class EmptyMessageError(NotifierError):
    """The alert message is empty."""

    def __init__(self) -> None:
        super().__init__("message is empty")


class EmptyNotifiersError(NotifierError):
    """A multi notifier was built without members."""

    def __init__(self) -> None:
        super().__init__("notifiers list is empty")


class InvalidSeverityError(NotifierError):
    """The alert severity is not one of the allowed values."""

    def __init__(self, severity: str, allowed: tuple[str, ...]) -> None:
        self.severity = severity
        self.allowed = allowed
        super().__init__(
            f"'{severity}', should be one of '[{' '.join(allowed)}]': invalid severity"
        )


class ChatIDParseError(NotifierError):
    """The Telegram chat id is not a signed 64-bit integer."""


class SendError(NotifierError):
    """A destination failed to deliver the alert."""


class WriteError(SendError):
    """Writing the alert to a stream failed."""


class AlertDeliveryError(NotifierError):
    """An alert failed for the destination identified by *kind*."""

    def __init__(self, kind: str, cause: BaseException) -> None:
        self.kind = kind
        self.cause = cause
        super().__init__(f"send alert to '{kind}': {cause}")


class MultiNotifierError(NotifierError):
    """One or more members of a multi notifier failed independently."""

    def __init__(self, errors: list[AlertDeliveryError]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(str(e) for e in self.errors))


class TelegramAPIError(Exception):
    """The Telegram Bot API returned an error or could not be reached."""

    def __init__(self, description: str, error_code: int | None = None) -> None:
        self.description = description
        self.error_code = error_code
        super().__init__(description)


def caused_by(err: BaseException, *types: type[BaseException]) -> bool:
    """Return True if *err* or anything in its ``__cause__`` chain is one of *types*."""
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        if isinstance(current, types):
            return True
        seen.add(id(current))
        current = current.__cause__
    return False
