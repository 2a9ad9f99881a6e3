"""Alert destinations — Telegram, text streams, and fan-out to several of them."""

from __future__ import annotations

import abc
import asyncio
import re
from contextvars import Context
from typing import TextIO

import structlog

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
    SendError,
    TelegramAPIError,
    TelegramClientError,
    WriteError,
    caused_by,
)
from src.notifier.formatter import format_alert
from src.notifier.telegram import DEFAULT_API_URL, MODE_HTML, TelegramClient

logger = structlog.get_logger(__name__)

_CHAT_ID_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _describe(err: BaseException) -> str:
    # TimeoutError() has an empty message.
    return str(err) or type(err).__name__


def _render(severity: int, message: str, scope: Context | None) -> str:
    try:
        return format_alert(severity, message, scope)
    except (EmptyMessageError, InvalidSeverityError) as err:
        raise FormatAlertError(f"format alert: {err}") from err


class Notifier(abc.ABC):
    """Base class for alert destinations."""

    @abc.abstractmethod
    async def alert(
        self,
        severity: int,
        message: str,
        scope: Context | None = None,
    ) -> None:
        """Deliver an alert. Raises a NotifierError subclass on failure."""

    @property
    @abc.abstractmethod
    def kind(self) -> str:
        """Human-readable identity of the destination."""

    async def close(self) -> None:
        """Release resources (HTTP sessions, etc.)."""


# ── Telegram ────────────────────────────────────────────────────


def _is_invalid_token(err: TelegramAPIError) -> bool:
    # The Bot API answers an unknown token with a bare 404 "Not Found".
    return "Not Found" in str(err)


def _parse_chat_id(chat_id: str) -> int:
    # int() would also accept whitespace and digit separators.
    if not _CHAT_ID_RE.fullmatch(chat_id):
        raise ChatIDParseError(f"parse telegram chat_id: invalid syntax {chat_id!r}")
    value = int(chat_id)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ChatIDParseError(
            f"parse telegram chat_id: {chat_id!r} is out of int64 range"
        )
    return value


class TelegramNotifier(Notifier):
    """Sends alerts to a Telegram chat using HTML parse mode.

    Build it with :meth:`create`, which validates the credentials against
    the Bot API before returning.
    """

    def __init__(self, chat_id: int, client: TelegramClient) -> None:
        self._chat_id = chat_id
        self._client = client

    @classmethod
    async def create(
        cls,
        token: str,
        chat_id: str,
        *,
        api_url: str = DEFAULT_API_URL,
        client: TelegramClient | None = None,
    ) -> TelegramNotifier:
        """Validate *token* and *chat_id* and connect to the Bot API.

        Raises:
            EmptyTelegramTokenError: *token* is empty.
            EmptyTelegramChatIDError: *chat_id* is empty.
            InvalidTokenError: Telegram does not know the token.
            TelegramClientError: ``getMe`` failed for any other reason.
            ChatIDParseError: *chat_id* is not a base-10 int64.
        """
        if token == "":
            raise EmptyTelegramTokenError()

        if chat_id == "":
            raise EmptyTelegramChatIDError()

        client = client or TelegramClient(token, api_url=api_url)
        try:
            await client.get_me()
        except Exception as err:
            await client.close()
            if isinstance(err, TelegramAPIError) and _is_invalid_token(err):
                raise InvalidTokenError() from err
            raise TelegramClientError(f"create telegram client: {_describe(err)}") from err

        try:
            parsed = _parse_chat_id(chat_id)
        except ChatIDParseError:
            await client.close()
            raise

        return cls(parsed, client)

    @property
    def kind(self) -> str:
        if not self._client.username:
            return "telegram"
        return f"telegram[{self._client.username}]"

    async def alert(
        self,
        severity: int,
        message: str,
        scope: Context | None = None,
    ) -> None:
        text = _render(severity, message, scope)

        try:
            await self._client.send_message(self._chat_id, text, parse_mode=MODE_HTML)
        except (TelegramAPIError, asyncio.TimeoutError) as err:
            raise SendError(f"send telegram message failed: {_describe(err)}") from err

        logger.debug("alert_sent", kind=self.kind, chat_id=self._chat_id)

    async def close(self) -> None:
        await self._client.close()


# ── Text stream ─────────────────────────────────────────────────


class StreamNotifier(Notifier):
    """Writes alerts to a text stream, one block per alert.

    Useful for tests and for echoing alerts into process logs.
    """

    def __init__(self, stream: TextIO, *labels: str) -> None:
        if stream is None:
            raise ValueError("stream is None")

        self._stream = stream
        self._kind = "iowriter"
        if labels:
            self._kind += ": " + " ".join(labels)

    @property
    def kind(self) -> str:
        return self._kind

    async def alert(
        self,
        severity: int,
        message: str,
        scope: Context | None = None,
    ) -> None:
        text = _render(severity, message, scope)

        try:
            self._stream.write(text + "\n")
        except (OSError, ValueError) as err:
            raise WriteError(f"write alert: {err}") from err


# ── Fan-out ─────────────────────────────────────────────────────


class MultiNotifier(Notifier):
    """Delivers each alert to every member, one after another.

    - Members are awaited sequentially in construction order.
    - An empty message or invalid severity fails identically for every
      member, so the first such failure stops the fan-out and is reported
      once against this notifier's own kind.
    - Any other member failure is recorded against that member's kind and
      the remaining members are still tried. All recorded failures are
      raised together as a MultiNotifierError.
    """

    def __init__(self, *notifiers: Notifier) -> None:
        if not notifiers:
            raise EmptyNotifiersError()
        self._notifiers: tuple[Notifier, ...] = notifiers

    @property
    def notifiers(self) -> tuple[Notifier, ...]:
        return self._notifiers

    @property
    def kind(self) -> str:
        return "multi[" + ";".join(n.kind for n in self._notifiers) + "]"

    async def alert(
        self,
        severity: int,
        message: str,
        scope: Context | None = None,
    ) -> None:
        errors: list[AlertDeliveryError] = []

        for notifier in self._notifiers:
            try:
                await notifier.alert(severity, message, scope)
            except Exception as err:
                if caused_by(err, EmptyMessageError, InvalidSeverityError):
                    logger.warning(
                        "alert_short_circuited",
                        kind=self.kind,
                        error=str(err),
                    )
                    raise AlertDeliveryError(self.kind, err) from err

                logger.warning(
                    "alert_delivery_failed",
                    kind=notifier.kind,
                    error=str(err),
                )
                delivery_err = AlertDeliveryError(notifier.kind, err)
                delivery_err.__cause__ = err
                errors.append(delivery_err)

        if errors:
            raise MultiNotifierError(errors)

    async def close(self) -> None:
        for notifier in self._notifiers:
            try:
                await notifier.close()
            except Exception:
                logger.exception("notifier_close_error", kind=notifier.kind)
