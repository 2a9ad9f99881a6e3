"""Minimal Telegram Bot API client over aiohttp."""

from __future__ import annotations

import asyncio
from typing import Any

import aiohttp
import structlog

from src.notifier.exceptions import TelegramAPIError

logger = structlog.get_logger(__name__)

DEFAULT_API_URL = "https://api.telegram.org"

# Telegram's rich-text rendering mode the formatter targets.
MODE_HTML = "HTML"


class TelegramClient:
    """Calls Bot API methods and unwraps the ``{"ok": ..., "result": ...}`` envelope."""

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._session = session
        # Filled by get_me().
        self.username: str = ""

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def _call(self, method: str, payload: dict[str, Any] | None = None) -> Any:
        url = f"{self._api_url}/bot{self._token}/{method}"
        try:
            session = self._get_session()
            async with session.post(url, json=payload or {}) as resp:
                try:
                    body = await resp.json(content_type=None)
                except ValueError:
                    text = await resp.text()
                    raise TelegramAPIError(text[:200] or resp.reason or "", resp.status)
        except aiohttp.ClientError as err:
            raise TelegramAPIError(f"{method}: {err}") from err
        except asyncio.TimeoutError as err:
            # aiohttp's request timeout is not a ClientError.
            raise TelegramAPIError(f"{method}: timeout") from err

        if not isinstance(body, dict) or not body.get("ok", False):
            description = ""
            code = resp.status
            if isinstance(body, dict):
                description = str(body.get("description", ""))
                code = int(body.get("error_code", code))
            logger.warning(
                "telegram_api_error",
                method=method,
                status=resp.status,
                error_code=code,
                description=description[:200],
            )
            raise TelegramAPIError(description or f"HTTP {resp.status}", code)

        return body.get("result")

    async def get_me(self) -> dict[str, Any]:
        """Fetch the bot identity; also validates the token."""
        me = await self._call("getMe")
        if isinstance(me, dict):
            self.username = str(me.get("username") or "")
            return me
        return {}

    async def send_message(
        self,
        chat_id: int,
        text: str,
        parse_mode: str = MODE_HTML,
    ) -> dict[str, Any]:
        """Send *text* to *chat_id* and return the created message."""
        payload = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": parse_mode,
        }
        result = await self._call("sendMessage", payload)
        return result if isinstance(result, dict) else {}

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
