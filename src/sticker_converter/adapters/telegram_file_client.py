"""Telegram file download client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

TELEGRAM_API_BASE = "https://api.telegram.org"


class TelegramFileError(RuntimeError):
    """Download failure whose message never includes the bot token."""


class TelegramFileClient(Protocol):
    """Interface for downloading Telegram files."""

    async def download_file_bytes(self, file_id: str) -> bytes:
        """Download a Telegram file and return its bytes."""


@dataclass
class HttpxTelegramFileClient(TelegramFileClient):
    """Telegram file client using httpx."""

    bot_token: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, bot_token: str) -> "HttpxTelegramFileClient":
        """Create a Telegram file client with a managed httpx session."""
        return cls(bot_token=bot_token, http_client=httpx.AsyncClient())

    async def download_file_bytes(self, file_id: str) -> bytes:
        """Resolve the file path via getFile, then fetch the content."""
        lookup = await self._get(
            f"{TELEGRAM_API_BASE}/bot{self.bot_token}/getFile",
            params={"file_id": file_id},
            timeout=10,
        )
        payload = lookup.json()
        if not payload.get("ok"):
            description = payload.get("description", "unknown error")
            raise TelegramFileError(f"getFile failed: {description}")
        file_path = payload["result"]["file_path"]
        download = await self._get(
            f"{TELEGRAM_API_BASE}/file/bot{self.bot_token}/{file_path}", timeout=20
        )
        return download.content

    async def _get(self, url: str, **kwargs: object) -> httpx.Response:
        # httpx error messages embed the URL, which carries the token.
        response = await self.http_client.get(url, **kwargs)
        if response.is_error:
            raise TelegramFileError(
                f"Telegram responded with HTTP {response.status_code}"
            )
        return response

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
