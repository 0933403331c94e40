"""Telegram Bot API share target."""

from dataclasses import dataclass

import httpx

from merry_style.services.delivery import ImageFile, ShareTarget


@dataclass
class HttpxTelegramShareClient(ShareTarget):
    """Shares images to a fixed Telegram chat using httpx."""

    bot_token: str
    chat_id: int
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, bot_token: str, chat_id: int) -> "HttpxTelegramShareClient":
        """Create a share client with a managed httpx session."""
        return cls(
            bot_token=bot_token, chat_id=chat_id, http_client=httpx.AsyncClient()
        )

    async def share_file(self, file: ImageFile, *, title: str, text: str) -> None:
        """Send the image with sendPhoto, using the title and text as caption."""
        url = f"https://api.telegram.org/bot{self.bot_token}/sendPhoto"
        response = await self.http_client.post(
            url,
            data={"chat_id": str(self.chat_id), "caption": f"{title}\n{text}"},
            files={"photo": (file.filename, file.content, file.mime_type)},
            timeout=20,
        )
        response.raise_for_status()
        payload = response.json()
        if not payload.get("ok"):
            raise RuntimeError("Telegram sendPhoto failed")

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
