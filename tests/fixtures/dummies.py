from __future__ import annotations

import httpx

from src.storefront.entities.core.user.entity import Avatar


class DummyResponse:
    def __init__(self, payload=None, status_code: int = 200, text: str = ""):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            request = httpx.Request("POST", "https://dummy.test")
            raise httpx.HTTPStatusError(
                "error",
                request=request,
                response=httpx.Response(self.status_code, request=request, text=self.text),
            )

    def json(self):
        return self._payload


class FakeImageHost:
    """In-memory image host recording every call."""

    def __init__(self):
        self.uploads: list[dict] = []
        self.destroyed: list[str] = []

    async def upload(self, source: str, folder: str, width: int | None = None) -> Avatar:
        self.uploads.append({"source": source, "folder": folder, "width": width})
        public_id = f"{folder}/img{len(self.uploads)}"
        return Avatar(public_id=public_id, url=f"https://img.test/{public_id}.png")

    async def destroy(self, public_id: str) -> None:
        self.destroyed.append(public_id)


class FakeMailer:
    """Captures outgoing mail instead of sending it."""

    def __init__(self):
        self.sent: list[dict[str, str]] = []

    async def send(self, to: str, subject: str, body: str) -> None:
        self.sent.append({"to": to, "subject": subject, "body": body})

    @property
    def last_activation_token(self) -> str:
        return self.sent[-1]["body"].rsplit("/activation/", 1)[1].strip()
