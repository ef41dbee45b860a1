from __future__ import annotations

import hashlib
from typing import Protocol

import httpx
from loguru import logger

from src.storefront.core.errors import ExternalServiceError
from src.storefront.runtime.config.config_data import MailConfig
from src.storefront.runtime.context import get_config


class Mailer(Protocol):
    async def send(self, to: str, subject: str, body: str) -> None: ...


def _idempotency_key(to: str, subject: str, body: str) -> str:
    """Stable key so the provider won't send duplicates of the same message."""
    payload_hash = hashlib.sha256(
        (to + "\x1f" + subject + "\x1f" + body).encode("utf-8")
    ).hexdigest()
    return f"email:{payload_hash}"


class HttpMailer:
    """Sends plain-text mail through a JSON HTTP provider."""

    def __init__(self, config: MailConfig | None = None):
        self._config = config or get_config().mail

    async def send(self, to: str, subject: str, body: str) -> None:
        cfg = self._config
        if not cfg.api_url or not cfg.api_key:
            raise ExternalServiceError("Email provider not configured")

        payload = {
            "from": {"email": cfg.from_email},
            "personalizations": [{"to": [{"email": to}], "subject": subject}],
            "content": [{"type": "text/plain", "value": body}],
        }
        headers = {
            "Authorization": f"Bearer {cfg.api_key}",
            "Idempotency-Key": _idempotency_key(to, subject, body),
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=cfg.timeout_seconds) as client:
                resp = await client.post(cfg.api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("mail.send failed: {}", type(exc).__name__)
            raise ExternalServiceError("Email could not be sent") from exc

        if 200 <= resp.status_code < 300:
            logger.info("mail.sent subject={!r}", subject)
            return

        logger.bind(status_code=resp.status_code).error(
            "mail.send rejected: {}", resp.text[:200]
        )
        raise ExternalServiceError("Email could not be sent")


class ConsoleMailer:
    """Development backend: writes the message to the log instead of sending it."""

    async def send(self, to: str, subject: str, body: str) -> None:
        logger.info("mail.console to={} subject={!r}\n{}", to, subject, body)


def get_mailer(config: MailConfig | None = None) -> Mailer:
    cfg = config or get_config().mail
    if cfg.backend == "http":
        return HttpMailer(cfg)
    return ConsoleMailer()
