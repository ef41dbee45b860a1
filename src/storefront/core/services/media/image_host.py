"""Image host client for avatar storage.

Speaks the Cloudinary upload API: every call is a form POST signed with
SHA-1 over the sorted parameters plus the API secret.
"""

from __future__ import annotations

import hashlib
import time
from typing import Protocol

import httpx
from loguru import logger

from src.storefront.core.errors import ExternalServiceError
from src.storefront.entities.core.user.entity import Avatar
from src.storefront.runtime.config.config_data import MediaConfig
from src.storefront.runtime.context import get_config

# Parameters the provider excludes from the signature
_UNSIGNED_PARAMS = {"file", "api_key", "resource_type", "cloud_name", "signature"}


class ImageHost(Protocol):
    async def upload(self, source: str, folder: str, width: int | None = None) -> Avatar: ...

    async def destroy(self, public_id: str) -> None: ...


def sign_params(params: dict[str, str | int], api_secret: str) -> str:
    """Compute the request signature for ``params``."""
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key not in _UNSIGNED_PARAMS and params[key] not in (None, "")
    )
    return hashlib.sha1((to_sign + api_secret).encode("utf-8")).hexdigest()


class CloudinaryImageHost:
    """Uploads and deletes images on a Cloudinary-compatible host."""

    def __init__(self, config: MediaConfig | None = None):
        self._config = config or get_config().media

    def _signed(self, params: dict[str, str | int]) -> dict[str, str | int]:
        cfg = self._config
        if not cfg.cloud_name or not cfg.api_key or not cfg.api_secret:
            raise ExternalServiceError("Image host is not configured")
        params = {**params, "timestamp": int(time.time())}
        params["signature"] = sign_params(params, cfg.api_secret)
        params["api_key"] = cfg.api_key
        return params

    async def _post(self, url: str, data: dict[str, str | int], action: str) -> dict:
        try:
            async with httpx.AsyncClient(timeout=self._config.timeout_seconds) as client:
                resp = await client.post(url, data=data)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as exc:
            logger.bind(status_code=exc.response.status_code).error(
                "image_host.{} failed: {}", action, exc.response.text[:200]
            )
            raise ExternalServiceError(f"Image {action} failed") from exc
        except httpx.HTTPError as exc:
            logger.error("image_host.{} failed: {}", action, type(exc).__name__)
            raise ExternalServiceError(f"Image {action} failed") from exc

    async def upload(self, source: str, folder: str, width: int | None = None) -> Avatar:
        """Upload ``source`` (data URI or remote URL) into ``folder``."""
        params: dict[str, str | int] = {"folder": folder}
        if width:
            params["transformation"] = f"w_{width}"
        data = {**self._signed(params), "file": source}

        body = await self._post(self._config.upload_url, data, "upload")
        try:
            avatar = Avatar(public_id=body["public_id"], url=body["secure_url"])
        except KeyError as exc:
            raise ExternalServiceError("Image upload failed") from exc
        logger.info("image_host.upload public_id={}", avatar.public_id)
        return avatar

    async def destroy(self, public_id: str) -> None:
        """Delete ``public_id``; an already-missing image is not an error."""
        body = await self._post(
            self._config.destroy_url, self._signed({"public_id": public_id}), "delete"
        )
        result = body.get("result")
        if result not in ("ok", "not found"):
            raise ExternalServiceError("Image delete failed")
        logger.info("image_host.destroy public_id={} result={}", public_id, result)
