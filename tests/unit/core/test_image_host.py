"""Unit tests for the Cloudinary image host client."""

import hashlib
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from src.storefront.core.errors import ExternalServiceError
from src.storefront.core.services import CloudinaryImageHost
from src.storefront.core.services.media.image_host import sign_params
from src.storefront.runtime.config.config_data import MediaConfig
from tests.fixtures.dummies import DummyResponse


@pytest.fixture
def media_config() -> MediaConfig:
    return MediaConfig(
        cloud_name="demo",
        api_key="key-123",
        api_secret="shh",
        base_url="https://media.test/v1_1",
    )


def _mock_post(mock_client, response) -> AsyncMock:
    post = AsyncMock(return_value=response)
    mock_client.return_value.__aenter__.return_value.post = post
    return post


def test_sign_params_sorts_and_skips_unsigned_keys():
    params = {"timestamp": 100, "folder": "avatars", "api_key": "k", "file": "data:..."}

    expected = hashlib.sha1(b"folder=avatars&timestamp=100shh").hexdigest()

    assert sign_params(params, "shh") == expected


def test_urls_built_from_cloud_name(media_config: MediaConfig):
    assert media_config.upload_url == "https://media.test/v1_1/demo/image/upload"
    assert media_config.destroy_url == "https://media.test/v1_1/demo/image/destroy"


class TestUpload:
    @pytest.mark.asyncio
    async def test_upload_returns_avatar(self, media_config: MediaConfig):
        host = CloudinaryImageHost(media_config)
        response = DummyResponse(
            {"public_id": "avatars/abc", "secure_url": "https://cdn.test/avatars/abc.png"}
        )

        with patch("httpx.AsyncClient") as mock_client:
            post = _mock_post(mock_client, response)
            avatar = await host.upload("data:image/png;base64,AAAA", folder="avatars", width=150)

        assert avatar.public_id == "avatars/abc"
        assert avatar.url == "https://cdn.test/avatars/abc.png"

        url = post.call_args.args[0]
        data = post.call_args.kwargs["data"]
        assert url == media_config.upload_url
        assert data["file"] == "data:image/png;base64,AAAA"
        assert data["folder"] == "avatars"
        assert data["transformation"] == "w_150"
        assert data["api_key"] == "key-123"
        signed = {k: v for k, v in data.items() if k != "signature"}
        assert data["signature"] == sign_params(signed, "shh")

    @pytest.mark.asyncio
    async def test_upload_without_width_has_no_transformation(self, media_config: MediaConfig):
        host = CloudinaryImageHost(media_config)
        response = DummyResponse({"public_id": "p", "secure_url": "u"})

        with patch("httpx.AsyncClient") as mock_client:
            post = _mock_post(mock_client, response)
            await host.upload("https://example.com/me.png", folder="avatars")

        assert "transformation" not in post.call_args.kwargs["data"]

    @pytest.mark.asyncio
    async def test_provider_error_becomes_external_service_error(
        self, media_config: MediaConfig
    ):
        host = CloudinaryImageHost(media_config)

        with patch("httpx.AsyncClient") as mock_client:
            _mock_post(mock_client, DummyResponse({}, status_code=400, text="bad file"))
            with pytest.raises(ExternalServiceError) as exc_info:
                await host.upload("garbage", folder="avatars")

        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "Image upload failed"

    @pytest.mark.asyncio
    async def test_network_error_becomes_external_service_error(
        self, media_config: MediaConfig
    ):
        host = CloudinaryImageHost(media_config)

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                side_effect=httpx.ConnectTimeout("timed out")
            )
            with pytest.raises(ExternalServiceError):
                await host.upload("data:...", folder="avatars")

    @pytest.mark.asyncio
    async def test_unconfigured_host_fails_before_any_request(self):
        host = CloudinaryImageHost(MediaConfig())

        with patch("httpx.AsyncClient") as mock_client:
            with pytest.raises(ExternalServiceError) as exc_info:
                await host.upload("data:...", folder="avatars")

        assert exc_info.value.message == "Image host is not configured"
        mock_client.assert_not_called()


class TestDestroy:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("result", ["ok", "not found"])
    async def test_destroy_accepts_ok_and_missing(self, media_config: MediaConfig, result):
        host = CloudinaryImageHost(media_config)

        with patch("httpx.AsyncClient") as mock_client:
            post = _mock_post(mock_client, DummyResponse({"result": result}))
            await host.destroy("avatars/abc")

        assert post.call_args.args[0] == media_config.destroy_url
        assert post.call_args.kwargs["data"]["public_id"] == "avatars/abc"

    @pytest.mark.asyncio
    async def test_destroy_unexpected_result(self, media_config: MediaConfig):
        host = CloudinaryImageHost(media_config)

        with patch("httpx.AsyncClient") as mock_client:
            _mock_post(mock_client, DummyResponse({"result": "error"}))
            with pytest.raises(ExternalServiceError) as exc_info:
                await host.destroy("avatars/abc")

        assert exc_info.value.message == "Image delete failed"
