"""Tests for the per-task configuration context."""

import asyncio
import threading

import pytest

from src.storefront.runtime.config.config_data import ConfigData
from src.storefront.runtime.context import (
    AppContext,
    get_config,
    get_context,
    set_config,
    set_context,
    with_context,
)


def _config(**changes) -> ConfigData:
    config = get_config().model_copy(deep=True)
    for name, value in changes.items():
        section, field = name.split("__")
        setattr(getattr(config, section), field, value)
    return config


class TestWithContext:
    def test_loaded_config_is_the_default(self):
        assert isinstance(get_context(), AppContext)
        assert get_context().config is get_config()

    def test_override_applies_inside_block_only(self):
        before = get_config()
        override = _config(app__frontend_url="https://shop.example.com")

        with with_context(override):
            assert get_config() is override
            assert get_config().app.frontend_url == "https://shop.example.com"

        assert get_config() is before

    def test_derived_override_keeps_other_settings(self):
        override = _config(security__cookie_name="sid")

        with with_context(override):
            assert get_config().security.cookie_name == "sid"
            assert get_config().jwt.issuer == get_context().config.jwt.issuer

    def test_nested_overrides_unwind_in_order(self):
        outer = _config(jwt__issuer="outer")
        inner = _config(jwt__issuer="inner")

        with with_context(outer):
            with with_context(inner):
                assert get_config().jwt.issuer == "inner"
            assert get_config().jwt.issuer == "outer"

    def test_none_keeps_current_config(self):
        before = get_config()

        with with_context(None):
            assert get_config() is before

    def test_rejects_plain_dict(self):
        with pytest.raises(ValueError):
            with with_context({"jwt": {"issuer": "x"}}):
                pass

    def test_restored_after_error(self):
        before = get_config()

        with pytest.raises(RuntimeError):
            with with_context(_config(jwt__issuer="boom")):
                raise RuntimeError("failed inside block")

        assert get_config() is before

    def test_set_config_replaces_current(self):
        original = get_context()
        replacement = _config(mail__from_email="shop@example.com")

        try:
            set_config(replacement)
            assert get_config().mail.from_email == "shop@example.com"
        finally:
            set_context(original)

        assert get_config() is original.config


class TestIsolation:
    @pytest.mark.asyncio
    async def test_tasks_see_their_own_config(self):
        async def frontend_of(n: int) -> str:
            with with_context(_config(app__frontend_url=f"https://shop{n}.example.com")):
                await asyncio.sleep(0.01)
                return get_config().app.frontend_url

        urls = await asyncio.gather(*(frontend_of(n) for n in range(4)))

        assert urls == [f"https://shop{n}.example.com" for n in range(4)]

    def test_threads_see_their_own_config(self):
        seen: dict[int, str] = {}

        def worker(n: int) -> None:
            with with_context(_config(security__cookie_name=f"sid-{n}")):
                seen[n] = get_config().security.cookie_name

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert seen == {n: f"sid-{n}" for n in range(4)}
