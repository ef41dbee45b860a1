from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace

from src.storefront.runtime.config.config_data import ConfigData
from src.storefront.runtime.config.config_template import load_config


@dataclass
class AppContext:
    """Per-task application state; currently just the active configuration."""

    config: ConfigData


_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=AppContext(config=load_config())
)


def get_context() -> AppContext:
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    return _app_context.set(context)


@contextmanager
def with_context(config: ConfigData | None = None):
    """Run a block against ``config`` instead of the current configuration.

    The override is installed as a whole. Derive it from the active one to
    change a single setting:

        override = get_config().model_copy(deep=True)
        override.app.frontend_url = "https://shop.example.com"
        with with_context(override):
            ...
    """
    if config is None:
        yield
        return

    if not isinstance(config, ConfigData):
        raise ValueError(f"with_context expects ConfigData or None, got {type(config)}")

    token = set_context(replace(get_context(), config=config))
    try:
        yield
    finally:
        _app_context.reset(token)


def set_config(config: ConfigData) -> None:
    """Replace the configuration of the current context."""
    set_context(replace(get_context(), config=config))


def get_config() -> ConfigData:
    return get_context().config
