"""Configuration template substitution utilities."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.storefront.runtime.config.config_data import (
    DEFAULT_ACTIVATION_SECRET,
    DEFAULT_SESSION_SECRET,
    ConfigData,
)


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """
    def replacer(match):
        var_expr = match.group(1)

        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)

        elif ":?" in var_expr:
            var_name, error_msg = var_expr.split(":?", 1)
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name}: {error_msg}")
            return value

        else:
            var_name = var_expr
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name} not set")
            return value

    pattern = r'\$\{([^}]+)\}'
    return re.sub(pattern, replacer, text)


def apply_environment_overrides(env_mode: str) -> None:
    """Copy ``<ENV>_NAME`` variables onto ``NAME`` for the active environment."""
    prefix = f"{env_mode.upper()}_"
    env_variables = [var for var in os.environ if var.startswith(prefix)]
    if env_variables:
        logger.info("Applying environment-specific overrides: {}", env_variables)

    for var_name in env_variables:
        new_var_name = var_name[len(prefix):]
        os.environ[new_var_name] = os.environ[var_name]
        logger.debug(f"Set environment variable {new_var_name} from {var_name}")


def load_templated_yaml(file_path: Path) -> ConfigData:
    """
    Load a YAML file with environment variable substitution.

    Args:
        file_path: Path to the YAML file

    Returns:
        Parsed YAML with environment variables substituted

    Raises:
        ValueError: If required environment variables are missing or the
            resulting document does not validate
        FileNotFoundError: If the YAML file doesn't exist
    """
    with open(file_path) as f:
        content = f.read()

    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    logger.info(f"Loading configuration for environment: {env_mode}")
    apply_environment_overrides(env_mode)

    substituted_content = substitute_env_vars(content)

    try:
        loaded = yaml.safe_load(substituted_content)
        if not loaded:
            raise ValueError("Failed to parse YAML")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e

    try:
        config_data = loaded.get("config", {})
        config = ConfigData(**config_data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    return config


def load_config(file_path: Path | None = None) -> ConfigData:
    """Load configuration from ``file_path`` (or ``APP_CONFIG_FILE``), falling back to defaults."""
    path = file_path or Path(os.getenv("APP_CONFIG_FILE", "config.yaml"))
    if not path.exists():
        logger.warning("Configuration file {} not found; using defaults", path)
        return ConfigData()
    return load_templated_yaml(path)


def validate_production_config(config: ConfigData) -> list[str]:
    """Return a list of problems that must block a production start."""
    problems = []
    if config.app.environment != "production":
        return problems

    if "*" in config.app.cors.origins and config.app.cors.allow_credentials:
        problems.append("cannot use '*' CORS origin with allow_credentials=True")
    if config.jwt.session_signing_secret == DEFAULT_SESSION_SECRET:
        problems.append("jwt.session_signing_secret is left at its development default")
    if config.jwt.activation_signing_secret == DEFAULT_ACTIVATION_SECRET:
        problems.append("jwt.activation_signing_secret is left at its development default")
    if not config.security.secure_cookies:
        problems.append("security.secure_cookies must be enabled")
    if config.mail.backend == "console":
        problems.append("mail.backend 'console' does not deliver activation mail")
    return problems
