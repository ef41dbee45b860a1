"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field

DEFAULT_SESSION_SECRET = "dev-session-secret-change-me"
DEFAULT_ACTIVATION_SECRET = "dev-activation-secret-change-me"


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class JWTConfig(BaseModel):
    """Signing configuration for session and activation tokens."""

    algorithm: str = Field(default="HS256", description="Signing algorithm")
    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256", "HS384", "HS512"],
        description="JWT algorithms accepted when verifying tokens",
    )
    issuer: str = Field(
        default="storefront-api", description="Issuer name to use when generating tokens"
    )
    session_signing_secret: str = Field(
        default=DEFAULT_SESSION_SECRET, description="Secret for signing session tokens"
    )
    activation_signing_secret: str = Field(
        default=DEFAULT_ACTIVATION_SECRET,
        description="Secret for signing account activation tokens",
    )
    session_token_ttl_seconds: int = Field(
        default=7 * 24 * 3600, description="Session token lifetime in seconds"
    )
    activation_token_ttl_seconds: int = Field(
        default=300, description="Activation token lifetime in seconds"
    )
    clock_skew: int = Field(default=0, description="Clock skew tolerance in seconds")


class SecurityConfig(BaseModel):
    """Cookie settings for the session token."""

    cookie_name: str = Field(default="token", description="Session cookie name")
    secure_cookies: bool = Field(
        default=False, description="Mark the session cookie as Secure"
    )
    cookie_samesite: Literal["lax", "strict", "none"] = Field(
        default="lax", description="SameSite cookie attribute"
    )


class MediaConfig(BaseModel):
    """Image host configuration (Cloudinary-compatible upload API)."""

    provider: Literal["cloudinary"] = Field(default="cloudinary")
    base_url: str = Field(
        default="https://api.cloudinary.com/v1_1", description="Image host API root"
    )
    cloud_name: str = Field(default="", description="Cloud (account) name")
    api_key: str = Field(default="", description="Image host API key")
    api_secret: str = Field(default="", description="Image host API secret")
    avatar_folder: str = Field(default="avatars", description="Folder for avatars")
    avatar_width: int = Field(default=150, description="Width applied on avatar update")
    timeout_seconds: float = Field(default=10.0, description="HTTP timeout")

    @computed_field
    @property
    def upload_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.cloud_name}/image/upload"

    @computed_field
    @property
    def destroy_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.cloud_name}/image/destroy"


class MailConfig(BaseModel):
    """Transactional e-mail configuration."""

    backend: Literal["http", "console"] = Field(
        default="console", description="'http' posts to a provider, 'console' only logs"
    )
    api_url: str = Field(default="", description="Provider send endpoint")
    api_key: str = Field(default="", description="Provider secret")
    from_email: str = Field(default="no-reply@example.com")
    timeout_seconds: float = Field(default=10.0, description="HTTP timeout")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./storefront.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    api_prefix: str = Field(default="/api/v2", description="Prefix for API routers")
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Storefront frontend root, used to build activation links",
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="Token signing configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Cookie configuration"
    )
    media: MediaConfig = Field(
        default_factory=MediaConfig, description="Image host configuration"
    )
    mail: MailConfig = Field(
        default_factory=MailConfig, description="Mail delivery configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
