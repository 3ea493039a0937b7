"""
Centralized configuration for the SOLAPI client.

Configuration is loaded from environment variables with sensible defaults.

Usage:
    from solapi.config import config

    base_url = config.api.base_url
    timeout = config.api.request_timeout
"""

import os
import platform
from dataclasses import dataclass, field
from typing import Dict

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

SDK_VERSION = "python/1.0.0"


@dataclass(frozen=True)
class APIConfig:
    """SOLAPI API configuration."""

    base_url: str = field(
        default_factory=lambda: os.getenv("SOLAPI_BASE_URL", "https://api.solapi.com")
    )
    key: str = field(default_factory=lambda: os.getenv("SOLAPI_API_KEY", ""))
    secret: str = field(default_factory=lambda: os.getenv("SOLAPI_API_SECRET", ""))
    request_timeout: float = field(
        default_factory=lambda: float(os.getenv("SOLAPI_REQUEST_TIMEOUT", "30"))
    )


@dataclass(frozen=True)
class AgentConfig:
    """Client metadata sent along with group and send requests."""

    sdk_version: str = SDK_VERSION
    os_platform: str = field(
        default_factory=lambda: f"{platform.system().lower()} | {platform.python_version()}"
    )

    def to_dict(self) -> Dict[str, str]:
        """Wire form of the agent block."""
        return {
            "sdkVersion": self.sdk_version,
            "osPlatform": self.os_platform,
        }


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""

    version: str = "1.0.0"
    api: APIConfig = field(default_factory=APIConfig)
    agent: AgentConfig = field(default_factory=AgentConfig)


# Global config instance
config = AppConfig()


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def validate_config(app_config: AppConfig = None) -> None:
    """
    Validate that all required configuration is present.

    Call this on application startup to fail fast with clear error messages
    instead of authentication failures on the first request.

    Raises:
        ConfigurationError: If required configuration is missing
    """
    app_config = app_config or config
    errors = []

    if not app_config.api.key:
        errors.append("SOLAPI_API_KEY is required but not set")

    if not app_config.api.secret:
        errors.append("SOLAPI_API_SECRET is required but not set")

    if not app_config.api.base_url.startswith(("http://", "https://")):
        errors.append(f"SOLAPI_BASE_URL must be an http(s) URL, got {app_config.api.base_url!r}")

    if app_config.api.request_timeout <= 0:
        errors.append("SOLAPI_REQUEST_TIMEOUT must be positive")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)
