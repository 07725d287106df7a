"""Configuration management using Pydantic Settings."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

# Config file location
CONFIG_PATH = Path.home() / ".config" / "launcher-auth" / "config.yaml"


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML config file."""

    def get_field_value(
        self, field: Any, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get field value from YAML config."""
        config = self._load_config()
        if field_name in config:
            return config[field_name], field_name, False
        return None, field_name, False

    def _load_config(self) -> dict:
        """Load config from YAML file."""
        if not CONFIG_PATH.exists():
            return {}
        try:
            with open(CONFIG_PATH) as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError:
            return {}

    def __call__(self) -> dict[str, Any]:
        """Return all config values."""
        return self._load_config()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LAUNCHER_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    timeout: int = Field(default=30, ge=5, le=120, description="HTTP timeout in seconds")
    azure_client_id: str | None = Field(
        default=None,
        description="OAuth client id registered with the Microsoft identity platform",
    )
    redirect_uri: str = Field(
        default="https://login.microsoftonline.com/common/oauth2/nativeclient",
        description="Redirect URI the authorization code is delivered to",
    )
    legacy_auth_url: str = Field(
        default="https://authserver.mojang.com",
        description="Base URL of the legacy username/password auth server",
    )
    keyring_service: str = Field(
        default="launcher-auth",
        description="Keyring service name accounts are stored under",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources - priority: env > yaml > defaults."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
        )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
