"""Configuration Service using domain models."""

import json
import os
from pathlib import Path

from domain.config import Config, ConfigError
from domain.exceptions import ServiceError
from domain.provider import ProviderId
from services.base import BaseService

ENV_KEY_TEMPLATE = "WALLHUB_{provider}_API_KEY"


class ConfigService(BaseService):
    """Service for managing application configuration using domain models."""

    def __init__(self, config_file: Path | None = None, environ: dict | None = None) -> None:
        """Initialize configuration service.

        Args:
            config_file: Path to config file (defaults to ~/.config/wallhub/config.json)
            environ: Environment used for API key overrides (defaults to os.environ)
        """
        super().__init__()
        self.config_file = config_file or Path.home() / ".config" / "wallhub" / "config.json"
        self.config_dir = self.config_file.parent
        self._environ = os.environ if environ is None else environ
        self._config: Config | None = None

    def _ensure_config_exists(self) -> None:
        """Create config directory and default config if they don't exist."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        if not self.config_file.exists():
            self.log_info(f"Creating default config at {self.config_file}")
            with open(self.config_file, "w") as f:
                json.dump(Config().to_dict(), f, indent=4)

    def _apply_env_overrides(self, config: Config) -> None:
        for provider in ProviderId:
            key = self._environ.get(ENV_KEY_TEMPLATE.format(provider=provider.name))
            if key:
                config.api_keys[provider] = key

    def load_config(self) -> Config:
        """Load configuration from file and return domain model.

        Returns:
            Config domain model with validated state

        Raises:
            ServiceError: If config file cannot be read or is invalid
        """
        try:
            self._ensure_config_exists()
            with open(self.config_file) as f:
                config_data = json.load(f)
            config = Config.from_dict(config_data)
            self._apply_env_overrides(config)
            config.validate()
            self._config = config
            self.log_debug(f"Loaded config from {self.config_file}")
            return config
        except (json.JSONDecodeError, OSError, ConfigError) as e:
            self.log_error(
                f"Failed to load config from {self.config_file}: {e}", exc_info=True
            )
            raise ServiceError(f"Failed to load configuration: {e}") from e

    def save_config(self, config: Config) -> None:
        """Save configuration domain model to file.

        Raises:
            ServiceError: If config is invalid or the file cannot be written
        """
        try:
            config.validate()
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                json.dump(config.to_dict(), f, indent=4)

            self._config = config
            self.log_info(f"Saved config to {self.config_file}")
        except (ConfigError, OSError) as e:
            self.log_error(
                f"Failed to save config to {self.config_file}: {e}", exc_info=True
            )
            raise ServiceError(f"Failed to save configuration: {e}") from e

    def get_config(self) -> Config:
        """Get current configuration, loading if necessary."""
        if self._config is None:
            return self.load_config()
        return self._config

    def set_api_key(self, provider: ProviderId, api_key: str) -> None:
        config = self.get_config()
        config.api_keys[provider] = api_key
        self.save_config(config)
