"""User configuration manager."""
import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Tuple

from spendlens.utils.exceptions import ConfigError
from spendlens.utils.formatting import CURRENCY_SYMBOLS
from spendlens.utils.logger import get_app_home

API_KEY_ENV_VAR = "OPENAI_API_KEY"


@dataclass
class Config:
    """Per-user configuration, passed explicitly into each analysis run."""
    openai_api_key: Optional[str] = None
    use_ai: bool = True
    currency_code: str = "USD"
    database_path: Optional[str] = None


class ConfigManager:
    """Manages user configuration stored as JSON in the app home."""

    def __init__(self):
        self.config_dir = get_app_home()
        self.config_file = self.config_dir / "config.json"

    def load_config(self) -> Config:
        """Load configuration, applying the API key environment override."""
        config = Config()
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                raise ConfigError(f"Failed to load configuration: {e}") from e
            config = self._config_from_dict(data)

        env_key = os.getenv(API_KEY_ENV_VAR)
        if env_key:
            config.openai_api_key = env_key
        return config

    @staticmethod
    def _config_from_dict(data) -> Config:
        """Build a Config from parsed JSON, rejecting wrongly typed values."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration file must contain a JSON object")

        unknown = set(data) - set(Config.__dataclass_fields__)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        if "use_ai" in data and not isinstance(data["use_ai"], bool):
            raise ConfigError(f"use_ai must be true or false, got {data['use_ai']!r}")
        for key in ("openai_api_key", "database_path"):
            if data.get(key) is not None and not isinstance(data[key], str):
                raise ConfigError(f"{key} must be a string, got {data[key]!r}")
        if "currency_code" in data and not isinstance(data["currency_code"], str):
            raise ConfigError(f"currency_code must be a string, got {data['currency_code']!r}")

        return Config(**data)

    def save_config(self, config: Config) -> None:
        """Save configuration as JSON."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(asdict(config), f, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}") from e

    def validate_config(self, config: Config) -> Tuple[bool, str]:
        """Validate configuration values."""
        if config.currency_code.upper() not in CURRENCY_SYMBOLS:
            return False, f"Unsupported currency code: {config.currency_code}"

        if config.use_ai and not config.openai_api_key:
            return False, "OpenAI API key is required when AI analysis is enabled"

        return True, "Configuration is valid"

    def resolve_database_path(self, config: Config) -> Path:
        """Database file from config, defaulting to the app home."""
        if config.database_path:
            return Path(config.database_path)
        return self.config_dir / "spendlens.db"
