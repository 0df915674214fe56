"""Application settings loader from YAML configuration."""
import os
import yaml
from pathlib import Path
from dataclasses import dataclass

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "defaults.yaml"


@dataclass
class AppSettings:
    """Application-wide settings loaded from YAML."""

    # App info
    app_name: str
    app_version: str

    # Logging
    log_level: str
    log_max_file_size_mb: int
    log_backup_count: int

    # LLM
    llm_api_url: str
    llm_model_name: str
    llm_temperature: float
    llm_max_tokens: int
    llm_timeout_seconds: float

    # Analysis
    auto_window_days: int
    top_category_limit: int

    @classmethod
    def load(cls, config_path: Path = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            override = os.getenv("SPENDLENS_SETTINGS")
            config_path = Path(override) if override else DEFAULT_SETTINGS_PATH

        if not config_path.exists():
            raise FileNotFoundError(f"Settings file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        return cls(
            app_name=config["app"]["name"],
            app_version=str(config["app"]["version"]),
            log_level=config["logging"]["level"],
            log_max_file_size_mb=config["logging"]["max_file_size_mb"],
            log_backup_count=config["logging"]["backup_count"],
            llm_api_url=config["llm"]["api_url"],
            llm_model_name=config["llm"]["model_name"],
            llm_temperature=float(config["llm"]["temperature"]),
            llm_max_tokens=config["llm"]["max_tokens"],
            llm_timeout_seconds=float(config["llm"]["timeout_seconds"]),
            auto_window_days=config["analysis"]["auto_window_days"],
            top_category_limit=config["analysis"]["top_category_limit"]
        )


# Global settings instance
_settings: AppSettings = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings
