from dataclasses import dataclass
from pathlib import Path
import json
import os
from typing import Dict, Any, List, Optional

# Package defaults (bundled with code)
PACKAGE_CONFIG_DIR = Path(__file__).parent / "defaults"

# User configs (in project root, gitignored)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
USER_CONFIG_DIR = PROJECT_ROOT / "config"

LOG_LEVEL_ENV = "CASHBOOK_LOG_LEVEL"

@dataclass(frozen=True)
class Settings:
    """Application settings"""
    database_path: str = "data/cashbook.db"
    currency: str = "THB"
    currency_symbol: str = "฿"
    subunits_per_unit: int = 100
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Build settings from a config dict, ignoring unknown keys"""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        settings = cls(**known)
        if settings.subunits_per_unit < 1:
            raise ValueError("subunits_per_unit must be at least 1")
        return settings

class ConfigLoader:
    """Load configuration with user overrides"""

    @staticmethod
    def load_config(config_name: str) -> Dict[str, Any]:
        """
        Load config with fallback: user config -> default config

        Args:
            config_name: Name of the config file (e.g., 'settings.json')

        Raises:
            FileNotFoundError: If no config file was found

        Returns:
            Parsed JSON configuration
        """
        user_config_path = USER_CONFIG_DIR / config_name
        if user_config_path.exists():
            with open(user_config_path, encoding="utf-8") as f:
                return json.load(f)

        default_config_path = PACKAGE_CONFIG_DIR / config_name
        if default_config_path.exists():
            with open(default_config_path, encoding="utf-8") as f:
                return json.load(f)

        raise FileNotFoundError(
            f"Config file '{config_name}' not found in:\n"
            f" - {user_config_path}\n"
            f" - {default_config_path}"
        )

    @staticmethod
    def load_settings(config: Optional[Dict[str, Any]] = None) -> Settings:
        """
        Load application settings.

        The log level can be overridden with the CASHBOOK_LOG_LEVEL
        environment variable.

        Args:
            config: Optional config dict. If None, loads 'settings.json'.
        """
        if config is None:
            config = ConfigLoader.load_config('settings.json')

        data = dict(config)
        env_level = os.getenv(LOG_LEVEL_ENV)
        if env_level:
            data["log_level"] = env_level
        return Settings.from_dict(data)

    @staticmethod
    def load_categories() -> List[Dict[str, str]]:
        """Load seed categories"""
        return ConfigLoader.load_config('categories.json')['categories']
