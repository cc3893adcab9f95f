"""
Centralized settings for the margin tool.

Values come from dataclass defaults, overridden by environment variables.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


_BOOLEAN_TRUE = {'1', 'true', 'yes', 'on'}


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _BOOLEAN_TRUE


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    project_root: Path

    # Labour day view multiplies hourly currency values by this
    hours_per_day: float = 8.0

    # Purchases are priced per one unit of cost
    purchase_cost: float = 1.0

    # Display precision
    percent_decimals: int = 1
    currency_decimals: int = 2

    # Logging
    log_level: str = 'INFO'
    json_logs: bool = False

    # API server
    api_host: str = '0.0.0.0'
    api_port: int = 8000

    # Streamlit server
    app_port: int = 8501
    app_headless: bool = False

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the environment."""
        root = project_root or get_project_root()

        settings = cls(
            project_root=root,
            hours_per_day=_env_float('MARGIN_TOOL_HOURS_PER_DAY', 8.0),
            purchase_cost=_env_float('MARGIN_TOOL_PURCHASE_COST', 1.0),
            percent_decimals=_env_int('MARGIN_TOOL_PERCENT_DECIMALS', 1),
            currency_decimals=_env_int('MARGIN_TOOL_CURRENCY_DECIMALS', 2),
            log_level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
            json_logs=_env_bool('MARGIN_TOOL_JSON_LOGS', False),
            api_host=os.environ.get('MARGIN_TOOL_API_HOST', '0.0.0.0'),
            api_port=_env_int('MARGIN_TOOL_API_PORT', 8000),
            app_port=_env_int('MARGIN_TOOL_APP_PORT', 8501),
            app_headless=_env_bool('MARGIN_TOOL_APP_HEADLESS', False),
        )

        if settings.hours_per_day <= 0:
            raise ValueError("MARGIN_TOOL_HOURS_PER_DAY must be positive")
        if settings.purchase_cost <= 0:
            raise ValueError("MARGIN_TOOL_PURCHASE_COST must be positive")
        return settings


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
