"""
config.py - Load presentation and pipeline settings from YAML.

Settings live in config/settings.yaml next to the package. Every key is
optional; anything left out falls back to the defaults on ``Settings``.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from finreport.errors import SettingsError

logger = logging.getLogger(__name__)

SETTINGS_FILE = Path(__file__).parent.parent / "config" / "settings.yaml"

_DEFAULT_COLORS = [
    "#667eea", "#38ef7d", "#ff6a00", "#ee0979", "#11998e",
    "#764ba2", "#f093fb", "#4facfe", "#43e97b", "#fa709a",
    "#fee140", "#30cfd0", "#a8edea", "#fed6e3", "#c471ed",
    "#12c2e9", "#f64f59", "#f5af19", "#fbc2eb", "#a6c1ee",
]


class Settings(BaseModel):
    currency_symbol: str = "₹"
    date_format: str = "%d/%m/%Y"

    top_n: int = Field(5, ge=0)
    recent_limit: int = Field(10, ge=0)
    chat_history_limit: int = Field(10, ge=0)
    duplicate_window_seconds: int = Field(30, ge=0)

    default_categories: list[str] = Field(
        default_factory=lambda: ["Food", "Travel", "Entertainment", "Other"]
    )
    description_placeholder: str = "No description"
    uncategorized_label: str = "Uncategorized"
    assistant_name: str = "a helpful financial assistant"

    income_color: str = "#38ef7d"
    expense_color: str = "#ff6a00"
    no_data_color: str = "#e0e0e0"
    chart_colors: list[str] = Field(default_factory=lambda: list(_DEFAULT_COLORS), min_length=1)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from a YAML file.

    Args:
        path: Path to a settings YAML. When omitted, config/settings.yaml is
              used if present, otherwise the built-in defaults.

    Returns:
        Validated Settings.

    Raises:
        FileNotFoundError: If an explicit ``path`` does not exist.
        SettingsError: If the file is not valid YAML or fails validation.
    """
    if path is None:
        if not SETTINGS_FILE.exists():
            logger.debug("No settings file at %s, using defaults", SETTINGS_FILE)
            return Settings()
        path = SETTINGS_FILE

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise SettingsError(f"Could not parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise SettingsError(f"Expected a mapping at the top of {path}, got {type(data).__name__}")

    try:
        return Settings(**data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {path}: {e}") from e
