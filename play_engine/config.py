"""
Engine configuration.

Formation-rule tolerances, auto-save timing and external service settings.
Every value can be overridden through environment variables (a local .env file
is loaded on first access). The rule thresholds are empirically tuned, not
official rulebook numbers, so they live here instead of in the validator.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


# ============================================================
# FIELD CONSTANTS
# ============================================================

FIELD_WIDTH = 700
FIELD_HEIGHT = 400
CENTER_X = 350
LINE_OF_SCRIMMAGE_Y = 200


# ============================================================
# RULE SETTINGS
# ============================================================

@dataclass
class RuleSettings:
    """Tolerances used by the formation validator."""

    # Pixels a player may sit past the LOS before being offsides
    neutral_zone_buffer: float = field(
        default_factory=lambda: _env_float("PLAY_ENGINE_NEUTRAL_ZONE_BUFFER", 5.0)
    )
    # Pixels from the LOS that still count as "on the line"
    los_tolerance: float = field(
        default_factory=lambda: _env_float("PLAY_ENGINE_LOS_TOLERANCE", 5.0)
    )
    min_on_line: int = field(default_factory=lambda: _env_int("PLAY_ENGINE_MIN_ON_LINE", 7))
    expected_linemen: int = field(
        default_factory=lambda: _env_int("PLAY_ENGINE_EXPECTED_LINEMEN", 5)
    )
    max_players: int = 11
    tackle_box_half_width: float = field(
        default_factory=lambda: _env_float("PLAY_ENGINE_TACKLE_BOX_HALF_WIDTH", 120.0)
    )
    max_split_ineligibles: int = field(
        default_factory=lambda: _env_int("PLAY_ENGINE_MAX_SPLIT_INELIGIBLES", 0)
    )
    min_defenders_in_box: int = field(
        default_factory=lambda: _env_int("PLAY_ENGINE_MIN_DEFENDERS_IN_BOX", 6)
    )
    box_depth: float = field(default_factory=lambda: _env_float("PLAY_ENGINE_BOX_DEPTH", 80.0))

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []
        if self.neutral_zone_buffer < 0:
            errors.append("PLAY_ENGINE_NEUTRAL_ZONE_BUFFER must be >= 0")
        if self.min_on_line < 1:
            errors.append("PLAY_ENGINE_MIN_ON_LINE must be >= 1")
        if self.min_defenders_in_box < 0:
            errors.append("PLAY_ENGINE_MIN_DEFENDERS_IN_BOX must be >= 0")
        return errors


# ============================================================
# ENGINE SETTINGS
# ============================================================

@dataclass
class EngineSettings:
    """Top-level settings for the engine and the services around it."""

    log_level: str = field(default_factory=lambda: os.getenv("PLAY_ENGINE_LOG_LEVEL", "INFO"))

    # Draft auto-save
    autosave_delay: float = field(
        default_factory=lambda: _env_float("PLAY_ENGINE_AUTOSAVE_DELAY", 2.0)
    )
    draft_dir: str = field(
        default_factory=lambda: os.getenv("PLAY_ENGINE_DRAFT_DIR", ".play_drafts")
    )

    # Interaction
    history_limit: int = field(default_factory=lambda: _env_int("PLAY_ENGINE_HISTORY_LIMIT", 50))
    click_threshold: float = 5.0

    # External services
    supabase_url: Optional[str] = field(default_factory=lambda: os.getenv("SUPABASE_URL"))
    supabase_key: Optional[str] = field(default_factory=lambda: os.getenv("SUPABASE_KEY"))
    anthropic_model: str = field(
        default_factory=lambda: os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514")
    )
    cors_origins: List[str] = field(
        default_factory=lambda: [
            origin.strip()
            for origin in os.getenv(
                "CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"
            ).split(",")
            if origin.strip()
        ]
    )

    rules: RuleSettings = field(default_factory=RuleSettings)

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Create settings from environment variables."""
        return cls()

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


# Singleton settings instance
_settings: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """Get the global engine settings."""
    global _settings
    if _settings is None:
        load_dotenv()
        _settings = EngineSettings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None
