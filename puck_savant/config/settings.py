import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Upstream Sources
    moneypuck_season: int = Field(
        2024, description="Season year used in the MoneyPuck export paths."
    )
    moneypuck_base_url: str = Field(
        "https://moneypuck.com/moneypuck/playerData/seasonSummary",
        description="Base URL of the MoneyPuck season summary exports.",
    )
    espn_scoreboard_url: str = Field(
        "https://site.api.espn.com/apis/site/v2/sports/hockey/nhl/scoreboard",
        description="ESPN scoreboard endpoint (live games and odds).",
    )
    nhl_schedule_url: str = Field(
        "https://api-web.nhle.com/v1/schedule/now",
        description="NHL schedule endpoint carrying probable starting goalies.",
    )

    # Cache Freshness
    stats_ttl_seconds: float = Field(
        60 * 60, gt=0, description="Time-to-live of the season statistics cache."
    )
    odds_ttl_seconds: float = Field(
        60 * 5, gt=0, description="Time-to-live of the live odds/schedule cache."
    )
    starter_ttl_seconds: float = Field(
        60 * 15, gt=0, description="Time-to-live of the starting goalie cache."
    )

    # HTTP Client
    http_timeout_seconds: float = Field(
        30.0, gt=0, description="Timeout applied to every upstream request."
    )
    user_agent: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        description="User-Agent header sent upstream.",
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def moneypuck_teams_url(self) -> str:
        return f"{self.moneypuck_base_url}/{self.moneypuck_season}/regular/teams.csv"

    @property
    def moneypuck_goalies_url(self) -> str:
        return f"{self.moneypuck_base_url}/{self.moneypuck_season}/regular/goalies.csv"


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
