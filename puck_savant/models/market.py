from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import SourceName

DEFAULT_TOTAL = 6.5
NOT_FOUND_SOURCE = "Not Found"
LINE_OFF = "OFF"
NO_FAVORITE = "N/A"


class GameOdds(BaseModel):
    """Odds object embedded in a scoreboard event (first provider only)."""

    model_config = ConfigDict(frozen=True)

    details: Optional[str] = None  # Spread description, e.g. "TOR -1.5"
    over_under: Optional[float] = None
    provider: Optional[str] = None


class MarketLine(BaseModel):
    """Market line for one scheduled game, rebuilt on every request."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Label of the feed the line came from.")
    line: str = Field(LINE_OFF, description="Spread text, 'OFF' when unavailable.")
    total: float = Field(DEFAULT_TOTAL, description="Over/under number.")
    favorite: str = Field(
        NO_FAVORITE, description="Leading token of the spread text (the favourite)."
    )
    found: bool = True

    @classmethod
    def not_found(cls) -> "MarketLine":
        """Sentinel returned when no game or no odds matched."""
        return cls(
            source=NOT_FOUND_SOURCE,
            line=LINE_OFF,
            total=DEFAULT_TOTAL,
            favorite=NO_FAVORITE,
            found=False,
        )

    @classmethod
    def from_odds(cls, odds: GameOdds) -> "MarketLine":
        details = (odds.details or "").strip()
        return cls(
            source=SourceName.LIVE_ODDS.value,
            line=details or "N/A",
            total=odds.over_under if odds.over_under else DEFAULT_TOTAL,
            favorite=details.split(" ")[0] if details else NO_FAVORITE,
        )
