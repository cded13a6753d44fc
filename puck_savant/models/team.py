from typing import Optional

from pydantic import BaseModel, Field

from .goalie import GoalieReport
from .market import MarketLine


class TeamReport(BaseModel):
    """Derived rate statistics for one team, recomputed on every request."""

    name: str  # Canonical team code

    # Offense
    gf_per_game: float = Field(..., description="Goals for per 60, all situations.")
    xgf_percent: float = Field(..., description="Expected goals share at 5on5.")

    # Defense
    ga_per_game: float = Field(..., description="Goals against per 60, all situations.")
    xga_per_60: float = Field(..., description="Expected goals against per 60 at 5on5.")

    # Special teams
    pp_percent: float
    pk_percent: float
    pims_per_game: float

    # Possession
    corsi_percent: float
    faceoff_percent: float

    # Shooting / quality
    shooting_percent: float
    hdcf_percent: float

    goalie: GoalieReport


class MatchupReport(BaseModel):
    """Response for a home/away team pair."""

    home: Optional[TeamReport] = None
    away: Optional[TeamReport] = None
    market: MarketLine
