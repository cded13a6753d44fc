from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import StarterStatus

AVERAGE_GOALIE_NAME = "Average Goalie"
AVERAGE_SAVE_PERCENT = 0.900


class StarterProjection(BaseModel):
    """Probable starting goalie for one team, from the schedule feed."""

    model_config = ConfigDict(frozen=True)

    team: str
    name: str
    status: StarterStatus = StarterStatus.CONFIRMED


class GoalieReport(BaseModel):
    """Goaltender attached to a team report."""

    name: str
    gsax: float = Field(0.0, description="Goals saved above expected per 60.")
    gaa: float = Field(0.0, description="Goals against per 60.")
    sv_pct: float = AVERAGE_SAVE_PERCENT
    games_played: float = 0.0
    # None when the caller asked for this goalie by name, or for the placeholder
    status: Optional[StarterStatus] = None
    is_placeholder: bool = False

    @classmethod
    def average(cls) -> "GoalieReport":
        """Well-shaped placeholder used when a team has no goalie rows."""
        return cls(
            name=AVERAGE_GOALIE_NAME,
            gsax=0.0,
            gaa=0.0,
            sv_pct=AVERAGE_SAVE_PERCENT,
            is_placeholder=True,
        )


class GoalieSeasonReport(BaseModel):
    """Season summary row of the goalie leaderboard."""

    name: str
    team: str
    games_played: float
    gaa: float
    sv_pct: float
    gsax_per_60: float
    total_gsax: float
