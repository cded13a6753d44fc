from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from .market import GameOdds


class GameTeam(BaseModel):
    """One side of a scheduled game, keyed by its canonical team code."""

    name: str  # Display name as delivered by the feed
    code: str  # Canonical 3-letter code
    score: Optional[int] = None
    record: str = "N/A"  # Series summary when the feed carries one


class ScheduledGame(BaseModel):
    """Represents a single scheduled or live game from the scoreboard feed."""

    game_id: str
    start_time_utc: Optional[datetime] = None
    status: str = ""  # e.g. "7:00 PM - 10/19" or "Final"
    period: Optional[int] = None
    clock: Optional[str] = None
    home_team: GameTeam
    away_team: GameTeam
    odds: Optional[GameOdds] = None
    last_updated_utc: datetime = Field(default_factory=datetime.utcnow)

    @computed_field  # type: ignore[misc]
    @property
    def description(self) -> str:
        """A human-readable description of the game."""
        return f"{self.away_team.code} @ {self.home_team.code} ({self.status})"

    def involves(self, code_a: str, code_b: str) -> bool:
        """True if the game is between the two teams, in either orientation."""
        return {self.home_team.code, self.away_team.code} == {code_a, code_b}
