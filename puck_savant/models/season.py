from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from puck_savant.normalization.normalizer import normalize_team_code
from .enums import Situation

StatsRow = Dict[str, str]


class SeasonStatsTable(BaseModel):
    """Team and goalie rows produced together by one season export refresh."""

    model_config = ConfigDict(frozen=True)

    teams: List[StatsRow] = []
    goalies: List[StatsRow] = []

    def team_row(self, team_code: str, situation: Situation) -> Optional[StatsRow]:
        """Row for the team under one situation filter, or None if absent."""
        for row in self.teams:
            if (
                row.get("situation") == situation.value
                and normalize_team_code(row.get("team")) == team_code
            ):
                return row
        return None

    def goalie_rows(self, team_code: Optional[str] = None) -> List[StatsRow]:
        """Season-aggregate goalie rows, optionally restricted to one team."""
        rows = [
            row
            for row in self.goalies
            if row.get("situation", Situation.ALL.value) == Situation.ALL.value
        ]
        if team_code is None:
            return rows
        return [row for row in rows if normalize_team_code(row.get("team")) == team_code]
