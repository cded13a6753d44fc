from typing import Any, Dict, Optional

from loguru import logger

from puck_savant.models.enums import SourceName, StarterStatus
from puck_savant.models.goalie import StarterProjection
from puck_savant.normalization.normalizer import normalize_team_code
from .base_client import BaseSourceClient, SourceParseError

StarterMap = Dict[str, StarterProjection]


class ScheduleClient(BaseSourceClient):
    """Fetches today's NHL schedule and the probable starting goalies on it."""

    source: SourceName = SourceName.STARTERS

    async def fetch(self) -> StarterMap:
        logger.info(f"Fetching starting goalies from {self.source.value} schedule")
        payload = await self._get_json(self.settings.nhl_schedule_url)
        starters = parse_starters(payload)
        logger.info(f"Found {len(starters)} probable starters")
        return starters


def parse_starters(payload: Any) -> StarterMap:
    """Builds a canonical team code -> starter map from the first schedule day."""
    if not isinstance(payload, dict):
        raise SourceParseError(
            f"Schedule payload must be an object, got {type(payload).__name__}"
        )
    game_week = payload.get("gameWeek") or []
    if not game_week or not isinstance(game_week[0], dict):
        return {}

    starters: StarterMap = {}
    for game in game_week[0].get("games") or []:
        if not isinstance(game, dict):
            continue
        for side in ("awayTeam", "homeTeam"):
            team = game.get(side) or {}
            name = _goalie_name(team.get("startingGoalie"))
            if not name:
                continue
            code = normalize_team_code(team.get("abbrev"))
            starters[code] = StarterProjection(
                team=code, name=name, status=StarterStatus.CONFIRMED
            )
    return starters


def _localized(value: Any) -> str:
    # NHL API names come as {"default": "Joseph", "cs": ...}
    if isinstance(value, dict):
        value = value.get("default")
    return str(value).strip() if value else ""


def _goalie_name(goalie: Optional[Dict[str, Any]]) -> str:
    if not isinstance(goalie, dict):
        return ""
    first = _localized(goalie.get("firstName"))
    last = _localized(goalie.get("lastName"))
    return f"{first} {last}".strip()
