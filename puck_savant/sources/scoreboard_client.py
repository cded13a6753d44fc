from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from puck_savant.models.enums import SourceName
from puck_savant.models.game import GameTeam, ScheduledGame
from puck_savant.models.market import GameOdds
from puck_savant.normalization.fields import find_numeric
from puck_savant.normalization.normalizer import normalize_team_code
from .base_client import BaseSourceClient, SourceParseError


class ScoreboardClient(BaseSourceClient):
    """Fetches scheduled/live games and embedded odds from the ESPN scoreboard."""

    source: SourceName = SourceName.LIVE_ODDS

    async def fetch(self, date: Optional[str] = None) -> List[ScheduledGame]:
        """Fetch games for ``date`` (YYYYMMDD), or today's slate when omitted."""
        params = {"dates": date} if date else None
        logger.info(f"Fetching scoreboard from {self.source.value} (date={date or 'today'})")
        payload = await self._get_json(self.settings.espn_scoreboard_url, params=params)
        games = parse_scoreboard(payload)
        logger.info(f"Parsed {len(games)} games from {self.source.value} scoreboard")
        return games


def parse_scoreboard(payload: Any) -> List[ScheduledGame]:
    """Maps the raw scoreboard payload into ScheduledGame objects.

    Events that cannot be understood are skipped with a warning.
    """
    if not isinstance(payload, dict):
        raise SourceParseError(
            f"Scoreboard payload must be an object, got {type(payload).__name__}"
        )
    events = payload.get("events") or []
    if not isinstance(events, list):
        raise SourceParseError("Scoreboard 'events' field is not a list")

    games: List[ScheduledGame] = []
    for raw_event in events:
        if not isinstance(raw_event, dict):
            logger.warning(f"Skipping non-dictionary scoreboard event: {type(raw_event)}")
            continue
        try:
            game = _parse_event(raw_event)
        except (AttributeError, TypeError, ValueError, ValidationError) as e:
            logger.warning(
                f"Skipping scoreboard event {raw_event.get('id', 'UNKNOWN_ID')}: {e}"
            )
            continue
        if game is not None:
            games.append(game)
    return games


def _parse_event(raw_event: Dict[str, Any]) -> Optional[ScheduledGame]:
    event_id = str(raw_event.get("id", "UNKNOWN_ID"))
    competitions = raw_event.get("competitions") or []
    if not competitions or not isinstance(competitions[0], dict):
        logger.warning(f"Skipping event {event_id}: no competition data")
        return None
    competition = competitions[0]

    competitors = [c for c in competition.get("competitors") or [] if isinstance(c, dict)]
    if len(competitors) < 2:
        logger.warning(f"Skipping event {event_id}: expected two competitors")
        return None

    home = next((c for c in competitors if c.get("homeAway") == "home"), None)
    away = next((c for c in competitors if c.get("homeAway") == "away"), None)
    if home is None or away is None or home is away:
        logger.debug(f"Event {event_id} has no home/away flags, using feed order")
        home, away = competitors[0], competitors[1]

    series = competition.get("series") or {}
    record = series.get("summary") if isinstance(series, dict) else None

    status = _as_dict(raw_event.get("status"))
    status_type = _as_dict(status.get("type"))

    odds_list = competition.get("odds") or []
    odds = _parse_odds(odds_list[0]) if odds_list and isinstance(odds_list[0], dict) else None

    period = find_numeric(status, ["period"])
    return ScheduledGame(
        game_id=event_id,
        start_time_utc=_parse_datetime(raw_event.get("date")),
        status=status_type.get("shortDetail") or status_type.get("description") or "",
        period=int(period) if period is not None else None,
        clock=status.get("displayClock"),
        home_team=_parse_team(home, record),
        away_team=_parse_team(away, record),
        odds=odds,
    )


def _parse_team(competitor: Dict[str, Any], record: Optional[str]) -> GameTeam:
    team = _as_dict(competitor.get("team"))
    abbreviation = team.get("abbreviation") or team.get("displayName")
    score = find_numeric(competitor, ["score"])
    return GameTeam(
        name=team.get("displayName") or abbreviation or "Unknown",
        code=normalize_team_code(abbreviation),
        score=int(score) if score is not None else None,
        record=record or "N/A",
    )


def _parse_odds(raw_odds: Dict[str, Any]) -> GameOdds:
    provider = raw_odds.get("provider") or {}
    return GameOdds(
        details=raw_odds.get("details"),
        over_under=find_numeric(raw_odds, ["overUnder"]),
        provider=provider.get("name") if isinstance(provider, dict) else None,
    )


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Could not parse scoreboard date: {value}")
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
