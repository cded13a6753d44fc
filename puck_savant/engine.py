import time
from typing import Awaitable, Callable, List, Optional

import httpx
from loguru import logger

from puck_savant.cache.source_cache import Clock, SourceCacheManager
from puck_savant.calculation.goalies import goalie_season_reports, resolve_goalie
from puck_savant.calculation.market_matcher import find_market
from puck_savant.calculation.stat_derivation import derive_team_stats
from puck_savant.config.settings import AppSettings, settings as default_settings
from puck_savant.models.enums import Situation
from puck_savant.models.game import ScheduledGame
from puck_savant.models.goalie import GoalieSeasonReport
from puck_savant.models.season import SeasonStatsTable
from puck_savant.models.team import MatchupReport, TeamReport
from puck_savant.normalization.normalizer import is_known_team, normalize_team_code
from puck_savant.sources.base_client import SourceError, build_http_client
from puck_savant.sources.moneypuck_client import MoneyPuckClient
from puck_savant.sources.schedule_client import ScheduleClient, StarterMap
from puck_savant.sources.scoreboard_client import ScoreboardClient

DateFetchFn = Callable[[str], Awaitable[List[ScheduledGame]]]


class MissingParameterError(ValueError):
    """Raised when a request lacks a required parameter."""

    pass


class StatsEngine:
    """Answers matchup, schedule and goalie queries from the source caches."""

    def __init__(
        self,
        caches: SourceCacheManager,
        fetch_games_for_date: Optional[DateFetchFn] = None,
    ):
        self.caches = caches
        self._fetch_games_for_date = fetch_games_for_date

    async def matchup(
        self,
        home: Optional[str],
        away: Optional[str],
        home_goalie: Optional[str] = None,
        away_goalie: Optional[str] = None,
    ) -> MatchupReport:
        if not home or not home.strip() or not away or not away.strip():
            raise MissingParameterError("Both 'home' and 'away' teams are required")

        target_home = normalize_team_code(home)
        target_away = normalize_team_code(away)
        for raw in (home, away):
            if not is_known_team(raw):
                logger.warning(
                    f"Unknown team '{raw}', using fallback code {normalize_team_code(raw)}"
                )

        stats_snap, odds_snap, starter_snap = await self.caches.refresh_all()
        table: Optional[SeasonStatsTable] = stats_snap.payload if stats_snap else None
        games: List[ScheduledGame] = odds_snap.payload if odds_snap else []
        starters: StarterMap = starter_snap.payload if starter_snap else {}

        if table is None:
            logger.warning("Season statistics unavailable; team reports omitted")

        return MatchupReport(
            home=self._team_report(table, target_home, starters, home_goalie),
            away=self._team_report(table, target_away, starters, away_goalie),
            market=find_market(games, target_home, target_away),
        )

    def _team_report(
        self,
        table: Optional[SeasonStatsTable],
        team_code: str,
        starters: StarterMap,
        requested_goalie: Optional[str],
    ) -> Optional[TeamReport]:
        if table is None:
            return None
        five_on_five = table.team_row(team_code, Situation.FIVE_ON_FIVE)
        if five_on_five is None:
            logger.warning(f"No {Situation.FIVE_ON_FIVE.value} row for {team_code}")
            return None
        all_situations = table.team_row(team_code, Situation.ALL)
        goalie = resolve_goalie(
            team_code, table.goalie_rows(team_code), starters, requested_goalie
        )
        return derive_team_stats(team_code, five_on_five, all_situations, goalie)

    async def schedule(self, date: Optional[str] = None) -> List[ScheduledGame]:
        """Games for ``date`` (YYYYMMDD), or today's cached slate."""
        if not date:
            snapshot = await self.caches.live_odds.get_or_refresh()
            return list(snapshot.payload) if snapshot else []

        if self._fetch_games_for_date is None:
            logger.warning(f"No scoreboard fetcher configured for date {date}")
            return []
        try:
            return await self._fetch_games_for_date(date)
        except SourceError as e:
            logger.warning(f"Scoreboard for {date} unavailable: {e}")
            return []

    async def goalies(
        self, team: Optional[str] = None, name: Optional[str] = None
    ) -> List[GoalieSeasonReport]:
        snapshot = await self.caches.season_stats.get_or_refresh()
        if snapshot is None:
            logger.warning("Season statistics unavailable; no goalie reports")
            return []
        return goalie_season_reports(snapshot.payload.goalie_rows(), team=team, name=name)


class EngineResources:
    """The engine plus the HTTP client it owns, closed together."""

    def __init__(self, engine: StatsEngine, client: httpx.AsyncClient):
        self.engine = engine
        self.client = client

    async def close(self) -> None:
        await self.client.aclose()
        logger.info("Closed shared HTTP client")


def build_engine(
    app_settings: Optional[AppSettings] = None,
    client: Optional[httpx.AsyncClient] = None,
    clock: Clock = time.monotonic,
) -> EngineResources:
    """Wires the real source clients into one engine for the process."""
    app_settings = app_settings or default_settings
    client = client or build_http_client(app_settings)

    moneypuck = MoneyPuckClient(client, app_settings)
    scoreboard = ScoreboardClient(client, app_settings)
    schedule = ScheduleClient(client, app_settings)

    caches = SourceCacheManager.from_fetchers(
        app_settings,
        fetch_season_stats=moneypuck.fetch,
        fetch_live_odds=scoreboard.fetch,
        fetch_starters=schedule.fetch,
        clock=clock,
    )
    engine = StatsEngine(caches, fetch_games_for_date=scoreboard.fetch)
    return EngineResources(engine, client)
