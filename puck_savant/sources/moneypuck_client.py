import asyncio
import csv
from io import StringIO
from typing import List

from loguru import logger

from puck_savant.models.enums import SourceName
from puck_savant.models.season import SeasonStatsTable, StatsRow
from .base_client import BaseSourceClient, SourceParseError


class MoneyPuckClient(BaseSourceClient):
    """Fetches the season team and goalie exports from MoneyPuck."""

    source: SourceName = SourceName.SEASON_STATS

    async def fetch(self) -> SeasonStatsTable:
        """Fetch both CSV exports concurrently; either failing fails the refresh."""
        logger.info(
            f"Fetching {self.source.value} season {self.settings.moneypuck_season} team and goalie exports"
        )
        teams_resp, goalies_resp = await asyncio.gather(
            self._make_request("GET", self.settings.moneypuck_teams_url),
            self._make_request("GET", self.settings.moneypuck_goalies_url),
        )
        table = SeasonStatsTable(
            teams=parse_csv_rows(teams_resp.text),
            goalies=parse_csv_rows(goalies_resp.text),
        )
        logger.info(
            f"Parsed {len(table.teams)} team rows and {len(table.goalies)} goalie rows"
        )
        return table


def parse_csv_rows(text: str) -> List[StatsRow]:
    """Parses a CSV export with a header line into dict rows, skipping blank lines."""
    if not text or not text.strip():
        raise SourceParseError("Empty CSV export")
    reader = csv.DictReader(StringIO(text))
    if not reader.fieldnames:
        raise SourceParseError("CSV export has no header row")
    try:
        rows = [
            {key: (value or "") for key, value in row.items() if key is not None}
            for row in reader
            if any((value or "").strip() for value in row.values() if isinstance(value, str))
        ]
    except csv.Error as e:
        raise SourceParseError(f"Malformed CSV export: {e}") from e
    return rows
