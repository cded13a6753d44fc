import json

import httpx
import pytest

from conftest import scoreboard_event
from puck_savant.config.settings import AppSettings
from puck_savant.models.enums import StarterStatus
from puck_savant.sources.base_client import (
    RateLimitError,
    SourceParseError,
    SourceUnavailableError,
)
from puck_savant.sources.moneypuck_client import MoneyPuckClient, parse_csv_rows
from puck_savant.sources.schedule_client import ScheduleClient, parse_starters
from puck_savant.sources.scoreboard_client import ScoreboardClient, parse_scoreboard

TEAMS_CSV = (
    "team,name,situation,iceTime,xGoalsAgainst\n"
    "T.B,T.B,5on5,1200,10\n"
    "\n"
    "T.B,T.B,all,7200,\n"
)
GOALIES_CSV = "playerId,name,team,situation,gamesPlayed,iceTime\n1,Jake Oettinger,DAL,all,10,36000\n"

SCHEDULE_PAYLOAD = {
    "gameWeek": [
        {
            "date": "2024-10-19",
            "games": [
                {
                    "awayTeam": {
                        "abbrev": "DAL",
                        "startingGoalie": {"firstName": {"default": "Jake"}, "lastName": {"default": "Oettinger"}},
                    },
                    "homeTeam": {"abbrev": "TB"},
                }
            ],
        },
        {"date": "2024-10-20", "games": []},
    ]
}


def _settings():
    return AppSettings(
        moneypuck_base_url="https://mp.test/summary",
        moneypuck_season=2024,
        espn_scoreboard_url="https://espn.test/scoreboard",
        nhl_schedule_url="https://nhl.test/schedule/now",
    )


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_parse_csv_rows_skips_blank_lines():
    rows = parse_csv_rows(TEAMS_CSV)
    assert len(rows) == 2
    assert rows[0]["xGoalsAgainst"] == "10"
    assert rows[1]["xGoalsAgainst"] == ""


def test_parse_csv_rows_rejects_empty_export():
    with pytest.raises(SourceParseError):
        parse_csv_rows("  \n")


def test_parse_starters_maps_confirmed_goalies_by_canonical_code():
    starters = parse_starters(SCHEDULE_PAYLOAD)
    assert list(starters) == ["DAL"]
    assert starters["DAL"].name == "Jake Oettinger"
    assert starters["DAL"].status == StarterStatus.CONFIRMED


def test_parse_starters_handles_empty_schedule():
    assert parse_starters({"gameWeek": []}) == {}
    with pytest.raises(SourceParseError):
        parse_starters(["not", "an", "object"])


def test_parse_scoreboard_normalizes_codes_and_scores():
    payload = {"events": [scoreboard_event("401", "SJ", "NJ", home_score="3", away_score="2")]}
    (game,) = parse_scoreboard(payload)

    assert game.game_id == "401"
    assert game.home_team.code == "SJS"
    assert game.away_team.code == "NJD"
    assert (game.home_team.score, game.away_team.score) == (3, 2)
    assert game.status == "10/19 - 7:00 PM EDT"
    assert game.start_time_utc.year == 2024
    assert game.odds is None


def test_parse_scoreboard_skips_malformed_events():
    payload = {"events": [{"id": "bad"}, "junk", scoreboard_event("2", "TOR", "BOS")]}
    games = parse_scoreboard(payload)
    assert [g.game_id for g in games] == ["2"]


def test_parse_scoreboard_skips_events_with_wrong_field_types():
    text_status = scoreboard_event("2", "TOR", "BOS")
    text_status["status"] = "STATUS_SCHEDULED"
    numeric_clock = scoreboard_event("3", "MTL", "OTT")
    numeric_clock["status"]["displayClock"] = 0
    text_team = scoreboard_event("4", "DAL", "CBJ")
    text_team["competitions"][0]["competitors"][0]["team"] = "DAL"
    bad_date = scoreboard_event("5", "SEA", "VAN")
    bad_date["date"] = 20241019

    payload = {"events": [scoreboard_event("1", "TB", "NJ"), text_status,
                          numeric_clock, text_team, bad_date]}
    games = parse_scoreboard(payload)

    assert [g.game_id for g in games] == ["1", "2", "4"]
    assert games[1].status == ""
    assert games[2].home_team.code == "UNK"


@pytest.mark.asyncio
async def test_moneypuck_client_fetches_both_exports():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        body = TEAMS_CSV if request.url.path.endswith("teams.csv") else GOALIES_CSV
        return httpx.Response(200, text=body)

    async with _client(handler) as http:
        table = await MoneyPuckClient(http, _settings()).fetch()

    assert sorted(seen) == [
        "https://mp.test/summary/2024/regular/goalies.csv",
        "https://mp.test/summary/2024/regular/teams.csv",
    ]
    assert len(table.teams) == 2
    assert table.goalie_rows("DAL")[0]["name"] == "Jake Oettinger"


@pytest.mark.asyncio
async def test_moneypuck_client_fails_whole_refresh_if_one_export_fails():
    def handler(request):
        if request.url.path.endswith("goalies.csv"):
            return httpx.Response(503)
        return httpx.Response(200, text=TEAMS_CSV)

    async with _client(handler) as http:
        with pytest.raises(SourceUnavailableError):
            await MoneyPuckClient(http, _settings()).fetch()


@pytest.mark.asyncio
async def test_scoreboard_client_passes_date():
    def handler(request):
        assert request.url.params["dates"] == "20241019"
        return httpx.Response(200, json={"events": [scoreboard_event("1", "TOR", "BOS")]})

    async with _client(handler) as http:
        games = await ScoreboardClient(http, _settings()).fetch("20241019")

    assert len(games) == 1


@pytest.mark.asyncio
async def test_schedule_client_parses_starters():
    def handler(request):
        return httpx.Response(200, content=json.dumps(SCHEDULE_PAYLOAD))

    async with _client(handler) as http:
        starters = await ScheduleClient(http, _settings()).fetch()

    assert "DAL" in starters


@pytest.mark.asyncio
async def test_rate_limit_and_bad_json_map_to_source_errors():
    async with _client(lambda request: httpx.Response(429)) as http:
        with pytest.raises(RateLimitError):
            await ScheduleClient(http, _settings()).fetch()

    async with _client(lambda request: httpx.Response(200, text="<html>")) as http:
        with pytest.raises(SourceParseError):
            await ScheduleClient(http, _settings()).fetch()


@pytest.mark.asyncio
async def test_network_errors_map_to_source_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as http:
        with pytest.raises(SourceUnavailableError):
            await ScoreboardClient(http, _settings()).fetch()
