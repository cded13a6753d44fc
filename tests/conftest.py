"""
Shared fixtures for puck-savant tests. Nothing here touches the network.
"""

import pytest

from puck_savant.models.season import SeasonStatsTable


class FakeClock:
    """Manually advanced clock injected into source caches."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def team_row(team, situation, **stats):
    row = {"team": team, "situation": situation, "name": team}
    row.update({key: str(value) for key, value in stats.items()})
    return row


def goalie_row(name, team, **stats):
    row = {"name": name, "team": team, "situation": "all"}
    row.update({key: str(value) for key, value in stats.items()})
    return row


def scoreboard_event(event_id, home, away, odds=None, home_score="0", away_score="0"):
    competition = {
        "competitors": [
            {"homeAway": "home", "score": home_score,
             "team": {"abbreviation": home, "displayName": f"{home} Team"}},
            {"homeAway": "away", "score": away_score,
             "team": {"abbreviation": away, "displayName": f"{away} Team"}},
        ],
    }
    if odds is not None:
        competition["odds"] = [odds]
    return {
        "id": event_id,
        "date": "2024-10-19T23:00Z",
        "status": {"period": 0, "displayClock": "0:00",
                   "type": {"shortDetail": "10/19 - 7:00 PM EDT"}},
        "competitions": [competition],
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def season_table():
    return SeasonStatsTable(
        teams=[
            team_row("T.B", "5on5", iceTime=1200, xGoalsAgainst=10, xGoalsPercentage=0.55,
                     corsiPercentage=0.52, shootingPercentage=0.09,
                     highDangerGoalsFor=6, highDangerGoalsAgainst=2),
            team_row("T.B", "all", iceTime=7200, goalsFor=8, goalsAgainst=6,
                     ppGoalsFor=3, penaltiesDrawn=12, ppGoalsAgainst=2, penaltiesTaken=10,
                     penaltiesMinutes=16, faceOffWinPercentage=0.51),
            team_row("CBJ", "5on5", iceTime=3600, xGoalsAgainst=3),
            team_row("CBJ", "all", iceTime=3600, goalsFor=2, goalsAgainst=4),
            team_row("DAL", "5on5", iceTime=3600, xGoalsAgainst=2),
            team_row("DAL", "all", iceTime=3600, goalsFor=3, goalsAgainst=1),
        ],
        goalies=[
            goalie_row("Andrei Vasilevskiy", "T.B", gamesPlayed=20, iceTime=72000,
                       goalsAgainst=40, goalsSavedAboveExpected=10, savePercentage=0.915),
            goalie_row("Jonas Johansson", "T.B", gamesPlayed=5, iceTime=18000,
                       goalsAgainst=15, goalsSavedAboveExpected=-2, savePercentage=0.890),
            goalie_row("Sergei Bobrovsky", "CBJ", gamesPlayed=2, iceTime=7200,
                       goalsAgainst=4, goalsSavedAboveExpected=2, savePercentage=0.920),
            goalie_row("Elvis Merzlikins", "CBJ", gamesPlayed=12, iceTime=43200,
                       goalsAgainst=36, goalsSavedAboveExpected=-3, savePercentage=0.895),
            goalie_row("Jake Oettinger", "DAL", gamesPlayed=10, iceTime=36000,
                       goalsAgainst=20, goalsSavedAboveExpected=4, savePercentage=0.925),
            goalie_row("Casey DeSmith", "DAL", gamesPlayed=3, iceTime=10800,
                       goalsAgainst=9, goalsSavedAboveExpected=0, savePercentage=0.900),
        ],
    )
