import math

import pytest

from conftest import team_row
from puck_savant.calculation.stat_derivation import (
    LEAGUE_AVERAGE_PIMS_PER_GAME,
    derive_team_stats,
    high_danger_share,
    penalty_kill_percent,
    penalty_minutes_per_game,
    per_60,
    percent,
    power_play_percent,
    special_teams_percent,
)
from puck_savant.models.goalie import GoalieReport


def test_per_60_scales_by_ice_time():
    assert per_60(10, 1200) == 30
    assert per_60(2, 3600) == 2


def test_per_60_guards_missing_ice_time():
    assert per_60(5, 0) == 5 * 3600
    assert per_60(5, None) == 5 * 3600
    assert per_60(None, None) == 0


def test_percent():
    assert percent(0.5) == 50
    assert percent(None) == 0


def test_high_danger_share_is_neutral_without_chances():
    assert high_danger_share(0, 0) == 50
    assert high_danger_share(None, None) == 50


@pytest.mark.parametrize("hd_for, hd_against", [(6, 2), (1, 0), (0, 4), (3, 7)])
def test_high_danger_share_formula(hd_for, hd_against):
    assert high_danger_share(hd_for, hd_against) == hd_for / (hd_for + hd_against) * 100


def test_special_teams_zero_opportunities_yields_zero():
    assert special_teams_percent(3, 0) == 0
    assert special_teams_percent(3, None) == 0
    assert special_teams_percent(3, 12) == 25


def test_power_play_and_penalty_kill_use_penalty_proxies():
    row = {"ppGoalsFor": "3", "penaltiesDrawn": "12", "ppGoalsAgainst": "2", "penaltiesTaken": "10"}
    assert power_play_percent(row) == 25
    assert penalty_kill_percent(row) == 80


def test_penalty_kill_without_penalties_taken_stays_finite():
    assert penalty_kill_percent({"ppGoalsAgainst": "2"}) == 100
    assert power_play_percent({}) == 0


def test_penalty_minutes_per_game():
    assert penalty_minutes_per_game(16, 7200) == 8
    assert penalty_minutes_per_game(0, 7200) == 0


def test_penalty_minutes_falls_back_to_league_average():
    assert penalty_minutes_per_game(16, 0) == LEAGUE_AVERAGE_PIMS_PER_GAME
    assert penalty_minutes_per_game(None, 7200) == LEAGUE_AVERAGE_PIMS_PER_GAME


def test_derive_team_stats_from_situational_rows():
    five = team_row("T.B", "5on5", iceTime=1200, xGoalsAgainst=10, xGoalsPercentage=0.5,
                    corsiPercentage=0.5, shootingPercentage=0.1,
                    highDangerGoalsFor=3, highDangerGoalsAgainst=1)
    everything = team_row("T.B", "all", iceTime=7200, goalsFor=8, goalsAgainst=6,
                          penaltiesMinutes=16, faceOffWinPercentage=0.5)

    report = derive_team_stats("TBL", five, everything, GoalieReport.average())

    assert report.name == "TBL"
    assert report.xga_per_60 == 30
    assert report.gf_per_game == 4
    assert report.ga_per_game == 3
    assert report.xgf_percent == 50
    assert report.corsi_percent == 50
    assert report.faceoff_percent == 50
    assert report.shooting_percent == pytest.approx(10)
    assert report.hdcf_percent == 75
    assert report.pims_per_game == 8
    assert report.goalie.is_placeholder


def test_derive_team_stats_without_all_situations_row_is_finite():
    five = team_row("SEA", "5on5")
    report = derive_team_stats("SEA", five, None, GoalieReport.average())

    values = report.model_dump(exclude={"name", "goalie"}).values()
    assert all(math.isfinite(v) for v in values)
    assert report.hdcf_percent == 50
    assert report.pp_percent == 0
    assert report.pims_per_game == LEAGUE_AVERAGE_PIMS_PER_GAME
