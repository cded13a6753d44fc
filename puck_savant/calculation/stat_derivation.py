"""Rate statistics derived from raw season totals.

Every divisor is guarded: a missing or zero ice time counts as one second,
a zero opportunity count yields 0, so no function here returns NaN or
Infinity.
"""

from typing import Optional

from puck_savant.models.goalie import GoalieReport
from puck_savant.models.season import StatsRow
from puck_savant.models.team import TeamReport
from puck_savant.normalization.fields import StatField, find_stat, get_stat

SECONDS_PER_HOUR = 3600.0
NEUTRAL_SHARE = 50.0
LEAGUE_AVERAGE_PIMS_PER_GAME = 8.0


def _ice_time_divisor(ice_time: Optional[float]) -> float:
    return ice_time if ice_time and ice_time > 0 else 1.0


def per_60(total: Optional[float], ice_time_seconds: Optional[float]) -> float:
    """Scales a season total to a per-60-minutes rate."""
    return (total or 0.0) * SECONDS_PER_HOUR / _ice_time_divisor(ice_time_seconds)


def percent(fraction: Optional[float]) -> float:
    return (fraction or 0.0) * 100


def high_danger_share(hd_for: Optional[float], hd_against: Optional[float]) -> float:
    """Share of high-danger goals, 50 when neither side has any."""
    hd_for = hd_for or 0.0
    hd_against = hd_against or 0.0
    if hd_for + hd_against == 0:
        return NEUTRAL_SHARE
    return hd_for / (hd_for + hd_against) * 100


def special_teams_percent(goals: Optional[float], opportunities: Optional[float]) -> float:
    """Goals per opportunity as a percentage; 0 when there were no opportunities.

    Opportunities are approximated by penalties drawn (power play) or taken
    (penalty kill), not a true power-play opportunity count.
    """
    if not opportunities:
        return 0.0
    return (goals or 0.0) / opportunities * 100


def power_play_percent(row: Optional[StatsRow]) -> float:
    return special_teams_percent(
        get_stat(row, StatField.PP_GOALS_FOR), get_stat(row, StatField.PENALTIES_DRAWN)
    )


def penalty_kill_percent(row: Optional[StatsRow]) -> float:
    return 100 - special_teams_percent(
        get_stat(row, StatField.PP_GOALS_AGAINST), get_stat(row, StatField.PENALTIES_TAKEN)
    )


def penalty_minutes_per_game(
    penalty_minutes: Optional[float], ice_time_seconds: Optional[float]
) -> float:
    """Penalty minutes per 60 minutes played, league average when unknown."""
    if penalty_minutes is None or not ice_time_seconds or ice_time_seconds <= 0:
        return LEAGUE_AVERAGE_PIMS_PER_GAME
    return penalty_minutes / (ice_time_seconds / SECONDS_PER_HOUR)


def derive_team_stats(
    team_code: str,
    five_on_five: StatsRow,
    all_situations: Optional[StatsRow],
    goalie: GoalieReport,
) -> TeamReport:
    """Builds the team report from its 5on5 and all-situations rows."""
    ice_time_all = find_stat(all_situations, StatField.ICE_TIME)
    ice_time_5v5 = find_stat(five_on_five, StatField.ICE_TIME)

    return TeamReport(
        name=team_code,
        gf_per_game=per_60(get_stat(all_situations, StatField.GOALS_FOR), ice_time_all),
        xgf_percent=percent(get_stat(five_on_five, StatField.X_GOALS_PERCENT)),
        ga_per_game=per_60(get_stat(all_situations, StatField.GOALS_AGAINST), ice_time_all),
        xga_per_60=per_60(get_stat(five_on_five, StatField.X_GOALS_AGAINST), ice_time_5v5),
        pp_percent=power_play_percent(all_situations),
        pk_percent=penalty_kill_percent(all_situations),
        pims_per_game=penalty_minutes_per_game(
            find_stat(all_situations, StatField.PENALTY_MINUTES), ice_time_all
        ),
        corsi_percent=percent(get_stat(five_on_five, StatField.CORSI_PERCENT)),
        faceoff_percent=percent(get_stat(all_situations, StatField.FACEOFF_PERCENT)),
        shooting_percent=percent(get_stat(five_on_five, StatField.SHOOTING_PERCENT)),
        hdcf_percent=high_danger_share(
            get_stat(five_on_five, StatField.HD_GOALS_FOR),
            get_stat(five_on_five, StatField.HD_GOALS_AGAINST),
        ),
        goalie=goalie,
    )
