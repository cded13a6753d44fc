from typing import Iterable, List, Mapping, Optional

from loguru import logger

from puck_savant.models.enums import StarterStatus
from puck_savant.models.goalie import GoalieReport, GoalieSeasonReport, StarterProjection
from puck_savant.models.season import StatsRow
from puck_savant.normalization.fields import StatField, find_stat, get_stat
from puck_savant.normalization.normalizer import normalize_team_code
from .stat_derivation import per_60


def surname(name: str) -> str:
    """Last whitespace-delimited token of a name, lowercased."""
    parts = name.strip().lower().split()
    return parts[-1] if parts else ""


def total_gsax(row: StatsRow) -> float:
    """Season goals saved above expected.

    Older exports only carry expected goals and goals against, in which case
    GSAx is their difference.
    """
    gsax = find_stat(row, StatField.GSAX)
    if gsax is not None:
        return gsax
    x_goals = find_stat(row, StatField.X_GOALS)
    goals_against = find_stat(row, StatField.GOALS_AGAINST)
    if x_goals is None or goals_against is None:
        return 0.0
    return x_goals - goals_against


def find_by_surname(rows: Iterable[StatsRow], name: str) -> Optional[StatsRow]:
    target = surname(name)
    if not target:
        return None
    for row in rows:
        if target in str(row.get("name") or "").lower():
            return row
    return None


def build_goalie_report(row: StatsRow, status: Optional[StarterStatus]) -> GoalieReport:
    ice_time = find_stat(row, StatField.ICE_TIME)
    return GoalieReport(
        name=str(row.get("name") or "Unknown"),
        gsax=per_60(total_gsax(row), ice_time),
        gaa=per_60(get_stat(row, StatField.GOALS_AGAINST), ice_time),
        sv_pct=get_stat(row, StatField.SAVE_PERCENT),
        games_played=get_stat(row, StatField.GAMES_PLAYED),
        status=status,
    )


def resolve_goalie(
    team_code: str,
    team_goalies: List[StatsRow],
    starters: Optional[Mapping[str, StarterProjection]] = None,
    requested_name: Optional[str] = None,
) -> GoalieReport:
    """Picks the goalie whose numbers go on a team's report.

    Priority: the caller's requested name, then the confirmed starter, then
    the goalie with the most games played (marked "projected"). A team with
    no goalie rows gets the average-goalie placeholder.
    """
    if not team_goalies:
        logger.warning(f"No goalie rows for {team_code}; using average goalie")
        return GoalieReport.average()

    if requested_name and requested_name.strip():
        row = find_by_surname(team_goalies, requested_name)
        if row is not None:
            return build_goalie_report(row, status=None)
        logger.info(f"Requested goalie '{requested_name}' not on {team_code} roster")
    else:
        starter = (starters or {}).get(team_code)
        if starter is not None:
            row = find_by_surname(team_goalies, starter.name)
            if row is not None:
                return build_goalie_report(row, status=starter.status)
            logger.info(f"Confirmed starter '{starter.name}' not on {team_code} roster")

    busiest = max(team_goalies, key=lambda r: get_stat(r, StatField.GAMES_PLAYED))
    return build_goalie_report(busiest, status=StarterStatus.PROJECTED)


def goalie_season_reports(
    rows: Iterable[StatsRow],
    team: Optional[str] = None,
    name: Optional[str] = None,
) -> List[GoalieSeasonReport]:
    """Season leaderboard, best GSAx/60 first. Goalies without ice time are dropped."""
    reports: List[GoalieSeasonReport] = []
    for row in rows:
        seconds = get_stat(row, StatField.ICE_TIME)
        if seconds <= 0:
            continue
        gsax = total_gsax(row)
        reports.append(
            GoalieSeasonReport(
                name=str(row.get("name") or "Unknown"),
                team=normalize_team_code(row.get("team")),
                games_played=get_stat(row, StatField.GAMES_PLAYED),
                gaa=round(per_60(get_stat(row, StatField.GOALS_AGAINST), seconds), 2),
                sv_pct=get_stat(row, StatField.SAVE_PERCENT),
                gsax_per_60=round(per_60(gsax, seconds), 3),
                total_gsax=round(gsax, 2),
            )
        )

    if team:
        target_team = normalize_team_code(team)
        reports = [r for r in reports if r.team == target_team]
    if name:
        target_name = name.strip().lower()
        reports = [r for r in reports if target_name in r.name.lower()]

    reports.sort(key=lambda r: r.gsax_per_60, reverse=True)
    return reports
