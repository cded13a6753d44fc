import sys
import asyncio
import argparse
from typing import List, Optional

# --- Settings/Logging ---
from puck_savant.logging.setup import setup_logging
from puck_savant.config.settings import settings

setup_logging()

from loguru import logger

from puck_savant.engine import MissingParameterError, StatsEngine, build_engine
from puck_savant.models.game import ScheduledGame
from puck_savant.models.goalie import GoalieSeasonReport
from puck_savant.models.team import MatchupReport, TeamReport

from rich import print
from rich.console import Group
from rich.panel import Panel
from rich.table import Table


def _team_panel(label: str, report: Optional[TeamReport]) -> Panel:
    if report is None:
        return Panel("[red]No season statistics for this team[/red]", title=label)

    table = Table(show_header=False, box=None)
    table.add_row("GF/60 (all)", f"{report.gf_per_game:.2f}")
    table.add_row("GA/60 (all)", f"{report.ga_per_game:.2f}")
    table.add_row("xGA/60 (5v5)", f"{report.xga_per_60:.2f}")
    table.add_row("xGF%", f"{report.xgf_percent:.1f}")
    table.add_row("Corsi%", f"{report.corsi_percent:.1f}")
    table.add_row("HDCF%", f"{report.hdcf_percent:.1f}")
    table.add_row("Shooting%", f"{report.shooting_percent:.1f}")
    table.add_row("Faceoff%", f"{report.faceoff_percent:.1f}")
    table.add_row("PP%", f"{report.pp_percent:.1f}")
    table.add_row("PK%", f"{report.pk_percent:.1f}")
    table.add_row("PIM/game", f"{report.pims_per_game:.1f}")

    goalie = report.goalie
    status = goalie.status.value if goalie.status else "requested"
    if goalie.is_placeholder:
        status = "placeholder"
    table.add_row(
        "Goalie",
        f"{goalie.name} ({status}) GSAx/60 {goalie.gsax:.3f}, GAA {goalie.gaa:.2f}, SV% {goalie.sv_pct:.3f}",
    )
    return Panel(table, title=f"{label}: {report.name}")


def render_matchup(report: MatchupReport) -> None:
    market = report.market
    market_text = (
        f"{market.line} | total {market.total} | favourite {market.favorite} ({market.source})"
        if market.found
        else f"[yellow]Market not found[/yellow] (total {market.total})"
    )
    print(
        Group(
            _team_panel("Home", report.home),
            _team_panel("Away", report.away),
            Panel(market_text, title="Market"),
        )
    )


def render_schedule(games: List[ScheduledGame]) -> None:
    table = Table(title=f"{len(games)} games")
    for column in ("Game", "Away", "Home", "Score", "Status", "Line", "Total"):
        table.add_column(column)
    for game in games:
        score = (
            f"{game.away_team.score}-{game.home_team.score}"
            if game.home_team.score is not None and game.away_team.score is not None
            else "-"
        )
        table.add_row(
            game.game_id,
            game.away_team.code,
            game.home_team.code,
            score,
            game.status,
            game.odds.details if game.odds and game.odds.details else "OFF",
            str(game.odds.over_under) if game.odds and game.odds.over_under else "-",
        )
    print(table)


def render_goalies(goalies: List[GoalieSeasonReport]) -> None:
    table = Table(title=f"{len(goalies)} goalies")
    for column in ("Name", "Team", "GP", "GAA", "SV%", "GSAx/60", "GSAx"):
        table.add_column(column)
    for goalie in goalies:
        table.add_row(
            goalie.name,
            goalie.team,
            f"{goalie.games_played:.0f}",
            f"{goalie.gaa:.2f}",
            f"{goalie.sv_pct:.3f}",
            f"{goalie.gsax_per_60:.3f}",
            f"{goalie.total_gsax:.2f}",
        )
    print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="NHL stats and market aggregation")
    subparsers = parser.add_subparsers(dest="command", required=True)

    matchup = subparsers.add_parser("matchup", help="Team reports and market for a pair")
    matchup.add_argument("home", nargs="?")
    matchup.add_argument("away", nargs="?")
    matchup.add_argument("--home-goalie")
    matchup.add_argument("--away-goalie")

    schedule = subparsers.add_parser("schedule", help="Scheduled games")
    schedule.add_argument("--date", help="YYYYMMDD, defaults to today")

    goalies = subparsers.add_parser("goalies", help="Goalie season leaderboard")
    goalies.add_argument("--team")
    goalies.add_argument("--name")
    return parser


async def run_command(engine: StatsEngine, args: argparse.Namespace) -> None:
    if args.command == "matchup":
        report = await engine.matchup(
            args.home, args.away, args.home_goalie, args.away_goalie
        )
        render_matchup(report)
    elif args.command == "schedule":
        render_schedule(await engine.schedule(args.date))
    elif args.command == "goalies":
        render_goalies(await engine.goalies(team=args.team, name=args.name))


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)
    logger.info(f"Starting puck-savant ({args.command}), season {settings.moneypuck_season}")

    resources = build_engine(settings)
    try:
        await run_command(resources.engine, args)
    except MissingParameterError as e:
        logger.error(f"Invalid request: {e}")
        return 2
    finally:
        await resources.close()
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
