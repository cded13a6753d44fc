from typing import Iterable, Optional

from loguru import logger

from puck_savant.models.game import ScheduledGame
from puck_savant.models.market import MarketLine
from puck_savant.normalization.normalizer import normalize_team_code


def find_game(
    games: Iterable[ScheduledGame], home_code: str, away_code: str
) -> Optional[ScheduledGame]:
    """First game between the two teams, ignoring home/away orientation."""
    home_code = normalize_team_code(home_code)
    away_code = normalize_team_code(away_code)
    for game in games:
        if game.involves(home_code, away_code):
            return game
    return None


def find_market(
    games: Optional[Iterable[ScheduledGame]], home_code: str, away_code: str
) -> MarketLine:
    """Market line for the requested pair, or the not-found sentinel."""
    game = find_game(games or [], home_code, away_code)
    if game is None:
        logger.debug(f"No scheduled game found for {away_code} @ {home_code}")
        return MarketLine.not_found()
    if game.odds is None:
        logger.debug(f"Game {game.game_id} has no odds posted")
        return MarketLine.not_found()
    return MarketLine.from_odds(game.odds)
