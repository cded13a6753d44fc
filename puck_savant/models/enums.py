from enum import Enum


class Situation(str, Enum):
    """Game-situation filters used by the MoneyPuck exports."""

    FIVE_ON_FIVE = "5on5"
    ALL = "all"


class StarterStatus(str, Enum):
    CONFIRMED = "confirmed"
    PROJECTED = "projected"


class SourceName(str, Enum):
    SEASON_STATS = "MoneyPuck"
    LIVE_ODDS = "ESPN"
    STARTERS = "NHL"
