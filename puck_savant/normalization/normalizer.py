from types import MappingProxyType
from typing import Mapping, Optional

UNKNOWN_TEAM = "UNK"

# Key: raw spelling seen in any feed, Value: canonical 3-letter code.
# MoneyPuck uses dotted codes (T.B), ESPN uses two-letter codes (TB),
# the NHL API uses the canonical codes.
_TEAM_ALIASES = {
    "S.J": "SJS", "SJ": "SJS", "SJS": "SJS", "San Jose Sharks": "SJS",
    "T.B": "TBL", "TB": "TBL", "TBL": "TBL", "Tampa Bay Lightning": "TBL",
    "L.A": "LAK", "LA": "LAK", "LAK": "LAK", "Los Angeles Kings": "LAK",
    "N.J": "NJD", "NJ": "NJD", "NJD": "NJD", "New Jersey Devils": "NJD",
    "NYR": "NYR", "New York Rangers": "NYR",
    "NYI": "NYI", "New York Islanders": "NYI",
    "VEG": "VGK", "VGS": "VGK", "VGK": "VGK", "Vegas Golden Knights": "VGK",
    "MTL": "MTL", "MON": "MTL", "Montreal Canadiens": "MTL", "Montréal Canadiens": "MTL",
    "VAN": "VAN", "Vancouver Canucks": "VAN",
    "TOR": "TOR", "Toronto Maple Leafs": "TOR",
    "BOS": "BOS", "Boston Bruins": "BOS",
    "BUF": "BUF", "Buffalo Sabres": "BUF",
    "OTT": "OTT", "Ottawa Senators": "OTT",
    "FLA": "FLA", "FLO": "FLA", "Florida Panthers": "FLA",
    "DET": "DET", "Detroit Red Wings": "DET",
    "PIT": "PIT", "Pittsburgh Penguins": "PIT",
    "WSH": "WSH", "WAS": "WSH", "Washington Capitals": "WSH",
    "PHI": "PHI", "Philadelphia Flyers": "PHI",
    "CBJ": "CBJ", "CLB": "CBJ", "Columbus Blue Jackets": "CBJ",
    "CAR": "CAR", "Carolina Hurricanes": "CAR",
    "CHI": "CHI", "Chicago Blackhawks": "CHI",
    "NSH": "NSH", "NAS": "NSH", "Nashville Predators": "NSH",
    "STL": "STL", "St. Louis Blues": "STL", "St Louis Blues": "STL",
    "MIN": "MIN", "Minnesota Wild": "MIN",
    "WPG": "WPG", "WIN": "WPG", "Winnipeg Jets": "WPG",
    "COL": "COL", "Colorado Avalanche": "COL",
    "DAL": "DAL", "Dallas Stars": "DAL",
    # Arizona relocated to Utah: the retired code and the active one both land on UTA
    "ARI": "UTA", "PHX": "UTA", "Arizona Coyotes": "UTA",
    "UTA": "UTA", "UTAH": "UTA", "Utah Hockey Club": "UTA", "Utah Mammoth": "UTA",
    "EDM": "EDM", "Edmonton Oilers": "EDM",
    "CGY": "CGY", "CAL": "CGY", "Calgary Flames": "CGY",
    "ANA": "ANA", "Anaheim Ducks": "ANA",
    "SEA": "SEA", "Seattle Kraken": "SEA",
}

TEAM_ALIASES: Mapping[str, str] = MappingProxyType(_TEAM_ALIASES)
_FOLDED_ALIASES: Mapping[str, str] = MappingProxyType(
    {key.casefold(): code for key, code in _TEAM_ALIASES.items()}
)

CANONICAL_TEAM_CODES = frozenset(TEAM_ALIASES.values())


def normalize_team_code(value: Optional[str]) -> str:
    """Maps any known team spelling to its canonical 3-letter code.

    Unknown input falls back to its first three characters, uppercased.
    This never raises, but a truly novel abbreviation may come out wrong.
    Empty input returns ``UNKNOWN_TEAM``.
    """
    if value is None:
        return UNKNOWN_TEAM
    cleaned = str(value).strip()
    if not cleaned:
        return UNKNOWN_TEAM

    code = TEAM_ALIASES.get(cleaned) or _FOLDED_ALIASES.get(cleaned.casefold())
    if code:
        return code
    return cleaned[:3].upper()


def is_known_team(value: Optional[str]) -> bool:
    """True if the input is covered by the alias table."""
    if not value or not str(value).strip():
        return False
    cleaned = str(value).strip()
    return cleaned in TEAM_ALIASES or cleaned.casefold() in _FOLDED_ALIASES
