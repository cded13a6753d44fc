"""Tolerant numeric extraction from provider rows.

Upstream CSV exports rename columns between seasons without notice. Instead of
scattering literal key lists at each call site, every logical statistic is
declared once in ``FIELD_ALIASES`` with the provider column names known to
carry it, in priority order. The table is checked once at import time.
"""

import math
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Tuple

from loguru import logger

Row = Mapping[str, Any]


class SchemaAliasError(Exception):
    """Raised when the field alias table is malformed."""

    pass


class StatField(str, Enum):
    """Logical statistics read from the season export."""

    ICE_TIME = "ice_time"
    GAMES_PLAYED = "games_played"
    GOALS_FOR = "goals_for"
    GOALS_AGAINST = "goals_against"
    X_GOALS = "x_goals"
    X_GOALS_AGAINST = "x_goals_against"
    X_GOALS_PERCENT = "x_goals_percent"
    PP_GOALS_FOR = "pp_goals_for"
    PP_GOALS_AGAINST = "pp_goals_against"
    PENALTIES_DRAWN = "penalties_drawn"
    PENALTIES_TAKEN = "penalties_taken"
    PENALTY_MINUTES = "penalty_minutes"
    CORSI_PERCENT = "corsi_percent"
    FACEOFF_PERCENT = "faceoff_percent"
    SHOOTING_PERCENT = "shooting_percent"
    HD_GOALS_FOR = "hd_goals_for"
    HD_GOALS_AGAINST = "hd_goals_against"
    GSAX = "gsax"
    SAVE_PERCENT = "save_percent"


FIELD_ALIASES: Mapping[StatField, Tuple[str, ...]] = {
    StatField.ICE_TIME: ("iceTime", "timeOnIce"),
    StatField.GAMES_PLAYED: ("gamesPlayed", "games_played"),
    StatField.GOALS_FOR: ("goalsFor",),
    StatField.GOALS_AGAINST: ("goalsAgainst",),
    StatField.X_GOALS: ("xGoals",),
    StatField.X_GOALS_AGAINST: ("xGoalsAgainst",),
    StatField.X_GOALS_PERCENT: ("xGoalsPercentage",),
    StatField.PP_GOALS_FOR: ("ppGoalsFor", "fiveOnFourGoalsFor"),
    StatField.PP_GOALS_AGAINST: ("ppGoalsAgainst", "fiveOnFourGoalsAgainst"),
    StatField.PENALTIES_DRAWN: ("penaltiesDrawn", "penaltiesAgainst", "penaltiesDrawnPer60"),
    StatField.PENALTIES_TAKEN: ("penaltiesTaken", "penaltiesFor", "penaltiesTakenPer60"),
    StatField.PENALTY_MINUTES: ("penaltiesMinutes", "penalityMinutesFor", "pim"),
    StatField.CORSI_PERCENT: ("corsiPercentage", "shotAttemptsPercentage"),
    StatField.FACEOFF_PERCENT: ("faceOffWinPercentage", "faceOffsWonPercentage"),
    StatField.SHOOTING_PERCENT: ("shootingPercentage", "shootingPercentage5on5"),
    StatField.HD_GOALS_FOR: ("highDangerGoalsFor",),
    StatField.HD_GOALS_AGAINST: ("highDangerGoalsAgainst",),
    StatField.GSAX: ("goalsSavedAboveExpected", "xGoalsSaved"),
    StatField.SAVE_PERCENT: ("savePercentage",),
}


def validate_field_aliases(
    aliases: Mapping[StatField, Sequence[str]] = FIELD_ALIASES,
) -> None:
    """Checks the alias table covers every StatField with non-blank names."""
    unknown = [field for field in aliases if not isinstance(field, StatField)]
    if unknown:
        raise SchemaAliasError(f"Unknown logical fields in alias table: {unknown}")

    missing = [field.value for field in StatField if not aliases.get(field)]
    if missing:
        raise SchemaAliasError(f"No provider aliases declared for: {missing}")

    for field, names in aliases.items():
        if isinstance(names, str):
            raise SchemaAliasError(
                f"Aliases for {field.value} must be a sequence, got a string"
            )
        blank = [name for name in names if not isinstance(name, str) or not name.strip()]
        if blank:
            raise SchemaAliasError(f"Blank alias declared for {field.value}")
        if len(set(names)) != len(names):
            raise SchemaAliasError(f"Duplicate alias declared for {field.value}")


def _parse_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def find_numeric(row: Optional[Row], keys: Sequence[str]) -> Optional[float]:
    """Returns the first parseable value among ``keys``, or None if there is none."""
    if not row:
        return None
    for key in keys:
        number = _parse_number(row.get(key))
        if number is not None:
            return number
    return None


def get_numeric(row: Optional[Row], keys: Sequence[str]) -> float:
    """Same as ``find_numeric`` but absent values come back as ``0``."""
    number = find_numeric(row, keys)
    return number if number is not None else 0.0


def find_stat(row: Optional[Row], field: StatField) -> Optional[float]:
    return find_numeric(row, FIELD_ALIASES[field])


def get_stat(row: Optional[Row], field: StatField) -> float:
    return get_numeric(row, FIELD_ALIASES[field])


validate_field_aliases()
logger.debug(f"Field alias table validated ({len(FIELD_ALIASES)} logical fields).")
