"""
Daily Selector

Maps a calendar day and difficulty onto the word of the day. Pure functions
only: the date is always passed in.
"""

from datetime import date, datetime, timedelta
from typing import List, Sequence, Union

from ..errors import EmptyCatalogError
from ..models.game import Difficulty, Term

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def calendar_date_string(day: Union[date, datetime]) -> str:
    """
    Render a day as e.g. "Sun Oct 18 2026".

    The weekday and month names come from fixed tables so the result does not
    depend on the process locale.
    """
    return (f"{_WEEKDAYS[day.weekday()]} {_MONTHS[day.month - 1]} "
            f"{day.day:02d} {day.year:04d}")


def daily_seed(day: Union[date, datetime], difficulty: Difficulty) -> int:
    """Sum of the character codes of the calendar string plus the tier name."""
    return sum(ord(char) for char in calendar_date_string(day) + Difficulty(difficulty).value)


def active_terms_for(terms: Sequence[Term], difficulty: Difficulty) -> List[Term]:
    """Active terms of one difficulty, in catalog order."""
    difficulty = Difficulty(difficulty)
    return [term for term in terms if term.difficulty == difficulty and term.is_active]


def select_todays_term(terms: Sequence[Term], difficulty: Difficulty,
                       day: Union[date, datetime]) -> Term:
    """
    Pick the word of the day for a difficulty.

    Args:
        terms: Catalog terms in a stable order (may contain other tiers)
        difficulty: Tier to select for
        day: Local calendar day

    Returns:
        Term: The same term for the same day, difficulty and catalog

    Raises:
        EmptyCatalogError: If no active term exists for the difficulty
    """
    candidates = active_terms_for(terms, difficulty)
    if not candidates:
        raise EmptyCatalogError(Difficulty(difficulty).value)

    return candidates[daily_seed(day, difficulty) % len(candidates)]


def next_daily_reset(now: datetime) -> datetime:
    """The next local midnight after now."""
    tomorrow = now.date() + timedelta(days=1)
    return datetime(tomorrow.year, tomorrow.month, tomorrow.day)


def time_until_next_daily(now: datetime) -> str:
    """Time left until the next word of the day, as "Hh Mm"."""
    remaining = int((next_daily_reset(now) - now).total_seconds())
    hours, remainder = divmod(remaining, 3600)
    return f"{hours}h {remainder // 60}m"
