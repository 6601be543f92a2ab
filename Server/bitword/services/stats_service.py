"""
Stats Service

Folds completed games into per-difficulty statistics and computes the
display score of a finished session.
"""

import math
from typing import Optional

from ..config.game_settings import (
    ATTEMPT_PENALTY,
    BASE_SCORE,
    DIFFICULTY_MULTIPLIERS,
    HINT_PENALTY,
    TIME_BONUS_WINDOW_SECONDS,
)
from ..models.game import Difficulty, DifficultyStats, GameResult, SessionState
from ..models.user import ANONYMOUS, UserKey


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return int(math.floor(value + 0.5))


def apply_result(existing: Optional[DifficultyStats],
                 result: GameResult,
                 difficulty: Difficulty = None,
                 user: UserKey = ANONYMOUS) -> DifficultyStats:
    """
    Fold one completed game into a difficulty's running statistics.

    Args:
        existing: Current entry, or None if this is the first completed game
        result: The completed game's outcome
        difficulty: Tier of the new entry (only used when existing is None)
        user: Owner of the new entry (only used when existing is None)

    Returns:
        DifficultyStats: A new entry; existing is left untouched
    """
    if existing is None:
        if difficulty is None:
            raise ValueError("difficulty is required when creating a stats entry")

        streak = 1 if result.won else 0
        return DifficultyStats(
            difficulty=Difficulty(difficulty),
            user_id=user.user_id,
            total_games=1,
            total_wins=1 if result.won else 0,
            current_streak=streak,
            best_streak=streak,
            average_time=result.time_seconds,
            total_hints=result.hints_used,
        )

    total_games = (existing.total_games or 0) + 1
    current_streak = (existing.current_streak or 0) + 1 if result.won else 0

    # Incremental mean from the previous mean and count; losses count too.
    old_average = existing.average_time or 0
    average_time = round_half_up(
        (old_average * (total_games - 1) + result.time_seconds) / total_games
    )

    return DifficultyStats(
        id=existing.id,
        difficulty=existing.difficulty,
        user_id=existing.user_id,
        total_games=total_games,
        total_wins=(existing.total_wins or 0) + (1 if result.won else 0),
        current_streak=current_streak,
        best_streak=max(existing.best_streak or 0, current_streak),
        average_time=average_time,
        total_hints=(existing.total_hints or 0) + result.hints_used,
    )


def calculate_score(state: SessionState, elapsed_seconds: int) -> int:
    """
    Display score for a finished session.

    Not persisted; it can be recomputed at any time from the stored attempts,
    hints and elapsed time.
    """
    multiplier = DIFFICULTY_MULTIPLIERS[state.difficulty or Difficulty.BEGINNER]
    time_bonus = max(0, TIME_BONUS_WINDOW_SECONDS - elapsed_seconds)
    attempt_penalty = state.attempts * ATTEMPT_PENALTY
    hint_penalty = state.hints_used * HINT_PENALTY

    score = round_half_up((BASE_SCORE + time_bonus - attempt_penalty - hint_penalty) * multiplier)
    return max(0, score)
