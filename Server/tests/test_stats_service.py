"""Unit tests for bitword.services.stats_service (stats fold and score)."""
import pytest

from bitword.models import (
    Difficulty, DifficultyStats, GameResult, GameStatus, RegisteredUser, SessionState,
)
from bitword.services.stats_service import apply_result, calculate_score, round_half_up


def _state(difficulty, attempts=0, hints_used=0):
    return SessionState(difficulty=difficulty, term=None, guessed_letters=[], wrong_letters=[],
                        status=GameStatus.WON, attempts=attempts, max_attempts=3,
                        hints_used=hints_used)


def test_first_win_then_loss():
    first = apply_result(None, GameResult(won=True, time_seconds=120, hints_used=0),
                         difficulty=Difficulty.BEGINNER)
    assert (first.total_games, first.total_wins, first.current_streak,
            first.best_streak, first.average_time, first.total_hints) == (1, 1, 1, 1, 120, 0)

    second = apply_result(first, GameResult(won=False, time_seconds=60, hints_used=1))
    assert (second.total_games, second.total_wins, second.current_streak,
            second.best_streak, second.average_time, second.total_hints) == (2, 1, 0, 1, 90, 1)


def test_first_loss_starts_without_streak():
    stats = apply_result(None, GameResult(won=False, time_seconds=30), difficulty=Difficulty.ADVANCED)
    assert stats.current_streak == 0
    assert stats.best_streak == 0
    assert stats.total_wins == 0


def test_existing_entry_is_not_mutated():
    existing = DifficultyStats(difficulty=Difficulty.BEGINNER, total_games=1, total_wins=1,
                               current_streak=1, best_streak=1, average_time=100, id="7")
    updated = apply_result(existing, GameResult(won=True, time_seconds=50))
    assert existing.total_games == 1
    assert existing.average_time == 100
    assert updated.id == "7"
    assert updated.current_streak == 2
    assert updated.best_streak == 2


def test_best_streak_survives_a_loss():
    stats = DifficultyStats(difficulty=Difficulty.BEGINNER, total_games=5, total_wins=5,
                            current_streak=5, best_streak=5, average_time=60)
    stats = apply_result(stats, GameResult(won=False, time_seconds=60))
    stats = apply_result(stats, GameResult(won=True, time_seconds=60))
    assert stats.current_streak == 1
    assert stats.best_streak == 5


def test_average_rounds_halves_up():
    stats = DifficultyStats(difficulty=Difficulty.BEGINNER, total_games=1, total_wins=1,
                            current_streak=1, best_streak=1, average_time=10)
    assert apply_result(stats, GameResult(won=True, time_seconds=11)).average_time == 11


def test_missing_average_counts_as_zero():
    stats = DifficultyStats(difficulty=Difficulty.BEGINNER, total_games=1, average_time=None)
    assert apply_result(stats, GameResult(won=True, time_seconds=40)).average_time == 20


def test_new_entry_requires_difficulty():
    with pytest.raises(ValueError):
        apply_result(None, GameResult(won=True, time_seconds=1))


def test_new_entry_belongs_to_user():
    stats = apply_result(None, GameResult(won=True, time_seconds=1),
                         difficulty=Difficulty.BEGINNER, user=RegisteredUser(42))
    assert stats.user_id == 42


def test_win_rate():
    stats = DifficultyStats(difficulty=Difficulty.BEGINNER, total_games=3, total_wins=2)
    assert stats.win_rate == 67
    assert stats.to_dict()["win_rate"] == 67
    assert DifficultyStats(difficulty=Difficulty.BEGINNER).win_rate == 0


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_score_with_penalties_and_multiplier():
    state = _state(Difficulty.INTERMEDIATE, attempts=1, hints_used=1)
    assert calculate_score(state, 100) == 1575


def test_score_time_bonus_expires():
    assert calculate_score(_state(Difficulty.ADVANCED), 400) == 2000


def test_score_rounds_half_up():
    assert calculate_score(_state(Difficulty.INTERMEDIATE), 1) == 1949


def test_score_defaults_to_beginner_multiplier():
    assert calculate_score(_state(None), 300) == 1000


def test_score_never_negative():
    assert calculate_score(_state(Difficulty.BEGINNER, attempts=30, hints_used=5), 600) == 0
