"""Tests for bitword.repositories.memory_repository against the repository contract."""
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta

import pytest

from bitword.errors import AlreadyCompletedError, NotFoundError, RepositoryError, ValidationError
from bitword.models import ANONYMOUS, Difficulty, GameResult, RegisteredUser
from bitword.repositories import InMemoryGameRepository

from conftest import TEST_TERMS

NOW = datetime(2026, 10, 18, 9, 0, 0)


def _new_game(repository, user=ANONYMOUS, now=NOW):
    return repository.get_or_create_todays_game(Difficulty.BEGINNER, "HODL", user, now)


def test_seed_assigns_ids_once(repository):
    terms = repository.get_terms(Difficulty.BEGINNER)
    assert [term.word for term in terms] == ["HODL", "FIAT"]
    assert all(term.id for term in terms)
    assert repository.seed_terms(TEST_TERMS) == 0


def test_seed_empty_repository():
    repository = InMemoryGameRepository()
    assert repository.seed_terms(TEST_TERMS) == len(TEST_TERMS)


def test_active_terms_exclude_inactive(repository):
    assert [term.word for term in repository.get_active_terms(Difficulty.BEGINNER)] == ["HODL"]
    assert repository.get_active_terms(Difficulty.ADVANCED) == []


def test_find_term(repository):
    assert repository.find_term(Difficulty.INTERMEDIATE, "SATS").word == "SATS"
    assert repository.find_term(Difficulty.BEGINNER, "SATS") is None


def test_get_or_create_returns_same_record_for_the_day(repository):
    first = _new_game(repository)
    second = _new_game(repository, now=NOW + timedelta(hours=10))
    assert first.id == second.id
    assert first.day == "2026-10-18"
    assert first.user_id is None


def test_get_or_create_partitions_by_user_and_day(repository):
    anonymous = _new_game(repository)
    registered = _new_game(repository, RegisteredUser(5))
    tomorrow = _new_game(repository, now=NOW + timedelta(days=1))
    assert len({anonymous.id, registered.id, tomorrow.id}) == 3
    assert registered.user_id == 5


def test_get_or_create_is_atomic_under_concurrency(repository):
    with ThreadPoolExecutor(max_workers=8) as pool:
        records = list(pool.map(lambda _: _new_game(repository), range(32)))
    assert len({record.id for record in records}) == 1
    assert len(repository.games) == 1


def test_get_todays_game(repository):
    assert repository.get_todays_game(Difficulty.BEGINNER, ANONYMOUS, NOW) is None
    created = _new_game(repository)
    assert repository.get_todays_game(Difficulty.BEGINNER, ANONYMOUS, NOW).id == created.id
    assert repository.get_todays_game(Difficulty.BEGINNER, RegisteredUser(1), NOW) is None


def test_update_game_progress(repository):
    game = _new_game(repository)
    updated = repository.update_game(game.id, {"guessed_letters": ["H", "X"],
                                               "wrong_letters": ["X"], "attempts": 1})
    assert updated.guessed_letters == ["H", "X"]
    assert repository.get_game(game.id).attempts == 1


def test_update_game_rejects_completion_fields(repository):
    game = _new_game(repository)
    with pytest.raises(ValidationError):
        repository.update_game(game.id, {"completed": True})
    assert repository.get_game(game.id).completed is False


def test_update_missing_game_returns_none(repository):
    assert repository.update_game("404", {"attempts": 1}) is None


def test_update_completed_game_raises(repository):
    game = _new_game(repository)
    repository.complete_game(game.id, GameResult(won=True, time_seconds=10))
    with pytest.raises(AlreadyCompletedError):
        repository.update_game(game.id, {"attempts": 2})


def test_reads_return_copies(repository):
    game = _new_game(repository)
    game.guessed_letters.append("Z")
    assert repository.get_game(game.id).guessed_letters == []


def test_complete_game_once(repository):
    game = _new_game(repository)
    completed = repository.complete_game(game.id, GameResult(won=False, time_seconds=33, attempts=3))
    assert completed.completed is True
    assert completed.time_seconds == 33
    with pytest.raises(AlreadyCompletedError):
        repository.complete_game(game.id, GameResult(won=True, time_seconds=1))


def test_complete_unknown_game(repository):
    with pytest.raises(NotFoundError):
        repository.complete_game("404", GameResult(won=True, time_seconds=1))


def test_complete_with_stats_uses_record_owner(repository):
    game = _new_game(repository, RegisteredUser(9))
    record, stats = repository.complete_game_with_stats(game.id, GameResult(won=True, time_seconds=80))
    assert record.completed is True
    assert stats.user_id == 9
    assert stats.total_games == 1
    assert repository.get_stats(Difficulty.BEGINNER, RegisteredUser(9)).average_time == 80
    assert repository.get_stats(Difficulty.BEGINNER, ANONYMOUS) is None


def test_double_completion_is_not_counted(repository):
    game = _new_game(repository)
    repository.complete_game_with_stats(game.id, GameResult(won=True, time_seconds=80))
    with pytest.raises(AlreadyCompletedError):
        repository.complete_game_with_stats(game.id, GameResult(won=True, time_seconds=80))
    assert repository.get_stats(Difficulty.BEGINNER, ANONYMOUS).total_games == 1


def test_stats_failure_restores_record(repository, monkeypatch):
    game = _new_game(repository)

    def boom(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(repository, "apply_game_result", boom)
    with pytest.raises(RepositoryError):
        repository.complete_game_with_stats(game.id, GameResult(won=True, time_seconds=80))
    assert repository.get_game(game.id).completed is False

    monkeypatch.undo()
    record, stats = repository.complete_game_with_stats(game.id, GameResult(won=True, time_seconds=80))
    assert record.completed is True
    assert stats.total_games == 1


def test_get_all_stats_per_user(repository):
    beginner = _new_game(repository, RegisteredUser(3))
    intermediate = repository.get_or_create_todays_game(
        Difficulty.INTERMEDIATE, "SATS", RegisteredUser(3), NOW)
    other = _new_game(repository)
    for game in (beginner, intermediate, other):
        repository.complete_game_with_stats(game.id, GameResult(won=True, time_seconds=10))

    entries = repository.get_all_stats(RegisteredUser(3))
    assert sorted(entry.difficulty.value for entry in entries) == ["beginner", "intermediate"]
    assert len(repository.get_all_stats(ANONYMOUS)) == 1
