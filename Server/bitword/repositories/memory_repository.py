"""
In-Memory Game Repository

Process-local storage used when no MongoDB is configured, and by the tests.
A single lock makes every operation atomic.
"""

import copy
import itertools
import threading
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..errors import AlreadyCompletedError, NotFoundError
from ..models.game import Difficulty, DifficultyStats, GameRecord, GameResult, Term
from ..models.user import UserKey
from ..services.stats_service import apply_result
from .base import GameRepository, check_progress_fields, day_bucket


class InMemoryGameRepository(GameRepository):
    """Dictionary-backed repository with the same contract as the Mongo one."""

    def __init__(self, terms: Iterable[Term] = ()):
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self.terms: List[Term] = []
        self.games: Dict[str, GameRecord] = {}
        self.game_owners: Dict[str, str] = {}  # game_id -> user storage key
        self.stats: Dict[Tuple[str, str], DifficultyStats] = {}
        if terms:
            self.seed_terms(terms)

    def _next_id(self) -> str:
        return str(next(self._ids))

    # -------------------------
    # Terms
    # -------------------------

    def get_terms(self, difficulty: Difficulty) -> List[Term]:
        difficulty = Difficulty(difficulty)
        with self._lock:
            return [term for term in self.terms if term.difficulty == difficulty]

    def find_term(self, difficulty: Difficulty, word: str) -> Optional[Term]:
        for term in self.get_terms(difficulty):
            if term.word == word:
                return term
        return None

    def seed_terms(self, terms: Iterable[Term]) -> int:
        with self._lock:
            if self.terms:
                return 0
            for term in terms:
                self.terms.append(replace(term, id=self._next_id()))
            return len(self.terms)

    # -------------------------
    # Games
    # -------------------------

    def get_game(self, game_id: str) -> Optional[GameRecord]:
        with self._lock:
            record = self.games.get(str(game_id))
            return copy.deepcopy(record) if record else None

    def _find_todays(self, difficulty: Difficulty, user: UserKey, day: str) -> Optional[GameRecord]:
        for game_id, record in self.games.items():
            if (record.difficulty == difficulty and record.day == day
                    and self.game_owners[game_id] == user.storage_key):
                return record
        return None

    def get_todays_game(self, difficulty: Difficulty, user: UserKey,
                        now: Optional[datetime] = None) -> Optional[GameRecord]:
        day = day_bucket(now or datetime.now())
        with self._lock:
            record = self._find_todays(Difficulty(difficulty), user, day)
            return copy.deepcopy(record) if record else None

    def get_or_create_todays_game(self, difficulty: Difficulty, word: str, user: UserKey,
                                  now: Optional[datetime] = None) -> GameRecord:
        now = now or datetime.now()
        difficulty = Difficulty(difficulty)
        with self._lock:
            record = self._find_todays(difficulty, user, day_bucket(now))
            if record is None:
                record = GameRecord(
                    id=self._next_id(),
                    difficulty=difficulty,
                    word=word,
                    created_at=now,
                    day=day_bucket(now),
                    user_id=user.user_id,
                )
                self.games[record.id] = record
                self.game_owners[record.id] = user.storage_key
            return copy.deepcopy(record)

    def update_game(self, game_id: str, fields: Dict[str, Any]) -> Optional[GameRecord]:
        fields = check_progress_fields(fields)
        with self._lock:
            record = self.games.get(str(game_id))
            if record is None:
                return None
            if record.completed:
                raise AlreadyCompletedError(f"Game {game_id} is already completed")
            for name, value in fields.items():
                setattr(record, name, copy.deepcopy(value))
            return copy.deepcopy(record)

    def complete_game(self, game_id: str, result: GameResult) -> GameRecord:
        with self._lock:
            record = self.games.get(str(game_id))
            if record is None:
                raise NotFoundError(f"Game {game_id} not found")
            if record.completed:
                raise AlreadyCompletedError(f"Game {game_id} is already completed")
            record.completed = True
            record.won = result.won
            record.time_seconds = result.time_seconds
            record.attempts = result.attempts
            record.hints_used = result.hints_used
            return copy.deepcopy(record)

    def _restore_game(self, record: GameRecord) -> None:
        with self._lock:
            self.games[record.id] = copy.deepcopy(record)

    # -------------------------
    # Stats
    # -------------------------

    def get_stats(self, difficulty: Difficulty, user: UserKey) -> Optional[DifficultyStats]:
        with self._lock:
            stats = self.stats.get((Difficulty(difficulty).value, user.storage_key))
            return copy.deepcopy(stats) if stats else None

    def get_all_stats(self, user: UserKey) -> List[DifficultyStats]:
        with self._lock:
            return [copy.deepcopy(stats) for (_, owner), stats in self.stats.items()
                    if owner == user.storage_key]

    def apply_game_result(self, difficulty: Difficulty, result: GameResult,
                          user: UserKey) -> DifficultyStats:
        key = (Difficulty(difficulty).value, user.storage_key)
        with self._lock:
            updated = apply_result(self.stats.get(key), result, difficulty=difficulty, user=user)
            if updated.id is None:
                updated.id = self._next_id()
            self.stats[key] = updated
            return copy.deepcopy(updated)
