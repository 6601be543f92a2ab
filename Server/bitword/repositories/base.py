"""
Game Repository Interface

The narrow storage interface the game service depends on. Implementations
must make find-or-create of today's game atomic and must reject a second
completion of the same record.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..errors import BitWordError, NotFoundError, RepositoryError, ValidationError
from ..models.game import Difficulty, DifficultyStats, GameRecord, GameResult, Term
from ..models.user import UserKey, user_key_from_id

logger = logging.getLogger(__name__)

# Fields a client may change on an unfinished game
PROGRESS_FIELDS = frozenset({'guessed_letters', 'wrong_letters', 'attempts', 'hints_used'})


def day_bucket(moment: datetime) -> str:
    """Local calendar day of a timestamp, midnight to midnight."""
    return moment.date().isoformat()


def check_progress_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Reject anything but progress fields; completion has its own operation."""
    unknown = set(fields) - PROGRESS_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
    return dict(fields)


class GameRepository(ABC):
    """CRUD over terms, game records and difficulty stats."""

    # -------------------------
    # Terms
    # -------------------------

    @abstractmethod
    def get_terms(self, difficulty: Difficulty) -> List[Term]:
        """All terms for a difficulty in a stable order, inactive included."""

    def get_active_terms(self, difficulty: Difficulty) -> List[Term]:
        return [term for term in self.get_terms(difficulty) if term.is_active]

    @abstractmethod
    def find_term(self, difficulty: Difficulty, word: str) -> Optional[Term]:
        """Look up the catalog term behind a stored game's word."""

    @abstractmethod
    def seed_terms(self, terms: Iterable[Term]) -> int:
        """Populate an empty catalog. Returns the number of terms inserted."""

    # -------------------------
    # Games
    # -------------------------

    @abstractmethod
    def get_game(self, game_id: str) -> Optional[GameRecord]:
        pass

    @abstractmethod
    def get_todays_game(self, difficulty: Difficulty, user: UserKey,
                        now: Optional[datetime] = None) -> Optional[GameRecord]:
        pass

    @abstractmethod
    def get_or_create_todays_game(self, difficulty: Difficulty, word: str, user: UserKey,
                                  now: Optional[datetime] = None) -> GameRecord:
        """Atomic find-or-create keyed by (difficulty, user, today)."""

    @abstractmethod
    def update_game(self, game_id: str, fields: Dict[str, Any]) -> Optional[GameRecord]:
        """
        Update progress fields of an unfinished game.

        Returns None when the game does not exist; raises
        AlreadyCompletedError when it is already completed.
        """

    @abstractmethod
    def complete_game(self, game_id: str, result: GameResult) -> GameRecord:
        """
        Mark a game completed exactly once.

        Raises:
            NotFoundError: If the game does not exist
            AlreadyCompletedError: If the game was already completed
        """

    @abstractmethod
    def _restore_game(self, record: GameRecord) -> None:
        """Write back a previously read record, undoing a completion."""

    # -------------------------
    # Stats
    # -------------------------

    @abstractmethod
    def get_stats(self, difficulty: Difficulty, user: UserKey) -> Optional[DifficultyStats]:
        pass

    @abstractmethod
    def get_all_stats(self, user: UserKey) -> List[DifficultyStats]:
        pass

    @abstractmethod
    def apply_game_result(self, difficulty: Difficulty, result: GameResult,
                          user: UserKey) -> DifficultyStats:
        """Fold a result into the stored stats entry and persist it."""

    # -------------------------
    # Completion
    # -------------------------

    def complete_game_with_stats(self, game_id: str,
                                 result: GameResult) -> Tuple[GameRecord, DifficultyStats]:
        """
        Complete a game and update its stats as one operation.

        If the stats update fails the game record is restored to its
        pre-completion state, so the whole call can be retried.
        """
        before = self.get_game(game_id)
        if before is None:
            raise NotFoundError(f"Game {game_id} not found")

        record = self.complete_game(game_id, result)
        try:
            stats = self.apply_game_result(
                record.difficulty, result, user_key_from_id(record.user_id)
            )
        except Exception as e:
            logger.error(f"Stats update failed for game {game_id}, restoring record: {e}")
            try:
                self._restore_game(before)
            except Exception as restore_error:
                logger.critical(f"Failed to restore game {game_id} after stats failure: {restore_error}")
                raise RepositoryError(f"Failed to complete game {game_id}") from restore_error
            if isinstance(e, BitWordError):
                raise
            raise RepositoryError(f"Failed to complete game {game_id}") from e

        return record, stats
