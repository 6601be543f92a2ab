"""
Game Service

Orchestrates the daily BitWord game: picks today's term, resumes or creates
the persisted record, drives the session engine and records completions.
"""

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config.game_settings import MAX_ATTEMPTS, MAX_HINTS
from ..errors import AlreadyCompletedError, NotFoundError, ValidationError
from ..models.game import (
    Difficulty,
    DifficultyStats,
    GameRecord,
    GameResult,
    GameStatus,
    GuessResult,
    HintResult,
    SessionStart,
    SessionState,
    Term,
)
from ..models.user import ANONYMOUS, UserKey, user_key_from_id
from .daily_selector import select_todays_term
from .session_engine import SessionEngine
from .stats_service import calculate_score

logger = logging.getLogger(__name__)

Completion = Optional[Tuple[GameRecord, DifficultyStats]]


def normalize_letter(letter: Any) -> str:
    """
    Uppercase a guessed letter.

    Raises:
        ValidationError: If the value is not a single letter A-Z
    """
    if not isinstance(letter, str):
        raise ValidationError("Letter must be a string")

    letter = letter.strip().upper()
    if len(letter) != 1 or not ('A' <= letter <= 'Z'):
        raise ValidationError("Letter must be a single letter A-Z")

    return letter


def check_merged_progress(record: GameRecord, fields: Dict[str, Any]) -> None:
    """
    Check a progress patch against the stored record it is merged into.

    Raises:
        ValidationError: If a wrong letter was never guessed, or attempts
            differs from the number of wrong letters
    """
    guessed = fields.get('guessed_letters', record.guessed_letters)
    wrong = fields.get('wrong_letters', record.wrong_letters)
    attempts = fields.get('attempts', record.attempts)

    if not set(wrong) <= set(guessed):
        raise ValidationError("wrong_letters must all be in guessed_letters")
    if attempts != len(wrong):
        raise ValidationError("attempts must equal the number of wrong_letters")


class GameService:
    """
    Core game service managing the live daily sessions.

    This class handles:
    - Word-of-the-day selection per difficulty
    - Find-or-create of today's game record per player
    - Guess and hint handling through a SessionEngine per game
    - Completion with an all-or-nothing stats update

    Work for one session key (difficulty + player) is serialized by a lock.
    """

    def __init__(self, repository, max_attempts: int = MAX_ATTEMPTS, max_hints: int = MAX_HINTS,
                 clock: Callable[[], datetime] = datetime.now):
        self.repository = repository
        self.max_attempts = max_attempts
        self.max_hints = max_hints
        self.clock = clock

        self.sessions: Dict[str, SessionEngine] = {}  # live engines by game_id
        self.session_keys: Dict[str, Tuple[str, str]] = {}  # game_id -> session key
        self._locks: Dict[Tuple[str, str], threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # -------------------------
    # Internals
    # -------------------------

    @staticmethod
    def _session_key(difficulty: Difficulty, user: UserKey) -> Tuple[str, str]:
        return Difficulty(difficulty).value, user.storage_key

    def _lock_for(self, key: Tuple[str, str]) -> threading.Lock:
        with self._locks_guard:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _new_engine(self) -> SessionEngine:
        return SessionEngine(self.max_attempts, self.max_hints, clock=self.clock)

    def _key_for_game(self, game_id: str) -> Tuple[str, str]:
        key = self.session_keys.get(game_id)
        if key is not None:
            return key

        record = self.repository.get_game(game_id)
        if record is None:
            raise NotFoundError(f"Game {game_id} not found")
        return self._session_key(record.difficulty, user_key_from_id(record.user_id))

    def _engine_for(self, game_id: str) -> Optional[SessionEngine]:
        """Live engine for a game, rebuilt from storage after a restart. Caller holds the lock."""
        engine = self.sessions.get(game_id)
        if engine is not None:
            return engine

        record = self.repository.get_game(game_id)
        if record is None:
            return None

        term = self.repository.find_term(record.difficulty, record.word)
        if term is None:
            raise NotFoundError(f"Word for game {game_id} is no longer in the catalog")

        engine = self._new_engine()
        engine.load(term, record)
        self.sessions[game_id] = engine
        self.session_keys[game_id] = self._session_key(record.difficulty, user_key_from_id(record.user_id))
        logger.info(f"Rebuilt session for game {game_id} from storage")
        return engine

    def _require_engine(self, game_id: str) -> SessionEngine:
        engine = self._engine_for(game_id)
        if engine is None:
            raise NotFoundError(f"Game {game_id} not found")
        return engine

    def _term_for_record(self, record: GameRecord, todays_term: Term) -> Term:
        if record.word == todays_term.word:
            return todays_term

        # Catalog changed since the record was created; keep playing its word
        term = self.repository.find_term(record.difficulty, record.word)
        if term is None:
            raise NotFoundError(f"Word for game {record.id} is no longer in the catalog")
        return term

    def _persist_progress(self, game_id: str, engine: SessionEngine) -> None:
        """Write the engine's progress; on failure the engine is dropped and rebuilt from storage later."""
        try:
            record = self.repository.update_game(game_id, engine.progress_fields())
        except Exception:
            self._evict(game_id)
            raise

        if record is None:
            self._evict(game_id)
            raise NotFoundError(f"Game {game_id} not found")

    def _record_completion(self, game_id: str, engine: SessionEngine) -> Tuple[GameRecord, DifficultyStats]:
        result = engine.completion_result()
        record, stats = self.repository.complete_game_with_stats(game_id, result)
        engine.mark_completion_recorded()
        logger.info(f"Game {game_id} completed: won={result.won} time={result.time_seconds}s")
        return record, stats

    def _evict(self, game_id: str) -> None:
        self.sessions.pop(game_id, None)
        self.session_keys.pop(game_id, None)

    # -------------------------
    # Terms
    # -------------------------

    def get_todays_term(self, difficulty: Difficulty) -> Term:
        """
        Today's word for a difficulty.

        Raises:
            EmptyCatalogError: If the difficulty has no active term
        """
        difficulty = Difficulty(difficulty)
        return select_todays_term(self.repository.get_active_terms(difficulty), difficulty, self.clock())

    def get_terms(self, difficulty: Difficulty) -> List[Term]:
        return self.repository.get_terms(Difficulty(difficulty))

    # -------------------------
    # Sessions
    # -------------------------

    def start_session(self, difficulty: Difficulty,
                      user: UserKey = ANONYMOUS) -> Tuple[GameRecord, SessionState, SessionStart]:
        """
        Initialize the player's session for today's word.

        A completed record is replayed, an unfinished one resumed, and
        otherwise a new record is created.

        Returns:
            Tuple of (record, session state, how the session started)
        """
        difficulty = Difficulty(difficulty)
        key = self._session_key(difficulty, user)

        with self._lock_for(key):
            now = self.clock()
            term = self.get_todays_term(difficulty)
            record = self.repository.get_todays_game(difficulty, user, now)
            if record is not None:
                term = self._term_for_record(record, term)

            engine = self._new_engine()
            engine.select_difficulty(difficulty)
            started = engine.load(term, record)

            if started == SessionStart.NEW:
                record = self.repository.get_or_create_todays_game(difficulty, term.word, user, now)
                # The stored record may predate this request
                term = self._term_for_record(record, term)
                reloaded = engine.load(term, record)
                if record.completed or record.has_progress:
                    started = reloaded

            self.sessions[record.id] = engine
            self.session_keys[record.id] = key

        logger.info(f"Session {started.value} for game {record.id} ({key[0]}, {key[1]})")
        return record, engine.snapshot(), started

    def get_session(self, game_id: str) -> Optional[SessionState]:
        """Snapshot of a session, or None if the game is unknown."""
        try:
            key = self._key_for_game(game_id)
        except NotFoundError:
            return None

        with self._lock_for(key):
            engine = self._engine_for(game_id)
            return engine.snapshot() if engine else None

    def make_guess(self, game_id: str, letter: str) -> Tuple[GuessResult, SessionState, Completion]:
        """
        Apply a guess and persist its effect.

        Returns:
            Tuple of (guess result, session state, completion) where completion
            is the (record, stats) pair when this guess ended the game

        Raises:
            ValidationError: If the letter is not a single A-Z letter
            NotFoundError: If the game does not exist
        """
        letter = normalize_letter(letter)

        with self._lock_for(self._key_for_game(game_id)):
            engine = self._require_engine(game_id)
            guessed_before = len(engine.state.guessed_letters)

            result = engine.guess(letter)
            if len(engine.state.guessed_letters) > guessed_before:
                self._persist_progress(game_id, engine)

            completion = None
            if engine.completion_pending:
                completion = self._record_completion(game_id, engine)

            return result, engine.snapshot(), completion

    def use_hint(self, game_id: str) -> Tuple[HintResult, SessionState]:
        with self._lock_for(self._key_for_game(game_id)):
            engine = self._require_engine(game_id)

            hint = engine.use_hint()
            if not hint.rejected:
                self._persist_progress(game_id, engine)

            return hint, engine.snapshot()

    def complete_session(self, game_id: str) -> Tuple[GameRecord, DifficultyStats]:
        """
        Record a finished session whose completion has not been stored yet.

        Raises:
            ValidationError: If the game is still in progress
            AlreadyCompletedError: If the completion was already recorded
        """
        with self._lock_for(self._key_for_game(game_id)):
            return self._record_completion(game_id, self._require_engine(game_id))

    def reset_session(self, game_id: str) -> bool:
        """Drop the live session. Persisted data is left untouched."""
        key = self.session_keys.get(game_id)
        if key is None:
            return False

        with self._lock_for(key):
            engine = self.sessions.pop(game_id, None)
            self.session_keys.pop(game_id, None)
            if engine is None:
                return False
            engine.reset()
            return True

    def session_score(self, state: SessionState, game_id: str) -> Optional[int]:
        """Display score of a finished session, None while it is being played."""
        if state.status == GameStatus.PLAYING:
            return None

        engine = self.sessions.get(game_id)
        elapsed = engine.elapsed_seconds() if engine else 0
        return calculate_score(state, elapsed)

    @property
    def live_session_count(self) -> int:
        return len(self.sessions)

    # -------------------------
    # Game records
    # -------------------------

    def get_todays_game(self, difficulty: Difficulty, user: UserKey = ANONYMOUS) -> Optional[GameRecord]:
        return self.repository.get_todays_game(Difficulty(difficulty), user, self.clock())

    def create_todays_game(self, difficulty: Difficulty, word: str,
                           user: UserKey = ANONYMOUS) -> GameRecord:
        """Find-or-create today's record for the player."""
        if not isinstance(word, str) or not word.strip():
            raise ValidationError("Word is required")

        difficulty = Difficulty(difficulty)
        with self._lock_for(self._session_key(difficulty, user)):
            return self.repository.get_or_create_todays_game(
                difficulty, word.strip().upper(), user, self.clock()
            )

    def update_game(self, game_id: str, fields: Dict[str, Any]) -> GameRecord:
        """
        Update progress fields of an unfinished record.

        The patch is merged over the stored record and must keep
        wrong_letters within guessed_letters and attempts equal to the
        number of wrong letters.

        Raises:
            ValidationError: If fields other than progress fields are given,
                or the merged progress is inconsistent
            NotFoundError: If the game does not exist
            AlreadyCompletedError: If the game is completed
        """
        with self._lock_for(self._key_for_game(game_id)):
            current = self.repository.get_game(game_id)
            if current is None:
                raise NotFoundError(f"Game {game_id} not found")
            if current.completed:
                raise AlreadyCompletedError(f"Game {game_id} is already completed")
            check_merged_progress(current, fields)

            record = self.repository.update_game(game_id, fields)
            if record is None:
                raise NotFoundError(f"Game {game_id} not found")
            # A live engine no longer matches the stored record
            self._evict(game_id)
            return record

    def complete_game(self, game_id: str, result: GameResult) -> Tuple[GameRecord, DifficultyStats]:
        """
        Complete a record and fold it into the owner's stats.

        Raises:
            NotFoundError: If the game does not exist
            AlreadyCompletedError: If the game was already completed
        """
        with self._lock_for(self._key_for_game(game_id)):
            record, stats = self.repository.complete_game_with_stats(game_id, result)
            self._evict(game_id)
            return record, stats

    def get_stats(self, difficulty: Difficulty, user: UserKey = ANONYMOUS) -> Optional[DifficultyStats]:
        return self.repository.get_stats(Difficulty(difficulty), user)

    def get_all_stats(self, user: UserKey = ANONYMOUS) -> List[DifficultyStats]:
        return self.repository.get_all_stats(user)


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(repository, max_attempts: int = MAX_ATTEMPTS,
                            max_hints: int = MAX_HINTS) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(repository, max_attempts=max_attempts, max_hints=max_hints)
    return _game_service
