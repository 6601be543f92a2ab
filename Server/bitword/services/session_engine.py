"""
Session Engine

Owns guess evaluation and session resume logic for a single daily game.

The engine is an explicit state machine driven by discrete events
(select_difficulty, load, guess, use_hint, completion). It performs no I/O;
the game service feeds it terms and records and persists what it emits.
"""

from datetime import datetime
from typing import Callable, Optional

from ..config.game_settings import MAX_ATTEMPTS, MAX_HINTS
from ..errors import AlreadyCompletedError, ValidationError
from ..models.game import (
    Difficulty,
    GameRecord,
    GameResult,
    GameStatus,
    GuessResult,
    HintResult,
    SessionStart,
    SessionState,
    Term,
)


class SessionEngine:
    """
    State machine for one player's daily game.

    States: PLAYING, WON, LOST (the last two terminal). A guess is a no-op
    outside PLAYING or when the letter was already guessed.
    """

    def __init__(self, max_attempts: int = MAX_ATTEMPTS, max_hints: int = MAX_HINTS,
                 clock: Callable[[], datetime] = datetime.now):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.max_attempts = max_attempts
        self.max_hints = max_hints
        self._clock = clock
        self._completion_recorded = False
        self._recorded_seconds: Optional[int] = None
        self.state = self._empty_state(None)

    def _empty_state(self, difficulty: Optional[Difficulty]) -> SessionState:
        self._recorded_seconds = None
        return SessionState(
            difficulty=difficulty,
            term=None,
            guessed_letters=[],
            wrong_letters=[],
            status=GameStatus.PLAYING,
            attempts=0,
            max_attempts=self.max_attempts,
            hints_used=0,
            start_time=None,
            end_time=None,
        )

    # -------------------------
    # Events
    # -------------------------

    def select_difficulty(self, difficulty: Difficulty) -> SessionState:
        """Start over with an empty session for a tier; the term comes later."""
        self.state = self._empty_state(Difficulty(difficulty))
        self._completion_recorded = False
        return self.snapshot()

    def load(self, term: Term, record: Optional[GameRecord] = None) -> SessionStart:
        """
        Derive the session from today's term and the persisted record, if any.

        Returns:
            SessionStart.NEW when there is no record (the caller persists one),
            RESUMED for an unfinished record, REPLAYED for a completed one.
        """
        if record is None:
            self.state = self._empty_state(term.difficulty)
            self.state.term = term
            self.state.start_time = self._clock()
            self._completion_recorded = False
            return SessionStart.NEW

        state = self._empty_state(record.difficulty)
        state.term = term
        state.wrong_letters = list(record.wrong_letters or [])
        state.attempts = record.attempts or 0
        state.hints_used = record.hints_used or 0
        state.start_time = record.created_at or self._clock()

        if not record.completed:
            state.guessed_letters = list(record.guessed_letters or [])
            self.state = state
            self._completion_recorded = False
            # Letters stored by a session whose completion failed to persist
            self._check_finished()
            return SessionStart.RESUMED

        # Legacy records may not carry their letters; show the solved word.
        state.guessed_letters = list(record.guessed_letters or term.distinct_letters)
        state.status = GameStatus.WON if record.won else GameStatus.LOST
        # Completion marker only; elapsed time comes from the record
        state.end_time = self._clock()
        self._recorded_seconds = record.time_seconds
        self.state = state
        self._completion_recorded = True
        return SessionStart.REPLAYED

    def guess(self, letter: str) -> GuessResult:
        """
        Apply a single uppercase letter. Callers validate the input.

        A correct final letter wins even when it arrives on the last attempt.
        """
        state = self.state
        if (state.term is None or state.status != GameStatus.PLAYING
                or letter in state.guessed_letters):
            return self._current_result(correct=False)

        word = state.term.word
        correct = letter in word

        state.guessed_letters.append(letter)
        if not correct:
            state.wrong_letters.append(letter)
            state.attempts += 1

        self._check_finished()
        return self._current_result(correct=correct)

    def use_hint(self) -> HintResult:
        """Consume the game's hint; a request past the limit is rejected."""
        state = self.state
        if (state.term is None or state.status != GameStatus.PLAYING
                or state.hints_used >= self.max_hints):
            return HintResult(hint=None, rejected=True)

        state.hints_used += 1
        return HintResult(hint=state.term.hint, rejected=False)

    def reset(self) -> SessionState:
        """Back to the initial state: no difficulty, no term."""
        self.state = self._empty_state(None)
        self._completion_recorded = False
        return self.snapshot()

    # -------------------------
    # Completion
    # -------------------------

    @property
    def is_complete(self) -> bool:
        return self.state.status != GameStatus.PLAYING

    @property
    def completion_pending(self) -> bool:
        return self.is_complete and not self._completion_recorded

    def elapsed_seconds(self) -> int:
        """Whole seconds between start and end (or now while playing)."""
        if self._recorded_seconds is not None:
            return self._recorded_seconds
        if self.state.start_time is None:
            return 0
        end = self.state.end_time or self._clock()
        return max(0, int((end - self.state.start_time).total_seconds()))

    def completion_result(self) -> GameResult:
        """
        The result to persist for a finished game.

        Raises:
            ValidationError: If the game is still being played
            AlreadyCompletedError: If the completion was already recorded
        """
        if not self.is_complete:
            raise ValidationError("Game is still in progress")
        if self._completion_recorded:
            raise AlreadyCompletedError("Game completion was already recorded")

        return GameResult(
            won=self.state.status == GameStatus.WON,
            time_seconds=self.elapsed_seconds(),
            attempts=self.state.attempts,
            hints_used=self.state.hints_used,
        )

    def mark_completion_recorded(self) -> None:
        self._completion_recorded = True

    # -------------------------
    # Views
    # -------------------------

    def snapshot(self) -> SessionState:
        """Copy of the current state, safe to hand to renderers."""
        state = self.state
        return SessionState(
            difficulty=state.difficulty,
            term=state.term,
            guessed_letters=list(state.guessed_letters),
            wrong_letters=list(state.wrong_letters),
            status=state.status,
            attempts=state.attempts,
            max_attempts=state.max_attempts,
            hints_used=state.hints_used,
            start_time=state.start_time,
            end_time=state.end_time,
        )

    def progress_fields(self) -> dict:
        """Fields of the game record that change while playing."""
        return {
            'guessed_letters': list(self.state.guessed_letters),
            'wrong_letters': list(self.state.wrong_letters),
            'attempts': self.state.attempts,
            'hints_used': self.state.hints_used,
        }

    def _check_finished(self) -> None:
        state = self.state
        all_revealed = all(char in state.guessed_letters for char in state.term.word)
        if all_revealed and state.attempts < self.max_attempts:
            state.status = GameStatus.WON
            state.end_time = self._clock()
        elif state.attempts >= self.max_attempts:
            state.status = GameStatus.LOST
            state.end_time = self._clock()

    def _current_result(self, correct: bool) -> GuessResult:
        status = self.state.status
        return GuessResult(
            correct=correct,
            complete=status != GameStatus.PLAYING,
            won=status == GameStatus.WON,
        )
