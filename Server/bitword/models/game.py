"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Difficulty(str, Enum):
    """Difficulty tier, used both for word selection and stats partitioning."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class GameStatus(str, Enum):
    """Session status. WON and LOST are terminal."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class SessionStart(str, Enum):
    """How a session was derived when its term and record were loaded."""
    NEW = "new"
    RESUMED = "resumed"
    REPLAYED = "replayed"


def _serialize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    return value


@dataclass(frozen=True)
class Term:
    """A catalog word with its definition, hint and fun fact."""
    word: str
    difficulty: Difficulty
    category: str
    definition: str
    hint: str
    fun_fact: Optional[str] = None
    is_active: bool = True
    id: Optional[str] = None

    @property
    def distinct_letters(self) -> List[str]:
        """Distinct letters of the word in first-occurrence order."""
        return list(dict.fromkeys(self.word))

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(asdict(self))


@dataclass
class GameRecord:
    """Persisted attempt at one day's word for one difficulty and user."""
    id: str
    difficulty: Difficulty
    word: str
    created_at: datetime
    day: str
    user_id: Optional[int] = None
    completed: bool = False
    won: bool = False
    attempts: int = 0
    hints_used: int = 0
    time_seconds: Optional[int] = None
    guessed_letters: List[str] = field(default_factory=list)
    wrong_letters: List[str] = field(default_factory=list)

    @property
    def has_progress(self) -> bool:
        return bool(self.guessed_letters) or self.hints_used > 0 or self.completed

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(asdict(self))


@dataclass
class DifficultyStats:
    """Cumulative counters for one difficulty and user."""
    difficulty: Difficulty
    user_id: Optional[int] = None
    total_games: int = 0
    total_wins: int = 0
    current_streak: int = 0
    best_streak: int = 0
    average_time: Optional[int] = None
    total_hints: int = 0
    id: Optional[str] = None

    @property
    def win_rate(self) -> int:
        """Percentage of games won, rounded to the nearest whole number."""
        if not self.total_games:
            return 0
        return int(self.total_wins * 100 / self.total_games + 0.5)

    def to_dict(self) -> Dict[str, Any]:
        data = _serialize(asdict(self))
        data["win_rate"] = self.win_rate
        return data


@dataclass
class GameResult:
    """Outcome of a finished game, as folded into the statistics."""
    won: bool
    time_seconds: int
    attempts: int = 0
    hints_used: int = 0


@dataclass
class GuessResult:
    correct: bool
    complete: bool
    won: bool


@dataclass
class HintResult:
    hint: Optional[str]
    rejected: bool


@dataclass
class SessionState:
    """In-memory view of the game currently being played."""
    difficulty: Optional[Difficulty]
    term: Optional[Term]
    guessed_letters: List[str]
    wrong_letters: List[str]
    status: GameStatus
    attempts: int
    max_attempts: int
    hints_used: int
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def remaining_attempts(self) -> int:
        return max(0, self.max_attempts - self.attempts)

    @property
    def masked_word(self) -> Optional[List[Optional[str]]]:
        """Word letters with unguessed positions as None, or None without a term."""
        if self.term is None:
            return None
        return [letter if letter in self.guessed_letters else None for letter in self.term.word]

    def to_dict(self, reveal: bool = False) -> Dict[str, Any]:
        """
        Serialize for clients. The word itself is only included once the game
        is over (or when reveal is requested).
        """
        term = None
        if self.term is not None:
            term = self.term.to_dict()
            if self.status == GameStatus.PLAYING and not reveal:
                term.pop("word")
                term.pop("hint")
                term["length"] = len(self.term.word)

        return {
            "difficulty": _serialize(self.difficulty),
            "term": term,
            "masked_word": self.masked_word,
            "guessed_letters": list(self.guessed_letters),
            "wrong_letters": list(self.wrong_letters),
            "status": self.status.value,
            "attempts": self.attempts,
            "max_attempts": self.max_attempts,
            "remaining_attempts": self.remaining_attempts,
            "hints_used": self.hints_used,
            "start_time": _serialize(self.start_time),
            "end_time": _serialize(self.end_time),
        }
