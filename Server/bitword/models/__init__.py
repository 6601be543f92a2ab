"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
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
from .user import ANONYMOUS, Anonymous, RegisteredUser, UserKey, user_key_from_id

__all__ = [
    'Difficulty', 'DifficultyStats', 'GameRecord', 'GameResult', 'GameStatus',
    'GuessResult', 'HintResult', 'SessionStart', 'SessionState', 'Term',
    'ANONYMOUS', 'Anonymous', 'RegisteredUser', 'UserKey', 'user_key_from_id'
]
