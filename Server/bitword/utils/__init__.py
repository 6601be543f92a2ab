"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_game_service
from .helpers import (
    error_response, fail, parse_difficulty, parse_user_id,
    validate_completion_payload, validate_progress_payload
)
from .game_logger import game_logger

__all__ = [
    'require_game_service', 'error_response', 'fail', 'parse_difficulty', 'parse_user_id',
    'validate_completion_payload', 'validate_progress_payload', 'game_logger'
]
