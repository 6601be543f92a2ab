"""
Helper Functions

Request parsing and validation used by the controllers. Validators return
(value, error_message) tuples; an empty error means the value is usable.
"""

from typing import Any, Dict, Optional, Tuple
from flask import jsonify

from ..errors import BitWordError
from ..models.game import Difficulty, GameResult
from ..models.user import UserKey, user_key_from_id
from .game_logger import game_logger


def parse_difficulty(value: Any) -> Tuple[Optional[Difficulty], str]:
    """Parse a difficulty tier name (case-insensitive)."""
    if not isinstance(value, str) or not value.strip():
        return None, "Difficulty is required"

    try:
        return Difficulty(value.strip().lower()), ""
    except ValueError:
        valid = ', '.join(d.value for d in Difficulty)
        return None, f"Invalid difficulty. Must be one of: {valid}"


def parse_user_id(value: Any) -> Tuple[Optional[UserKey], str]:
    """Parse an optional numeric user id into a UserKey; missing means anonymous."""
    if value is None or value == '':
        return user_key_from_id(None), ""

    if isinstance(value, bool):
        return None, "user_id must be an integer"

    try:
        return user_key_from_id(int(value)), ""
    except (TypeError, ValueError):
        return None, "user_id must be an integer"


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def validate_completion_payload(data: Any) -> Tuple[Optional[GameResult], str]:
    """Validate the body of a completion request."""
    if not isinstance(data, dict):
        return None, "Request body must be a JSON object"

    won = data.get('won')
    if not isinstance(won, bool):
        return None, "won must be a boolean"

    time_seconds = data.get('time_seconds')
    if not _is_count(time_seconds):
        return None, "time_seconds must be a non-negative integer"

    attempts = data.get('attempts', 0)
    hints_used = data.get('hints_used', 0)
    if not _is_count(attempts) or not _is_count(hints_used):
        return None, "attempts and hints_used must be non-negative integers"

    return GameResult(won=won, time_seconds=time_seconds, attempts=attempts, hints_used=hints_used), ""


def validate_progress_payload(data: Any) -> Tuple[Optional[Dict[str, Any]], str]:
    """Validate the value types of a progress update; field names are checked by the repository."""
    if not isinstance(data, dict) or not data:
        return None, "Request body must be a non-empty JSON object"

    fields = dict(data)
    for name in ('guessed_letters', 'wrong_letters'):
        if name in fields:
            letters = fields[name]
            if not isinstance(letters, list) or not all(
                    isinstance(letter, str) and len(letter) == 1 and letter.isalpha() for letter in letters):
                return None, f"{name} must be a list of single letters"
            fields[name] = [letter.upper() for letter in letters]

    for name in ('attempts', 'hints_used'):
        if name in fields and not _is_count(fields[name]):
            return None, f"{name} must be a non-negative integer"

    return fields, ""


def error_response(request_obj, error: Exception, action: str, game_id: Optional[str] = None):
    """
    Log a failed request and build its JSON response.

    Domain errors carry their own status code; anything else is a 500.
    """
    status_code = error.status_code if isinstance(error, BitWordError) else 500
    game_logger.log_error(request_obj, error, action, game_id)

    body = {
        'success': False,
        'error': str(error) if isinstance(error, BitWordError) else 'Internal server error'
    }
    game_logger.log_server_response(request_obj, action, False, body, game_id, status_code=status_code)
    return jsonify(body), status_code


def fail(request_obj, message: str, action: str, status_code: int = 400, game_id: Optional[str] = None):
    """Reject a request with a plain validation message."""
    body = {
        'success': False,
        'error': message
    }
    game_logger.log_server_response(request_obj, action, False, body, game_id, status_code=status_code)
    return jsonify(body), status_code
