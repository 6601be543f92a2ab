"""
Services Package

Contains all business logic and service classes.
"""

from .daily_selector import select_todays_term, time_until_next_daily
from .game_service import GameService, get_game_service, initialize_game_service
from .session_engine import SessionEngine
from .stats_service import apply_result, calculate_score

__all__ = [
    'select_todays_term', 'time_until_next_daily',
    'GameService', 'get_game_service', 'initialize_game_service',
    'SessionEngine',
    'apply_result', 'calculate_score'
]
