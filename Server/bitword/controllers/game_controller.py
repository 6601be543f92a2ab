"""
Game Controller

Handles the game record endpoints and the health check.
"""

from datetime import datetime
from flask import Blueprint, request, jsonify
from ..models.game import Difficulty
from ..services.daily_selector import time_until_next_daily
from ..utils.decorators import require_game_service
from ..utils.game_logger import game_logger
from ..utils.helpers import (
    error_response, fail, parse_difficulty, parse_user_id,
    validate_completion_payload, validate_progress_payload
)

game_bp = Blueprint('game', __name__)


@game_bp.route('/games', methods=['POST'])
@require_game_service
def create_game(game_service):
    """Find or create today's game record for a player."""
    try:
        data = request.get_json(silent=True) or {}

        tier, error = parse_difficulty(data.get('difficulty'))
        if error:
            return fail(request, error, 'create_game')

        user, error = parse_user_id(data.get('user_id'))
        if error:
            return fail(request, error, 'create_game')

        game_logger.log_user_action(request, 'create_game', difficulty=tier.value)

        record = game_service.create_todays_game(tier, data.get('word'), user)
        response_data = {
            'success': True,
            'game': record.to_dict()
        }

        game_logger.log_server_response(request, 'create_game', True, {'success': True}, record.id)
        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'create_game')


@game_bp.route('/games/today/<difficulty>', methods=['GET'])
@require_game_service
def get_todays_game(difficulty, game_service):
    """Get today's game record for a player, or null."""
    try:
        tier, error = parse_difficulty(difficulty)
        if error:
            return fail(request, error, 'get_todays_game')

        user, error = parse_user_id(request.args.get('user_id'))
        if error:
            return fail(request, error, 'get_todays_game')

        game_logger.log_user_action(request, 'get_todays_game', difficulty=tier.value)

        record = game_service.get_todays_game(tier, user)
        response_data = {
            'success': True,
            'game': record.to_dict() if record else None
        }

        game_logger.log_server_response(
            request, 'get_todays_game', True, {'success': True},
            record.id if record else None, found=record is not None
        )
        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'get_todays_game')


@game_bp.route('/games/<game_id>', methods=['PATCH'])
@require_game_service
def update_game(game_id, game_service):
    """Save the progress of an unfinished game."""
    try:
        fields, error = validate_progress_payload(request.get_json(silent=True))
        if error:
            return fail(request, error, 'update_game', game_id=game_id)

        game_logger.log_user_action(request, 'update_game', game_id, fields=sorted(fields))

        record = game_service.update_game(game_id, fields)
        response_data = {
            'success': True,
            'game': record.to_dict()
        }

        game_logger.log_server_response(request, 'update_game', True, {'success': True}, game_id)
        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'update_game', game_id)


@game_bp.route('/games/<game_id>/complete', methods=['POST'])
@require_game_service
def complete_game(game_id, game_service):
    """Complete a game and fold it into the owner's statistics."""
    try:
        result, error = validate_completion_payload(request.get_json(silent=True))
        if error:
            return fail(request, error, 'complete_game', game_id=game_id)

        game_logger.log_user_action(request, 'complete_game', game_id, won=result.won)

        record, stats = game_service.complete_game(game_id, result)
        response_data = {
            'success': True,
            'game': record.to_dict(),
            'stats': stats.to_dict()
        }

        game_logger.log_server_response(request, 'complete_game', True, response_data, game_id)
        game_logger.log_game_event(
            game_id, 'stats_updated', request.remote_addr,
            user_id=record.user_id, difficulty=record.difficulty.value,
            total_games=stats.total_games, current_streak=stats.current_streak
        )
        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'complete_game', game_id)


@game_bp.route('/health', methods=['GET'])
@require_game_service
def health_check(game_service):
    """Health check endpoint with live session and catalog counts."""
    try:
        catalog = {
            tier.value: len(game_service.get_terms(tier))
            for tier in Difficulty
        }

        return jsonify({
            'status': 'healthy',
            'live_sessions': game_service.live_session_count,
            'catalog': catalog,
            'next_word_in': time_until_next_daily(datetime.now()),
            'logging': game_logger.get_log_stats()
        })

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        return jsonify({
            'status': 'unhealthy',
            'error': str(e)
        }), 500
