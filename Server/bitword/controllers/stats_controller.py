"""
Stats Controller

Handles the per-difficulty statistics endpoint.
"""

from flask import Blueprint, request, jsonify
from ..utils.decorators import require_game_service
from ..utils.game_logger import game_logger
from ..utils.helpers import error_response, fail, parse_difficulty, parse_user_id

stats_bp = Blueprint('stats', __name__)


@stats_bp.route('/stats', methods=['GET'])
@require_game_service
def get_stats(game_service):
    """
    Get statistics for one difficulty, or for all of them when no
    difficulty is given.
    """
    try:
        user, error = parse_user_id(request.args.get('user_id'))
        if error:
            return fail(request, error, 'get_stats')

        difficulty = request.args.get('difficulty')
        game_logger.log_user_action(request, 'get_stats', difficulty=difficulty)

        if difficulty:
            tier, error = parse_difficulty(difficulty)
            if error:
                return fail(request, error, 'get_stats')

            stats = game_service.get_stats(tier, user)
            response_data = {
                'success': True,
                'stats': stats.to_dict() if stats else None
            }
        else:
            response_data = {
                'success': True,
                'stats': [entry.to_dict() for entry in game_service.get_all_stats(user)]
            }

        game_logger.log_server_response(request, 'get_stats', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'get_stats')
