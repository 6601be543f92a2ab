"""
Word Controller

Handles the term catalog endpoints: today's word and the per-tier listing.
"""

from flask import Blueprint, request, jsonify
from ..config.game_settings import DIFFICULTY_DESCRIPTIONS
from ..utils.decorators import require_game_service
from ..utils.game_logger import game_logger
from ..utils.helpers import error_response, fail, parse_difficulty

word_bp = Blueprint('word', __name__)


@word_bp.route('/bitword/<difficulty>', methods=['GET'])
@require_game_service
def get_todays_word(difficulty, game_service):
    """Get today's term for a difficulty."""
    try:
        tier, error = parse_difficulty(difficulty)
        if error:
            return fail(request, error, 'get_todays_word')

        game_logger.log_user_action(request, 'get_todays_word', difficulty=tier.value)

        term = game_service.get_todays_term(tier)
        response_data = {
            'success': True,
            'term': term.to_dict(),
            'difficulty_description': DIFFICULTY_DESCRIPTIONS[tier]
        }

        game_logger.log_server_response(
            request, 'get_todays_word', True, {'success': True}, difficulty=tier.value
        )
        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'get_todays_word')


@word_bp.route('/bitwords/<difficulty>', methods=['GET'])
@require_game_service
def list_words(difficulty, game_service):
    """List every term of a difficulty, inactive ones included."""
    try:
        tier, error = parse_difficulty(difficulty)
        if error:
            return fail(request, error, 'list_words')

        game_logger.log_user_action(request, 'list_words', difficulty=tier.value)

        terms = game_service.get_terms(tier)
        response_data = {
            'success': True,
            'terms': [term.to_dict() for term in terms]
        }

        game_logger.log_server_response(
            request, 'list_words', True, response_data, difficulty=tier.value
        )
        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'list_words')
