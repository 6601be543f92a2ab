"""
Session Controller

Handles the live game session endpoints: start, guess, hint, completion
retry and reset. The word stays hidden until the session ends.
"""

from flask import Blueprint, request, jsonify
from ..models.game import GameStatus, SessionStart
from ..utils.decorators import require_game_service
from ..utils.game_logger import game_logger
from ..utils.helpers import error_response, fail, parse_difficulty, parse_user_id

session_bp = Blueprint('session', __name__)


def _session_payload(game_service, game_id, state):
    payload = state.to_dict()
    payload['game_id'] = game_id
    payload['score'] = game_service.session_score(state, game_id)
    return payload


def _completion_payload(completion):
    if completion is None:
        return None
    record, stats = completion
    return {
        'game': record.to_dict(),
        'stats': stats.to_dict()
    }


def _log_completion(game_id, state, completion):
    event = 'game_won' if state.status == GameStatus.WON else 'game_lost'
    game_logger.log_game_event(
        game_id, event, request.remote_addr,
        word=state.term.word if state.term else None,
        attempts=state.attempts, hints_used=state.hints_used
    )
    record, stats = completion
    game_logger.log_game_event(
        game_id, 'stats_updated', request.remote_addr,
        user_id=record.user_id, total_games=stats.total_games,
        current_streak=stats.current_streak
    )


@session_bp.route('/session', methods=['POST'])
@require_game_service
def start_session(game_service):
    """Start, resume or replay today's game for a difficulty."""
    try:
        data = request.get_json(silent=True) or {}

        tier, error = parse_difficulty(data.get('difficulty'))
        if error:
            return fail(request, error, 'start_session')

        user, error = parse_user_id(data.get('user_id'))
        if error:
            return fail(request, error, 'start_session')

        game_logger.log_user_action(request, 'start_session', difficulty=tier.value)

        record, state, started = game_service.start_session(tier, user)
        response_data = {
            'success': True,
            'game_id': record.id,
            'started': started.value,
            'state': _session_payload(game_service, record.id, state)
        }

        game_logger.log_server_response(request, 'start_session', True, response_data, record.id)
        event = 'game_started' if started == SessionStart.NEW else 'game_resumed'
        game_logger.log_game_event(
            record.id, event, request.remote_addr,
            user_id=user.user_id, difficulty=tier.value, started=started.value
        )
        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'start_session')


@session_bp.route('/session/<game_id>', methods=['GET'])
@require_game_service
def get_session(game_id, game_service):
    """Get the current session state."""
    try:
        game_logger.log_user_action(request, 'get_session', game_id)

        state = game_service.get_session(game_id)
        if state is None:
            return fail(request, 'Game not found', 'get_session', 404, game_id)

        response_data = {
            'success': True,
            'state': _session_payload(game_service, game_id, state)
        }

        game_logger.log_server_response(request, 'get_session', True, response_data, game_id)
        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'get_session', game_id)


@session_bp.route('/session/<game_id>/guess', methods=['POST'])
@require_game_service
def make_guess(game_id, game_service):
    """Submit a single letter."""
    try:
        data = request.get_json(silent=True) or {}
        if 'letter' not in data:
            return fail(request, 'Letter is required', 'guess', game_id=game_id)

        game_logger.log_user_action(request, 'guess', game_id, letter=data['letter'])

        result, state, completion = game_service.make_guess(game_id, data['letter'])
        response_data = {
            'success': True,
            'correct': result.correct,
            'complete': result.complete,
            'won': result.won,
            'state': _session_payload(game_service, game_id, state),
            'completion': _completion_payload(completion)
        }

        game_logger.log_server_response(
            request, 'guess', True, response_data, game_id,
            correct=result.correct, attempts=state.attempts
        )
        if completion is not None:
            _log_completion(game_id, state, completion)

        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'guess', game_id)


@session_bp.route('/session/<game_id>/hint', methods=['POST'])
@require_game_service
def use_hint(game_id, game_service):
    """Reveal the hint; requests past the limit are rejected, not errors."""
    try:
        game_logger.log_user_action(request, 'use_hint', game_id)

        hint, state = game_service.use_hint(game_id)
        response_data = {
            'success': True,
            'hint': hint.hint,
            'rejected': hint.rejected,
            'state': _session_payload(game_service, game_id, state)
        }

        game_logger.log_server_response(request, 'use_hint', True, response_data, game_id)
        if not hint.rejected:
            game_logger.log_game_event(
                game_id, 'hint_used', request.remote_addr, hints_used=state.hints_used
            )
        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'use_hint', game_id)


@session_bp.route('/session/<game_id>/complete', methods=['POST'])
@require_game_service
def complete_session(game_id, game_service):
    """Retry recording a finished session whose completion failed."""
    try:
        game_logger.log_user_action(request, 'complete_session', game_id)

        completion = game_service.complete_session(game_id)
        response_data = {
            'success': True,
            **_completion_payload(completion)
        }

        game_logger.log_server_response(request, 'complete_session', True, response_data, game_id)
        record, stats = completion
        game_logger.log_game_event(
            game_id, 'stats_updated', request.remote_addr,
            user_id=record.user_id, total_games=stats.total_games,
            current_streak=stats.current_streak
        )
        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'complete_session', game_id)


@session_bp.route('/session/<game_id>', methods=['DELETE'])
@require_game_service
def reset_session(game_id, game_service):
    """Drop the live session. The stored record is kept."""
    try:
        game_logger.log_user_action(request, 'reset_session', game_id)

        if not game_service.reset_session(game_id):
            return fail(request, 'Session not found', 'reset_session', 404, game_id)

        response_data = {
            'success': True,
            'message': 'Session reset'
        }

        game_logger.log_server_response(request, 'reset_session', True, response_data, game_id)
        return jsonify(response_data)

    except Exception as e:
        return error_response(request, e, 'reset_session', game_id)
