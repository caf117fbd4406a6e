from flask import Blueprint, jsonify, current_app
from chesslink.exceptions import SessionNotFound


sessions = Blueprint('sessions', __name__)


@sessions.route('/<string:game_id>', methods=['GET'])
def get_session_state(game_id):
    """
    Returns the current position and seated colors of a live session.
    """
    registry = current_app.extensions['session_registry']
    try:
        snapshot = registry.snapshot(game_id)
    except SessionNotFound as exc:
        return jsonify({'error': exc.message}), 404
    return jsonify(snapshot), 200
