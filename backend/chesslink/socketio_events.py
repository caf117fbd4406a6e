from functools import wraps

from flask import current_app, request
from flask_socketio import emit

from chesslink import protocol, socketio
from chesslink.exceptions import SessionError


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _reports_errors(handler):
    """Send a failed request's error to the requester only."""
    @wraps(handler)
    def wrapper(data=None):
        try:
            return handler(data)
        except SessionError as exc:
            current_app.logger.info(f"[error] sid={_get_sid()} event={handler.__name__} code={exc.code} message={exc.message}")
            emit(protocol.ERROR, protocol.error(exc))
    return wrapper


def register_socketio_handlers(registry, namespace: str = '/ws') -> None:
    """Bind protocol events on ``namespace`` to ``registry`` operations.

    Closing a connection always lands in ``handle_disconnect``, which detaches
    the connection from whatever seat it held.
    """

    def handle_connect(auth=None):
        emit(protocol.CONNECTED, {'message': f'Connected to {namespace}'})

    def handle_disconnect(reason=None):
        registry.detach(_get_sid())

    @_reports_errors
    def handle_create_game(data):
        registry.create_session(_get_sid())

    @_reports_errors
    def handle_join_game(data):
        registry.join_session(protocol.parse_join(data), _get_sid())

    @_reports_errors
    def handle_move(data):
        game_id, move = protocol.parse_move(data)
        registry.submit_move(game_id, _get_sid(), move)

    @_reports_errors
    def handle_bot_message(data):
        game_id, message = protocol.parse_bot_message(data)
        registry.relay_message(game_id, _get_sid(), message)

    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event(protocol.CREATE_GAME, handle_create_game, namespace=namespace)
    socketio.on_event(protocol.JOIN_GAME, handle_join_game, namespace=namespace)
    socketio.on_event(protocol.MOVE, handle_move, namespace=namespace)
    socketio.on_event(protocol.CREATE_BOT_MESSAGE, handle_bot_message, namespace=namespace)
