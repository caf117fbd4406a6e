"""Socket.IO event contract between participants and the session registry.

Inbound payloads are parsed here and rejected with MalformedMessage before
they reach a session; outbound payloads are built here so both the server and
the client agree on their shape.
"""

from typing import Any, Tuple

import chess

from .exceptions import MalformedMessage, SessionError
from .models import PIECE_KINDS, Move

# Client -> server
CREATE_GAME = 'createGame'
JOIN_GAME = 'joinGame'
MOVE = 'move'
CREATE_BOT_MESSAGE = 'createBotMessage'

# Server -> client
CONNECTED = 'connected'
GAME_CREATED = 'gameCreated'
GAME_JOINED = 'gameJoined'
GAME_STATE = 'gameState'
RECEIVE_BOT_MESSAGE = 'receiveBotMessage'
ERROR = 'error'

MAX_MESSAGE_LENGTH = 500


def _game_id(data: Any) -> str:
    game_id = data.get('gameId') if isinstance(data, dict) else None
    if not isinstance(game_id, str) or not game_id.strip():
        raise MalformedMessage('gameId is required')
    return game_id.strip()


def parse_join(data: Any) -> str:
    # A bare string id is accepted as well as {"gameId": ...}
    if isinstance(data, str):
        data = {'gameId': data}
    return _game_id(data)


def parse_move_payload(data: Any) -> Move:
    if not isinstance(data, dict):
        raise MalformedMessage('move must be an object')
    origin = data.get('from')
    target = data.get('to')
    if origin not in chess.SQUARE_NAMES or target not in chess.SQUARE_NAMES:
        raise MalformedMessage('move needs valid from and to squares')
    if origin == target:
        raise MalformedMessage('move must change square')
    promotion = data.get('promotion')
    if promotion is not None:
        if not isinstance(promotion, str) or promotion.lower() not in PIECE_KINDS:
            raise MalformedMessage(f'unknown promotion piece: {promotion!r}')
        promotion = promotion.lower()
    return Move(origin, target, promotion)


def parse_move(data: Any) -> Tuple[str, Move]:
    game_id = _game_id(data)
    return game_id, parse_move_payload(data.get('move'))


def parse_bot_message(data: Any) -> Tuple[str, str]:
    game_id = _game_id(data)
    message = data.get('message')
    if not isinstance(message, str) or not message.strip():
        raise MalformedMessage('message is required')
    if len(message) > MAX_MESSAGE_LENGTH:
        raise MalformedMessage(f'message longer than {MAX_MESSAGE_LENGTH} characters')
    return game_id, message


def game_created(game_id: str) -> dict:
    return {'gameId': game_id}


def game_joined(game_id: str, color: str) -> dict:
    return {'gameId': game_id, 'color': color}


def game_state(game_id: str, position: str) -> dict:
    return {'gameId': game_id, 'fen': position}


def bot_message(game_id: str, message: str) -> dict:
    return {'gameId': game_id, 'message': message}


def error(exc: SessionError) -> dict:
    return exc.to_dict()
