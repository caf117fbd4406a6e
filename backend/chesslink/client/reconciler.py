import logging
import threading
from typing import Callable, List, Optional

from chesslink import protocol
from chesslink.exceptions import IllegalMove
from chesslink.models import START_POSITION, WHITE, Move
from chesslink.rules import ChessRules
from chesslink.services.sessions.status import DerivedStatus, derive_status

logger = logging.getLogger(__name__)

WAITING_FOR_OPPONENT = 'Waiting for opponent to join...'
GAME_STARTED = "Game started. White's turn."


class GameClient:
    """A participant's local copy of one session.

    Local moves are applied straight away and sent to the server; every
    ``gameState`` from the server then replaces the local position outright.
    The server's position always wins and is full state, so a dropped or
    superseded broadcast needs no repair. A local move the server refuses is
    rolled back to the last position the server sent.

    ``lock`` guards the position; hold it to make a read-then-move atomic
    against incoming updates.
    """

    def __init__(self, emit: Callable[[str, dict], None], rules: Optional[ChessRules] = None):
        self._emit = emit
        self.rules = rules or ChessRules()
        self.lock = threading.RLock()
        self.game_id: Optional[str] = None
        self.color = WHITE
        self.status = ''
        self.waiting_for_opponent = False
        self.last_error: Optional[dict] = None
        self.messages: List[str] = []
        self._listeners: List[Callable[[str], None]] = []
        self._reset_position()

    # ---- outbound ----

    def create_game(self) -> None:
        self._emit(protocol.CREATE_GAME, {})

    def join_game(self, game_id: str) -> None:
        self._emit(protocol.JOIN_GAME, {'gameId': game_id})

    def rejoin(self) -> bool:
        """Reclaim a seat in the current game after the connection changed."""
        if not self.game_id:
            return False
        logger.info("Rejoining game %s", self.game_id)
        self.join_game(self.game_id)
        return True

    def send_message(self, message: str) -> None:
        if self.game_id:
            self._emit(protocol.CREATE_BOT_MESSAGE, {'gameId': self.game_id, 'message': message})

    def attempt_move(self, move: Move) -> bool:
        """Play ``move`` locally and send it. False means nothing happened."""
        with self.lock:
            if not self.can_move:
                return False
            try:
                tentative = self.rules.apply_move(self.position, move)
            except IllegalMove:
                return False
            self._set_position(tentative)
            self.pending_move = move
            self._emit(protocol.MOVE, {'gameId': self.game_id, 'move': move.to_dict()})
        return True

    # ---- inbound ----

    def handle(self, event: str, payload) -> None:
        handlers = {
            protocol.GAME_CREATED: self.on_game_created,
            protocol.GAME_JOINED: self.on_game_joined,
            protocol.GAME_STATE: self.on_game_state,
            protocol.RECEIVE_BOT_MESSAGE: self.on_bot_message,
            protocol.ERROR: self.on_error,
        }
        handler = handlers.get(event)
        if handler is not None:
            handler(payload)

    def on_game_created(self, payload: dict) -> None:
        with self.lock:
            self.game_id = payload['gameId']
            self.color = WHITE
            self.waiting_for_opponent = True
            self._reset_position()
            self.status = WAITING_FOR_OPPONENT
        logger.info("Created game %s", self.game_id)

    def on_game_joined(self, payload: dict) -> None:
        with self.lock:
            if payload['gameId'] != self.game_id:
                self.game_id = payload['gameId']
                self._reset_position()
            self.color = payload['color']
            self.waiting_for_opponent = False
            self.status = GAME_STARTED
        logger.info("Joined game %s as %s", self.game_id, self.color)

    def on_game_state(self, payload: dict) -> None:
        with self.lock:
            # A broadcast means both seats have been filled at least once
            self.waiting_for_opponent = False
            self.confirmed_position = payload['fen']
            self.pending_move = None
            self._set_position(payload['fen'])
            position = self.position
        for listener in list(self._listeners):
            listener(position)

    def on_bot_message(self, payload: dict) -> None:
        self.messages.append(payload['message'])

    def on_error(self, payload: dict) -> None:
        with self.lock:
            if self.pending_move is not None:
                logger.info("Rolling back refused move %s", self.pending_move.uci())
                self.pending_move = None
                self._set_position(self.confirmed_position)
            self.last_error = payload
            self.status = f"Error: {payload.get('message')}"
        logger.error("Server error: %s", payload)

    # ---- derived ----

    def add_listener(self, listener: Callable[[str], None]) -> None:
        """Call ``listener(position)`` after every authoritative update."""
        self._listeners.append(listener)

    @property
    def is_my_turn(self) -> bool:
        return self.derived.turn == self.color

    @property
    def can_move(self) -> bool:
        return bool(self.game_id) and not self.waiting_for_opponent and self.is_my_turn and not self.derived.is_game_over

    @property
    def captured(self) -> dict:
        return {'w': list(self.derived.captured_by_white), 'b': list(self.derived.captured_by_black)}

    def legal_targets(self, square: str) -> List[str]:
        return self.rules.legal_targets(self.position, square)

    def _reset_position(self) -> None:
        self.confirmed_position = START_POSITION
        self.pending_move: Optional[Move] = None
        self._set_position(START_POSITION)

    def _set_position(self, position: str) -> None:
        self.position = position
        self.derived: DerivedStatus = derive_status(position, self.rules)
        if self.game_id:
            self.status = self.derived.text
