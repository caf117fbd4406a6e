import logging
import threading
import time
from typing import Callable, Dict, Optional

from chesslink import protocol
from chesslink.exceptions import IllegalMove, NotYourTurn, SessionFull, SessionNotFound
from chesslink.models import WHITE, Move, Session, Slot, generate_game_code
from chesslink.rules import ChessRules
from .status import derive_status

# emit(event, payload, sid)
Emitter = Callable[[str, dict, str], None]
# on_vacated(game_id, vacated_at)
VacatedHook = Callable[[str, float], None]


class SessionRegistry:
    """Owns every live session and is the only place session state changes.

    Lock order is always session lock first, registry lock second. The
    registry lock guards the id -> session map and the sid -> id seat index;
    each session's own lock serializes join, move and detach on that session.
    Outbound game state is emitted while the session lock is held, so every
    participant sees broadcasts in the order they were produced.
    """

    def __init__(self, rules=None, emit: Optional[Emitter] = None, logger=None,
                 id_length: int = 6, id_factory: Optional[Callable[[], str]] = None,
                 on_vacated: Optional[VacatedHook] = None, clock=time.time):
        self.rules = rules or ChessRules()
        self._emit = emit or (lambda event, payload, sid: None)
        self._logger = logger or logging.getLogger(__name__)
        self._id_factory = id_factory or (lambda: generate_game_code(id_length))
        self._on_vacated = on_vacated
        self._clock = clock
        self._sessions: Dict[str, Session] = {}
        self._seats: Dict[str, str] = {}
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._sessions)

    def __contains__(self, game_id):
        with self._lock:
            return game_id in self._sessions

    def seat_of(self, sid: str) -> Optional[str]:
        """Id of the session ``sid`` is seated in, if any."""
        with self._lock:
            return self._seats.get(sid)

    # ---- operations ----

    def create_session(self, sid: str) -> str:
        previous = self.seat_of(sid)
        with self._lock:
            while True:
                game_id = self._id_factory()
                if game_id not in self._sessions:
                    break
                self._logger.info(f"[session-id-collision] game={game_id} retrying")
            session = Session(id=game_id, slots=[Slot(sid, WHITE)])
            self._sessions[game_id] = session
            self._seats[sid] = game_id
        with session.lock:
            self._emit(protocol.GAME_CREATED, protocol.game_created(game_id), sid)
        self._logger.info(f"[session-create] game={game_id} sid={sid}")
        if previous is not None:
            self._vacate(previous, sid)
        return game_id

    def join_session(self, game_id: str, sid: str) -> str:
        previous = self.seat_of(sid)
        session = self._get(game_id)
        with session.lock:
            self._ensure_live(session)
            slot = session.slot_for(sid)
            if slot is None:
                color = session.vacant_color()
                if color is None:
                    raise SessionFull()
                slot = Slot(sid, color)
                session.slots.append(slot)
                session.vacated_at = None
                with self._lock:
                    self._seats[sid] = game_id
                self._logger.info(f"[session-join] game={game_id} sid={sid} color={slot.color}")
            else:
                self._logger.info(f"[session-rejoin] game={game_id} sid={sid} color={slot.color}")
            self._emit(protocol.GAME_JOINED, protocol.game_joined(game_id, slot.color), sid)
            self._broadcast(session, protocol.GAME_STATE, protocol.game_state(game_id, session.position))
            color = slot.color
        if previous is not None and previous != game_id:
            self._vacate(previous, sid)
        return color

    def submit_move(self, game_id: str, sid: str, move: Move) -> str:
        session = self._get(game_id)
        with session.lock:
            self._ensure_live(session)
            slot = session.slot_for(sid)
            turn = self.rules.side_to_move(session.position)
            if slot is None or slot.color != turn:
                raise NotYourTurn()
            try:
                position = self.rules.apply_move(session.position, move)
            except IllegalMove:
                self._logger.info(f"[move-rejected] game={game_id} sid={sid} move={move.uci()}")
                raise
            session.position = position
            self._logger.info(f"[move] game={game_id} color={slot.color} move={move.uci()} fen={position}")
            self._broadcast(session, protocol.GAME_STATE, protocol.game_state(game_id, position))
        return position

    def relay_message(self, game_id: str, sid: str, message: str) -> None:
        session = self._get(game_id)
        with session.lock:
            self._ensure_live(session)
            if session.slot_for(sid) is None:
                raise SessionNotFound()
            payload = protocol.bot_message(game_id, message)
            for slot in session.slots:
                if slot.sid != sid:
                    self._emit(protocol.RECEIVE_BOT_MESSAGE, payload, slot.sid)

    def detach(self, sid: str) -> Optional[str]:
        """Drop ``sid`` from its seat. Returns the id of a session left empty."""
        with self._lock:
            game_id = self._seats.pop(sid, None)
        if game_id is None:
            return None
        return self._vacate(game_id, sid)

    def reap(self, game_id: str, vacated_at: float) -> bool:
        """Remove a session that has stayed empty since ``vacated_at``."""
        with self._lock:
            session = self._sessions.get(game_id)
        if session is None:
            return False
        with session.lock:
            if session.slots or session.vacated_at != vacated_at:
                return False
            with self._lock:
                self._sessions.pop(game_id, None)
        self._logger.info(f"[session-reap] game={game_id}")
        return True

    def snapshot(self, game_id: str) -> dict:
        session = self._get(game_id)
        with session.lock:
            data = session.to_dict()
        data.update(derive_status(data['fen'], self.rules).to_dict())
        return data

    # ---- helpers ----

    def _get(self, game_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(game_id)
        if session is None:
            raise SessionNotFound()
        return session

    def _ensure_live(self, session: Session) -> None:
        # The session may have been reaped between lookup and locking
        with self._lock:
            if self._sessions.get(session.id) is not session:
                raise SessionNotFound()

    def _broadcast(self, session: Session, event: str, payload: dict) -> None:
        for slot in session.slots:
            self._emit(event, payload, slot.sid)

    def _vacate(self, game_id: str, sid: str) -> Optional[str]:
        with self._lock:
            session = self._sessions.get(game_id)
        if session is None:
            return None
        with session.lock:
            slot = session.slot_for(sid)
            if slot is None:
                return None
            session.slots.remove(slot)
            self._logger.info(f"[detach] game={game_id} sid={sid} color={slot.color}")
            if session.slots:
                return None
            session.vacated_at = vacated_at = self._clock()
        if self._on_vacated is not None:
            self._on_vacated(game_id, vacated_at)
        return game_id
