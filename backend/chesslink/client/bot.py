import logging
import threading
from typing import Callable, Optional

from chesslink.engine import MoveOracle, SearchLimits

logger = logging.getLogger(__name__)


def _start_thread(target, *args):
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


class BotOpponent:
    """Plays a GameClient's side with moves from a MoveOracle.

    The search runs off the event thread via ``spawn``. Its result is played
    through ``GameClient.attempt_move``, so the bot is held to the same turn
    and legality checks as a person.
    """

    def __init__(self, client, oracle: MoveOracle, limits: Optional[SearchLimits] = None,
                 spawn: Optional[Callable] = None):
        self.client = client
        self.oracle = oracle
        self.limits = limits or SearchLimits()
        self._spawn = spawn or _start_thread
        client.add_listener(self.on_position)

    def should_move(self, position: str) -> bool:
        client = self.client
        if not client.game_id or client.waiting_for_opponent:
            return False
        rules = client.rules
        return rules.side_to_move(position) == client.color and not rules.is_game_over(position)

    def on_position(self, position: str) -> None:
        if self.should_move(position):
            self._spawn(self.play, position)

    def play(self, position: str) -> bool:
        move = self.oracle.suggest_move(position, self.limits)
        if move is None:
            logger.info("No move suggested for %s", position)
            return False
        with self.client.lock:
            if self.client.position != position:
                # The server moved on while we were thinking
                logger.info("Dropping stale suggestion %s", move.uci())
                return False
            played = self.client.attempt_move(move)
        if not played:
            logger.warning("Suggested move %s was refused locally", move.uci())
        return played
