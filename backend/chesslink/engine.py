"""Computer-opponent move suggestions from a UCI engine.

The suggested move is only a proposal: it goes through the same ``move``
event, turn check and legality check as a human's move.
"""

import logging
import shutil
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import chess
import chess.engine

from .models import Move

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchLimits:
    depth: int = 15
    time_budget_ms: int = 1000
    skill_level: int = 10

    @classmethod
    def from_config(cls, config):
        return cls(
            depth=int(config.get('BOT_DEPTH', 15)),
            time_budget_ms=int(config.get('BOT_MOVETIME_MS', 1000)),
            skill_level=int(config.get('BOT_SKILL_LEVEL', 10)),
        )

    def to_engine_limit(self) -> chess.engine.Limit:
        # The search stops at whichever bound is reached first
        return chess.engine.Limit(depth=self.depth, time=self.time_budget_ms / 1000)


class MoveOracle(Protocol):
    def suggest_move(self, position: str, limits: SearchLimits) -> Optional[Move]:
        ...


def engine_command_available(command: str) -> bool:
    return bool(Path(command).exists() or shutil.which(command))


def move_from_chess(move: chess.Move) -> Move:
    promotion = chess.piece_symbol(move.promotion) if move.promotion else None
    return Move(chess.square_name(move.from_square), chess.square_name(move.to_square), promotion)


class StockfishMoveOracle:
    """Suggests moves with a Stockfish (or any UCI) engine process.

    The process is started on first use and shared by all callers; searches
    are serialized because a UCI engine handles one search at a time.
    """

    def __init__(self, command: str = 'stockfish', engine: Optional[chess.engine.SimpleEngine] = None):
        self.command = command
        self._engine = engine
        self._skill_level = None
        self._lock = threading.Lock()

    def _ensure_engine(self) -> chess.engine.SimpleEngine:
        if self._engine is None:
            self._engine = chess.engine.SimpleEngine.popen_uci(self.command)
            logger.info("Started engine %s", self.command)
        return self._engine

    def _configure(self, engine: chess.engine.SimpleEngine, skill_level: int) -> None:
        if skill_level == self._skill_level:
            return
        try:
            engine.configure({'Skill Level': skill_level})
        except chess.engine.EngineError as exc:
            logger.warning("Engine option configuration failed: %s", exc)
        self._skill_level = skill_level

    def suggest_move(self, position: str, limits: SearchLimits) -> Optional[Move]:
        board = chess.Board(position)
        if board.is_game_over():
            return None
        with self._lock:
            engine = self._ensure_engine()
            self._configure(engine, limits.skill_level)
            result = engine.play(board, limits.to_engine_limit())
        if result.move is None:
            return None
        return move_from_chess(result.move)

    def close(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.quit()
                self._engine = None
