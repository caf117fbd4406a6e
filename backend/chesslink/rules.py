"""Move legality and position inspection, backed by python-chess.

Positions travel as FEN strings; a fresh ``chess.Board`` is built for every
question so no board state is ever shared between callers.
"""

from typing import Dict, List, Optional, Tuple

import chess

from .exceptions import IllegalMove
from .models import BLACK, WHITE, Move


def _color(turn: bool) -> str:
    return WHITE if turn == chess.WHITE else BLACK


class ChessRules:

    def apply_move(self, position: str, move: Move) -> str:
        """Return the position after ``move`` or raise IllegalMove."""
        board = chess.Board(position)
        try:
            candidate = self._to_chess_move(board, move)
        except ValueError:
            raise IllegalMove()
        if not board.is_legal(candidate):
            raise IllegalMove()
        board.push(candidate)
        return board.fen()

    def is_checkmate(self, position: str) -> bool:
        return chess.Board(position).is_checkmate()

    def is_check(self, position: str) -> bool:
        return chess.Board(position).is_check()

    def is_draw(self, position: str) -> bool:
        # Repetition needs move history, which a FEN does not carry.
        board = chess.Board(position)
        return board.is_stalemate() or board.is_insufficient_material() or board.is_fifty_moves()

    def is_game_over(self, position: str) -> bool:
        return self.is_checkmate(position) or self.is_draw(position)

    def side_to_move(self, position: str) -> str:
        return _color(chess.Board(position).turn)

    def piece_at(self, position: str, square: str) -> Optional[Tuple[str, str]]:
        piece = chess.Board(position).piece_at(chess.parse_square(square))
        if piece is None:
            return None
        return _color(piece.color), piece.symbol().lower()

    def board_occupancy(self, position: str) -> Dict[str, Tuple[str, str]]:
        board = chess.Board(position)
        return {
            chess.square_name(square): (_color(piece.color), piece.symbol().lower())
            for square, piece in board.piece_map().items()
        }

    def legal_targets(self, position: str, square: str) -> List[str]:
        """Squares the piece on ``square`` may move to, for highlighting."""
        board = chess.Board(position)
        origin = chess.parse_square(square)
        targets = {chess.square_name(m.to_square) for m in board.legal_moves if m.from_square == origin}
        return sorted(targets)

    @staticmethod
    def _to_chess_move(board: chess.Board, move: Move) -> chess.Move:
        origin = chess.parse_square(move.from_square)
        target = chess.parse_square(move.to_square)
        piece = board.piece_at(origin)
        promotion = None
        # A promotion letter only matters when a pawn reaches the last rank;
        # without one the pawn becomes a queen.
        if piece is not None and piece.piece_type == chess.PAWN and chess.square_rank(target) in (0, 7):
            promotion = chess.Piece.from_symbol(move.promotion).piece_type if move.promotion else chess.QUEEN
        return chess.Move(origin, target, promotion=promotion)
