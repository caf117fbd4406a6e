from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

from chesslink.models import BLACK, COLOR_NAMES, COLORS, PIECE_KINDS, WHITE, opponent

STARTING_COUNTS = {'p': 8, 'n': 2, 'b': 2, 'r': 2, 'q': 1}


@dataclass(frozen=True)
class DerivedStatus:
    turn: str
    is_check: bool
    is_checkmate: bool
    is_draw: bool
    captured_by_white: Tuple[str, ...]
    captured_by_black: Tuple[str, ...]

    @property
    def is_game_over(self) -> bool:
        return self.is_checkmate or self.is_draw

    @property
    def winner(self):
        return opponent(self.turn) if self.is_checkmate else None

    @property
    def text(self) -> str:
        # Checkmate wins over draw, draw over check
        if self.is_checkmate:
            return f"Checkmate! {COLOR_NAMES[self.winner]} wins."
        if self.is_draw:
            return "Game over. It's a draw."
        if self.is_check:
            return f"Check! {COLOR_NAMES[self.turn]} to move."
        return f"{COLOR_NAMES[self.turn]} to move."

    def to_dict(self):
        return {
            'turn': self.turn,
            'isCheck': self.is_check,
            'isCheckmate': self.is_checkmate,
            'isDraw': self.is_draw,
            'status': self.text,
            'captured': {WHITE: list(self.captured_by_white), BLACK: list(self.captured_by_black)},
        }


def captured_pieces(occupancy: Mapping[str, Tuple[str, str]]) -> Dict[str, List[str]]:
    """Tally captures from what is still on the board.

    Each color's missing pieces are listed under the color that took them.
    A promoted piece is indistinguishable from an original one, so promoting
    to a kind that was already captured hides that capture.
    """
    remaining = {color: dict(STARTING_COUNTS) for color in COLORS}
    for color, kind in occupancy.values():
        if kind in remaining[color]:
            remaining[color][kind] -= 1
    captured = {WHITE: [], BLACK: []}
    for color in COLORS:
        for kind in PIECE_KINDS:
            captured[opponent(color)].extend([kind] * max(0, remaining[color][kind]))
    return captured


def derive_status(position: str, rules) -> DerivedStatus:
    captured = captured_pieces(rules.board_occupancy(position))
    return DerivedStatus(
        turn=rules.side_to_move(position),
        is_check=rules.is_check(position),
        is_checkmate=rules.is_checkmate(position),
        is_draw=rules.is_draw(position),
        captured_by_white=tuple(captured[WHITE]),
        captured_by_black=tuple(captured[BLACK]),
    )
