import random
import string
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional

import chess

WHITE = 'w'
BLACK = 'b'
COLORS = (WHITE, BLACK)
COLOR_NAMES = {WHITE: 'White', BLACK: 'Black'}

# Wire letters for piece kinds; the king is never captured or promoted to.
PIECE_KINDS = ('p', 'n', 'b', 'r', 'q')

START_POSITION = chess.STARTING_FEN


def opponent(color: str) -> str:
    return BLACK if color == WHITE else WHITE


def generate_game_code(length=6):
    """Generate a short game code. Uniqueness is checked by the registry."""
    return ''.join(random.choices(string.ascii_lowercase + string.digits, k=length))


@dataclass(frozen=True)
class Move:
    from_square: str
    to_square: str
    promotion: Optional[str] = None

    def uci(self) -> str:
        return f"{self.from_square}{self.to_square}{self.promotion or ''}"

    def to_dict(self):
        data = {'from': self.from_square, 'to': self.to_square}
        if self.promotion:
            data['promotion'] = self.promotion
        return data


@dataclass
class Slot:
    sid: str
    color: str


@dataclass
class Session:
    """One game between at most two connections.

    ``position`` is replaced on every accepted move, never edited in place.
    All reads and writes go through ``lock``.
    """
    id: str
    position: str = START_POSITION
    slots: List[Slot] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    vacated_at: Optional[float] = None
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def slot_for(self, sid: str) -> Optional[Slot]:
        for slot in self.slots:
            if slot.sid == sid:
                return slot
        return None

    def vacant_color(self) -> Optional[str]:
        taken = {slot.color for slot in self.slots}
        for color in COLORS:
            if color not in taken:
                return color
        return None

    @property
    def is_empty(self) -> bool:
        return not self.slots

    def to_dict(self):
        return {
            'gameId': self.id,
            'fen': self.position,
            'players': [c for c in COLORS if any(s.color == c for s in self.slots)],
            'createdAt': self.created_at,
        }
