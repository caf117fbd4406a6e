"""Session domain services: the registry, derived status and empty-session reaping.

This package holds the game-session logic that HTTP routes and socket
handlers call into, keeping transport concerns separated from the rules of
who may do what to which session.
"""

from .registry import SessionRegistry
from .status import DerivedStatus, captured_pieces, derive_status
