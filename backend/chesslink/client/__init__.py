"""Participant side of the protocol: local game mirror, transport and bot."""

from .bot import BotOpponent
from .reconciler import GameClient
