from typing import Optional

import socketio

from chesslink import protocol
from chesslink.rules import ChessRules
from .reconciler import GameClient

INBOUND_EVENTS = (
    protocol.GAME_CREATED,
    protocol.GAME_JOINED,
    protocol.GAME_STATE,
    protocol.RECEIVE_BOT_MESSAGE,
    protocol.ERROR,
)


class SocketIOTransport:
    """Connects a GameClient to the server over a python-socketio client."""

    def __init__(self, url: str, namespace: str = '/ws', client: Optional[socketio.Client] = None,
                 rules: Optional[ChessRules] = None):
        self.url = url
        self.namespace = namespace
        self.sio = client or socketio.Client()
        self.game = GameClient(self.emit, rules)
        for event in INBOUND_EVENTS:
            self.sio.on(event, self._dispatcher(event), namespace=namespace)
        # Reconnecting yields a new sid; the server has dropped the old seat
        self.sio.on('connect', self.game.rejoin, namespace=namespace)

    def _dispatcher(self, event: str):
        def dispatch(data=None):
            self.game.handle(event, data)
        return dispatch

    def emit(self, event: str, payload: dict) -> None:
        self.sio.emit(event, payload, namespace=self.namespace)

    def connect(self) -> None:
        self.sio.connect(self.url, namespaces=[self.namespace])

    def wait(self) -> None:
        self.sio.wait()

    def disconnect(self) -> None:
        self.sio.disconnect()
