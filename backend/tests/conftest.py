import os
import sys
import pytest

# Ensure the backend root (containing the `chesslink` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from chesslink import create_app, socketio
from chesslink.models import Move
from chesslink.services.sessions import SessionRegistry

NAMESPACE = '/ws'


class TestConfig(Config):
    __test__ = False
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SESSION_GRACE_SEC = 0


class Recorder:
    """Stands in for the Socket.IO emitter and remembers what went where."""

    def __init__(self):
        self.sent = []

    def __call__(self, event, payload, sid):
        self.sent.append((event, payload, sid))

    def to(self, sid, event=None):
        return [(e, p) for e, p, s in self.sent if s == sid and (event is None or e == event)]

    def clear(self):
        self.sent.clear()


def mv(uci):
    return Move(uci[0:2], uci[2:4], uci[4:] or None)


def received(test_client, name=None):
    """Drain a test client's queue, returning (event, payload) pairs."""
    out = []
    for pkt in test_client.get_received(NAMESPACE):
        if name is None or pkt['name'] == name:
            out.append((pkt['name'], pkt['args'][0] if pkt['args'] else None))
    return out


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['session_registry']


@pytest.fixture()
def connect(flask_app):
    """Factory for connected Socket.IO test clients with the greeting flushed."""
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, namespace=NAMESPACE)
        test_client.get_received(NAMESPACE)
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected(NAMESPACE):
                test_client.disconnect(namespace=NAMESPACE)
        except RuntimeError:
            pass


@pytest.fixture()
def recorder():
    return Recorder()


@pytest.fixture()
def make_registry(recorder):
    def _make(**kwargs):
        kwargs.setdefault('emit', recorder)
        return SessionRegistry(**kwargs)
    return _make
