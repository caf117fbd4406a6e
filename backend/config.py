import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Allowed browser origin for CORS and Socket.IO
    CLIENT_URL = os.environ.get('CLIENT_URL') or 'http://localhost:3000'
    PORT = int(os.environ.get('PORT', '4000'))
    SOCKETIO_NAMESPACE = '/ws'
    # Session ids: short lowercase alphanumeric tokens
    SESSION_ID_LENGTH = int(os.environ.get('SESSION_ID_LENGTH', '6'))
    # How long an empty session is kept before it is removed (seconds). 0 removes immediately.
    SESSION_GRACE_SEC = float(os.environ.get('SESSION_GRACE_SEC', '30'))
    # Computer opponent
    STOCKFISH_PATH = os.environ.get('STOCKFISH_PATH') or 'stockfish'
    BOT_DEPTH = int(os.environ.get('BOT_DEPTH', '15'))
    BOT_MOVETIME_MS = int(os.environ.get('BOT_MOVETIME_MS', '1000'))
    BOT_SKILL_LEVEL = int(os.environ.get('BOT_SKILL_LEVEL', '10'))
