from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = [flask_app.config['CLIENT_URL']]
    namespace = flask_app.config['SOCKETIO_NAMESPACE']
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from chesslink.rules import ChessRules
    from chesslink.services.sessions import SessionRegistry
    from chesslink.services.sessions.reaper import schedule_reap

    def _emit(event, payload, sid):
        socketio.emit(event, payload, to=sid, namespace=namespace)

    def _on_vacated(game_id, vacated_at):
        schedule_reap(flask_app, registry, game_id, vacated_at)

    # One registry per app; handlers and routes reach it through the app
    registry = SessionRegistry(
        rules=ChessRules(),
        emit=_emit,
        logger=flask_app.logger,
        id_length=flask_app.config['SESSION_ID_LENGTH'],
        on_vacated=_on_vacated,
    )
    flask_app.extensions['session_registry'] = registry

    # Import and register blueprints here
    from chesslink.main import main
    flask_app.register_blueprint(main)

    from chesslink.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    from chesslink.socketio_events import register_socketio_handlers
    register_socketio_handlers(registry, namespace=namespace)

    from chesslink.cli import bot_command
    flask_app.cli.add_command(bot_command)

    return flask_app
