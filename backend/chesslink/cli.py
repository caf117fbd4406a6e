import click
from flask import current_app
from flask.cli import with_appcontext

from chesslink.client import BotOpponent
from chesslink.client.transport import SocketIOTransport
from chesslink.engine import SearchLimits, StockfishMoveOracle, engine_command_available


@click.command('bot')
@click.option('--server', default=None, help='Server URL, defaults to this app on localhost.')
@click.option('--game', 'game_id', default=None, help='Game id to join; a new game is created when omitted.')
@with_appcontext
def bot_command(server, game_id):
    """Plays one side of a game with the Stockfish engine."""
    config = current_app.config
    command = config['STOCKFISH_PATH']
    if not engine_command_available(command):
        raise click.ClickException(f'Engine not found: {command}')
    server = server or f"http://localhost:{config['PORT']}"

    oracle = StockfishMoveOracle(command)
    transport = SocketIOTransport(server, namespace=config['SOCKETIO_NAMESPACE'])
    BotOpponent(transport.game, oracle, SearchLimits.from_config(config), spawn=transport.sio.start_background_task)

    transport.connect()
    if game_id:
        transport.game.join_game(game_id)
        click.echo(f'Bot joining game {game_id}')
    else:
        transport.game.create_game()
        click.echo('Bot creating a new game')
    try:
        transport.wait()
    finally:
        oracle.close()
        transport.disconnect()
