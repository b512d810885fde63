from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from werkzeug.exceptions import HTTPException
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config, judge=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = list(flask_app.config.get('CORS_ORIGINS') or [])

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # The judge is injected so tests can swap in a scripted fake
    if judge is None:
        from supp_trivia.services.judge import build_judge
        judge = build_judge(flask_app.config)
    flask_app.extensions['judge'] = judge

    from supp_trivia.main import main
    flask_app.register_blueprint(main)

    from supp_trivia.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/room')

    from supp_trivia.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    _register_error_handlers(flask_app)

    @click.command('purge-rooms')
    @click.option('--hours', type=int, default=None,
                  help='Delete rooms untouched for this many hours (defaults to ROOM_RETENTION_HOURS).')
    def purge_rooms_command(hours):
        """Deletes rooms whose last update is older than the retention window."""
        from supp_trivia.store import RoomStore
        retention = hours if hours is not None else int(flask_app.config.get('ROOM_RETENTION_HOURS', 24))
        with flask_app.app_context():
            removed = RoomStore().purge_older_than(retention * 3600 * 1000)
        flask_app.logger.info(f"[purge] retention_hours={retention} removed={removed}")
        click.echo(f'Removed {removed} room(s) older than {retention}h.')

    flask_app.cli.add_command(purge_rooms_command)

    return flask_app


def _register_error_handlers(flask_app):
    from supp_trivia.errors import SessionError

    @flask_app.errorhandler(SessionError)
    def handle_session_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({'error': exc.description or exc.name}), exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected(exc):
        flask_app.logger.exception(f"[unhandled] {exc}")
        db.session.rollback()
        return jsonify({'error': str(exc) or exc.__class__.__name__}), 500
