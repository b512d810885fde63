import json
import os
import sys
import pytest

# Ensure the backend root (containing the `supp_trivia` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from supp_trivia import create_app, db, socketio
from supp_trivia.errors import GenerationError
from supp_trivia.services.rooms import prompts


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['https://supp-trivia.web.app', 'https://supp-trivia.firebaseapp.com']


TICKET_ANSWER = '```json\n' + json.dumps({
    'title': 'App do banco não abre',
    'description': 'Depois da atualização o aplicativo fecha sozinho.',
    'difficulty': 'easy',
}) + '\n```'


class FakeJudge:
    """Scripted judge: queued answers first, then a sensible default per call type.

    A queued exception instance is raised instead of returned.
    """

    def __init__(self):
        self.queue = []
        self.calls = []

    def push(self, *answers):
        self.queue.extend(answers)

    def complete(self, instructions, prompt):
        self.calls.append((instructions, prompt))
        if self.queue:
            answer = self.queue.pop(0)
            if isinstance(answer, Exception):
                raise answer
            return answer
        if instructions == prompts.TICKET_INSTRUCTIONS:
            return TICKET_ANSWER
        if instructions == prompts.SUMMARY_INSTRUCTIONS:
            return 'Que partida!'
        return json.dumps({'score': 5, 'feedback': 'Bom caminho.', 'isTheAnswerPerfect': False})

    def fail_next(self, message='provider down'):
        self.queue.append(GenerationError(message))


@pytest.fixture()
def judge():
    return FakeJudge()


def _make_app(config_class, judge):
    application = create_app(config_class, judge=judge)
    with application.app_context():
        # Ensure models are imported so tables are created
        import supp_trivia.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def flask_app(judge):
    yield from _make_app(TestConfig, judge)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def make_room(client):
    """Create a room hosted by `host` and join the remaining nicknames."""
    def _make(host='Ana', *others):
        room = client.post('/room', json={'nickname': host}).get_json()
        for nickname in others:
            room = client.post(f"/room/{room['code']}/join", json={'nickname': nickname}).get_json()
        return room
    return _make


@pytest.fixture()
def started_room(client, make_room):
    room = make_room('Ana', 'Bo')
    return client.post(f"/room/{room['code']}/start").get_json()
