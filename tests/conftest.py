import os
import sys
from datetime import datetime

import pytest

# Ensure the project root (containing the `songle` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from songle import create_app, db, socketio
from songle.services.game.songs import Song


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:5173']
    ATTEMPT_DURATIONS = [1, 3, 5, 7, 10]
    SONGS_PER_DAY = 5
    COOLDOWN_HOURS = 12
    ELIGIBILITY_POLL_SEC = 60
    QUOTA_RECORD_NAME = 'daily_quota'
    SONG_SOURCE_OFFLINE = True


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 9, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, delta):
        self.now = self.now + delta


@pytest.fixture()
def ginza():
    return Song(
        id='3',
        title='Ginza',
        artist_name='J Balvin',
        preview_url='https://example.test/ginza.mp3',
        cover_url='https://example.test/ginza.jpg',
    )


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import songle.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


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
