import os
import sys
from datetime import datetime, timedelta

import pytest

# Ensure the backend root (containing the `hunt` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from hunt import create_app, db, socketio
from hunt.services.game.notifications import NotificationError


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REGISTER_KEY = 'let-us-play'
    JWT_SECRET_KEY = 'test-jwt-secret'
    JWT_ACCESS_TOKEN_EXPIRES = False
    SMS_API_URL = 'http://sms.invalid/send'
    HTTPSMS_APIKEY = 'test-key'
    PHONE_NUMBER = '9000000000'
    HUNT_DURATION_SEC = 1800
    RANDOM_SEED = 1234


class FakeClock:
    """Settable stand-in for the wall clock."""

    def __init__(self, now=None):
        self.now = now or datetime(2026, 3, 14, 10, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


class FakeNotifier:
    def __init__(self):
        self.sent = []
        self.fail = False

    def send_code(self, phone_number, code):
        if self.fail:
            raise NotificationError('provider down')
        self.sent.append((phone_number, code))


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def notifier():
    return FakeNotifier()


@pytest.fixture()
def flask_app(clock, notifier):
    application = create_app(TestConfig)
    application.config['CLOCK'] = clock
    application.extensions['hunt_notifier'] = notifier
    with application.app_context():
        # Ensure models are imported so tables are created
        import hunt.models  # noqa: F401
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


@pytest.fixture()
def make_team(flask_app, clock):
    """Insert a team directly; started teams begin at the fake clock's now."""
    from hunt.models import Member, Team

    def _make(code='123456', name='Rovers', story=1, stage=1, phase=1, health=100.0,
              started=True, phones=(9876543210, 9876543211), **fields):
        team = Team(id=code, name=name, story=story, stage=stage, phase=phase, health=health, **fields)
        if started:
            team.start_time = fields.get('start_time') or clock.now
            team.last_synced_time = fields.get('last_synced_time') or clock.now
        team.members = [Member(phone_number=p) for p in phones]
        db.session.add(team)
        db.session.commit()
        return team

    return _make
