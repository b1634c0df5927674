import itertools
import queue

import pytest

from skill_gomoku import create_app, socketio
from skill_gomoku.config import Config
from skill_gomoku.services.account_service import AccountStore
from skill_gomoku.services.room_service import RoomService
from skill_gomoku.services.session_registry import SessionRegistry


class FakeTimer:
    """Stands in for threading.Timer; tests call fire() to simulate expiry."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


class FakeTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function):
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self):
        return self.timers[-1]


@pytest.fixture()
def timers():
    return FakeTimerFactory()


@pytest.fixture()
def notification_queue():
    return queue.Queue()


@pytest.fixture()
def account_store(tmp_path):
    store = AccountStore(str(tmp_path / 'accounts.json'))
    store.load()
    return store


@pytest.fixture()
def service(account_store, notification_queue, timers):
    counter = itertools.count(1)
    sessions = SessionRegistry(issue_token_func=lambda username: f"token-{next(counter)}-{username}")
    return RoomService(
        config={'MAX_ROOMS': 5, 'RECONNECT_GRACE_SEC': 60, 'DEFAULT_BOARD_SIZE': 15},
        account_store=account_store,
        session_registry=sessions,
        notification_queue=notification_queue,
        timer_factory=timers,
    )


@pytest.fixture()
def flask_app(tmp_path, timers):
    class TestConfig(Config):
        TESTING = True
        JWT_SECRET_KEY = 'test-secret'
        SOCKETIO_ASYNC_MODE = 'threading'
        NOTIFICATION_CONSUMER = False
        ACCOUNTS_FILE = str(tmp_path / 'accounts.json')
        LOG_FILE = str(tmp_path / 'application.log')
        EVENT_LOG_FILE = str(tmp_path / 'events.log')

    application, _ = create_app(TestConfig, timer_factory=timers)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make

    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()
