# skill_gomoku/config.py

import os

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

class Config:
    """Base configuration (safe defaults). The instance config.py and the environment override it."""

    JWT_SECRET_KEY = 'skill-gomoku-default-key-SHOULD-BE-CHANGED'
    # Tokens live for the whole process; nothing expires them.
    JWT_ACCESS_TOKEN_EXPIRES = False

    PORT = 8080
    # Relative paths are resolved against the instance folder.
    ACCOUNTS_FILE = 'accounts.json'
    LOG_FILE = 'application.log'
    EVENT_LOG_FILE = 'events.log'

    # Empty = let Flask-SocketIO pick (eventlet when installed).
    SOCKETIO_ASYNC_MODE = None
    NOTIFICATION_CONSUMER = True

    # --- Rooms ---
    MAX_ROOMS = 5
    RECONNECT_GRACE_SEC = 60
    DEFAULT_BOARD_SIZE = 15
