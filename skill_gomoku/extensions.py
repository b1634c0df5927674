# skill_gomoku/extensions.py
"""
Flask extensions and process-wide objects.

Created here once so the app factory, the socket handlers and the workers
can import them without circular imports.
"""

from flask_socketio import SocketIO
from flask_jwt_extended import JWTManager
import queue

# --- Flask extensions ---

# cors_allowed_origins="*" accepts any origin; restrict it in production.
socketio = SocketIO(cors_allowed_origins="*")

# Signs the opaque session tokens handed out on register/login
jwt = JWTManager()


# --- Shared state ---

# Notifications produced outside a socket handler (eviction timers) are put
# here and emitted by the background consumer in workers.py.
notification_queue: queue.Queue = queue.Queue()
