# skill_gomoku/sockets/connection_handlers.py
import logging
from flask import request, current_app
from ..extensions import socketio
from .message_handlers import emit_notifications

logger = logging.getLogger(__name__)


@socketio.on('connect')
def handle_connect(auth=None):
    """
    Every connection starts anonymous. A client that still holds a token may
    pass it as `auth={'token': ...}` instead of sending `authWithToken`.
    """
    room_service = current_app.room_service
    sid = request.sid

    room_service.attach_client(sid)
    logger.info(f"[Connect] {sid} connected.")

    token = auth.get('token') if isinstance(auth, dict) else None
    if token:
        emit_notifications(room_service.auth_with_token(sid, token))


@socketio.on('disconnect')
def handle_disconnect(*args):
    room_service = current_app.room_service
    sid = request.sid

    logger.info(f"[Disconnect] {sid} disconnected.")
    emit_notifications(room_service.handle_disconnect(sid))
