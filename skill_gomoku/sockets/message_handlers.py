# skill_gomoku/sockets/message_handlers.py

import logging
from flask import request, current_app
from flask_socketio import emit
from ..extensions import socketio
from ..api.schemas import load_message

logger = logging.getLogger(__name__)


def emit_notifications(notifications):
    for notification in notifications:
        emit(
            notification['event'],
            notification['payload'],
            room=notification['room']
        )


@socketio.on('message')
def handle_message(data):
    """
    Single entry point for client messages. Anything that fails its schema
    is dropped without an answer.
    """
    sid = request.sid
    message = load_message(data)
    if message is None:
        return

    room_service = current_app.room_service
    notifications = room_service.handle_message(sid, message)
    emit_notifications(notifications)
