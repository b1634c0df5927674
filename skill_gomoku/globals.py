# skill_gomoku/globals.py

import datetime
from flask import current_app, has_app_context
from skill_gomoku.services.logging_service import log_event_to_file


def log_event(event_type, message, sid=None, room_id=None, extra_data=None):
    """
    Writes one line to the event log. The username is looked up from the
    live connection table when a sid is given.
    """
    if not has_app_context():
        return

    timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    username = 'Unknown'
    if sid:
        room_service = getattr(current_app, 'room_service', None)
        client = room_service.clients.get(sid) if room_service else None
        if client and client.username:
            username = client.username

    log_entry = f"[{timestamp}] [TYPE: {event_type}] [User: {username}]"

    if sid:
        log_entry += f" [SID: {sid}]"
    if room_id:
        log_entry += f" [RoomID: {room_id}]"
    if extra_data:
        log_entry += f" [Data: {extra_data}]"

    log_entry += f" | {message}\n"

    log_event_to_file(log_entry)
