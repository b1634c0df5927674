# skill_gomoku/services/notifications.py

from typing import Any, Dict, Optional

# Every server -> client message travels on this Socket.IO event;
# the payload's `type` field tells the client what it is.
MESSAGE_EVENT = "message"

Notification = Dict[str, Any]


def notify(sid: Optional[str], payload: Dict[str, Any]) -> Notification:
    return {'event': MESSAGE_EVENT, 'payload': payload, 'room': sid}


def error(sid: str, code: str, message: str) -> Notification:
    return notify(sid, {'type': 'error', 'code': code, 'message': message})


def auth_error(sid: str, code: str, message: str) -> Notification:
    return notify(sid, {'type': 'authError', 'code': code, 'message': message})
