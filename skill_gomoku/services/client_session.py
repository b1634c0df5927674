# skill_gomoku/services/client_session.py

import datetime
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ClientSession:
    """
    One live Socket.IO connection. Identity (`username` + `credential`) is
    attached on auth or on a session-less join; `room_id`/`seat` while the
    connection is bound to a seat.
    """
    sid: str
    username: Optional[str] = None
    credential: Optional[str] = None
    room_id: Optional[str] = None
    seat: Optional[str] = None
    # True when the identity is a session-less session id rather than an account token
    guest: bool = False
    connect_time: datetime.datetime = field(default_factory=datetime.datetime.now)

    @property
    def is_authenticated(self) -> bool:
        return self.username is not None and self.credential is not None

    @property
    def is_seated(self) -> bool:
        return self.room_id is not None and self.seat is not None

    def bind_seat(self, room_id: str, seat: str) -> None:
        self.room_id = room_id
        self.seat = seat

    def unbind_seat(self) -> None:
        self.room_id = None
        self.seat = None
