# skill_gomoku/services/room_factory.py

import itertools
from typing import Any, Callable, Optional

from skill_gomoku.game_core import initialize
from .room_session import RoomSession
from .room_state import RoomState
from .room_player_manager import RoomPlayerManager, TimerFactory
from .room_turn_manager import RoomTurnManager

FIRST_ROOM_NUMBER = 1001


class RoomFactory:

    def __init__(
        self,
        log_event: Callable,
        board_size: int,
        grace_period_sec: float,
        expire_callback: Callable[[str, str, Any], None],
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.log_event = log_event
        self.board_size = board_size
        self.grace_period_sec = grace_period_sec
        self.expire_callback = expire_callback
        self.timer_factory = timer_factory
        self._room_numbers = itertools.count(FIRST_ROOM_NUMBER)

    def next_room_id(self) -> str:
        return f"room-{next(self._room_numbers)}"

    def create_room(self, first_seat_color: str, room_id: Optional[str] = None) -> RoomSession:
        """Builds an empty room; the caller seats the host."""
        room_id = room_id or self.next_room_id()

        player_manager = RoomPlayerManager(
            room_id=room_id,
            grace_period_sec=self.grace_period_sec,
            log_event=self.log_event,
            expire_callback=self.expire_callback,
            timer_factory=self.timer_factory,
        )
        turn_manager = RoomTurnManager(room_id=room_id, log_event=self.log_event)

        room = RoomSession(
            room_id=room_id,
            state=RoomState(room_id, initialize(self.board_size, first_seat_color)),
            player_manager=player_manager,
            turn_manager=turn_manager,
            log_event=self.log_event,
        )
        return room
