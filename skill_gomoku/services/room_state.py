# skill_gomoku/services/room_state.py

from dataclasses import dataclass
from typing import Dict, Optional

from skill_gomoku.game_core import SEATS, SEAT_FIRST, GameState

# Lobby status of a room
STATUS_WAITING = "waiting"
STATUS_PLAYING = "playing"
STATUS_FINISHED = "finished"


@dataclass
class RoomPlayer:
    """Whoever holds a seat. `credential` is the token or session id used to reclaim it."""
    credential: str
    name: str
    online: bool = True


class RoomState:
    """
    Plain holder for one room's match data. Seat occupancy lives in
    RoomPlayerManager; this class has no logic.
    """
    def __init__(self, room_id: str, game: GameState):
        self.id = room_id
        self.version: int = 1
        self.game: GameState = game
        self.host_seat: str = SEAT_FIRST
        # None = no vote, otherwise the requested swapColors flag
        self.rematch_votes: Dict[str, Optional[bool]] = {seat: None for seat in SEATS}

    def clear_rematch_votes(self) -> None:
        self.rematch_votes = {seat: None for seat in SEATS}
