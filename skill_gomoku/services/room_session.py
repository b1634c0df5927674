# skill_gomoku/services/room_session.py

import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from skill_gomoku.game_core import (
    SEAT_FIRST,
    initialize,
    opponent_color,
    serialize_game_state,
)
from .errors import ErrorCode
from .notifications import Notification, error, notify
from .room_state import RoomState, STATUS_WAITING, STATUS_PLAYING, STATUS_FINISHED
from .room_player_manager import RoomPlayerManager
from .room_turn_manager import RoomTurnManager


class RoomSession:
    """
    One live room. A facade that coordinates RoomState,
    RoomPlayerManager and RoomTurnManager. Callers serialize access.
    """

    def __init__(
        self,
        room_id: str,
        state: RoomState,
        player_manager: RoomPlayerManager,
        turn_manager: RoomTurnManager,
        log_event: Callable,
    ):
        self.id = room_id
        self.state = state
        self.players = player_manager
        self.turn_manager = turn_manager
        self.log_event = log_event
        self.last_activity = time.time()

        self.log_event("ROOM_INIT", f"Room {self.id} created.", room_id=self.id)

    # --- Helpers ---

    def get_all_sids(self) -> List[str]:
        return self.players.get_all_sids()

    def get_all_credentials(self) -> List[str]:
        return self.players.get_all_credentials()

    def find_seat_by_credential(self, credential: str) -> Optional[str]:
        return self.players.find_seat_by_credential(credential)

    def is_empty(self) -> bool:
        return self.players.is_empty()

    def status(self) -> str:
        if self.state.game.winner is not None:
            return STATUS_FINISHED
        if self.players.both_ready():
            return STATUS_PLAYING
        return STATUS_WAITING

    def _broadcast(self, payload: Dict[str, Any]) -> List[Notification]:
        return [notify(sid, payload) for sid in self.get_all_sids()]

    def _restart_match(self, first_seat_color: str) -> None:
        self.state.game = initialize(self.state.game.board_size, first_seat_color)
        self.state.clear_rematch_votes()
        self.state.version += 1

    # --- Payloads ---

    def room_state_payload(self) -> Dict[str, Any]:
        game = self.state.game
        return {
            'type': 'roomState',
            'roomId': self.id,
            'version': self.state.version,
            'state': serialize_game_state(game),
            'players': self.players.players_view(game.color_assignment, self.state.host_seat),
            'readyMap': dict(self.players.ready),
            'rematchVotes': dict(self.state.rematch_votes),
        }

    def broadcast_room_state(self) -> List[Notification]:
        return self._broadcast(self.room_state_payload())

    def joined_payload(self, seat: str, username: str, session_id: Optional[str] = None) -> Dict[str, Any]:
        payload = {
            'type': 'joined',
            'roomId': self.id,
            'seat': seat,
            'color': self.state.game.color_assignment[seat],
            'isHost': self.state.host_seat == seat,
            'username': username,
        }
        if session_id:
            payload['sessionId'] = session_id
        return payload

    def summary(self) -> Dict[str, Any]:
        host_seat = self.state.host_seat
        host = self.players.players[host_seat]
        return {
            'roomId': self.id,
            'hostName': host.name if host else '-',
            'hostColor': self.state.game.color_assignment[host_seat],
            'players': len(self.players.occupied_seats()),
            'status': self.status(),
        }

    # --- Membership ---

    def setup_host(self, credential: str, name: str, sid: str) -> None:
        self.players.seat_player(SEAT_FIRST, credential, name, sid)
        self.state.host_seat = SEAT_FIRST

    def join(self, credential: str, name: str, sid: str) -> Tuple[Optional[str], bool]:
        """
        Seats a player. A credential that already holds a seat gets it back
        even if the room is full. Returns (seat, is_reconnect); seat is None
        when the room is full.
        """
        self.last_activity = time.time()
        seat = self.players.find_seat_by_credential(credential)
        if seat is None:
            seat = self.players.first_open_seat()
        if seat is None:
            return None, False

        is_reconnect = self.players.seat_player(seat, credential, name, sid)
        self.state.rematch_votes[seat] = None
        return seat, is_reconnect

    def _vacate(self, seat: str) -> None:
        self.players.vacate_seat(seat)
        self.state.rematch_votes[seat] = None
        if self.is_empty():
            return
        if self.state.host_seat == seat:
            self.state.host_seat = self.players.occupied_seats()[0]
            self.log_event("HOST_CHANGED", f"Host -> {self.state.host_seat}.", room_id=self.id)

    def leave(self, seat: str) -> List[Notification]:
        """Explicit leave: no grace period."""
        self._vacate(seat)
        if self.is_empty():
            return []
        notifications = self._broadcast({'type': 'playerLeft', 'roomId': self.id, 'seat': seat})
        notifications.extend(self.broadcast_room_state())
        return notifications

    def handle_disconnect(self, seat: str) -> List[Notification]:
        self.players.handle_disconnect(seat)
        notifications = self._broadcast({'type': 'playerLeft', 'roomId': self.id, 'seat': seat})
        notifications.extend(self.broadcast_room_state())
        return notifications

    def expire_seat(self, seat: str, timer: Any) -> Optional[List[Notification]]:
        """
        Called when an eviction timer fires. Returns None when the timer is
        stale (seat reclaimed or timer replaced), else the notifications.
        """
        if not self.players.is_current_timer(seat, timer):
            return None
        self.players.clear_timer(seat)
        player = self.players.players[seat]
        if player is None or player.online:
            return None

        self.log_event("SEAT_EXPIRED", f"Seat {seat} ('{player.name}') not reclaimed in time.", room_id=self.id)
        self._vacate(seat)
        if self.is_empty():
            return []
        return self.broadcast_room_state()

    def close(self) -> None:
        self.players.cancel_all_timers()

    # --- Match flow ---

    def set_player_ready(self, seat: str) -> List[Notification]:
        if self.players.set_ready(seat):
            self._restart_match(self.state.game.color_assignment[SEAT_FIRST])
            self.log_event("MATCH_START", f"Both seats ready, version {self.state.version}.", room_id=self.id)
        return self.broadcast_room_state()

    def apply_action(self, seat: str, sid: str, seq: Optional[int], action: Dict[str, Any]) -> List[Notification]:
        self.last_activity = time.time()
        return self.turn_manager.apply_action(self.state, self.players, seat, sid, seq, action)

    def request_rematch(self, seat: str, sid: str, swap_colors: bool) -> List[Notification]:
        self.state.rematch_votes[seat] = swap_colors

        if self.state.host_seat != seat:
            return [error(sid, ErrorCode.NOT_HOST, "Only the host can start a rematch.")]
        if not self.players.is_full():
            return [error(sid, ErrorCode.INVALID_ACTION, "Both players must be in the room.")]
        if self.state.game.winner is None:
            return [error(sid, ErrorCode.INVALID_ACTION, "The current match has not ended.")]

        first_color = self.state.game.color_assignment[SEAT_FIRST]
        if swap_colors:
            first_color = opponent_color(first_color)

        self._restart_match(first_color)
        self.players.force_all_ready()
        self.log_event("REMATCH", f"Rematch started (swapColors={swap_colors}).", room_id=self.id)

        notifications = self._broadcast({'type': 'rematchRequested', 'roomId': self.id, 'swapColors': swap_colors})
        notifications.extend(self.broadcast_room_state())
        return notifications
