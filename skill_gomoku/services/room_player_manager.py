# skill_gomoku/services/room_player_manager.py

import threading
from typing import Any, Callable, Dict, List, Optional

from skill_gomoku.game_core import SEATS
from .room_state import RoomPlayer

# timer_factory(interval, function) -> object with start() / cancel()
TimerFactory = Callable[[float, Callable[[], None]], Any]


class RoomPlayerManager:
    """
    Owns the two seats of a room: who sits there, their live connection,
    readiness and the eviction timer that runs while they are offline.
    """
    def __init__(
        self,
        room_id: str,

        # --- Injected dependencies ---
        grace_period_sec: float,
        log_event: Callable,
        expire_callback: Callable[[str, str, Any], None],
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.room_id = room_id
        self.grace_period_sec = grace_period_sec
        self.log_event = log_event
        self.expire_callback = expire_callback
        self.timer_factory = timer_factory or threading.Timer

        self.players: Dict[str, Optional[RoomPlayer]] = {seat: None for seat in SEATS}
        # Connection handles are replaceable: swapped on reconnect, cleared on disconnect.
        self.sockets: Dict[str, Optional[str]] = {seat: None for seat in SEATS}
        self.ready: Dict[str, bool] = {seat: False for seat in SEATS}
        self.eviction_timers: Dict[str, Any] = {seat: None for seat in SEATS}

    # --- Lookups ---

    def find_seat_by_credential(self, credential: Optional[str]) -> Optional[str]:
        if not credential:
            return None
        for seat in SEATS:
            player = self.players[seat]
            if player and player.credential == credential:
                return seat
        return None

    def first_open_seat(self) -> Optional[str]:
        for seat in SEATS:
            if self.players[seat] is None:
                return seat
        return None

    def occupied_seats(self) -> List[str]:
        return [seat for seat in SEATS if self.players[seat] is not None]

    def is_empty(self) -> bool:
        return not self.occupied_seats()

    def is_full(self) -> bool:
        return len(self.occupied_seats()) == len(SEATS)

    def both_ready(self) -> bool:
        return all(self.ready[seat] for seat in SEATS)

    def get_all_sids(self) -> List[str]:
        return [sid for sid in self.sockets.values() if sid]

    def get_all_credentials(self) -> List[str]:
        return [p.credential for p in self.players.values() if p]

    # --- Seat lifecycle ---

    def seat_player(self, seat: str, credential: str, name: str, sid: str) -> bool:
        """
        Puts a player (back) into `seat`. Returns True when this was a
        reconnect of the same credential, which keeps readiness.
        """
        current = self.players[seat]
        is_reconnect = current is not None and current.credential == credential

        self._cancel_timer(seat)
        self.players[seat] = RoomPlayer(credential=credential, name=name, online=True)
        self.sockets[seat] = sid

        if not is_reconnect:
            self.ready[seat] = False

        self.log_event(
            "SEAT_RECLAIMED" if is_reconnect else "SEAT_TAKEN",
            f"Seat {seat} -> '{name}'.", sid=sid, room_id=self.room_id
        )
        return is_reconnect

    def vacate_seat(self, seat: str) -> Optional[RoomPlayer]:
        """Empties a seat immediately. Returns the player who sat there."""
        self._cancel_timer(seat)
        player = self.players[seat]
        self.players[seat] = None
        self.sockets[seat] = None
        self.ready[seat] = False
        self.log_event("SEAT_VACATED", f"Seat {seat} vacated.", room_id=self.room_id)
        return player

    def set_ready(self, seat: str) -> bool:
        """Marks a seat ready. Returns True if this made both seats ready."""
        if self.ready[seat]:
            return False
        self.ready[seat] = True
        return self.both_ready()

    def force_all_ready(self) -> None:
        for seat in SEATS:
            self.ready[seat] = True

    # --- Disconnect / eviction timer ---

    def _cancel_timer(self, seat: str) -> None:
        timer = self.eviction_timers[seat]
        if timer is not None:
            timer.cancel()
            self.eviction_timers[seat] = None

    def cancel_all_timers(self) -> None:
        for seat in SEATS:
            self._cancel_timer(seat)

    def handle_disconnect(self, seat: str) -> None:
        """Marks the seat offline and (re)starts its eviction timer."""
        player = self.players[seat]
        self.sockets[seat] = None
        if player:
            player.online = False

        self._cancel_timer(seat)
        timer = None

        def _fire():
            self.expire_callback(self.room_id, seat, timer)

        timer = self.timer_factory(self.grace_period_sec, _fire)
        self.eviction_timers[seat] = timer
        timer.start()
        self.log_event(
            "EVICTION_TIMER",
            f"Seat {seat} offline, evicting in {self.grace_period_sec}s unless reclaimed.",
            room_id=self.room_id
        )

    def is_current_timer(self, seat: str, timer: Any) -> bool:
        """A cancelled timer may still fire; only the stored handle counts."""
        return timer is not None and self.eviction_timers[seat] is timer

    def clear_timer(self, seat: str) -> None:
        self.eviction_timers[seat] = None

    # --- Views ---

    def players_view(self, color_assignment: Dict[str, str], host_seat: str) -> List[Dict[str, Any]]:
        view = []
        for seat in SEATS:
            player = self.players[seat]
            if not player:
                continue
            view.append({
                'seat': seat,
                'name': player.name,
                'color': color_assignment[seat],
                'online': player.online,
                'isHost': host_seat == seat,
            })
        return view
