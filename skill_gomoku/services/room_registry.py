# skill_gomoku/services/room_registry.py

import threading
from typing import Dict, List, Optional

from .room_session import RoomSession


class RoomRegistry:
    """
    Stores and looks up live rooms, and which room each credential holds a
    seat in. Thread-safe.
    """
    def __init__(self, log_event_func=None):
        self.rooms: Dict[str, RoomSession] = {}  # room_id -> RoomSession
        self.credential_to_room_id: Dict[str, str] = {}

        self.lock = threading.RLock()
        self.log_event = log_event_func or (lambda *args, **kwargs: None)

    def add_room(self, room: RoomSession) -> None:
        with self.lock:
            if room.id in self.rooms:
                self.log_event("REGISTRY_WARN", f"Room {room.id} already registered.", room_id=room.id)
                return

            self.rooms[room.id] = room
            for credential in room.get_all_credentials():
                self.credential_to_room_id[credential] = room.id

            self.log_event("REGISTRY_ADD", f"Room {room.id} added. Rooms: {len(self.rooms)}", room_id=room.id)

    def remove_room_by_id(self, room_id: str) -> Optional[RoomSession]:
        with self.lock:
            room = self.rooms.pop(room_id, None)
            if room is None:
                self.log_event("REGISTRY_WARN", f"Tried to remove unknown room {room_id}", room_id=room_id)
                return None

            stale = [cred for cred, rid in self.credential_to_room_id.items() if rid == room_id]
            for credential in stale:
                del self.credential_to_room_id[credential]

            self.log_event("REGISTRY_REMOVE", f"Room {room_id} removed. Rooms left: {len(self.rooms)}", room_id=room_id)
            return room

    def get_by_room_id(self, room_id: str) -> Optional[RoomSession]:
        with self.lock:
            return self.rooms.get(room_id)

    def get_room_id_by_credential(self, credential: Optional[str]) -> Optional[str]:
        if not credential:
            return None
        with self.lock:
            return self.credential_to_room_id.get(credential)

    def associate_credential(self, credential: str, room_id: str) -> None:
        with self.lock:
            if room_id not in self.rooms:
                self.log_event("REGISTRY_WARN", f"Tried to bind a credential to unknown room {room_id}", room_id=room_id)
                return
            self.credential_to_room_id[credential] = room_id

    def disassociate_credential(self, credential: Optional[str]) -> Optional[str]:
        if not credential:
            return None
        with self.lock:
            return self.credential_to_room_id.pop(credential, None)

    def count(self) -> int:
        with self.lock:
            return len(self.rooms)

    def all_rooms(self) -> List[RoomSession]:
        """Live rooms ordered by id."""
        with self.lock:
            return [self.rooms[room_id] for room_id in sorted(self.rooms)]
