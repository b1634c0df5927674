# skill_gomoku/services/room_service.py

import datetime
import logging
import queue
import threading
from typing import Any, Dict, List, Optional

from skill_gomoku.game_core import COLOR_BLACK
from .account_service import AccountStore
from .client_session import ClientSession
from .errors import ErrorCode
from .notifications import Notification, auth_error, error, notify
from .room_factory import RoomFactory
from .room_player_manager import TimerFactory
from .room_registry import RoomRegistry
from .room_session import RoomSession
from .session_registry import SessionRegistry

logger = logging.getLogger(__name__)

AUTH_MESSAGES = ('register', 'login', 'authWithToken')


class RoomService:
    """
    Room Manager. Owns the connection table, the room collection and the
    credential -> room associations, and turns every inbound message into a
    list of notifications for the transport to emit.

    Every public method runs under one re-entrant lock. Eviction timers fire
    on their own thread; their notifications go through `notification_queue`.
    """

    def __init__(self,
                 config: Dict[str, Any],
                 account_store: AccountStore,
                 session_registry: SessionRegistry,
                 notification_queue: queue.Queue,
                 registry: Optional[RoomRegistry] = None,
                 app=None,
                 log_event_func=None,
                 timer_factory: Optional[TimerFactory] = None):
        try:
            self.config = {
                'MAX_ROOMS': config['MAX_ROOMS'],
                'RECONNECT_GRACE_SEC': config['RECONNECT_GRACE_SEC'],
                'DEFAULT_BOARD_SIZE': config['DEFAULT_BOARD_SIZE'],
            }
        except KeyError as e:
            raise KeyError(f"RoomService: missing config key {e}.")

        self.app = app
        self.log_event = log_event_func or (lambda *args, **kwargs: None)
        self.accounts = account_store
        self.sessions = session_registry
        self.notification_queue = notification_queue
        self.registry = registry or RoomRegistry(log_event_func=self.log_event)
        self.factory = RoomFactory(
            log_event=self.log_event,
            board_size=self.config['DEFAULT_BOARD_SIZE'],
            grace_period_sec=self.config['RECONNECT_GRACE_SEC'],
            expire_callback=self._on_seat_expired,
            timer_factory=timer_factory,
        )

        self.clients: Dict[str, ClientSession] = {}
        self.lock = threading.RLock()

    ### Private helpers ###

    def _client(self, sid: str) -> ClientSession:
        client = self.clients.get(sid)
        if client is None:
            client = self.clients[sid] = ClientSession(sid=sid)
        return client

    def _seated_room(self, client: ClientSession) -> Optional[RoomSession]:
        if not client.is_seated:
            return None
        room = self.registry.get_by_room_id(client.room_id)
        if room is None or room.players.sockets.get(client.seat) != client.sid:
            # The seat was vacated or taken over by another connection.
            client.unbind_seat()
            return None
        return room

    def _allocate_room_id(self) -> str:
        room_id = self.factory.next_room_id()
        while self.registry.get_by_room_id(room_id) is not None:
            room_id = self.factory.next_room_id()
        return room_id

    def _destroy_room(self, room: RoomSession) -> None:
        room.close()
        self.registry.remove_room_by_id(room.id)
        self.log_event("ROOM_DESTROYED", f"Room {room.id} is empty and was removed.", room_id=room.id)

    def _seat_client(self, client: ClientSession, room: RoomSession, seat: str) -> None:
        self.registry.associate_credential(client.credential, room.id)
        client.bind_seat(room.id, seat)

    ### Lobby ###

    def lobby_payload(self) -> Dict[str, Any]:
        return {
            'type': 'lobbyState',
            'maxRooms': self.config['MAX_ROOMS'],
            'rooms': [room.summary() for room in self.registry.all_rooms()],
        }

    def list_rooms(self, sid: str) -> List[Notification]:
        with self.lock:
            return [notify(sid, self.lobby_payload())]

    def _broadcast_lobby(self) -> List[Notification]:
        """Lobby refresh for every authenticated connection that is not seated."""
        recipients = [c.sid for c in self.clients.values() if c.is_authenticated and not c.is_seated]
        if not recipients:
            return []
        payload = self.lobby_payload()
        return [notify(sid, payload) for sid in recipients]

    ### Connection lifecycle ###

    def attach_client(self, sid: str) -> None:
        with self.lock:
            self._client(sid)
        self.log_event("SESSION_START", "Connection opened.", sid=sid)

    def handle_disconnect(self, sid: str) -> List[Notification]:
        """Transport-initiated. Keeps the seat for the grace period."""
        with self.lock:
            client = self.clients.pop(sid, None)
            if client is None:
                return []

            duration = datetime.datetime.now() - client.connect_time
            duration_str = str(datetime.timedelta(seconds=int(duration.total_seconds())))
            self.log_event(
                "SESSION_END",
                f"'{client.username or 'anonymous'}' disconnected. Session duration: {duration_str}",
                sid=sid, room_id=client.room_id
            )

            room = self._seated_room(client)
            if room is None:
                return []

            notifications = room.handle_disconnect(client.seat)
            notifications.extend(self._broadcast_lobby())
            return notifications

    def _on_seat_expired(self, room_id: str, seat: str, timer: Any) -> None:
        """Eviction timer callback; runs on the timer's thread."""
        if self.app is not None:
            with self.app.app_context():
                notifications = self._expire_seat(room_id, seat, timer)
        else:
            notifications = self._expire_seat(room_id, seat, timer)

        for notification in notifications:
            self.notification_queue.put(notification)

    def _expire_seat(self, room_id: str, seat: str, timer: Any) -> List[Notification]:
        with self.lock:
            room = self.registry.get_by_room_id(room_id)
            if room is None:
                return []

            player = room.players.players.get(seat)
            notifications = room.expire_seat(seat, timer)
            if notifications is None:
                return []

            if player is not None:
                self.registry.disassociate_credential(player.credential)
            if room.is_empty():
                self._destroy_room(room)

            notifications.extend(self._broadcast_lobby())
            return notifications

    ### Authentication ###

    def _authenticate(self, client: ClientSession, username: str) -> List[Notification]:
        token = self.sessions.issue_token(username)
        client.username = username
        client.credential = token
        client.guest = False
        self.log_event("AUTH_OK", f"Authenticated as '{username}'.", sid=client.sid)
        return [
            notify(client.sid, {'type': 'authOk', 'username': username, 'token': token}),
            notify(client.sid, self.lobby_payload()),
        ]

    def _refuse_auth_while_seated(self, client: ClientSession) -> Optional[List[Notification]]:
        if self._seated_room(client) is not None:
            return [error(client.sid, ErrorCode.INVALID_ACTION, "Leave the room before switching accounts.")]
        return None

    def register(self, sid: str, username: str, password: str) -> List[Notification]:
        with self.lock:
            client = self._client(sid)
            refused = self._refuse_auth_while_seated(client)
            if refused:
                return refused

            result = self.accounts.register_user(username, password)
            if result['status'] != 'success':
                return [auth_error(sid, result['code'], result['message'])]
            return self._authenticate(client, result['username'])

    def login(self, sid: str, username: str, password: str) -> List[Notification]:
        with self.lock:
            client = self._client(sid)
            refused = self._refuse_auth_while_seated(client)
            if refused:
                return refused

            canonical = self.accounts.authenticate_user(username, password)
            if canonical is None:
                return [auth_error(sid, ErrorCode.AUTH_FAILED, "Invalid username or password.")]
            return self._authenticate(client, canonical)

    def auth_with_token(self, sid: str, token: str) -> List[Notification]:
        with self.lock:
            client = self._client(sid)
            refused = self._refuse_auth_while_seated(client)
            if refused:
                return refused

            username = self.sessions.resolve_token(token)
            if username is None:
                return [auth_error(sid, ErrorCode.AUTH_FAILED, "Unknown token.")]

            client.username = username
            client.credential = token
            client.guest = False
            self.log_event("AUTH_RESTORED", f"Token restored '{username}'.", sid=sid)
            return [
                notify(sid, {'type': 'authOk', 'username': username, 'token': token}),
                notify(sid, self.lobby_payload()),
            ]

    ### Room operations ###

    def create_room(self, sid: str, preferred_color: Optional[str] = None) -> List[Notification]:
        with self.lock:
            client = self._client(sid)
            if self.registry.get_room_id_by_credential(client.credential):
                return [error(sid, ErrorCode.ALREADY_IN_ROOM, "You already hold a seat in a room.")]
            if self.registry.count() >= self.config['MAX_ROOMS']:
                return [error(sid, ErrorCode.ROOM_LIMIT_REACHED, "The room limit has been reached.")]

            room = self.factory.create_room(preferred_color or COLOR_BLACK, room_id=self._allocate_room_id())
            return self._open_room_as_host(client, room)

    def _open_room_as_host(self, client: ClientSession, room: RoomSession,
                           session_id: Optional[str] = None) -> List[Notification]:
        seat = room.state.host_seat
        room.setup_host(client.credential, client.username, client.sid)
        self.registry.add_room(room)
        self._seat_client(client, room, seat)
        self.log_event("ROOM_CREATE", f"'{client.username}' opened the room.", sid=client.sid, room_id=room.id)

        notifications = [
            notify(client.sid, {'type': 'roomCreated', 'roomId': room.id}),
            notify(client.sid, room.joined_payload(seat, client.username, session_id)),
        ]
        notifications.extend(room.broadcast_room_state())
        notifications.extend(self._broadcast_lobby())
        return notifications

    def _adopt_session_identity(self, client: ClientSession, player_name: str,
                                session_id: Optional[str]) -> Optional[str]:
        """Session-less join: resolves or issues a session id. Returns it, or None for a blank name."""
        name = player_name.strip()
        if not name:
            return None

        if session_id and self.sessions.resolve_session(session_id) is not None:
            self.sessions.rename_session(session_id, name)
        else:
            session_id = self.sessions.issue_session_id(name)

        client.username = name
        client.credential = session_id
        client.guest = True
        return session_id

    def join_room(self, sid: str, room_id: str, player_name: Optional[str] = None,
                  session_id: Optional[str] = None) -> List[Notification]:
        with self.lock:
            client = self._client(sid)

            # --- 1. Identity ---
            issued_session = None
            wants_session = player_name is not None and (client.guest or not client.is_authenticated)
            if wants_session and self._seated_room(client) is None:
                issued_session = self._adopt_session_identity(client, player_name, session_id)
                if issued_session is None:
                    return [error(sid, ErrorCode.INVALID_ACTION, "Player name must not be empty.")]
            elif client.guest:
                issued_session = client.credential

            if not client.is_authenticated:
                return [error(sid, ErrorCode.AUTH_REQUIRED, "Authenticate first.")]

            # --- 2. Guard clauses ---
            held_room_id = self.registry.get_room_id_by_credential(client.credential)
            if held_room_id and held_room_id != room_id:
                return [error(sid, ErrorCode.ALREADY_IN_ROOM, "You already hold a seat in another room.")]

            room = self.registry.get_by_room_id(room_id)
            if room is None:
                if not client.guest:
                    return [error(sid, ErrorCode.ROOM_NOT_FOUND, f"Room {room_id} does not exist.")]
                if self.registry.count() >= self.config['MAX_ROOMS']:
                    return [error(sid, ErrorCode.ROOM_LIMIT_REACHED, "The room limit has been reached.")]
                room = self.factory.create_room(COLOR_BLACK, room_id=room_id)
                return self._open_room_as_host(client, room, issued_session)

            # --- 3. Seat ---
            previous_seat = room.find_seat_by_credential(client.credential)
            previous_sid = room.players.sockets.get(previous_seat) if previous_seat else None

            seat, is_reconnect = room.join(client.credential, client.username, sid)
            if seat is None:
                return [error(sid, ErrorCode.ROOM_FULL, f"Room {room_id} is full.")]

            if previous_sid and previous_sid != sid:
                # Another connection of the same credential held the seat; it loses it.
                stale_client = self.clients.get(previous_sid)
                if stale_client is not None:
                    stale_client.unbind_seat()

            self._seat_client(client, room, seat)
            self.log_event(
                "ROOM_REJOIN" if is_reconnect else "ROOM_JOIN",
                f"'{client.username}' took seat {seat}.", sid=sid, room_id=room.id
            )

            notifications = [notify(sid, room.joined_payload(seat, client.username, issued_session))]
            notifications.extend(room.broadcast_room_state())
            notifications.extend(self._broadcast_lobby())
            return notifications

    def leave_room(self, sid: str) -> List[Notification]:
        with self.lock:
            client = self._client(sid)
            room = self._seated_room(client)
            if room is None:
                return []

            seat = client.seat
            notifications = room.leave(seat)
            self.registry.disassociate_credential(client.credential)
            client.unbind_seat()
            self.log_event("ROOM_LEAVE", f"'{client.username}' left seat {seat}.", sid=sid, room_id=room.id)

            if room.is_empty():
                self._destroy_room(room)

            notifications.extend(self._broadcast_lobby())
            return notifications

    def ready(self, sid: str) -> List[Notification]:
        with self.lock:
            client = self._client(sid)
            room = self._seated_room(client)
            if room is None:
                return [error(sid, ErrorCode.INVALID_ACTION, "You are not seated in a room.")]

            notifications = room.set_player_ready(client.seat)
            notifications.extend(self._broadcast_lobby())
            return notifications

    def dispatch_action(self, sid: str, room_id: Optional[str], seq: Optional[int],
                        action: Dict[str, Any]) -> List[Notification]:
        with self.lock:
            client = self._client(sid)
            room = self._seated_room(client)
            if room is None:
                return [notify(sid, {
                    'type': 'actionRejected',
                    'roomId': room_id,
                    'seq': seq,
                    'code': ErrorCode.INVALID_ACTION,
                    'message': "You are not seated in a room.",
                })]

            status_before = room.status()
            notifications = room.apply_action(client.seat, sid, seq, action)
            if room.status() != status_before:
                notifications.extend(self._broadcast_lobby())
            return notifications

    def request_rematch(self, sid: str, swap_colors: bool) -> List[Notification]:
        with self.lock:
            client = self._client(sid)
            room = self._seated_room(client)
            if room is None:
                return [error(sid, ErrorCode.INVALID_ACTION, "You are not seated in a room.")]

            version_before = room.state.version
            notifications = room.request_rematch(client.seat, sid, swap_colors)
            if room.state.version != version_before:
                notifications.extend(self._broadcast_lobby())
            return notifications

    ### Dispatch ###

    def handle_message(self, sid: str, message: Dict[str, Any]) -> List[Notification]:
        """Routes one validated client message by its `type`."""
        msg_type = message['type']

        if msg_type == 'ping':
            return [notify(sid, {'type': 'pong'})]

        if msg_type == 'register':
            return self.register(sid, message['username'], message['password'])
        if msg_type == 'login':
            return self.login(sid, message['username'], message['password'])
        if msg_type == 'authWithToken':
            return self.auth_with_token(sid, message['token'])

        if msg_type == 'joinRoom':
            return self.join_room(
                sid, message['roomId'],
                player_name=message.get('playerName'),
                session_id=message.get('sessionId'),
            )

        with self.lock:
            if not self._client(sid).is_authenticated:
                return [error(sid, ErrorCode.AUTH_REQUIRED, "Authenticate first.")]

            if msg_type == 'listRooms':
                return self.list_rooms(sid)
            if msg_type == 'createRoom':
                return self.create_room(sid, message.get('preferredColor'))
            if msg_type == 'leaveRoom':
                return self.leave_room(sid)
            if msg_type == 'ready':
                return self.ready(sid)
            if msg_type == 'actionIntent':
                return self.dispatch_action(sid, message.get('roomId'), message.get('seq'), message['action'])
            if msg_type == 'rematchRequest':
                return self.request_rematch(sid, bool(message.get('swapColors', False)))

        logger.debug(f"[RoomService] Unhandled message type '{msg_type}' from {sid}")
        return []
