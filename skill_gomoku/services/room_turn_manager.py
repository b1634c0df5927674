# skill_gomoku/services/room_turn_manager.py

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from skill_gomoku.game_core import apply_action, serialize_game_state
from .errors import ErrorCode, error_code_for_failure
from .notifications import Notification, notify

if TYPE_CHECKING:
    from .room_state import RoomState
    from .room_player_manager import RoomPlayerManager


class RoomTurnManager:
    """
    Runs one action intent through the engine: guard checks, engine call,
    version bump and the resulting broadcasts.
    """
    def __init__(self, room_id: str, log_event: Callable):
        self.room_id = room_id
        self.log_event = log_event

    def _reject(self, sid: str, seq: Optional[int], code: str, message: str) -> List[Notification]:
        return [notify(sid, {
            'type': 'actionRejected',
            'roomId': self.room_id,
            'seq': seq,
            'code': code,
            'message': message,
        })]

    def apply_action(
        self,
        room_state: 'RoomState',
        player_manager: 'RoomPlayerManager',
        seat: str,
        sid: str,
        seq: Optional[int],
        action: Dict[str, Any],
    ) -> List[Notification]:
        """
        Returns the notifications to emit. On any refusal only the acting
        connection hears about it and the room is left untouched.
        """
        # --- 1. Guard clauses ---

        if not player_manager.both_ready():
            return self._reject(sid, seq, ErrorCode.INVALID_ACTION, "The match has not started.")

        seat_color = room_state.game.color_assignment[seat]
        if action.get('color') != seat_color:
            return self._reject(sid, seq, ErrorCode.NOT_YOUR_TURN, "Action color does not match your seat.")

        # --- 2. Engine ---

        result = apply_action(room_state.game, action)
        if not result.ok:
            self.log_event(
                "ACTION_REJECTED", f"{action.get('type')} refused: {result.failure.value}",
                sid=sid, room_id=self.room_id
            )
            return self._reject(sid, seq, error_code_for_failure(result.failure), result.message)

        # --- 3. Commit and broadcast ---

        room_state.game = result.state
        room_state.version += 1
        room_state.clear_rematch_votes()

        state_payload = serialize_game_state(room_state.game)
        sids = player_manager.get_all_sids()

        notifications = [notify(s, {
            'type': 'actionApplied',
            'roomId': self.room_id,
            'seq': seq,
            'version': room_state.version,
            'action': action,
            'state': state_payload,
        }) for s in sids]

        winner = room_state.game.winner
        if winner is not None:
            self.log_event(
                "GAME_OVER", f"{winner.color} ({winner.seat}) wins.",
                room_id=self.room_id, extra_data=winner.line_cells
            )
            notifications.extend(notify(s, {
                'type': 'gameOver',
                'roomId': self.room_id,
                'winner': {'seat': winner.seat, 'color': winner.color},
                'version': room_state.version,
                'state': state_payload,
            }) for s in sids)

        return notifications
