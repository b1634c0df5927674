# skill_gomoku/services/errors.py

from skill_gomoku.game_core import EngineFailure


class ErrorCode:
    """Error codes sent to clients in `error`, `authError` and `actionRejected`."""

    # --- Auth ---
    AUTH_REQUIRED = "AuthRequired"
    AUTH_FAILED = "AuthFailed"
    USER_EXISTS = "UserExists"

    # --- Room lifecycle ---
    ROOM_NOT_FOUND = "RoomNotFound"
    ROOM_FULL = "RoomFull"
    ALREADY_IN_ROOM = "AlreadyInRoom"
    ROOM_LIMIT_REACHED = "RoomLimitReached"
    NOT_HOST = "NotHost"

    # --- Actions ---
    NOT_YOUR_TURN = "NotYourTurn"
    SKILL_USED = "SkillUsed"
    INVALID_TARGET = "InvalidTarget"
    CELL_OCCUPIED = "CellOccupied"
    INVALID_ACTION = "InvalidAction"


ENGINE_FAILURE_CODES = {
    EngineFailure.WRONG_TURN: ErrorCode.NOT_YOUR_TURN,
    EngineFailure.SKILL_ALREADY_USED: ErrorCode.SKILL_USED,
    EngineFailure.INVALID_TARGET: ErrorCode.INVALID_TARGET,
    EngineFailure.CELL_OCCUPIED: ErrorCode.CELL_OCCUPIED,
    EngineFailure.GAME_ALREADY_OVER: ErrorCode.INVALID_ACTION,
    EngineFailure.OUT_OF_BOUNDS: ErrorCode.INVALID_ACTION,
}


def error_code_for_failure(failure: EngineFailure) -> str:
    return ENGINE_FAILURE_CODES.get(failure, ErrorCode.INVALID_ACTION)
