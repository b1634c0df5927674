# skill_gomoku/game_core/move_validator.py

from enum import Enum
from typing import Any, Mapping, NamedTuple, Optional

from . import constants as c
from .board_state import (
    GameState,
    color_to_cell,
    get_cell,
    is_inside,
    opponent_color,
    seat_by_color,
)


class EngineFailure(str, Enum):
    """Closed set of reasons a placement or skill can be refused."""
    GAME_ALREADY_OVER = "GameAlreadyOver"
    WRONG_TURN = "WrongTurn"
    OUT_OF_BOUNDS = "OutOfBounds"
    CELL_OCCUPIED = "CellOccupied"
    SKILL_ALREADY_USED = "SkillAlreadyUsed"
    INVALID_TARGET = "InvalidTarget"


FAILURE_MESSAGES = {
    EngineFailure.GAME_ALREADY_OVER: "game already ended",
    EngineFailure.WRONG_TURN: "not this color's turn",
    EngineFailure.OUT_OF_BOUNDS: "out of board",
    EngineFailure.CELL_OCCUPIED: "cell is not empty",
    EngineFailure.SKILL_ALREADY_USED: "skill already used",
    EngineFailure.INVALID_TARGET: "invalid target",
}


class EngineResult(NamedTuple):
    state: Optional[GameState]
    failure: Optional[EngineFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def message(self) -> str:
        return FAILURE_MESSAGES[self.failure] if self.failure else ""


def _is_int(value: Any) -> bool:
    # bool is an int subclass, but True is not a coordinate
    return isinstance(value, int) and not isinstance(value, bool)


def _check_turn(state: GameState, color: str) -> Optional[EngineFailure]:
    if state.winner is not None:
        return EngineFailure.GAME_ALREADY_OVER
    if color != state.current_turn_color:
        return EngineFailure.WRONG_TURN
    return None


def validate_placement(state: GameState, color: str, x: Any, y: Any) -> Optional[EngineFailure]:
    """Returns the reason a stone cannot go on (x, y), or None if it can."""
    failure = _check_turn(state, color)
    if failure:
        return failure
    if not (_is_int(x) and _is_int(y)) or not is_inside(state.board_size, x, y):
        return EngineFailure.OUT_OF_BOUNDS
    if get_cell(state.board, state.board_size, x, y) != c.CELL_EMPTY:
        return EngineFailure.CELL_OCCUPIED
    return None


def validate_cell_target(state: GameState, target: Mapping[str, Any], expected_cell: int) -> Optional[EngineFailure]:
    x, y = target.get("x"), target.get("y")
    if not (_is_int(x) and _is_int(y)) or not is_inside(state.board_size, x, y):
        return EngineFailure.INVALID_TARGET
    if get_cell(state.board, state.board_size, x, y) != expected_cell:
        return EngineFailure.INVALID_TARGET
    return None


def validate_line_target(state: GameState, target: Mapping[str, Any]) -> Optional[EngineFailure]:
    axis, index = target.get("axis"), target.get("index")
    if axis not in c.AXES or not _is_int(index):
        return EngineFailure.INVALID_TARGET
    if not 0 <= index < state.board_size:
        return EngineFailure.INVALID_TARGET
    return None


def validate_skill(state: GameState, color: str, skill: str, target: Any) -> Optional[EngineFailure]:
    """
    Checks, in order: game over, turn, skill kind, single use, target.
    The single-use check comes before the target so a reused skill is always
    reported as such.
    """
    failure = _check_turn(state, color)
    if failure:
        return failure
    if skill not in c.SKILLS:
        return EngineFailure.INVALID_TARGET

    seat = seat_by_color(state, color)
    if state.skill_usage[seat][skill]:
        return EngineFailure.SKILL_ALREADY_USED

    if not isinstance(target, Mapping):
        return EngineFailure.INVALID_TARGET

    if skill == c.SKILL_CLEAR_STONE:
        return validate_cell_target(state, target, color_to_cell(opponent_color(color)))
    if skill == c.SKILL_DAMAGE_CELL:
        return validate_cell_target(state, target, c.CELL_EMPTY)
    return validate_line_target(state, target)
