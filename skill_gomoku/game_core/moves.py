# skill_gomoku/game_core/moves.py

from typing import Any, Mapping

from . import constants as c
from .board_state import (
    GameState,
    WinnerInfo,
    color_to_cell,
    copy_state,
    get_cell,
    opponent_color,
    seat_by_color,
    set_cell,
)
from .move_validator import EngineResult, validate_placement, validate_skill
from .utils import check_winner


def apply_placement(state: GameState, color: str, x: int, y: int) -> EngineResult:
    """
    Places a stone of `color` on (x, y), passes the turn, then runs win
    detection. Returns a new state; `state` is left untouched.
    """
    failure = validate_placement(state, color, x, y)
    if failure:
        return EngineResult(None, failure)

    next_state = copy_state(state, current_turn_color=opponent_color(color))
    set_cell(next_state.board, next_state.board_size, x, y, color_to_cell(color))

    winner = check_winner(next_state)
    if winner:
        next_state.winner = WinnerInfo(
            color=winner.color,
            seat=seat_by_color(next_state, winner.color),
            line_cells=winner.line_cells,
        )
    return EngineResult(next_state)


def apply_skill(state: GameState, color: str, skill: str, target: Mapping[str, Any]) -> EngineResult:
    """
    Applies a skill for the side to move. Skills keep the turn and never
    trigger win detection.
    """
    failure = validate_skill(state, color, skill, target)
    if failure:
        return EngineResult(None, failure)

    next_state = copy_state(state)
    size = next_state.board_size
    board = next_state.board

    if skill == c.SKILL_CLEAR_STONE:
        set_cell(board, size, target["x"], target["y"], c.CELL_EMPTY)
    elif skill == c.SKILL_DAMAGE_CELL:
        set_cell(board, size, target["x"], target["y"], c.CELL_DAMAGED)
    else:
        index = target["index"]
        for i in range(size):
            x, y = (i, index) if target["axis"] == c.AXIS_ROW else (index, i)
            if get_cell(board, size, x, y) in (c.CELL_BLACK, c.CELL_WHITE):
                set_cell(board, size, x, y, c.CELL_EMPTY)

    next_state.skill_usage[seat_by_color(next_state, color)][skill] = True
    return EngineResult(next_state)


def apply_action(state: GameState, action: Mapping[str, Any]) -> EngineResult:
    """Dispatches a wire-form action (`place` or `useSkill`)."""
    if action.get("type") == c.ACTION_PLACE:
        return apply_placement(state, action.get("color"), action.get("x"), action.get("y"))
    return apply_skill(state, action.get("color"), action.get("skill"), action.get("target"))
