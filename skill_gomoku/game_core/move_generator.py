# skill_gomoku/game_core/move_generator.py

from typing import Any, Dict, List

from . import constants as c
from .board_state import GameState, color_to_cell, get_cell, opponent_color, seat_by_color


def _is_current(state: GameState, color: str) -> bool:
    return state.winner is None and color == state.current_turn_color


def _cells_with_value(state: GameState, value: int) -> List[Dict[str, int]]:
    size = state.board_size
    return [
        {"x": x, "y": y}
        for y in range(size)
        for x in range(size)
        if get_cell(state.board, size, x, y) == value
    ]


def list_legal_placements(state: GameState, color: str) -> List[Dict[str, int]]:
    """
    Every empty cell, row-major. Empty when the game is over or it is not
    `color`'s turn. Meant for UI hints; the server re-validates every action.
    """
    if not _is_current(state, color):
        return []
    return _cells_with_value(state, c.CELL_EMPTY)


def list_legal_skill_targets(state: GameState, skill: str, color: str) -> List[Dict[str, Any]]:
    """Every target `skill` would accept right now, in a stable order."""
    if not _is_current(state, color) or skill not in c.SKILLS:
        return []
    if state.skill_usage[seat_by_color(state, color)][skill]:
        return []

    if skill == c.SKILL_CLEAR_STONE:
        return _cells_with_value(state, color_to_cell(opponent_color(color)))
    if skill == c.SKILL_DAMAGE_CELL:
        return _cells_with_value(state, c.CELL_EMPTY)

    targets = []
    for index in range(state.board_size):
        targets.append({"axis": c.AXIS_ROW, "index": index})
        targets.append({"axis": c.AXIS_COL, "index": index})
    return targets
