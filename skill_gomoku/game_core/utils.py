# skill_gomoku/game_core/utils.py

from typing import NamedTuple, List, Optional

from . import constants as c
from .board_state import Coord, GameState, cell_to_color, get_cell, is_inside


class WinnerResult(NamedTuple):
    color: str
    line_cells: List[Coord]


def check_winner(state: GameState) -> Optional[WinnerResult]:
    """
    Finds the first line of WIN_LENGTH or more same-color stones.

    Cells are scanned row by row, and for each cell the directions in
    DIRECTIONS order. A run is only measured from its start (no same-color
    predecessor), so the reported cells are the first WIN_LENGTH of the run.
    """
    size = state.board_size
    board = state.board

    for y in range(size):
        for x in range(size):
            value = get_cell(board, size, x, y)
            color = cell_to_color(value)
            if color is None:
                continue

            for dx, dy in c.DIRECTIONS:
                px, py = x - dx, y - dy
                if is_inside(size, px, py) and get_cell(board, size, px, py) == value:
                    continue

                length = 0
                cx, cy = x, y
                while is_inside(size, cx, cy) and get_cell(board, size, cx, cy) == value:
                    length += 1
                    cx += dx
                    cy += dy

                if length >= c.WIN_LENGTH:
                    line_cells = [(x + dx * i, y + dy * i) for i in range(c.WIN_LENGTH)]
                    return WinnerResult(color=color, line_cells=line_cells)
    return None
