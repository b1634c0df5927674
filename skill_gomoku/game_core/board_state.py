# skill_gomoku/game_core/board_state.py

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from . import constants as c

Coord = Tuple[int, int]


@dataclass
class WinnerInfo:
    """Winning color, the seat that owns it and the 5 cells of the line."""
    color: str
    seat: str
    line_cells: List[Coord]


@dataclass
class GameState:
    """
    Full state of one match. The engine never mutates a GameState it was
    given: every transition returns a new instance.
    """
    board_size: int
    board: List[int]
    current_turn_color: str
    color_assignment: Dict[str, str]
    skill_usage: Dict[str, Dict[str, bool]]
    winner: Optional[WinnerInfo] = None


def _fresh_skill_usage() -> Dict[str, Dict[str, bool]]:
    return {seat: {skill: False for skill in c.SKILLS} for seat in c.SEATS}


def initialize(board_size: int = c.DEFAULT_BOARD_SIZE, first_seat_color: str = c.COLOR_BLACK) -> GameState:
    """
    Creates an empty board. Seat "first" gets `first_seat_color`,
    black always moves first.
    """
    if first_seat_color not in c.COLORS:
        raise ValueError(f"Unknown color: {first_seat_color!r}")
    if board_size < c.WIN_LENGTH:
        raise ValueError(f"Board size must be at least {c.WIN_LENGTH}, got {board_size}")

    return GameState(
        board_size=board_size,
        board=[c.CELL_EMPTY] * (board_size * board_size),
        current_turn_color=c.COLOR_BLACK,
        color_assignment={
            c.SEAT_FIRST: first_seat_color,
            c.SEAT_SECOND: opponent_color(first_seat_color),
        },
        skill_usage=_fresh_skill_usage(),
        winner=None,
    )


def copy_state(state: GameState, **changes) -> GameState:
    """Deep enough copy: board, assignment and skill flags are never shared."""
    fresh = replace(
        state,
        board=list(state.board),
        color_assignment=dict(state.color_assignment),
        skill_usage={seat: dict(flags) for seat, flags in state.skill_usage.items()},
    )
    return replace(fresh, **changes) if changes else fresh


# --- Cell helpers ---

def is_inside(size: int, x: int, y: int) -> bool:
    return 0 <= x < size and 0 <= y < size


def get_cell(board: List[int], size: int, x: int, y: int) -> int:
    return board[y * size + x]


def set_cell(board: List[int], size: int, x: int, y: int, value: int) -> None:
    board[y * size + x] = value


def color_to_cell(color: str) -> int:
    return c.CELL_BLACK if color == c.COLOR_BLACK else c.CELL_WHITE


def cell_to_color(cell: int) -> Optional[str]:
    if cell == c.CELL_BLACK:
        return c.COLOR_BLACK
    if cell == c.CELL_WHITE:
        return c.COLOR_WHITE
    return None


# --- Color / seat helpers ---

def opponent_color(color: str) -> str:
    return c.COLOR_WHITE if color == c.COLOR_BLACK else c.COLOR_BLACK


def seat_by_color(state: GameState, color: str) -> str:
    """Returns the seat that plays `color`."""
    return c.SEAT_FIRST if state.color_assignment[c.SEAT_FIRST] == color else c.SEAT_SECOND


def current_seat(state: GameState) -> str:
    return seat_by_color(state, state.current_turn_color)
