# skill_gomoku/game_core/serialization.py

from typing import Any, Dict

from .board_state import GameState, WinnerInfo


def serialize_game_state(state: GameState) -> Dict[str, Any]:
    """Wire form of a GameState (plain JSON types only)."""
    winner = None
    if state.winner is not None:
        winner = {
            "color": state.winner.color,
            "seat": state.winner.seat,
            "lineCells": [{"x": x, "y": y} for x, y in state.winner.line_cells],
        }

    return {
        "boardSize": state.board_size,
        "board": list(state.board),
        "currentTurnColor": state.current_turn_color,
        "colorAssignment": dict(state.color_assignment),
        "skillUsage": {seat: dict(flags) for seat, flags in state.skill_usage.items()},
        "winner": winner,
    }


def deserialize_game_state(data: Dict[str, Any]) -> GameState:
    winner_data = data.get("winner")
    winner = None
    if winner_data:
        winner = WinnerInfo(
            color=winner_data["color"],
            seat=winner_data["seat"],
            line_cells=[(cell["x"], cell["y"]) for cell in winner_data["lineCells"]],
        )

    return GameState(
        board_size=data["boardSize"],
        board=[int(v) for v in data["board"]],
        current_turn_color=data["currentTurnColor"],
        color_assignment=dict(data["colorAssignment"]),
        skill_usage={seat: dict(flags) for seat, flags in data["skillUsage"].items()},
        winner=winner,
    )
