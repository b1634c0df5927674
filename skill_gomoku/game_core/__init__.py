# skill_gomoku/game_core/__init__.py

# Public API of the game engine
from .constants import (
    DEFAULT_BOARD_SIZE, COLOR_BLACK, COLOR_WHITE, COLORS, SEAT_FIRST, SEAT_SECOND, SEATS,
    ACTION_PLACE, ACTION_USE_SKILL,
    SKILL_CLEAR_STONE, SKILL_DAMAGE_CELL, SKILL_LINE_CLEAR, SKILLS,
)

from .board_state import (
    GameState,
    WinnerInfo,
    initialize,
    opponent_color,
    seat_by_color,
    current_seat,
)

from .move_validator import (
    EngineFailure,
    EngineResult,
)

from .moves import (
    apply_placement,
    apply_skill,
    apply_action,
)

from .move_generator import (
    list_legal_placements,
    list_legal_skill_targets,
)

from .utils import (
    WinnerResult,
    check_winner,
)

from .serialization import (
    serialize_game_state,
    deserialize_game_state,
)
