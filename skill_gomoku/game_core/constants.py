# skill_gomoku/game_core/constants.py

# === Board setup ===
DEFAULT_BOARD_SIZE = 15
WIN_LENGTH = 5

# === Cell values (wire form) ===
CELL_DAMAGED = -1
CELL_EMPTY = 0
CELL_BLACK = 1
CELL_WHITE = 2

# === Colors ===
COLOR_BLACK = "black"
COLOR_WHITE = "white"
COLORS = (COLOR_BLACK, COLOR_WHITE)

# === Seats ===
SEAT_FIRST = "first"
SEAT_SECOND = "second"
SEATS = (SEAT_FIRST, SEAT_SECOND)

# === Skills ===
# Removes one opponent stone
SKILL_CLEAR_STONE = "area-clear-on-opponent-stone"
# Turns one empty cell into a damaged cell
SKILL_DAMAGE_CELL = "area-damage-on-empty-cell"
# Removes every stone along one row or column
SKILL_LINE_CLEAR = "line-clear"
SKILLS = (SKILL_CLEAR_STONE, SKILL_DAMAGE_CELL, SKILL_LINE_CLEAR)

AXIS_ROW = "row"
AXIS_COL = "col"
AXES = (AXIS_ROW, AXIS_COL)

# === Actions ===
ACTION_PLACE = "place"
ACTION_USE_SKILL = "useSkill"

# Scan order: horizontal, vertical, diagonal down-right, diagonal up-right
DIRECTIONS = (
    (1, 0),
    (0, 1),
    (1, 1),
    (1, -1),
)
