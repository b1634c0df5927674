import pytest

from skill_gomoku.game_core import (
    COLOR_BLACK,
    COLOR_WHITE,
    SEAT_FIRST,
    SEAT_SECOND,
    SKILL_CLEAR_STONE,
    SKILL_DAMAGE_CELL,
    SKILL_LINE_CLEAR,
    SKILLS,
    EngineFailure,
    apply_action,
    apply_placement,
    apply_skill,
    check_winner,
    current_seat,
    deserialize_game_state,
    initialize,
    list_legal_placements,
    list_legal_skill_targets,
    serialize_game_state,
)
from skill_gomoku.game_core.board_state import get_cell, set_cell
from skill_gomoku.game_core.constants import CELL_BLACK, CELL_DAMAGED, CELL_EMPTY, CELL_WHITE
from skill_gomoku.services.errors import ENGINE_FAILURE_CODES, ErrorCode, error_code_for_failure


def play(state, *moves):
    """Applies placements for alternating colors, starting with the side to move."""
    for x, y in moves:
        result = apply_placement(state, state.current_turn_color, x, y)
        assert result.ok, result.failure
        state = result.state
    return state


def cell(state, x, y):
    return get_cell(state.board, state.board_size, x, y)


# --- initialize ---

def test_initialize_defaults():
    state = initialize()
    assert state.board_size == 15
    assert len(state.board) == 225
    assert all(v == CELL_EMPTY for v in state.board)
    assert state.current_turn_color == COLOR_BLACK
    assert state.color_assignment == {SEAT_FIRST: COLOR_BLACK, SEAT_SECOND: COLOR_WHITE}
    assert all(not used for flags in state.skill_usage.values() for used in flags.values())
    assert state.winner is None


def test_initialize_white_first_seat_still_black_moves_first():
    state = initialize(9, COLOR_WHITE)
    assert state.color_assignment == {SEAT_FIRST: COLOR_WHITE, SEAT_SECOND: COLOR_BLACK}
    assert state.current_turn_color == COLOR_BLACK
    assert current_seat(state) == SEAT_SECOND


@pytest.mark.parametrize("size, color", [(4, COLOR_BLACK), (15, "red")])
def test_initialize_rejects_bad_arguments(size, color):
    with pytest.raises(ValueError):
        initialize(size, color)


# --- placement ---

def test_placement_sets_cell_and_passes_turn_without_mutating_input():
    state = initialize()
    result = apply_placement(state, COLOR_BLACK, 7, 7)

    assert result.ok
    assert cell(result.state, 7, 7) == CELL_BLACK
    assert result.state.current_turn_color == COLOR_WHITE
    assert cell(state, 7, 7) == CELL_EMPTY
    assert state.current_turn_color == COLOR_BLACK


def test_placement_failures():
    state = play(initialize(), (7, 7))

    assert apply_placement(state, COLOR_BLACK, 0, 0).failure == EngineFailure.WRONG_TURN
    assert apply_placement(state, COLOR_WHITE, 7, 7).failure == EngineFailure.CELL_OCCUPIED
    assert apply_placement(state, COLOR_WHITE, 15, 0).failure == EngineFailure.OUT_OF_BOUNDS
    assert apply_placement(state, COLOR_WHITE, -1, 3).failure == EngineFailure.OUT_OF_BOUNDS
    assert apply_placement(state, COLOR_WHITE, "1", 3).failure == EngineFailure.OUT_OF_BOUNDS


def test_placement_on_damaged_cell_is_occupied():
    state = apply_skill(initialize(), COLOR_BLACK, SKILL_DAMAGE_CELL, {"x": 2, "y": 2}).state
    assert apply_placement(state, COLOR_BLACK, 2, 2).failure == EngineFailure.CELL_OCCUPIED


# --- win detection ---

def test_horizontal_five_wins_with_line_cells():
    # black: (3,5)..(7,5); white plays elsewhere
    state = play(initialize(), (3, 5), (0, 0), (4, 5), (0, 1), (5, 5), (0, 2), (6, 5), (10, 10))
    assert state.winner is None

    state = play(state, (7, 5))
    assert state.winner.color == COLOR_BLACK
    assert state.winner.seat == SEAT_FIRST
    assert state.winner.line_cells == [(3, 5), (4, 5), (5, 5), (6, 5), (7, 5)]


def test_anti_diagonal_win():
    # black on (2,6),(3,5),(4,4),(5,3),(6,2)
    state = play(initialize(), (2, 6), (0, 0), (3, 5), (0, 1), (4, 4), (0, 2), (5, 3), (0, 3), (6, 2))
    assert state.winner.color == COLOR_BLACK
    assert state.winner.line_cells == [(2, 6), (3, 5), (4, 4), (5, 3), (6, 2)]


def test_white_win_reports_its_seat():
    state = initialize(15, COLOR_WHITE)
    state = play(state, (0, 14), (5, 0), (2, 14), (5, 1), (4, 14), (5, 2), (6, 14), (5, 3), (8, 14), (5, 4))
    assert state.winner.color == COLOR_WHITE
    assert state.winner.seat == SEAT_FIRST
    assert state.winner.line_cells == [(5, 0), (5, 1), (5, 2), (5, 3), (5, 4)]


def test_four_with_gap_is_not_a_win():
    state = play(initialize(), (0, 0), (9, 9), (1, 0), (9, 10), (3, 0), (9, 12), (4, 0))
    assert state.winner is None


def test_six_in_a_row_reports_first_five_cells():
    state = initialize()
    for x in range(6):
        set_cell(state.board, 15, x, 4, CELL_WHITE)
    result = check_winner(state)
    assert result.color == COLOR_WHITE
    assert result.line_cells == [(0, 4), (1, 4), (2, 4), (3, 4), (4, 4)]


def test_first_line_in_scan_order_wins():
    state = initialize()
    for y in range(5):
        set_cell(state.board, 15, 10, y, CELL_WHITE)
    for x in range(5):
        set_cell(state.board, 15, x, 8, CELL_BLACK)
    # the vertical white run starts on row 0, the black run on row 8
    assert check_winner(state).color == COLOR_WHITE


def test_actions_after_win_are_refused():
    state = play(initialize(), (0, 0), (0, 1), (1, 0), (1, 1), (2, 0), (2, 1), (3, 0), (3, 1), (4, 0))
    assert state.winner is not None
    assert apply_placement(state, COLOR_WHITE, 9, 9).failure == EngineFailure.GAME_ALREADY_OVER
    assert apply_skill(state, COLOR_WHITE, SKILL_LINE_CLEAR, {"axis": "row", "index": 0}).failure \
        == EngineFailure.GAME_ALREADY_OVER


# --- skills ---

def test_clear_stone_removes_opponent_stone_and_keeps_turn():
    state = play(initialize(), (7, 7), (8, 8))
    result = apply_skill(state, COLOR_BLACK, SKILL_CLEAR_STONE, {"x": 8, "y": 8})

    assert result.ok
    assert cell(result.state, 8, 8) == CELL_EMPTY
    assert result.state.current_turn_color == COLOR_BLACK
    assert result.state.skill_usage[SEAT_FIRST][SKILL_CLEAR_STONE] is True
    assert result.state.skill_usage[SEAT_SECOND][SKILL_CLEAR_STONE] is False


def test_clear_stone_needs_an_opponent_stone():
    state = play(initialize(), (7, 7), (8, 8))
    assert apply_skill(state, COLOR_BLACK, SKILL_CLEAR_STONE, {"x": 7, "y": 7}).failure == EngineFailure.INVALID_TARGET
    assert apply_skill(state, COLOR_BLACK, SKILL_CLEAR_STONE, {"x": 0, "y": 0}).failure == EngineFailure.INVALID_TARGET


def test_damage_cell_needs_an_empty_cell():
    state = play(initialize(), (7, 7))
    assert apply_skill(state, COLOR_WHITE, SKILL_DAMAGE_CELL, {"x": 7, "y": 7}).failure == EngineFailure.INVALID_TARGET

    result = apply_skill(state, COLOR_WHITE, SKILL_DAMAGE_CELL, {"x": 6, "y": 6})
    assert result.ok
    assert cell(result.state, 6, 6) == CELL_DAMAGED


def test_line_clear_removes_stones_but_not_damage():
    state = play(initialize(), (1, 5), (2, 5), (3, 5), (3, 6))
    state = apply_skill(state, COLOR_BLACK, SKILL_DAMAGE_CELL, {"x": 9, "y": 5}).state

    result = apply_skill(state, COLOR_BLACK, SKILL_LINE_CLEAR, {"axis": "row", "index": 5})
    assert result.ok
    assert [cell(result.state, x, 5) for x in (1, 2, 3)] == [CELL_EMPTY] * 3
    assert cell(result.state, 9, 5) == CELL_DAMAGED
    assert cell(result.state, 3, 6) == CELL_WHITE


def test_line_clear_column():
    state = play(initialize(), (4, 0), (4, 1))
    result = apply_skill(state, COLOR_BLACK, SKILL_LINE_CLEAR, {"axis": "col", "index": 4})
    assert cell(result.state, 4, 0) == CELL_EMPTY
    assert cell(result.state, 4, 1) == CELL_EMPTY


def test_skill_is_single_use_regardless_of_target():
    state = play(initialize(), (5, 5), (6, 6))
    state = apply_skill(state, COLOR_BLACK, SKILL_LINE_CLEAR, {"axis": "row", "index": 5}).state

    for target in ({"axis": "row", "index": 5}, {"axis": "col", "index": 99}, {"x": 1, "y": 1}, None):
        result = apply_skill(state, COLOR_BLACK, SKILL_LINE_CLEAR, target)
        assert result.failure == EngineFailure.SKILL_ALREADY_USED


@pytest.mark.parametrize("skill, target", [
    (SKILL_LINE_CLEAR, {"x": 1, "y": 1}),
    (SKILL_LINE_CLEAR, {"axis": "diagonal", "index": 1}),
    (SKILL_LINE_CLEAR, {"axis": "row", "index": 15}),
    (SKILL_DAMAGE_CELL, {"axis": "row", "index": 1}),
    (SKILL_DAMAGE_CELL, "1,1"),
    ("teleport", {"x": 1, "y": 1}),
])
def test_target_shape_mismatch_is_invalid_target(skill, target):
    assert apply_skill(initialize(), COLOR_BLACK, skill, target).failure == EngineFailure.INVALID_TARGET


def test_skill_out_of_turn():
    assert apply_skill(initialize(), COLOR_WHITE, SKILL_DAMAGE_CELL, {"x": 0, "y": 0}).failure \
        == EngineFailure.WRONG_TURN


def test_skill_never_triggers_win_detection():
    state = initialize()
    for x in range(5):
        set_cell(state.board, 15, x, 0, CELL_BLACK)
    result = apply_skill(state, COLOR_BLACK, SKILL_DAMAGE_CELL, {"x": 9, "y": 9})
    assert result.ok
    assert result.state.winner is None


def test_apply_action_dispatches_wire_actions():
    state = apply_action(initialize(), {"type": "place", "color": "black", "x": 1, "y": 2}).state
    assert cell(state, 1, 2) == CELL_BLACK

    result = apply_action(state, {
        "type": "useSkill", "color": "white",
        "skill": SKILL_CLEAR_STONE, "target": {"x": 1, "y": 2},
    })
    assert result.ok
    assert cell(result.state, 1, 2) == CELL_EMPTY


# --- legal move listing ---

def test_legal_placements_are_row_major_and_turn_scoped():
    state = play(initialize(), (0, 0))
    placements = list_legal_placements(state, COLOR_WHITE)
    assert len(placements) == 224
    assert placements[0] == {"x": 1, "y": 0}
    assert list_legal_placements(state, COLOR_BLACK) == []


def test_legal_skill_targets():
    state = play(initialize(), (0, 0), (3, 3))
    assert list_legal_skill_targets(state, SKILL_CLEAR_STONE, COLOR_BLACK) == [{"x": 3, "y": 3}]
    assert len(list_legal_skill_targets(state, SKILL_DAMAGE_CELL, COLOR_BLACK)) == 223

    lines = list_legal_skill_targets(state, SKILL_LINE_CLEAR, COLOR_BLACK)
    assert len(lines) == 30
    assert lines[:3] == [{"axis": "row", "index": 0}, {"axis": "col", "index": 0}, {"axis": "row", "index": 1}]

    used = apply_skill(state, COLOR_BLACK, SKILL_LINE_CLEAR, {"axis": "row", "index": 0}).state
    assert list_legal_skill_targets(used, SKILL_LINE_CLEAR, COLOR_BLACK) == []


# --- serialization ---

def test_serialize_round_trip_with_winner_and_skills():
    state = play(initialize(), (7, 7), (8, 8))
    state = apply_skill(state, COLOR_BLACK, SKILL_DAMAGE_CELL, {"x": 0, "y": 14}).state
    state = play(state, (0, 0), (1, 1), (1, 0), (2, 1), (2, 0), (3, 1), (3, 0), (4, 1), (4, 0))
    assert state.winner is not None

    data = serialize_game_state(state)
    assert data["winner"]["lineCells"][0] == {"x": 0, "y": 0}
    assert data["skillUsage"][SEAT_FIRST][SKILL_DAMAGE_CELL] is True
    assert deserialize_game_state(data) == state


def test_serialized_shape():
    data = serialize_game_state(initialize(5))
    assert set(data) == {"boardSize", "board", "currentTurnColor", "colorAssignment", "skillUsage", "winner"}
    assert data["winner"] is None
    assert set(data["skillUsage"][SEAT_FIRST]) == set(SKILLS)


# --- error codes ---

def test_every_engine_failure_has_an_error_code():
    assert set(ENGINE_FAILURE_CODES) == set(EngineFailure)


@pytest.mark.parametrize("failure, code", [
    (EngineFailure.WRONG_TURN, ErrorCode.NOT_YOUR_TURN),
    (EngineFailure.SKILL_ALREADY_USED, ErrorCode.SKILL_USED),
    (EngineFailure.INVALID_TARGET, ErrorCode.INVALID_TARGET),
    (EngineFailure.CELL_OCCUPIED, ErrorCode.CELL_OCCUPIED),
    (EngineFailure.OUT_OF_BOUNDS, ErrorCode.INVALID_ACTION),
    (EngineFailure.GAME_ALREADY_OVER, ErrorCode.INVALID_ACTION),
])
def test_error_code_mapping(failure, code):
    assert error_code_for_failure(failure) == code
