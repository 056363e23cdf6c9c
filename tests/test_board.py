from soko_core.board import UNREACHABLE
from soko_core.parser import parse_level_str
from soko_core.render import render_dead
from soko_core.state import iter_bits

ROOM = """
#####
#@  #
# $ #
#  .#
#####
"""

# top wall has a gap above the middle, so that run is not dead
ALCOVE = """
#######
###.###
#@ $  #
#     #
#######
"""

WALLED_OFF_GOAL = """
#######
#@$ #.#
#   ###
#######
"""


def _dead_coords(board):
    return {board.coord(i) for i in iter_bits(board.dead)}


def test_corners_and_wall_runs_are_dead():
    board, _ = parse_level_str(ROOM)
    # top row and left column are goal-less runs between corners
    assert _dead_coords(board) == {(1, 1), (2, 1), (3, 1), (1, 2), (1, 3)}
    assert render_dead(board).splitlines()[1] == "#xxx#"


def test_goal_corner_is_never_dead():
    board, _ = parse_level_str(ROOM)
    assert board.is_goal(board.idx(3, 3))
    assert not board.is_dead(board.idx(3, 3))
    # runs ending in the goal corner stay alive
    assert not board.is_dead(board.idx(3, 2))
    assert not board.is_dead(board.idx(2, 3))


def test_gap_in_wall_stops_the_run():
    board, _ = parse_level_str(ALCOVE)
    assert board.is_dead(board.idx(1, 2))
    assert board.is_dead(board.idx(5, 2))
    assert not board.is_dead(board.idx(2, 2))
    assert not board.is_dead(board.idx(4, 2))
    # bottom row hugs the wall from corner to corner
    assert all(board.is_dead(board.idx(x, 3)) for x in range(1, 6))


def test_goal_distance_field():
    board, _ = parse_level_str(ROOM)
    assert board.goals == (board.idx(3, 3),)
    assert board.goal_distance(0, board.idx(3, 3)) == 0
    assert board.goal_distance(0, board.idx(3, 2)) == 1
    assert board.goal_distance(0, board.idx(2, 3)) == 1
    assert board.goal_distance(0, board.idx(2, 2)) == 2
    # dead tiles are not expanded
    assert board.goal_distance(0, board.idx(1, 1)) is None
    assert board.nearest_goal[board.idx(2, 2)] == 2


def test_interior_mask():
    board, _ = parse_level_str(ROOM)
    assert bin(board.interior).count("1") == 9
    assert not board.is_interior(board.idx(0, 0))


def test_walled_off_goal_still_analyzes():
    board, start = parse_level_str(WALLED_OFF_GOAL)
    goal = board.idx(5, 1)
    assert not board.is_interior(goal)
    # no goal reaches the agent's room, so every crate tile there is dead
    assert board.nearest_goal[board.idx(2, 1)] == UNREACHABLE
    assert board.is_dead(board.idx(2, 1))
    assert not board.is_dead(goal)


def test_goal_state_flips_with_single_crate():
    board, start = parse_level_str(ROOM)
    assert not board.is_goal_state(start)
    goal = board.goals[0]
    solved = start.without_crate(board.idx(2, 2)).with_crate(goal)
    assert board.is_goal_state(solved)
    assert not board.is_goal_state(solved.without_crate(goal))
