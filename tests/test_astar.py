import pytest

from soko_core.actions import Action, actions_to_string
from soko_core.moves import replay
from soko_core.parser import parse_level_str
from soko_heuristics.classic import h_assignment, h_goal_distance, h_unsatisfied_goal_distance, h_zero
from soko_search.astar import SearchBudget, SearchStatus, astar, search, uniform_cost_search
from soko_search.path import PathLink, read_path
from soko_search.priority_queue import PriorityQueue
from soko_search.progress import ProgressTracker

TRIVIAL = """
#####
#@$.#
#####
"""

ROOM = """
#####
#@  #
# $ #
#  .#
#####
"""

ALCOVE = """
#######
###.###
#@ $  #
#     #
#######
"""

TWO = """
#######
#     #
# $$  #
#@  ..#
#######
"""

# the crate on (3,2) has to make room before the other one can pass
PARKED = """
######
#    #
#@$*.#
#    #
#    #
######
"""

# crate starts on the goal-less bottom row between two corners
CORNERED = """
#####
#.  #
#@$ #
#####
"""

# the only push moves the crate up, after which the agent is shut in below it
STUCK = """
#####
#.  #
##$##
##@##
#####
"""

WALLED_OFF_GOAL = """
#######
#@$ #.#
#   ###
#######
"""


def _assert_solves(board, start, res):
    assert res.status is SearchStatus.SOLVED
    assert board.is_goal_state(replay(board, start, res.actions))


def test_trivial_single_push():
    board, s = parse_level_str(TRIVIAL)
    res = search(board, s)
    _assert_solves(board, s, res)
    assert res.actions == [Action.RIGHT]
    assert res.solution_len == 1


def test_walk_counts_towards_cost():
    board, s = parse_level_str(ROOM)
    res = search(board, s)
    _assert_solves(board, s, res)
    assert res.solution_len == 5


def test_alcove_solution():
    board, s = parse_level_str(ALCOVE)
    res = search(board, s)
    _assert_solves(board, s, res)
    assert res.solution_len == 4
    assert res.actions[-1] is Action.UP


def test_already_solved_start():
    board, s = parse_level_str("#####\n#@* #\n#   #\n#####")
    res = search(board, s)
    assert res.status is SearchStatus.SOLVED
    assert res.actions == []


def test_matches_uniform_cost_baseline():
    for lvl in (TRIVIAL, ROOM, ALCOVE, TWO, PARKED):
        board, s = parse_level_str(lvl)
        informed = search(board, s)
        baseline = uniform_cost_search(board, s)
        _assert_solves(board, s, informed)
        _assert_solves(board, s, baseline)
        assert informed.solution_len == baseline.solution_len


@pytest.mark.parametrize("lvl", [ROOM, TWO, PARKED])
@pytest.mark.parametrize("h", [h_goal_distance, h_unsatisfied_goal_distance, h_assignment])
def test_every_heuristic_is_optimal(h, lvl):
    board, s = parse_level_str(lvl)
    res = astar(board, s, h_fn=h)
    _assert_solves(board, s, res)
    assert res.solution_len == uniform_cost_search(board, s).solution_len


def test_deterministic():
    board, s = parse_level_str(TWO)
    first = search(board, s)
    second = search(board, s)
    assert actions_to_string(first.actions) == actions_to_string(second.actions)


def test_cornered_crate_is_unsolvable():
    board, s = parse_level_str(CORNERED)
    res = search(board, s)
    assert res.status is SearchStatus.UNSOLVABLE
    assert res.nodes == 0
    assert not res.success and res.solution_len == -1


def test_exhausted_frontier_is_unsolvable():
    board, s = parse_level_str(STUCK)
    res = search(board, s)
    assert res.status is SearchStatus.UNSOLVABLE
    assert res.nodes == 2
    assert res.reason is None


def test_walled_off_goal_is_unsolvable():
    board, s = parse_level_str(WALLED_OFF_GOAL)
    assert search(board, s).status is SearchStatus.UNSOLVABLE


def test_node_budget():
    board, s = parse_level_str(TWO)
    res = search(board, s, budget=SearchBudget(max_nodes=1))
    assert res.status is SearchStatus.BUDGET_EXCEEDED
    assert res.reason == "max_nodes"
    assert res.nodes == 1


def test_generous_budget_still_solves():
    board, s = parse_level_str(TWO)
    res = search(board, s, budget=SearchBudget(max_nodes=100000, max_time=60.0))
    assert res.status is SearchStatus.SOLVED


def test_cooperative_cancel():
    board, s = parse_level_str(TWO)
    calls = []

    def stop():
        calls.append(1)
        return len(calls) > 3

    res = astar(board, s, h_fn=h_zero, should_stop=stop)
    assert res.status is SearchStatus.BUDGET_EXCEEDED
    assert res.reason == "cancelled"
    assert len(calls) == 4


def test_progress_reports():
    board, s = parse_level_str(TWO)
    seen = []
    res = search(board, s, on_progress=seen.append, progress_every=1)
    assert res.success
    # one report per expanded node plus the final one
    assert len(seen) == res.nodes + 1
    assert seen[-1].expanded == res.nodes
    assert seen[-1].lower_bound <= res.solution_len
    assert res.lower_bound == seen[-1].lower_bound


def test_to_dict():
    board, s = parse_level_str(TRIVIAL)
    row = search(board, s).to_dict()
    assert row["status"] == "solved"
    assert row["solution"] == "r"
    assert row["solution_len"] == 1


def test_read_path_shares_links():
    root = PathLink(None, (Action.DOWN, Action.RIGHT))
    a = PathLink(root, (Action.UP,))
    b = PathLink(root, (Action.LEFT, Action.LEFT))
    assert read_path(a) == [Action.DOWN, Action.RIGHT, Action.UP]
    assert read_path(b) == [Action.DOWN, Action.RIGHT, Action.LEFT, Action.LEFT]
    assert read_path(None) == []


def test_priority_queue_ties_in_insertion_order():
    q = PriorityQueue()
    q.push(2, "a")
    q.push(1, "b")
    q.push(1, "c")
    assert [q.pop()[1] for _ in range(3)] == ["b", "c", "a"]
    assert len(q) == 0


def test_progress_tracker_frequency():
    got = []
    t = ProgressTracker(got.append, frequency=2)
    for g in range(5):
        t.update(g, 1, frontier=10)
    assert [p.expanded for p in got] == [2, 4]
    assert t.max_depth == 4 and t.max_f == 5


def test_default_heuristic_is_unsatisfied_goal_distance():
    board, s = parse_level_str(PARKED)
    default = search(board, s)
    explicit = astar(board, s, h_fn=h_unsatisfied_goal_distance)
    assert default.nodes == explicit.nodes
    assert default.actions == explicit.actions
