import pytest

from soko_search.astar import SearchBudget
from soko_search.config import SolverConfig, config_from_dict, load_solver_config


def test_defaults_without_file():
    cfg = load_solver_config(None)
    assert cfg == SolverConfig()
    assert cfg.heuristic == "unsatisfied"
    assert cfg.budget() == SearchBudget()


def test_load_yaml(tmp_path):
    p = tmp_path / "solver.yaml"
    p.write_text("solver:\n  heuristic: assignment\n  max_nodes: 500\n  max_time: 2.5\n", encoding="utf-8")
    cfg = load_solver_config(str(p))
    assert cfg.heuristic == "assignment"
    assert cfg.budget() == SearchBudget(max_nodes=500, max_time=2.5)


def test_repo_config_loads():
    cfg = load_solver_config("configs/solver.yaml")
    assert cfg.heuristic == "unsatisfied"
    assert cfg.max_nodes == 2000000


def test_flags_override_file_values():
    cfg = SolverConfig(heuristic="zero", max_nodes=10)
    out = cfg.override(heuristic=None, max_nodes=20, max_time=None)
    assert out.heuristic == "zero" and out.max_nodes == 20 and out.max_time is None


def test_unknown_keys_rejected():
    with pytest.raises(ValueError):
        config_from_dict({"solver": {"heuristics": "zero"}})
