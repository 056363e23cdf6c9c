from __future__ import annotations
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import yaml

from .astar import SearchBudget


@dataclass(frozen=True)
class SolverConfig:
    heuristic: str = "unsatisfied"
    max_nodes: Optional[int] = None
    max_time: Optional[float] = None
    progress_every: int = 7919

    def budget(self) -> SearchBudget:
        return SearchBudget(max_nodes=self.max_nodes, max_time=self.max_time)

    def override(self, **kwargs: Any) -> "SolverConfig":
        """Copy with every non-None keyword applied (CLI flags win over the file)."""
        return replace(self, **{k: v for k, v in kwargs.items() if v is not None})


def config_from_dict(cfg: Dict[str, Any]) -> SolverConfig:
    section = cfg.get("solver", cfg) or {}
    known = {f.name for f in fields(SolverConfig)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"unknown solver config keys: {sorted(unknown)}")
    return SolverConfig(**section)


def load_solver_config(path: Optional[str]) -> SolverConfig:
    if path is None:
        return SolverConfig()
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    return config_from_dict(cfg)
