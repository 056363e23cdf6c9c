from __future__ import annotations
import argparse, csv, os, time
import logging
from typing import Dict, List
from multiprocessing import Pool, cpu_count
from tqdm import tqdm

from soko_core.errors import LevelError
from soko_core.levels.resolve import load_level_by_id, split_on_blank_lines
from soko_heuristics.selector import HEURISTICS, get_heuristic
from soko_search.astar import SearchBudget, search
from soko_search.config import load_solver_config

logger = logging.getLogger(__name__)

FIELDS = ["level_id", "heuristic", "status", "success", "nodes", "generated",
          "runtime", "solution_len", "reason", "solution"]


def _run_one(args_tuple) -> Dict[str, object]:
    level_id, heur_name, max_nodes, max_time = args_tuple
    row: Dict[str, object] = {"level_id": level_id, "heuristic": heur_name}
    try:
        board, start = load_level_by_id(level_id)
    except (LevelError, OSError, IndexError) as e:
        logger.warning("skipping %s: %s", level_id, e)
        row.update(status="invalid", success=False, nodes=0, generated=0,
                   runtime=0.0, solution_len=-1, reason=str(e), solution="")
        return row
    res = search(board, start, budget=SearchBudget(max_nodes, max_time), h_fn=get_heuristic(heur_name))
    row.update(res.to_dict())
    return row


def expand_level_ids(entries: List[str]) -> List[str]:
    """'pack.txt' without '#idx' stands for every level in the pack."""
    ids: List[str] = []
    for e in entries:
        if "#" in e:
            ids.append(e)
            continue
        with open(e, "r", encoding="utf-8") as f:
            n = len(split_on_blank_lines(f.read()))
        ids.extend(f"{e}#{i}" for i in range(n))
    return ids


def main():
    p = argparse.ArgumentParser(description="Batch A* runs → CSV (flags, parallel)")
    p.add_argument("--list", required=True, help="file with one level id (or pack path) per line")
    p.add_argument("--config", default=None, help="solver YAML config")
    p.add_argument("--h", default=None, choices=sorted(HEURISTICS))
    p.add_argument("--out", default="results/batch.csv")
    p.add_argument("--max_time", type=float, default=None)
    p.add_argument("--max_nodes", type=int, default=None)
    p.add_argument("--jobs", type=int, default=0, help="processes (0→cpu_count)")
    p.add_argument("--log-level", default="WARNING")
    args = p.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    cfg = load_solver_config(args.config).override(
        heuristic=args.h, max_nodes=args.max_nodes, max_time=args.max_time)

    out_dir = os.path.dirname(args.out)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    with open(args.list, "r", encoding="utf-8") as f:
        entries = [ln.strip() for ln in f if ln.strip() and not ln.strip().startswith("#")]
    level_ids = expand_level_ids(entries)

    jobs = args.jobs or cpu_count()
    payload = [(lid, cfg.heuristic, cfg.max_nodes, cfg.max_time) for lid in level_ids]

    started = time.time()
    if jobs == 1:
        rows = [_run_one(t) for t in tqdm(payload, desc="Running A*", unit="level")]
    else:
        with Pool(processes=jobs) as pool:
            rows = list(tqdm(pool.imap_unordered(_run_one, payload), total=len(payload), desc="Running A*", unit="level"))

    with open(args.out, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=FIELDS)
        w.writeheader()
        for r in rows:
            w.writerow(r)

    solved = sum(1 for r in rows if r["success"])
    print(f"done: {len(rows)} levels ({solved} solved) → {args.out}; total_time={time.time()-started:.2f}s; jobs={jobs}")


if __name__ == "__main__":
    main()
