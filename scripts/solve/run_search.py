from __future__ import annotations
import argparse
import logging
import sys

from tqdm import tqdm

from soko_core.actions import actions_to_string
from soko_core.errors import LevelError
from soko_core.levels.resolve import load_level_by_id
from soko_core.moves import replay
from soko_core.parser import parse_level_str
from soko_core.render import render_ascii
from soko_heuristics.selector import HEURISTICS, get_heuristic
from soko_search.astar import SearchStatus, search
from soko_search.config import load_solver_config

LVL = """
#######
#     #
# $$  #
#@  ..#
#######
"""


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Solve one Sokoban level with A*")
    p.add_argument(
        "level_id",
        nargs="?",
        default=None,
        help="Level id like 'path/to/pack.txt#idx'; the built-in example when omitted.",
    )
    p.add_argument("--config", type=str, default=None, help="solver YAML config")
    p.add_argument("--h", type=str, default=None, choices=sorted(HEURISTICS), help="heuristic")
    p.add_argument("--max_nodes", type=int, default=None)
    p.add_argument("--max_time", type=float, default=None, help="seconds")
    p.add_argument("--show", action="store_true", help="print the board after every push")
    p.add_argument("--log-level", default="WARNING")
    args = p.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    cfg = load_solver_config(args.config).override(
        heuristic=args.h, max_nodes=args.max_nodes, max_time=args.max_time)

    try:
        if args.level_id is None:
            board, start = parse_level_str(LVL)
        else:
            board, start = load_level_by_id(args.level_id)
    except LevelError as e:
        print(f"Invalid level: {e}", file=sys.stderr)
        return 2

    with tqdm(desc="Searching", unit="node", unit_scale=True, leave=False) as bar:
        def on_progress(pr):
            bar.update(pr.expanded - bar.n)
            bar.set_postfix(depth=pr.max_depth, bound=pr.lower_bound, frontier=pr.frontier)

        res = search(board, start, budget=cfg.budget(), h_fn=get_heuristic(cfg.heuristic),
                     on_progress=on_progress, progress_every=cfg.progress_every)

    print("Result:", {k: v for k, v in res.to_dict().items() if k != "solution"})
    if res.status is SearchStatus.SOLVED:
        print(f"Found solution: {actions_to_string(res.actions)}")
        if args.show:
            s = start
            print(f"\n-- start --\n{render_ascii(board, s)}")
            for i, a in enumerate(res.actions, 1):
                nxt = replay(board, s, [a])
                if nxt.crates != s.crates:
                    print(f"\n-- move {i} ({a.char}) --\n{render_ascii(board, nxt)}")
                s = nxt
    elif res.status is SearchStatus.UNSOLVABLE:
        print("Exhausted search, level is not solvable.")
    else:
        print(f"Search budget exceeded ({res.reason}); solvability unknown.")
    print(f"Search finished after {res.runtime:.3f} seconds.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
