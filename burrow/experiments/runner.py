from __future__ import annotations
import argparse, csv, logging, sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from burrow.domains.burrow import SAMPLE, SAMPLE_COSTS, Burrow
from burrow.domains.layout import parse_layout, unfold
from burrow.errors import BurrowError
from burrow.heuristics.home_distance import HEURISTICS, make_heuristic
from burrow.search.configuration import Configuration
from burrow.search.engine import branch_and_bound
from burrow.settings import load_settings

BOARDS = {"small": 2, "large": 4}

HEADER = [
    "board", "instance", "seed", "algorithm", "heuristic", "cutoff", "transpositions",
    "cost", "expected", "moves", "expanded", "generated", "pruned", "duplicates",
    "solutions", "peak_open", "time_sec", "termination",
]


@dataclass
class Instance:
    board: str
    name: str
    seed: Optional[int]
    burrow: Burrow
    start: Configuration
    expected: Optional[int] = None


def sample_instance(board: str) -> Instance:
    text = SAMPLE if board == "small" else unfold(SAMPLE)
    burrow, start = parse_layout(text)
    return Instance(board, "sample", None, burrow, start, SAMPLE_COSTS[board])


def scrambled_instances(board: str, count: int, start_seed: int = 0) -> List[Instance]:
    burrow = Burrow(BOARDS[board])
    out: List[Instance] = []
    for seed in range(start_seed, start_seed + count):
        out.append(Instance(board, f"scramble-{seed}", seed, burrow, burrow.scramble(seed)))
    return out


def main(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(description="Burrow sorting experiment runner")
    ap.add_argument("--board", choices=["small", "large", "both"], default="small")
    ap.add_argument("--instances", choices=["sample", "scrambled"], default="sample")
    ap.add_argument("--count", type=int, default=5, help="Scrambled instances per board")
    ap.add_argument("--seed", type=int, default=0, help="First scramble seed")
    ap.add_argument("--heuristic", choices=list(HEURISTICS), default=None,
                    help="Overrides the settings file")
    ap.add_argument("--no_cutoff", action="store_true", help="Disable best-solution pruning")
    ap.add_argument("--transpositions", dest="transpositions", action="store_true", default=None)
    ap.add_argument("--no_transpositions", dest="transpositions", action="store_false")
    ap.add_argument("--timeout_sec", type=float, default=None, help="Per-instance wall time")
    ap.add_argument("--max_nodes", type=int, default=None, help="Per-instance expansion budget")
    ap.add_argument("--config", type=Path, default=None, help="JSON settings file")
    ap.add_argument("--out", type=Path, default=Path("results/last_run.csv"))
    ap.add_argument("--trace_out", type=Path, default=None,
                    help="Also write the best-known-solution trace of every run")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings(args.config)
    except BurrowError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    heuristic = args.heuristic or settings["heuristic"]
    transpositions = settings["transpositions"] if args.transpositions is None else args.transpositions
    use_cutoff = settings["use_cutoff"] and not args.no_cutoff
    timeout_sec = args.timeout_sec if args.timeout_sec is not None else settings["timeout_sec"]
    max_nodes = args.max_nodes if args.max_nodes is not None else settings["max_nodes"]
    weights = settings["weights"]

    boards = ["small", "large"] if args.board == "both" else [args.board]
    insts: List[Instance] = []
    for b in boards:
        if args.instances == "sample":
            insts.append(sample_instance(b))
        else:
            insts.extend(scrambled_instances(b, args.count, args.seed))

    args.out.parent.mkdir(parents=True, exist_ok=True)
    trace_rows = []
    with args.out.open("w", newline="") as f:
        w = csv.writer(f); w.writerow(HEADER)
        for inst in insts:
            topo = inst.burrow.topology
            try:
                r = branch_and_bound(
                    topo, weights, inst.start,
                    hfun=make_heuristic(heuristic, topo, weights),
                    use_cutoff=use_cutoff, transpositions=transpositions,
                    timeout_sec=timeout_sec, max_nodes=max_nodes,
                )
            except BurrowError as e:
                print(f"error: {inst.board}/{inst.name}: {e}", file=sys.stderr)
                return 1
            w.writerow([
                inst.board, inst.name, "" if inst.seed is None else inst.seed,
                r["algorithm"], heuristic, int(use_cutoff), int(transpositions),
                "" if r["cost"] is None else r["cost"],
                "" if inst.expected is None else inst.expected,
                "" if r["moves"] is None else r["moves"],
                r["expanded"], r["generated"], r["pruned"], r["duplicates"],
                r["solutions"], r["peak_open"], f"{r['time']:.6f}", r["termination"],
            ])
            for expanded, cost in r["bound_trace"]:
                trace_rows.append([inst.board, inst.name, r["algorithm"], heuristic, expanded, cost])
            print(f"{inst.board}/{inst.name}: cost={r['cost']} ({r['termination']}, "
                  f"{r['expanded']} expanded, {r['time']:.2f}s)")

    if args.trace_out is not None:
        args.trace_out.parent.mkdir(parents=True, exist_ok=True)
        with args.trace_out.open("w", newline="") as f:
            w = csv.writer(f)
            w.writerow(["board", "instance", "algorithm", "heuristic", "expanded", "cost"])
            w.writerows(trace_rows)

    print(f"Wrote {args.out} ({len(insts)} instances)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
