from __future__ import annotations
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
import heapq
import itertools
import logging
import math
from time import perf_counter

from burrow.domains.topology import Topology
from burrow.errors import ConfigurationError, CostOverflowError, SearchBudgetExceeded
from burrow.search.configuration import Configuration, apply_move, check_invariants, kinds, pieces
from burrow.search.rules import is_goal, is_legal_move

logger = logging.getLogger(__name__)

# Width of an unsigned 64-bit accumulator; anything beyond is treated as a defect.
COST_LIMIT = 2 ** 63 - 1

NO_SOLUTION = None

Heuristic = Callable[[Configuration], int]


def move_cost(weights: Mapping[str, int], kind: str, dist: int) -> int:
    try:
        return weights[kind] * dist
    except KeyError:
        raise ConfigurationError(f"no movement weight for piece kind {kind!r}") from None


def branch_and_bound(
    topology: Topology,
    weights: Mapping[str, int],
    start: Configuration,
    hfun: Optional[Heuristic] = None,
    use_cutoff: bool = True,
    transpositions: bool = False,
    timeout_sec: float | None = None,
    max_nodes: int | None = None,
    validate: bool = False,
) -> Dict[str, Any]:
    """
    Cost-ordered branch-and-bound over configurations, with instrumentation.

    Pops the cheapest node, expands every legal move, records goal children
    as solutions and pushes the rest. The best solution cost bounds both
    the frontier (stop once its minimum reaches the bound) and new children.
    There is no visited set unless `transpositions` is on; then a child is
    dropped when its type-level layout was already pushed at a lower or
    equal cost. `hfun` must never overestimate; with it the frontier is
    ordered by cost + h (A*), without it by cost alone.

    Returns a dict; `termination` is "ok" (cost found), "exhausted"
    (provably no solution), or "timeout"/"budget" (answer unknown).
    """
    t0 = perf_counter()
    h = hfun or (lambda cfg: 0)
    algorithm = "B&B" if hfun is None else "A*"

    expanded = 0
    generated = 0
    pruned = 0
    duplicates = 0
    solutions = 0
    peak_open = 1
    best = math.inf
    best_moves: Optional[int] = None
    trace: List[Tuple[int, int]] = []

    def result(termination: str) -> Dict[str, Any]:
        finished = termination in ("ok", "exhausted")
        bound = None if best == math.inf else best
        return {
            "cost": bound if finished else None,
            "moves": best_moves if finished else None,
            "bound": bound,
            "expanded": expanded,
            "generated": generated,
            "pruned": pruned,
            "duplicates": duplicates,
            "solutions": solutions,
            "peak_open": peak_open,
            "bound_trace": trace,
            "time": perf_counter() - t0,
            "algorithm": algorithm,
            "termination": termination,
        }

    if is_goal(topology, start):
        best, best_moves = 0, 0
        return result("ok")

    expected = pieces(start) if validate else None
    counter = itertools.count()
    open_heap: List[Tuple[int, int, int, int, Configuration]] = []
    heapq.heappush(open_heap, (h(start), next(counter), 0, 0, start))
    best_g: Dict[Tuple[Optional[str], ...], int] = {}
    if transpositions:
        best_g[kinds(start)] = 0

    while open_heap:
        peak_open = max(peak_open, len(open_heap))
        f, _, g, nmoves, cfg = heapq.heappop(open_heap)
        if use_cutoff and f >= best:
            # nothing left on the frontier can undercut the best solution
            break
        if transpositions and g > best_g.get(kinds(cfg), math.inf):
            duplicates += 1
            continue

        if timeout_sec is not None and (perf_counter() - t0) > timeout_sec:
            logger.info(f"Search timed out after {expanded} expansions")
            return result("timeout")
        if max_nodes is not None and expanded >= max_nodes:
            logger.info(f"Search hit the node budget of {max_nodes}")
            return result("budget")
        expanded += 1

        for src, piece in enumerate(cfg):
            if piece is None:
                continue
            for route in topology.routes_for(src, piece.kind):
                if not is_legal_move(topology, cfg, src, route):
                    continue
                g2 = g + move_cost(weights, piece.kind, route.dist)
                if g2 > COST_LIMIT:
                    raise CostOverflowError(f"accumulated cost {g2} exceeds {COST_LIMIT}")
                generated += 1
                if use_cutoff and g2 >= best:
                    pruned += 1
                    continue

                child = apply_move(cfg, src, route.dest)
                if expected is not None:
                    check_invariants(child, expected)

                if topology.locations[route.dest].is_home and is_goal(topology, child):
                    solutions += 1
                    if g2 < best:
                        best, best_moves = g2, nmoves + 1
                        trace.append((expanded, g2))
                        logger.debug(f"Solution found with cost {g2}, {nmoves + 1} moves")
                    continue

                f2 = g2 + h(child)
                if use_cutoff and f2 >= best:
                    pruned += 1
                    continue
                if transpositions:
                    key = kinds(child)
                    if g2 >= best_g.get(key, math.inf):
                        duplicates += 1
                        continue
                    best_g[key] = g2
                heapq.heappush(open_heap, (f2, next(counter), g2, nmoves + 1, child))

    out = result("ok" if best != math.inf else "exhausted")
    logger.info(
        f"{algorithm} finished: cost={out['cost']} expanded={expanded} "
        f"generated={generated} pruned={pruned} time={out['time']:.3f}s")
    return out


def minimum_cost(
    topology: Topology,
    weights: Mapping[str, int],
    start: Configuration,
    **kwargs: Any,
) -> Optional[int]:
    """Minimum total cost to sort `start`, or NO_SOLUTION.

    Raises SearchBudgetExceeded when a timeout or node budget stopped the
    search, so a returned value is always conclusive."""
    r = branch_and_bound(topology, weights, start, **kwargs)
    if r["termination"] in ("timeout", "budget"):
        raise SearchBudgetExceeded(r)
    return r["cost"]
