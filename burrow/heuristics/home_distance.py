from __future__ import annotations
from typing import Callable, Dict, Mapping, Optional, Tuple

from burrow.domains.topology import Topology
from burrow.search.configuration import Configuration
from burrow.search.rules import settled


def home_distance(topology: Topology, weights: Mapping[str, int]) -> Callable[[Configuration], int]:
    """
    Admissible lower bound: every piece not yet resting in its column pays
    its weight times the shortest distance it must still walk.

    - outside its column: distance to the column's top slot;
    - inside its column above a wrong piece: out to the corridor and back;
    - inside its column with only empty or correct slots below: one step.
    """
    # (location, kind) -> steps; precomputed once per topology
    enter: Dict[Tuple[int, str], int] = {}
    for kind, slots in topology.columns.items():
        top = slots[0]
        detour = min(topology.route(top, c).dist for c in topology.corridor) * 2
        for loc in range(len(topology)):
            if loc in slots:
                enter[(loc, kind)] = topology.route(loc, top).dist + detour if loc != top else detour
            else:
                enter[(loc, kind)] = topology.route(loc, top).dist

    def h(cfg: Configuration) -> int:
        total = 0
        for loc, p in enumerate(cfg):
            if p is None:
                continue
            home = topology.locations[loc].home
            if home == p.kind:
                if settled(topology, cfg, loc):
                    continue
                blocked = any(cfg[i] is not None and cfg[i].kind != home for i in topology.below[loc])
                total += weights[p.kind] * (enter[(loc, p.kind)] if blocked else 1)
            else:
                total += weights[p.kind] * enter[(loc, p.kind)]
        return total

    return h


HEURISTICS = ("zero", "home_distance")


def make_heuristic(name: str, topology: Topology, weights: Mapping[str, int]) -> Optional[Callable[[Configuration], int]]:
    """Heuristic by name. "zero" means plain cost ordering and gives None."""
    if name not in HEURISTICS:
        raise ValueError(f"Unknown heuristic: {name}. Available: {', '.join(HEURISTICS)}")
    if name == "zero":
        return None
    return home_distance(topology, weights)
