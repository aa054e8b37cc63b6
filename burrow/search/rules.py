from __future__ import annotations
from typing import TYPE_CHECKING, Iterator, Tuple

from burrow.search.configuration import Configuration

if TYPE_CHECKING:
    from burrow.domains.topology import Route, Topology


def settled(topology: "Topology", cfg: Configuration, loc: int) -> bool:
    """True when every slot below `loc` in its column holds a piece of the column's kind."""
    kind = topology.locations[loc].home
    for i in topology.below[loc]:
        p = cfg[i]
        if p is None or p.kind != kind:
            return False
    return True


def is_legal_move(topology: "Topology", cfg: Configuration, src: int, route: "Route") -> bool:
    """Whether the piece at `src` may travel `route` in one move."""
    piece = cfg[src]
    if piece is None:
        return False
    dst = route.dest
    if cfg[dst] is not None:
        return False
    for v in route.via:
        if cfg[v] is not None:
            return False

    a = topology.locations[src]
    b = topology.locations[dst]
    # corridor to corridor never helps
    if not a.is_home and not b.is_home:
        return False
    # already resting on a finished part of its own column
    if a.home == piece.kind and settled(topology, cfg, src):
        return False
    if b.is_home:
        if b.home != piece.kind:
            return False
        # columns fill bottom-up
        if not settled(topology, cfg, dst):
            return False
    return True


def legal_moves(topology: "Topology", cfg: Configuration) -> Iterator[Tuple[int, "Route"]]:
    for src, piece in enumerate(cfg):
        if piece is None:
            continue
        for route in topology.routes_for(src, piece.kind):
            if is_legal_move(topology, cfg, src, route):
                yield src, route


def is_goal(topology: "Topology", cfg: Configuration) -> bool:
    for kind, slots in topology.columns.items():
        for i in slots:
            p = cfg[i]
            if p is None or p.kind != kind:
                return False
    return True
