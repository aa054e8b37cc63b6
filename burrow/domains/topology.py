from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple, Union

from burrow.errors import TopologyError

Edges = Mapping[str, Sequence[Tuple[str, int]]]


@dataclass(frozen=True)
class Location:
    name: str
    home: Optional[str] = None  # piece kind of a home-column slot
    depth: int = 0              # 0 = slot nearest the corridor

    @property
    def is_home(self) -> bool:
        return self.home is not None


@dataclass(frozen=True)
class Route:
    dest: int
    dist: int
    via: Tuple[int, ...]  # strictly intermediate locations, in walking order


class Topology:
    """
    Fixed board graph plus every precomputed route between two locations.

    Built once from the raw adjacency and then only read. Every origin gets
    exactly one route to every other location; anything else is a defect
    in the board definition and raises TopologyError here.
    """
    def __init__(self, locations: Sequence[Location], edges: Edges):
        self.locations: Tuple[Location, ...] = tuple(locations)
        self.index: Dict[str, int] = {}
        for i, loc in enumerate(self.locations):
            if loc.name in self.index:
                raise TopologyError(f"duplicate location {loc.name!r}")
            self.index[loc.name] = i
        self.size = len(self.locations)

        self._adj = self._check_edges(edges)
        self.columns = self._check_columns()
        self.corridor: Tuple[int, ...] = tuple(
            i for i, loc in enumerate(self.locations) if not loc.is_home)

        # deeper slots of the same column, per location (empty for corridor cells)
        below: List[Tuple[int, ...]] = []
        for loc in self.locations:
            if loc.is_home:
                below.append(self.columns[loc.home][loc.depth + 1:])
            else:
                below.append(())
        self.below: Tuple[Tuple[int, ...], ...] = tuple(below)

        self.routes: Tuple[Tuple[Route, ...], ...] = tuple(
            self._walk(origin) for origin in range(self.size))
        self._table: Tuple[Dict[int, Route], ...] = tuple(
            {r.dest: r for r in routes} for routes in self.routes)
        self._by_kind = self._index_by_kind()

    # ---------- construction ----------
    def _check_edges(self, edges: Edges) -> Tuple[Tuple[Tuple[int, int], ...], ...]:
        adj: List[List[Tuple[int, int]]] = [[] for _ in range(self.size)]
        dist: Dict[Tuple[int, int], int] = {}
        for name, conns in edges.items():
            if name not in self.index:
                raise TopologyError(f"edge from unknown location {name!r}")
            a = self.index[name]
            for other, d in conns:
                if other not in self.index:
                    raise TopologyError(f"edge {name!r} -> unknown location {other!r}")
                if d <= 0:
                    raise TopologyError(f"edge {name!r} -> {other!r} has distance {d}")
                b = self.index[other]
                if (a, b) in dist:
                    raise TopologyError(f"edge {name!r} -> {other!r} listed twice")
                dist[(a, b)] = d
                adj[a].append((b, d))
        for (a, b), d in dist.items():
            back = dist.get((b, a))
            if back is None:
                raise TopologyError(
                    f"edge {self.locations[a].name!r} -> {self.locations[b].name!r} has no reciprocal")
            if back != d:
                raise TopologyError(
                    f"edge {self.locations[a].name!r} <-> {self.locations[b].name!r} "
                    f"has distances {d} and {back}")
        return tuple(tuple(conns) for conns in adj)

    def _check_columns(self) -> Dict[str, Tuple[int, ...]]:
        slots: Dict[str, Dict[int, int]] = {}
        for i, loc in enumerate(self.locations):
            if not loc.is_home:
                continue
            col = slots.setdefault(loc.home, {})
            if loc.depth in col:
                raise TopologyError(f"column {loc.home!r} has two slots at depth {loc.depth}")
            col[loc.depth] = i
        columns: Dict[str, Tuple[int, ...]] = {}
        for kind, col in slots.items():
            if sorted(col) != list(range(len(col))):
                raise TopologyError(f"column {kind!r} depths {sorted(col)} are not 0..{len(col) - 1}")
            columns[kind] = tuple(col[d] for d in range(len(col)))
        return columns

    def _walk(self, origin: int) -> Tuple[Route, ...]:
        # Iterative DFS. Before descending from a node all of its unclaimed
        # neighbours are claimed at once, so no route detours through a
        # sibling that the parent reaches directly.
        found: Dict[int, Route] = {}
        stack: List[Tuple[int, FrozenSet[int], Tuple[int, ...], int]] = [
            (origin, frozenset((origin,)), (), 0)]
        while stack:
            loc, claimed, via, dist = stack.pop()
            conns = [(n, d) for n, d in self._adj[loc] if n not in claimed]
            if not conns:
                continue
            next_claimed = claimed | {n for n, _ in conns}
            children = []
            for n, d in conns:
                if n in found:
                    raise TopologyError(
                        f"two routes from {self.locations[origin].name!r} "
                        f"to {self.locations[n].name!r}")
                found[n] = Route(dest=n, dist=dist + d, via=via)
                children.append((n, next_claimed, via + (n,), dist + d))
            stack.extend(reversed(children))
        missing = [self.locations[i].name for i in range(self.size)
                   if i != origin and i not in found]
        if missing:
            raise TopologyError(
                f"no route from {self.locations[origin].name!r} to {', '.join(missing)}")
        return tuple(found[d] for d in sorted(found))

    def _index_by_kind(self) -> Tuple[Dict[str, Tuple[Route, ...]], ...]:
        out = []
        for origin, routes in enumerate(self.routes):
            from_home = self.locations[origin].is_home
            per_kind: Dict[str, Tuple[Route, ...]] = {}
            for kind in self.columns:
                keep = []
                for r in routes:
                    dest = self.locations[r.dest]
                    if dest.is_home:
                        if dest.home == kind:
                            keep.append(r)
                    elif from_home:
                        keep.append(r)
                per_kind[kind] = tuple(keep)
            out.append(per_kind)
        return tuple(out)

    # ---------- lookups ----------
    def index_of(self, loc: Union[int, str]) -> int:
        if isinstance(loc, int):
            return loc
        try:
            return self.index[loc]
        except KeyError:
            raise TopologyError(f"unknown location {loc!r}") from None

    def route(self, origin: Union[int, str], dest: Union[int, str]) -> Route:
        a, b = self.index_of(origin), self.index_of(dest)
        try:
            return self._table[a][b]
        except KeyError:
            raise TopologyError(
                f"no route from {self.locations[a].name!r} to {self.locations[b].name!r}") from None

    def routes_for(self, origin: int, kind: str) -> Tuple[Route, ...]:
        """Routes a piece of `kind` at `origin` could ever take: into its own
        column, or out to the corridor when it stands in a column."""
        return self._by_kind[origin].get(kind, ())

    @property
    def kinds(self) -> Tuple[str, ...]:
        return tuple(sorted(self.columns))

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        depths = ", ".join(f"{k}:{len(v)}" for k, v in sorted(self.columns.items()))
        return f"Topology({self.size} locations; columns {depths})"
