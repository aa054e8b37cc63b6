from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet, List, Mapping, Optional, Tuple

from burrow.errors import ConfigurationError, InvariantViolation

if TYPE_CHECKING:
    from burrow.domains.topology import Topology


@dataclass(frozen=True)
class Piece:
    name: str  # stable identity, e.g. "B2"
    kind: str  # selects the home column and the movement weight

    def __str__(self) -> str:
        return self.name


# One entry per location index: the piece standing there, or None.
Configuration = Tuple[Optional[Piece], ...]


def make_configuration(topology: "Topology", placements: Mapping[str, Piece]) -> Configuration:
    """
    Build an initial configuration from {location_name: piece}.

    This is the boundary for external input, so everything the search relies
    on is checked here: known locations, unique piece identities, a home
    column for every kind, and exactly as many pieces of a kind as its
    column has slots.
    """
    cells: List[Optional[Piece]] = [None] * len(topology)
    seen = set()
    for name, piece in placements.items():
        if name not in topology.index:
            raise ConfigurationError(f"unknown location {name!r}")
        if piece.name in seen:
            raise ConfigurationError(f"piece {piece.name!r} placed twice")
        if piece.kind not in topology.columns:
            raise ConfigurationError(f"piece {piece.name!r} has kind {piece.kind!r} with no home column")
        seen.add(piece.name)
        cells[topology.index[name]] = piece

    counts = Counter(p.kind for p in cells if p is not None)
    for kind, slots in sorted(topology.columns.items()):
        if counts[kind] != len(slots):
            raise ConfigurationError(
                f"{counts[kind]} pieces of kind {kind!r} for a column of {len(slots)} slots")
    return tuple(cells)


def apply_move(cfg: Configuration, src: int, dst: int) -> Configuration:
    lst = list(cfg)
    lst[src], lst[dst] = None, lst[src]
    return tuple(lst)


def kinds(cfg: Configuration) -> Tuple[Optional[str], ...]:
    """Type-level view; two configurations with the same view cost the same to finish."""
    return tuple(p.kind if p is not None else None for p in cfg)


def pieces(cfg: Configuration) -> FrozenSet[Piece]:
    return frozenset(p for p in cfg if p is not None)


def check_invariants(cfg: Configuration, expected: FrozenSet[Piece]) -> None:
    placed = [p for p in cfg if p is not None]
    if len(placed) != len(set(placed)):
        dup = sorted(p.name for p, n in Counter(placed).items() if n > 1)
        raise InvariantViolation(f"pieces placed twice: {', '.join(dup)}")
    got = frozenset(placed)
    if got != expected:
        missing = sorted(p.name for p in expected - got)
        extra = sorted(p.name for p in got - expected)
        raise InvariantViolation(f"missing pieces {missing}, unexpected pieces {extra}")
