from __future__ import annotations
from typing import Dict, List, Mapping, Tuple
import random

from burrow.domains.topology import Location, Topology
from burrow.errors import TopologyError
from burrow.search.configuration import Configuration, Piece, make_configuration
from burrow.search.rules import is_goal

KINDS: Tuple[str, ...] = ("A", "B", "C", "D")
DEFAULT_WEIGHTS: Dict[str, int] = {"A": 1, "B": 10, "C": 100, "D": 1000}

# Corridor cells that may hold a piece, keyed by their column in the diagram's
# hallway row. The four cells directly above a column are never stopped on and
# are folded into distance-2 edges.
HALL_CELLS: Dict[int, str] = {0: "H1", 1: "H2", 3: "H3", 5: "H4", 7: "H5", 9: "H6", 10: "H7"}
DOORWAYS: Dict[int, str] = {2: "A", 4: "B", 6: "C", 8: "D"}
HALL_WIDTH = 11

# #############
# #...........#
# ###B#C#B#D###
#   #A#D#C#A#
#   #########
SAMPLE = """\
#############
#...........#
###B#C#B#D###
  #A#D#C#A#
  #########
"""

# rows inserted below the first column row to turn a small layout into a large one
UNFOLD_ROWS = ("  #D#C#B#A#", "  #D#B#A#C#")

SAMPLE_COSTS = {"small": 12521, "large": 44169}


def slot_name(kind: str, depth: int) -> str:
    return f"{kind}{depth}"


def burrow_graph(depth: int) -> Tuple[List[Location], Dict[str, List[Tuple[str, int]]]]:
    """Locations and adjacency of the corridor-plus-columns board."""
    hall = [HALL_CELLS[c] for c in sorted(HALL_CELLS)]
    locations = [Location(h) for h in hall]
    for kind in KINDS:
        locations += [Location(slot_name(kind, d), home=kind, depth=d) for d in range(depth)]

    edges: Dict[str, List[Tuple[str, int]]] = {loc.name: [] for loc in locations}

    def link(a: str, b: str, dist: int):
        edges[a].append((b, dist))
        edges[b].append((a, dist))

    cols = sorted(HALL_CELLS)
    for left, right in zip(cols, cols[1:]):
        link(HALL_CELLS[left], HALL_CELLS[right], right - left)
    for door, kind in DOORWAYS.items():
        top = slot_name(kind, 0)
        link(HALL_CELLS[door - 1], top, 2)
        link(HALL_CELLS[door + 1], top, 2)
        for d in range(depth - 1):
            link(slot_name(kind, d), slot_name(kind, d + 1), 1)
    return locations, edges


class Burrow:
    """
    One board variant: four home columns of `depth` slots under a
    seven-cell corridor. depth=2 is the small board, depth=4 the large one.
    """
    def __init__(self, depth: int):
        if depth < 1:
            raise TopologyError(f"depth must be >= 1, got {depth}")
        self.depth = depth
        locations, edges = burrow_graph(depth)
        self.topology = Topology(locations, edges)

    @property
    def name(self) -> str:
        return {2: "small", 4: "large"}.get(self.depth, f"depth{self.depth}")

    # ---------- configurations ----------
    def configuration(self, placements: Mapping[str, Piece]) -> Configuration:
        return make_configuration(self.topology, placements)

    def from_columns(self, columns: Mapping[str, str]) -> Configuration:
        """Build a configuration from column contents read top to bottom,
        e.g. {"A": "BA", "B": "CD", ...}; the corridor starts empty."""
        counts: Dict[str, int] = {}
        placements: Dict[str, Piece] = {}
        for kind in KINDS:
            for d, letter in enumerate(columns.get(kind, "")):
                counts[letter] = counts.get(letter, 0) + 1
                placements[slot_name(kind, d)] = Piece(f"{letter}{counts[letter]}", letter)
        return self.configuration(placements)

    def goal(self) -> Configuration:
        return self.from_columns({k: k * self.depth for k in KINDS})

    def is_goal(self, cfg: Configuration) -> bool:
        return is_goal(self.topology, cfg)

    # ---------- instance generation ----------
    def scramble(self, seed: int) -> Configuration:
        """Seeded random deal of all pieces over the home slots; corridor empty."""
        rng = random.Random(seed)
        letters = [k for k in KINDS for _ in range(self.depth)]
        rng.shuffle(letters)
        cols = {k: "".join(letters[i * self.depth:(i + 1) * self.depth])
                for i, k in enumerate(KINDS)}
        return self.from_columns(cols)
