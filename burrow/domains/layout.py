from __future__ import annotations
from typing import Dict, List, Tuple

from burrow.domains.burrow import DOORWAYS, HALL_CELLS, HALL_WIDTH, KINDS, UNFOLD_ROWS, Burrow, slot_name
from burrow.errors import LayoutError
from burrow.search.configuration import Configuration, Piece

EMPTY = "."


def _lines(text: str) -> List[str]:
    return [ln.rstrip() for ln in text.splitlines() if ln.strip()]


def parse_layout(text: str) -> Tuple[Burrow, Configuration]:
    """
    Read a board diagram:

        #############
        #...........#
        ###B#C#B#D###
          #A#D#C#A#
          #########

    The number of column rows picks the board depth. Pieces are named by
    kind and reading order (A1, A2, ...). Validation of counts and kinds is
    left to make_configuration so every entry point enforces the same rules.
    """
    lines = _lines(text)
    if len(lines) < 4:
        raise LayoutError(f"expected at least 4 non-empty lines, got {len(lines)}")
    hall = lines[1]
    if len(hall) != HALL_WIDTH + 2 or hall[0] != "#" or hall[-1] != "#":
        raise LayoutError(f"bad corridor row {hall!r}")
    rows = lines[2:-1]
    if set(lines[-1].strip()) != {"#"}:
        raise LayoutError(f"bad bottom wall {lines[-1]!r}")

    cells: List[Tuple[str, str]] = []  # (location name, letter), reading order
    for x, ch in enumerate(hall[1:-1]):
        if ch == EMPTY:
            continue
        if x in DOORWAYS:
            raise LayoutError(f"piece {ch!r} stands in the doorway above column {DOORWAYS[x]}")
        cells.append((HALL_CELLS[x], ch))
    for depth, row in enumerate(rows):
        if len(row) < HALL_WIDTH - 1:
            raise LayoutError(f"column row {depth + 1} is too short: {row!r}")
        for door, kind in sorted(DOORWAYS.items()):
            ch = row[door + 1]
            if ch != EMPTY:
                cells.append((slot_name(kind, depth), ch))

    placements: Dict[str, Piece] = {}
    counts: Dict[str, int] = {}
    for loc, ch in cells:
        if not ch.isalpha() or not ch.isupper():
            raise LayoutError(f"unexpected character {ch!r} at {loc}")
        counts[ch] = counts.get(ch, 0) + 1
        placements[loc] = Piece(f"{ch}{counts[ch]}", ch)

    burrow = Burrow(len(rows))
    return burrow, burrow.configuration(placements)


def unfold(text: str) -> str:
    """Insert the two hidden rows below the first column row (small -> large board)."""
    lines = _lines(text)
    return "\n".join(lines[:3] + list(UNFOLD_ROWS) + lines[3:]) + "\n"


def render(burrow: Burrow, cfg: Configuration) -> str:
    topo = burrow.topology

    def at(name: str) -> str:
        p = cfg[topo.index[name]]
        return p.kind if p is not None else EMPTY

    hall = "".join(at(HALL_CELLS[x]) if x in HALL_CELLS else EMPTY for x in range(HALL_WIDTH))
    out = ["#" * (HALL_WIDTH + 2), f"#{hall}#"]
    for depth in range(burrow.depth):
        inner = "#".join(at(slot_name(k, depth)) for k in KINDS)
        out.append(("###" if depth == 0 else "  #") + inner + ("###" if depth == 0 else "#"))
    out.append("  " + "#" * (HALL_WIDTH - 2))
    return "\n".join(out) + "\n"
