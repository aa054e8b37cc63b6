#!/usr/bin/env python3
import argparse, logging, sys
from pathlib import Path

from burrow.domains.layout import parse_layout, render, unfold
from burrow.errors import BurrowError
from burrow.search.engine import NO_SOLUTION, minimum_cost
from burrow.settings import engine_options, load_settings


def main(argv=None):
    p = argparse.ArgumentParser(description="Print the minimum cost to sort one burrow layout.")
    p.add_argument("layout", nargs="?", default="-", help="Layout file ('-' reads stdin)")
    p.add_argument("--unfold", action="store_true", help="Insert the two extra rows (large board)")
    p.add_argument("--config", type=Path, default=None, help="JSON settings file")
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    log = logging.getLogger("burrow.solve")

    text = sys.stdin.read() if args.layout == "-" else Path(args.layout).read_text()
    if args.unfold:
        text = unfold(text)

    try:
        settings = load_settings(args.config)
        burrow, start = parse_layout(text)
        log.debug(f"Solving:\n{render(burrow, start)}")
        cost = minimum_cost(burrow.topology, settings["weights"], start,
                            **engine_options(settings, burrow.topology))
    except BurrowError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print("no solution" if cost is NO_SOLUTION else cost)
    return 0


if __name__ == "__main__":
    sys.exit(main())
