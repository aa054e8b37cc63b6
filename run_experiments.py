#!/usr/bin/env python3
import subprocess, sys
from pathlib import Path

def run(desc, cmd):
    print(f"\n=== {desc} ===\n{cmd}")
    r = subprocess.run(cmd, shell=True)
    if r.returncode != 0:
        sys.exit(r.returncode)

def main():
    Path("results").mkdir(exist_ok=True)
    run("Samples, plain B&B", "python -m burrow.experiments.runner --board both --instances sample --out results/samples_bb.csv --trace_out results/samples_bb_trace.csv")
    run("Samples, A* home_distance", "python -m burrow.experiments.runner --board both --instances sample --heuristic home_distance --out results/samples_astar.csv --trace_out results/samples_astar_trace.csv")
    run("Scrambled small boards", "python -m burrow.experiments.runner --board small --instances scrambled --count 20 --heuristic home_distance --out results/scrambled_small.csv")
    run("Scrambled small boards, no cutoff", "python -m burrow.experiments.runner --board small --instances scrambled --count 20 --heuristic home_distance --no_cutoff --out results/scrambled_small_nocut.csv")
    run("Cost cross-check", "python -m burrow.experiments.analyze results/samples_bb.csv results/samples_astar.csv results/scrambled_small.csv results/scrambled_small_nocut.csv --out results/summary.csv")
    run("Plots", "python -m burrow.experiments.plot results/samples_bb.csv results/samples_astar.csv --trace results/samples_bb_trace.csv")

if __name__ == "__main__":
    main()
