#!/usr/bin/env python3
import argparse, os, sys
from pathlib import Path

import numpy as np
import pandas as pd
import matplotlib
# Default to a non-interactive backend; we'll only show() if --show
if "MPLBACKEND" not in os.environ:
    matplotlib.use("Agg")
import matplotlib.pyplot as plt

from burrow.experiments.analyze import VARIANT, load


def _label(key) -> str:
    algo, heur, cutoff, tt = key
    parts = [f"{algo} | {heur}"]
    if not cutoff:
        parts.append("no cutoff")
    if tt:
        parts.append("TT")
    return ", ".join(parts)


def plot_effort(ax, df: pd.DataFrame, metric: str):
    """Mean `metric` per board for every search variant (log scale)."""
    done = df[df["termination"].isin(["ok", "exhausted"])]
    boards = sorted(done["board"].unique())
    variants = sorted({tuple(k) for k in done[VARIANT].itertuples(index=False)})
    width = 0.8 / max(len(variants), 1)
    xs = np.arange(len(boards))
    for i, v in enumerate(variants):
        mask = np.logical_and.reduce([done[c] == val for c, val in zip(VARIANT, v)])
        sub = done[mask].groupby("board")[metric]
        means = sub.mean().reindex(boards)
        errs = sub.std(ddof=0).reindex(boards).fillna(0.0)
        ax.bar(xs + i * width, means.values, width, yerr=errs.values, capsize=3, label=_label(v))
    ax.set_xticks(xs + width * (len(variants) - 1) / 2)
    ax.set_xticklabels(boards)
    ax.set_yscale("log")
    ax.set_ylabel(metric)
    ax.set_title(f"{metric} per board (mean ± std)")
    ax.grid(True, axis="y")
    ax.legend()


def plot_trace(ax, trace: pd.DataFrame):
    """Best-known-solution cost against expansions; every curve only steps down."""
    for (board, inst, algo, heur), grp in trace.groupby(["board", "instance", "algorithm", "heuristic"]):
        grp = grp.sort_values("expanded")
        ax.step(grp["expanded"], grp["cost"], where="post", marker="o", label=f"{board}/{inst} {algo} | {heur}")
    ax.set_xlabel("Expanded nodes")
    ax.set_ylabel("Best-known cost")
    ax.set_title("Best-known-solution trace")
    ax.grid(True)
    ax.legend(fontsize="small")


def save_fig(fig, outdir: Path, name: str):
    outdir.mkdir(parents=True, exist_ok=True)
    path = outdir / f"{name}.png"
    fig.savefig(path, dpi=200, bbox_inches="tight")
    print(f"Saved: {path}")
    return path


def main(argv=None):
    ap = argparse.ArgumentParser(description="Plot runner CSVs and save PNGs.")
    ap.add_argument("csv", nargs="+", help="One or more runner CSV files")
    ap.add_argument("--trace", type=Path, default=None, help="Trace CSV written by runner --trace_out")
    ap.add_argument("--save", default="results/plots", help="Directory to save plots")
    ap.add_argument("--show", action="store_true", help="Also open interactive windows (if GUI available)")
    args = ap.parse_args(argv)

    df = load(args.csv)
    if df.empty:
        print("No rows to plot. Are your CSVs empty?")
        return 0

    outdir = Path(args.save)
    base = "combo" if len(args.csv) > 1 else Path(args.csv[0]).stem

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))
    for ax, metric in zip(axes, ["expanded", "time_sec"]):
        plot_effort(ax, df, metric)
    plt.tight_layout()
    save_fig(fig, outdir, f"{base}_effort")
    plt.close(fig)

    if args.trace is not None:
        trace = pd.read_csv(args.trace)
        if not trace.empty:
            fig, ax = plt.subplots(figsize=(8, 6))
            plot_trace(ax, trace)
            plt.tight_layout()
            save_fig(fig, outdir, f"{base}_trace")
            plt.close(fig)

    if args.show:
        plt.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
