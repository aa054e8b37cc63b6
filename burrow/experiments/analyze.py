#!/usr/bin/env python3
import argparse, sys
from pathlib import Path

import numpy as np
import pandas as pd

VARIANT = ["algorithm", "heuristic", "cutoff", "transpositions"]


def load(paths) -> pd.DataFrame:
    dfs = []
    for p in paths:
        df = pd.read_csv(p)
        df["__src__"] = Path(p).name
        dfs.append(df)
    if not dfs:
        return pd.DataFrame()
    df = pd.concat(dfs, ignore_index=True, sort=False)
    for c in ("cost", "expected", "moves", "expanded", "generated", "pruned",
              "duplicates", "solutions", "peak_open", "time_sec"):
        if c in df.columns:
            df[c] = pd.to_numeric(df[c], errors="coerce")
    for c, default in (("heuristic", "zero"), ("termination", "ok")):
        if c not in df.columns:
            df[c] = default
        df[c] = df[c].fillna(default)
    return df


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """Mean/median effort per board and search variant, concluded runs only."""
    done = df[df["termination"].isin(["ok", "exhausted"])]
    if done.empty:
        return pd.DataFrame()
    g = done.groupby(["board"] + VARIANT)
    out = g.agg(
        runs=("instance", "count"),
        expanded_mean=("expanded", "mean"),
        expanded_median=("expanded", "median"),
        generated_mean=("generated", "mean"),
        generated_sum=("generated", "sum"),
        pruned_sum=("pruned", "sum"),
        time_mean=("time_sec", "mean"),
        time_max=("time_sec", "max"),
    )
    out["pruned_share"] = out["pruned_sum"] / out["generated_sum"].replace(0, np.nan)
    out = out.drop(columns=["generated_sum", "pruned_sum"])
    return out.reset_index()


def inconsistencies(df: pd.DataFrame) -> pd.DataFrame:
    """
    Instances whose concluded cost differs between search variants, or from
    the published expectation. Pruning, transpositions and heuristics may
    only change effort, never the answer, so this should come back empty.
    """
    done = df[df["termination"].isin(["ok", "exhausted"])].copy()
    if done.empty:
        return pd.DataFrame(columns=["board", "instance", "costs", "expected"])
    # "no solution" compares as its own value
    done["cost_key"] = done["cost"].fillna(-1).astype(np.int64)
    rows = []
    for (board, inst), grp in done.groupby(["board", "instance"]):
        costs = sorted(set(grp["cost_key"]))
        expected = grp["expected"].dropna().unique() if "expected" in grp else []
        bad = len(costs) > 1 or any(int(e) not in costs for e in expected)
        if bad:
            rows.append({"board": board, "instance": inst, "costs": costs,
                         "expected": [int(e) for e in expected]})
    return pd.DataFrame(rows, columns=["board", "instance", "costs", "expected"])


def main(argv=None):
    ap = argparse.ArgumentParser(description="Summarize runner CSVs and cross-check costs.")
    ap.add_argument("csv", nargs="+", help="One or more runner CSV files")
    ap.add_argument("--out", type=Path, default=None, help="Write the summary table here")
    args = ap.parse_args(argv)

    df = load(args.csv)
    if df.empty:
        print("No rows to analyze. Are your CSVs empty?")
        return 0

    table = summarize(df)
    with pd.option_context("display.width", 160, "display.max_columns", 20):
        print("=" * 80)
        print("Search effort per board and variant")
        print("=" * 80)
        print(table.to_string(index=False) if not table.empty else "(no concluded runs)")

    unknown = df[~df["termination"].isin(["ok", "exhausted"])]
    if not unknown.empty:
        print(f"\n{len(unknown)} run(s) stopped by a budget; their answers are unknown.")

    bad = inconsistencies(df)
    if not bad.empty:
        print("\nCost mismatches:")
        print(bad.to_string(index=False))
        return 1
    print("\nAll concluded runs agree on cost.")

    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        table.to_csv(args.out, index=False)
        print(f"Saved: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
