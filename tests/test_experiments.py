import csv
import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

import pandas as pd

from burrow.experiments import analyze, plot, runner, solve

from boards import DEADLOCK, STEP_DOWN


class ExperimentCase(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def quiet(self, fn, argv):
        out = io.StringIO()
        with redirect_stdout(out), redirect_stderr(io.StringIO()):
            code = fn(argv)
        return code, out.getvalue()


class TestRunnerPipeline(ExperimentCase):
    def run_sample(self):
        out = self.dir / "sample.csv"
        trace = self.dir / "trace.csv"
        code, _ = self.quiet(runner.main, [
            "--board", "small", "--instances", "sample", "--heuristic", "home_distance",
            "--config", str(self.dir / "missing.json"),
            "--out", str(out), "--trace_out", str(trace),
        ])
        self.assertEqual(code, 0)
        return out, trace

    def test_runner_writes_sample_cost(self):
        out, trace = self.run_sample()
        with out.open() as f:
            rows = list(csv.DictReader(f))
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["cost"], "12521")
        self.assertEqual(rows[0]["expected"], "12521")
        self.assertEqual(rows[0]["algorithm"], "A*")
        self.assertEqual(rows[0]["termination"], "ok")
        self.assertEqual(list(rows[0].keys()), runner.HEADER)
        t = pd.read_csv(trace)
        self.assertEqual(int(t["cost"].iloc[-1]), 12521)

    def test_analyze_and_plot(self):
        out, trace = self.run_sample()
        df = analyze.load([out])
        self.assertEqual(len(df), 1)
        table = analyze.summarize(df)
        self.assertEqual(int(table["runs"].iloc[0]), 1)
        self.assertTrue(analyze.inconsistencies(df).empty)
        code, _ = self.quiet(analyze.main, [str(out), "--out", str(self.dir / "summary.csv")])
        self.assertEqual(code, 0)
        self.assertTrue((self.dir / "summary.csv").exists())

        code, _ = self.quiet(plot.main, [str(out), "--trace", str(trace), "--save", str(self.dir / "plots")])
        self.assertEqual(code, 0)
        self.assertTrue((self.dir / "plots" / "sample_effort.png").exists())
        self.assertTrue((self.dir / "plots" / "sample_trace.png").exists())

    def test_budget_rows_have_no_cost(self):
        out = self.dir / "budget.csv"
        code, _ = self.quiet(runner.main, [
            "--config", str(self.dir / "missing.json"), "--max_nodes", "1", "--out", str(out)])
        self.assertEqual(code, 0)
        df = analyze.load([out])
        self.assertEqual(df["termination"].iloc[0], "budget")
        self.assertTrue(pd.isna(df["cost"].iloc[0]))
        self.assertTrue(analyze.summarize(df).empty)

    def test_scrambled_instances(self):
        insts = runner.scrambled_instances("small", 3, start_seed=5)
        self.assertEqual([i.seed for i in insts], [5, 6, 7])
        self.assertEqual(insts[0].start, runner.scrambled_instances("small", 1, 5)[0].start)
        self.assertIsNone(insts[0].expected)


class TestInconsistencies(unittest.TestCase):
    def frame(self, costs, expected=None):
        return pd.DataFrame({
            "board": "small", "instance": "sample",
            "algorithm": ["B&B", "A*"][:len(costs)], "heuristic": "zero",
            "cutoff": 1, "transpositions": 1, "termination": "ok",
            "cost": costs, "expected": expected,
        })

    def test_agreeing_runs(self):
        self.assertTrue(analyze.inconsistencies(self.frame([12521, 12521], 12521)).empty)

    def test_variant_mismatch(self):
        bad = analyze.inconsistencies(self.frame([12521, 12523]))
        self.assertEqual(len(bad), 1)
        self.assertEqual(bad["costs"].iloc[0], [12521, 12523])

    def test_expectation_mismatch(self):
        bad = analyze.inconsistencies(self.frame([12600], 12521))
        self.assertEqual(bad["expected"].iloc[0], [12521])


class TestSolveCli(ExperimentCase):
    def layout(self, text):
        p = self.dir / "board.txt"
        p.write_text(text)
        return str(p)

    def test_prints_cost(self):
        code, out = self.quiet(solve.main, [self.layout(STEP_DOWN), "--config", str(self.dir / "none.json")])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "4")

    def test_no_solution(self):
        code, out = self.quiet(solve.main, [self.layout(DEADLOCK), "--config", str(self.dir / "none.json")])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "no solution")

    def test_bad_layout(self):
        code, out = self.quiet(solve.main, [self.layout("#####\n"), "--config", str(self.dir / "none.json")])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")


if __name__ == "__main__":
    unittest.main()
