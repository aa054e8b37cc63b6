import unittest

from burrow.domains.burrow import DEFAULT_WEIGHTS, SAMPLE, SAMPLE_COSTS
from burrow.domains.layout import parse_layout, unfold
from burrow.errors import ConfigurationError, CostOverflowError, SearchBudgetExceeded
from burrow.heuristics.home_distance import home_distance
from burrow.search.engine import COST_LIMIT, NO_SOLUTION, branch_and_bound, minimum_cost, move_cost

from boards import DEADLOCK, SLOW, SORTED, STEP_DOWN, UNFINISHED

W = DEFAULT_WEIGHTS


def solve(text, **kw):
    burrow, start = parse_layout(text)
    return branch_and_bound(burrow.topology, W, start, **kw)


def solve_astar(text, **kw):
    burrow, start = parse_layout(text)
    topo = burrow.topology
    return branch_and_bound(topo, W, start, hfun=home_distance(topo, W), **kw)


def effort(r):
    return {k: v for k, v in r.items() if k != "time"}


class TestSampleCosts(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.small_bb = solve(SAMPLE, transpositions=True)
        cls.small_astar = solve_astar(SAMPLE, transpositions=True)

    def test_small_sample_plain(self):
        r = self.small_bb
        self.assertEqual(r["termination"], "ok")
        self.assertEqual(r["cost"], SAMPLE_COSTS["small"])
        self.assertEqual(r["algorithm"], "B&B")

    def test_small_sample_astar(self):
        r = self.small_astar
        self.assertEqual(r["cost"], 12521)
        self.assertEqual(r["algorithm"], "A*")

    def test_large_sample_astar(self):
        r = solve_astar(unfold(SAMPLE), transpositions=True)
        self.assertEqual(r["termination"], "ok")
        self.assertEqual(r["cost"], SAMPLE_COSTS["large"])

    def test_bound_trace_only_decreases(self):
        for r in (self.small_bb, self.small_astar):
            costs = [c for _, c in r["bound_trace"]]
            steps = [e for e, _ in r["bound_trace"]]
            self.assertTrue(costs)
            self.assertEqual(costs[-1], r["cost"])
            self.assertEqual(costs, sorted(costs, reverse=True))
            self.assertEqual(len(set(costs)), len(costs))
            self.assertEqual(steps, sorted(steps))

    def test_counters_are_consistent(self):
        r = self.small_bb
        self.assertGreaterEqual(r["generated"], r["pruned"])
        self.assertGreaterEqual(r["solutions"], 1)
        self.assertGreaterEqual(r["peak_open"], 1)
        self.assertEqual(r["bound"], r["cost"])

    def test_small_sample_without_cutoff(self):
        r = solve(SAMPLE, use_cutoff=False, transpositions=True)
        self.assertEqual(r["cost"], 12521)
        self.assertEqual(r["pruned"], 0)
        self.assertGreaterEqual(r["expanded"], self.small_bb["expanded"])

    def test_small_sample_keeps_every_piece(self):
        r = solve(SAMPLE, transpositions=True, validate=True)
        self.assertEqual(r["cost"], 12521)
        self.assertEqual(r["expanded"], self.small_bb["expanded"])

    @unittest.skipUnless(SLOW, "set BURROW_SLOW=1 to run the reference (no dedup) search")
    def test_small_sample_reference_mode(self):
        self.assertEqual(solve(SAMPLE)["cost"], 12521)

    @unittest.skipUnless(SLOW, "set BURROW_SLOW=1 to run plain B&B on the large board")
    def test_large_sample_plain(self):
        self.assertEqual(solve(unfold(SAMPLE), transpositions=True)["cost"], 44169)


class TestSmallBoards(unittest.TestCase):
    def test_already_sorted(self):
        r = solve(SORTED)
        self.assertEqual(r["cost"], 0)
        self.assertEqual(r["moves"], 0)
        self.assertEqual(r["termination"], "ok")
        self.assertEqual(r["expanded"], 0)

    def test_step_down_then_walk_in(self):
        r = solve(STEP_DOWN)
        self.assertEqual(r["cost"], 4)
        self.assertEqual(r["moves"], 2)

    def test_cutoff_only_changes_effort(self):
        with_cut = solve(STEP_DOWN)
        without = solve(STEP_DOWN, use_cutoff=False)
        self.assertEqual(with_cut["cost"], without["cost"])
        self.assertEqual(without["pruned"], 0)
        self.assertGreaterEqual(without["expanded"], with_cut["expanded"])

    def test_variants_agree(self):
        plain = solve(UNFINISHED, transpositions=True)
        astar = solve_astar(UNFINISHED, transpositions=True)
        self.assertEqual(plain["termination"], "ok")
        self.assertEqual(plain["cost"], astar["cost"])

    def test_search_is_repeatable(self):
        a = solve_astar(UNFINISHED, transpositions=True)
        b = solve_astar(UNFINISHED, transpositions=True)
        self.assertEqual(effort(a), effort(b))

    def test_validation_does_not_change_the_answer(self):
        for text in (STEP_DOWN, UNFINISHED):
            self.assertEqual(solve(text, transpositions=True, validate=True)["cost"],
                             solve(text, transpositions=True)["cost"])

    def test_deadlock_is_exhausted(self):
        r = solve(DEADLOCK)
        self.assertEqual(r["termination"], "exhausted")
        self.assertIsNone(r["cost"])
        self.assertEqual(r["expanded"], 1)
        burrow, start = parse_layout(DEADLOCK)
        self.assertIs(minimum_cost(burrow.topology, W, start), NO_SOLUTION)


class TestBudgets(unittest.TestCase):
    def test_node_budget(self):
        r = solve(SAMPLE, max_nodes=1)
        self.assertEqual(r["termination"], "budget")
        self.assertIsNone(r["cost"])
        self.assertEqual(r["expanded"], 1)

    def test_timeout(self):
        r = solve(SAMPLE, timeout_sec=1e-9)
        self.assertEqual(r["termination"], "timeout")
        self.assertIsNone(r["cost"])

    def test_minimum_cost_refuses_unknown_answers(self):
        burrow, start = parse_layout(SAMPLE)
        with self.assertRaises(SearchBudgetExceeded) as ctx:
            minimum_cost(burrow.topology, W, start, max_nodes=1)
        self.assertEqual(ctx.exception.result["termination"], "budget")

    def test_minimum_cost(self):
        burrow, start = parse_layout(STEP_DOWN)
        self.assertEqual(minimum_cost(burrow.topology, W, start, transpositions=True), 4)


class TestCostModel(unittest.TestCase):
    def test_move_cost(self):
        self.assertEqual(move_cost(W, "A", 4), 4)
        self.assertEqual(move_cost(W, "D", 3), 3000)

    def test_unknown_kind(self):
        with self.assertRaises(ConfigurationError):
            move_cost(W, "E", 1)
        burrow, start = parse_layout(SAMPLE)
        with self.assertRaises(ConfigurationError):
            branch_and_bound(burrow.topology, {"A": 1}, start)

    def test_overflow(self):
        burrow, start = parse_layout(STEP_DOWN)
        huge = {k: 2 ** 62 for k in W}
        self.assertGreater(2 ** 63, COST_LIMIT)
        with self.assertRaises(CostOverflowError):
            branch_and_bound(burrow.topology, huge, start)


if __name__ == "__main__":
    unittest.main()
