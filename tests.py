#!/usr/bin/env python3
"""
Monty Hall Simulator - Unit & Integration Test Suite

Run: python tests.py
     python tests.py -v          # verbose
     python tests.py TestHostReveal

Test categories:
  TestArrangement     - door setup, validation, uniform shuffling
  TestFirstChoice     - contestant's opening pick
  TestHostReveal      - informed host rule (random on prize, forced otherwise)
  TestFinalDecision   - stay / switch door arithmetic
  TestOutcomeJudge    - win / lose classification
  TestSingleTrial     - one game, both strategies on the same doors
  TestAggregation     - counting and proportions over trial records
  TestBatchRunner     - play_n_trials output, validation, convergence
  TestSettings        - environment parsing, logging setup, RunConfig
"""

import io
import logging
import os
import random
import re
import sys
import unittest
from collections import Counter
from contextlib import redirect_stdout
from itertools import permutations
from pathlib import Path
from unittest.mock import patch, MagicMock

# ── Ensure project root is on sys.path ──
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from pydantic import ValidationError
from rich.console import Console

from sim_engine.monty import (
    DOORS, Arrangement, DoorContent, InvalidInput, Outcome, Strategy,
    TrialRecord, aggregate, compute_final_door, create_arrangement,
    judge_outcome, play_n_trials, play_single_trial, reveal_host_door,
    run_batch, select_first_door,
)

P = DoorContent.PRIZE
N = DoorContent.NON_PRIZE
ALL_ARRANGEMENTS = sorted(set(permutations([P, N, N])))


def _console() -> Console:
    return Console(file=io.StringIO(), width=100)


# ============================================================
# Game Setup
# ============================================================

class TestArrangement(unittest.TestCase):

    def test_generated_arrangements_have_one_prize(self):
        rng = random.Random(1)
        for _ in range(500):
            arr = create_arrangement(rng)
            self.assertEqual(len(arr), 3)
            self.assertEqual(list(arr).count(P), 1)
            self.assertEqual(list(arr).count(N), 2)

    def test_all_three_layouts_equally_likely(self):
        rng = random.Random(7)
        runs = 6000
        seen = Counter(create_arrangement(rng).prize_door for _ in range(runs))
        self.assertEqual(set(seen), set(DOORS))
        for door, n in seen.items():
            self.assertAlmostEqual(n / runs, 1 / 3, delta=0.03, msg=f"door {door}")

    def test_uses_injected_rng(self):
        rng = MagicMock()
        rng.sample.return_value = [N, N, P]
        arr = create_arrangement(rng)
        rng.sample.assert_called_once()
        self.assertEqual(arr.prize_door, 3)
        self.assertEqual(arr.non_prize_doors, [1, 2])

    def test_accepts_string_labels(self):
        arr = Arrangement(("non_prize", "prize", "non_prize"))
        self.assertEqual(arr[2], P)
        self.assertEqual(arr.to_list(), ["non_prize", "prize", "non_prize"])

    def test_rejects_bad_layouts(self):
        for contents in [(P, P, N), (N, N, N), (P, N), (P, N, N, N), ("car", "goat", "goat")]:
            with self.assertRaises(InvalidInput, msg=str(contents)):
                Arrangement(contents)

    def test_door_lookup_is_one_based(self):
        arr = Arrangement((P, N, N))
        self.assertIs(arr[1], P)
        for bad in (0, 4, -1):
            with self.assertRaises(InvalidInput):
                arr[bad]

    def test_is_immutable(self):
        arr = Arrangement((P, N, N))
        with self.assertRaises(Exception):
            arr.contents = (N, N, P)


# ============================================================
# Contestant First Choice
# ============================================================

class TestFirstChoice(unittest.TestCase):

    def test_always_a_valid_door(self):
        rng = random.Random(3)
        picks = Counter(select_first_door(rng) for _ in range(3000))
        self.assertEqual(set(picks), set(DOORS))
        for n in picks.values():
            self.assertAlmostEqual(n / 3000, 1 / 3, delta=0.04)

    def test_uses_injected_rng(self):
        rng = MagicMock()
        rng.choice.return_value = 2
        self.assertEqual(select_first_door(rng), 2)
        rng.choice.assert_called_once_with(DOORS)


# ============================================================
# Host Reveal
# ============================================================

class TestHostReveal(unittest.TestCase):

    def test_forced_reveal_when_contestant_holds_non_prize(self):
        """[N, N, P], first pick 1 → host must open 2, no randomness used."""
        rng = MagicMock()
        self.assertEqual(reveal_host_door(Arrangement((N, N, P)), 1, rng), 2)
        rng.choice.assert_not_called()

    def test_forced_reveal_every_layout(self):
        for layout in ALL_ARRANGEMENTS:
            arr = Arrangement(layout)
            for first in DOORS:
                if arr[first] is P:
                    continue
                expected = next(d for d in DOORS if d != first and d != arr.prize_door)
                self.assertEqual(reveal_host_door(arr, first), expected)

    def test_random_reveal_when_contestant_holds_prize(self):
        """[P, N, N], first pick 1 → host opens 2 or 3, about half each."""
        arr = Arrangement((P, N, N))
        rng = random.Random(11)
        runs = 4000
        opened = Counter(reveal_host_door(arr, 1, rng) for _ in range(runs))
        self.assertEqual(set(opened), {2, 3})
        self.assertAlmostEqual(opened[2] / runs, 0.5, delta=0.05)
        self.assertAlmostEqual(opened[3] / runs, 0.5, delta=0.05)

    def test_random_reveal_draws_from_non_prize_doors(self):
        rng = MagicMock()
        rng.choice.side_effect = lambda seq: seq[-1]
        self.assertEqual(reveal_host_door(Arrangement((N, P, N)), 2, rng), 3)
        rng.choice.assert_called_once_with([1, 3])

    def test_never_opens_pick_or_prize(self):
        rng = random.Random(5)
        for layout in ALL_ARRANGEMENTS:
            arr = Arrangement(layout)
            for first in DOORS:
                for _ in range(20):
                    opened = reveal_host_door(arr, first, rng)
                    self.assertNotEqual(opened, first)
                    self.assertIs(arr[opened], N)

    def test_accepts_plain_sequences(self):
        """Lists and tuples are read as doors 1..3, not indexed from 0."""
        self.assertEqual(reveal_host_door([N, N, P], 1), 2)
        self.assertEqual(reveal_host_door(("non_prize", "non_prize", "prize"), 1), 2)
        self.assertIn(reveal_host_door([P, N, N], 1, random.Random(4)), (2, 3))

    def test_rejects_bad_plain_sequences(self):
        for layout in ([P, P, N], [N, N], ["car", "goat", "goat"], 7):
            with self.assertRaises(InvalidInput, msg=repr(layout)):
                reveal_host_door(layout, 1)

    def test_rejects_invalid_first_choice(self):
        arr = Arrangement((P, N, N))
        for bad in (0, 4, -1, "1", 1.0, True, None):
            with self.assertRaises(InvalidInput, msg=repr(bad)):
                reveal_host_door(arr, bad)


# ============================================================
# Final Decision
# ============================================================

class TestFinalDecision(unittest.TestCase):

    def _pairs(self):
        return [(r, f) for r in DOORS for f in DOORS if r != f]

    def test_stay_keeps_first_choice(self):
        for revealed, first in self._pairs():
            self.assertEqual(compute_final_door(Strategy.STAY, revealed, first), first)

    def test_switch_takes_remaining_door(self):
        for revealed, first in self._pairs():
            remaining = (set(DOORS) - {revealed, first}).pop()
            self.assertEqual(compute_final_door(Strategy.SWITCH, revealed, first), remaining)

    def test_accepts_strategy_strings(self):
        self.assertEqual(compute_final_door("stay", 2, 1), 1)
        self.assertEqual(compute_final_door("switch", 2, 1), 3)

    def test_rejects_unknown_strategy(self):
        with self.assertRaises(InvalidInput):
            compute_final_door("maybe", 2, 1)

    def test_rejects_revealed_equal_to_first(self):
        with self.assertRaises(InvalidInput):
            compute_final_door(Strategy.SWITCH, 2, 2)

    def test_rejects_out_of_range_doors(self):
        with self.assertRaises(InvalidInput):
            compute_final_door(Strategy.STAY, 4, 1)
        with self.assertRaises(InvalidInput):
            compute_final_door(Strategy.STAY, 2, 0)


# ============================================================
# Outcome Judge
# ============================================================

class TestOutcomeJudge(unittest.TestCase):

    def test_prize_door_wins(self):
        arr = Arrangement((N, N, P))
        self.assertIs(judge_outcome(3, arr), Outcome.WIN)
        self.assertIs(judge_outcome(1, arr), Outcome.LOSE)
        self.assertIs(judge_outcome(2, arr), Outcome.LOSE)

    def test_concrete_non_prize_scenario(self):
        """[N, N, P], first pick 1: reveal 2, stay on 1 loses, switch to 3 wins."""
        arr = Arrangement((N, N, P))
        opened = reveal_host_door(arr, 1)
        stay = compute_final_door(Strategy.STAY, opened, 1)
        switch = compute_final_door(Strategy.SWITCH, opened, 1)
        self.assertEqual((opened, stay, switch), (2, 1, 3))
        self.assertIs(judge_outcome(stay, arr), Outcome.LOSE)
        self.assertIs(judge_outcome(switch, arr), Outcome.WIN)

    def test_concrete_prize_scenario(self):
        """[P, N, N], first pick 1: stay wins, switch loses, whichever door opens."""
        arr = Arrangement((P, N, N))
        rng = random.Random(2)
        for _ in range(50):
            opened = reveal_host_door(arr, 1, rng)
            switch = compute_final_door(Strategy.SWITCH, opened, 1)
            self.assertEqual(switch, 5 - opened)
            self.assertIs(judge_outcome(compute_final_door(Strategy.STAY, opened, 1), arr), Outcome.WIN)
            self.assertIs(judge_outcome(switch, arr), Outcome.LOSE)

    def test_rejects_invalid_door(self):
        with self.assertRaises(InvalidInput):
            judge_outcome(0, Arrangement((P, N, N)))

    def test_plain_sequences_are_one_based(self):
        self.assertIs(judge_outcome(1, [P, N, N]), Outcome.WIN)
        self.assertIs(judge_outcome(3, [P, N, N]), Outcome.LOSE)
        self.assertIs(judge_outcome(3, (N, N, P)), Outcome.WIN)
        self.assertIs(judge_outcome(2, ["non_prize", "prize", "non_prize"]), Outcome.WIN)

    def test_rejects_bad_plain_sequences(self):
        for layout in ([P, P, N], [P, N], [N, N, N]):
            with self.assertRaises(InvalidInput, msg=repr(layout)):
                judge_outcome(1, layout)


# ============================================================
# Single Trial
# ============================================================

class TestSingleTrial(unittest.TestCase):

    def test_strategies_are_complementary(self):
        rng = random.Random(42)
        for _ in range(1000):
            rec = play_single_trial(rng)
            self.assertNotEqual(rec.revealed_door, rec.first_choice)
            self.assertIs(rec.arrangement[rec.revealed_door], N)
            if rec.first_choice == rec.arrangement.prize_door:
                self.assertIs(rec.stay_outcome, Outcome.WIN)
                self.assertIs(rec.switch_outcome, Outcome.LOSE)
            else:
                self.assertIs(rec.stay_outcome, Outcome.LOSE)
                self.assertIs(rec.switch_outcome, Outcome.WIN)

    def test_host_reveal_computed_once(self):
        with patch("sim_engine.monty.trial.reveal_host_door", return_value=2) as reveal, \
             patch("sim_engine.monty.trial.create_arrangement",
                   return_value=Arrangement((N, N, P))), \
             patch("sim_engine.monty.trial.select_first_door", return_value=1):
            rec = play_single_trial()
        reveal.assert_called_once()
        self.assertEqual(rec.revealed_door, 2)
        self.assertIs(rec.outcome(Strategy.STAY), Outcome.LOSE)
        self.assertIs(rec.outcome("switch"), Outcome.WIN)

    def test_bare_record_has_no_doors(self):
        rec = TrialRecord(Outcome.WIN, Outcome.LOSE)
        self.assertIsNone(rec.arrangement)
        self.assertIsNone(rec.first_choice)
        self.assertIsNone(rec.revealed_door)
        self.assertEqual(rec.to_dict()["first_choice"], None)

    def test_unknown_strategy_lookup(self):
        rec = TrialRecord(Outcome.WIN, Outcome.LOSE)
        with self.assertRaises(InvalidInput):
            rec.outcome("maybe")

    def test_to_dict(self):
        rec = play_single_trial(random.Random(0))
        d = rec.to_dict()
        self.assertEqual(set(d), {"arrangement", "first_choice", "revealed_door", "stay", "switch"})
        self.assertIn(d["stay"], ("win", "lose"))
        self.assertEqual(d["arrangement"].count("prize"), 1)

    def test_seeded_trials_are_reproducible(self):
        a = [play_single_trial(random.Random(99)) for _ in range(3)]
        b = [play_single_trial(random.Random(99)) for _ in range(3)]
        self.assertEqual(a, b)


# ============================================================
# Aggregation
# ============================================================

class TestAggregation(unittest.TestCase):

    def test_counts_and_proportions(self):
        records = [
            TrialRecord(Outcome.WIN, Outcome.LOSE),
            TrialRecord(Outcome.LOSE, Outcome.WIN),
            TrialRecord(Outcome.LOSE, Outcome.WIN),
            TrialRecord(Outcome.LOSE, Outcome.WIN),
        ]
        stats = aggregate(records)
        self.assertEqual(stats.trials, 4)
        self.assertEqual(stats.count(Strategy.STAY, Outcome.WIN), 1)
        self.assertEqual(stats.count("stay", "lose"), 3)
        self.assertEqual(stats.count(Strategy.SWITCH, Outcome.WIN), 3)
        self.assertAlmostEqual(stats.proportion(Strategy.STAY, Outcome.WIN), 0.25)
        self.assertAlmostEqual(stats.win_rate(Strategy.SWITCH), 0.75)

    def test_missing_groups_count_zero(self):
        stats = aggregate([TrialRecord(Outcome.WIN, Outcome.LOSE)])
        self.assertEqual(stats.count(Strategy.STAY, Outcome.LOSE), 0)
        self.assertEqual(stats.count(Strategy.SWITCH, Outcome.WIN), 0)
        self.assertEqual(len(stats.counts), 4)

    def test_proportions_sum_to_one_per_strategy(self):
        stats = run_batch(300, seed=8).stats
        for s in Strategy:
            total = sum(stats.proportion(s, o) for o in Outcome)
            self.assertAlmostEqual(total, 1.0)

    def test_unknown_labels_rejected(self):
        stats = aggregate([TrialRecord(Outcome.WIN, Outcome.LOSE)])
        with self.assertRaises(InvalidInput):
            stats.count("maybe", Outcome.WIN)
        with self.assertRaises(InvalidInput):
            stats.proportion(Strategy.STAY, "draw")

    def test_empty_records_rejected(self):
        with self.assertRaises(InvalidInput):
            aggregate([])

    def test_to_dict_shape(self):
        d = run_batch(60, seed=4).stats.to_dict()
        self.assertEqual(d["trials"], 60)
        self.assertEqual(set(d["strategies"]), {"stay", "switch"})
        self.assertEqual(set(d["strategies"]["stay"]), {"win", "lose"})
        self.assertEqual(d["win_rate_theoretical"], {"stay": 0.3333, "switch": 0.6667})
        cells = d["strategies"]["switch"]
        self.assertEqual(cells["win"]["count"] + cells["lose"]["count"], 60)


# ============================================================
# Batch Runner
# ============================================================

class TestBatchRunner(unittest.TestCase):

    def test_returns_n_records(self):
        records = play_n_trials(100, rng=random.Random(1), console=_console())
        self.assertEqual(len(records), 100)
        for rec in records:
            self.assertIsInstance(rec, TrialRecord)
            self.assertIsInstance(rec.stay_outcome, Outcome)
            self.assertIsInstance(rec.switch_outcome, Outcome)

    def test_default_is_100_trials(self):
        self.assertEqual(len(play_n_trials(console=_console())), 100)

    def test_prints_proportion_table(self):
        console = _console()
        play_n_trials(200, seed=3, console=console)
        out = console.file.getvalue()
        stats = run_batch(200, seed=3).stats

        self.assertIn("WIN", out)
        self.assertIn("LOSE", out)
        for s in Strategy:
            row = next(line for line in out.splitlines() if s.name in line)
            cells = re.findall(r"\d\.\d{2}", row)
            self.assertEqual(cells, [f"{stats.proportion(s, o):.2f}" for o in Outcome])

    def test_prints_to_stdout_by_default(self):
        buf = io.StringIO()
        with redirect_stdout(buf):
            play_n_trials(20, seed=5)
        out = buf.getvalue()
        self.assertIn("STAY", out)
        self.assertIn("SWITCH", out)

    def test_invalid_counts_rejected_before_playing(self):
        for bad in (0, -5, 2.5, True, "100", None):
            console = _console()
            with patch("sim_engine.monty.batch.play_single_trial") as play:
                with self.assertRaises(InvalidInput, msg=repr(bad)):
                    play_n_trials(bad, console=console)
            play.assert_not_called()
            self.assertEqual(console.file.getvalue(), "")

    def test_exactly_one_strategy_wins_each_trial(self):
        result = run_batch(2000, seed=12)
        wins = result.stats.count(Strategy.STAY, Outcome.WIN) \
            + result.stats.count(Strategy.SWITCH, Outcome.WIN)
        self.assertEqual(wins, 2000)

    def test_records_keep_generation_order(self):
        rng_a, rng_b = random.Random(21), random.Random(21)
        records = run_batch(25, rng=rng_a).records
        expected = [play_single_trial(rng_b) for _ in range(25)]
        self.assertEqual(records, expected)

    def test_converges_to_one_third_and_two_thirds(self):
        stats = run_batch(10_000, seed=2024).stats
        self.assertAlmostEqual(stats.win_rate(Strategy.STAY), 1 / 3, delta=0.02)
        self.assertAlmostEqual(stats.win_rate(Strategy.SWITCH), 2 / 3, delta=0.02)


# ============================================================
# Settings & Run Config
# ============================================================

class TestSettings(unittest.TestCase):

    def tearDown(self):
        root = logging.getLogger("montyhall")
        for h in list(root.handlers):
            root.removeHandler(h)
        root.setLevel(logging.NOTSET)

    def test_env_int_parsing(self):
        from config.settings import _env_int
        with patch.dict(os.environ, {"MONTY_TEST_INT": "250"}):
            self.assertEqual(_env_int("MONTY_TEST_INT", 100), 250)
        with patch.dict(os.environ, {"MONTY_TEST_INT": "lots"}):
            self.assertEqual(_env_int("MONTY_TEST_INT", 100), 100)
        with patch.dict(os.environ, {"MONTY_TEST_INT": ""}):
            self.assertIsNone(_env_int("MONTY_TEST_INT", None))

    def test_env_log_level_parsing(self):
        from config.settings import _env_log_level
        with patch.dict(os.environ, {"MONTY_TEST_LEVEL": "debug"}):
            self.assertEqual(_env_log_level("MONTY_TEST_LEVEL"), "DEBUG")
        with patch.dict(os.environ, {"MONTY_TEST_LEVEL": ""}):
            self.assertEqual(_env_log_level("MONTY_TEST_LEVEL"), "WARNING")
        with patch.dict(os.environ, {"MONTY_TEST_LEVEL": "verbose"}):
            with self.assertLogs("montyhall.settings", level="WARNING") as logs:
                self.assertEqual(_env_log_level("MONTY_TEST_LEVEL"), "WARNING")
        self.assertTrue(any("verbose" in line for line in logs.output))

    def test_configure_logging_is_idempotent(self):
        from config.settings import configure_logging
        configure_logging("info")
        root = configure_logging("debug")
        self.assertEqual(len(root.handlers), 1)
        self.assertEqual(root.level, logging.DEBUG)

    def test_batch_logs_summary(self):
        with self.assertLogs("montyhall.batch", level="INFO") as logs:
            run_batch(30, seed=1)
        self.assertTrue(any("30 trials" in line for line in logs.output))

    def test_run_config_defaults(self):
        from config.monty_schema import OutputFormat, RunConfig
        from config.settings import SimConfig
        run = RunConfig()
        self.assertEqual(run.trials, SimConfig.DEFAULT_TRIALS)
        self.assertIs(run.output, OutputFormat.TABLE)
        self.assertFalse(run.show_counts)

    def test_run_config_rejects_bad_trials(self):
        from config.monty_schema import RunConfig
        for bad in (0, -1, 2.5, "100"):
            with self.assertRaises(ValidationError, msg=repr(bad)):
                RunConfig(trials=bad)


if __name__ == "__main__":
    unittest.main()
