#!/usr/bin/env python3
"""
Monty Hall Simulator - CLI Tests

Verifies:
  1. Table output has one row per strategy and one column per outcome
  2. --counts adds the raw count table
  3. --json prints AggregateStats.to_dict()
  4. --seed makes runs reproducible
  5. Invalid --trials exits with status 2 and prints no table
  6. An unknown MONTY_LOG_LEVEL falls back to WARNING instead of crashing

Run: python tests_cli.py
"""

import io
import json
import logging
import os
import sys
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent))

from rich.console import Console

from config.settings import SimConfig, _env_log_level
from tools.monty_cli import build_parser, main


def _run(*argv):
    console = Console(file=io.StringIO(), width=100)
    try:
        code = main(list(argv), console=console)
    finally:
        # main() installs a stderr handler; drop it so it does not outlive the test
        root = logging.getLogger("montyhall")
        for h in list(root.handlers):
            root.removeHandler(h)
    return code, console.file.getvalue()


def _exit_code(*argv):
    try:
        _run(*argv)
    except SystemExit as e:
        return e.code
    return None


def test_table_output():
    code, out = _run("--trials", "300", "--seed", "1")
    assert code == 0
    for label in ("STAY", "SWITCH", "WIN", "LOSE"):
        assert label in out, f"missing {label}"
    assert "Counts" not in out
    print("✅ Table output")


def test_counts_table():
    code, out = _run("--trials", "300", "--seed", "1", "--counts")
    assert code == 0
    assert "Counts" in out
    print("✅ Counts table")


def test_json_output():
    code, out = _run("--trials", "500", "--seed", "9", "--json")
    assert code == 0
    data = json.loads(out)
    assert data["trials"] == 500
    stay = data["strategies"]["stay"]
    switch = data["strategies"]["switch"]
    assert stay["win"]["count"] + switch["win"]["count"] == 500
    assert data["win_rate_measured"]["switch"] > data["win_rate_measured"]["stay"]
    print("✅ JSON output")


def test_seed_reproducible():
    _, first = _run("--trials", "250", "--seed", "17", "--json")
    _, second = _run("--trials", "250", "--seed", "17", "--json")
    assert json.loads(first) == json.loads(second)
    print("✅ Seeded runs reproducible")


def test_invalid_trials_exit_2():
    for bad in ("0", "-3"):
        assert _exit_code("--trials", bad) == 2, f"--trials {bad}"
    assert _exit_code("--trials", "many") == 2
    print("✅ Invalid --trials rejected")


def test_log_level_case_insensitive():
    args = build_parser().parse_args(["--log-level", "debug"])
    assert args.log_level == "DEBUG"
    print("✅ --log-level normalised")


def test_unknown_env_log_level_falls_back():
    with patch.dict(os.environ, {"MONTY_LOG_LEVEL": "verbose"}):
        level = _env_log_level("MONTY_LOG_LEVEL")
    assert level == "WARNING"
    with patch.object(SimConfig, "LOG_LEVEL", level):
        assert build_parser().parse_args([]).log_level == "WARNING"
        code, out = _run("--trials", "5", "--seed", "2")
    assert code == 0
    assert "STAY" in out
    print("✅ Unknown MONTY_LOG_LEVEL falls back to WARNING")


if __name__ == "__main__":
    tests = [
        test_table_output,
        test_counts_table,
        test_json_output,
        test_seed_reproducible,
        test_invalid_trials_exit_2,
        test_log_level_case_insensitive,
        test_unknown_env_log_level_falls_back,
    ]

    print(f"\n{'='*60}")
    print(f"CLI Tests - {len(tests)} tests")
    print(f"{'='*60}\n")

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"❌ {test.__name__}: {e}")
            failed += 1

    print(f"\n{'='*60}")
    print(f"Results: {passed} passed, {failed} failed, {passed + failed} total")
    print(f"{'='*60}")

    sys.exit(0 if failed == 0 else 1)
