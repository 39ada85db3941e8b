#!/usr/bin/env python3
"""
Monty Hall Simulator - CLI

Usage:
    python -m tools.monty_cli
    python -m tools.monty_cli --trials 10000 --seed 7
    python -m tools.monty_cli --trials 500 --counts
    python -m tools.monty_cli --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError
from rich.console import Console

from config.monty_schema import OutputFormat, RunConfig
from config.settings import LOG_LEVELS, SimConfig, configure_logging
from sim_engine.monty import (
    render_count_table, render_proportion_table, run_batch,
)

logger = logging.getLogger("montyhall.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate the Monty Hall problem")
    parser.add_argument("--trials", "-n", type=int, default=SimConfig.DEFAULT_TRIALS,
                        help=f"Number of games (default {SimConfig.DEFAULT_TRIALS})")
    parser.add_argument("--seed", type=int, default=SimConfig.SEED, help="Random seed")
    parser.add_argument("--json", action="store_true", help="Print statistics as JSON")
    parser.add_argument("--counts", action="store_true", help="Also print raw counts")
    parser.add_argument("--log-level", type=str.upper, default=SimConfig.LOG_LEVEL,
                        choices=LOG_LEVELS)
    return parser


def main(argv=None, console: Console = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    console = console if console is not None else Console()

    try:
        run = RunConfig(
            trials=args.trials,
            seed=args.seed,
            output=OutputFormat.JSON if args.json else OutputFormat.TABLE,
            show_counts=args.counts,
        )
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err["loc"])
        parser.error(f"--{field}: {err['msg']}")

    logger.debug(f"Run config: {run.model_dump_json()}")
    result = run_batch(run.trials, seed=run.seed)

    if run.output is OutputFormat.JSON:
        console.print_json(json.dumps(result.stats.to_dict()))
        return 0

    console.print(render_proportion_table(result.stats))
    if run.show_counts:
        console.print(render_count_table(result.stats))
    return 0


if __name__ == "__main__":
    sys.exit(main())
