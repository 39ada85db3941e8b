"""
MONTYHALL - Batch Runner

Plays N independent games, then reduces the trial records to per-strategy
win/lose counts and proportions. Nothing is accumulated while the games
run; the statistics are computed from the finished record list.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass, field

from rich.console import Console
from rich.table import Table

from config.settings import SimConfig
from sim_engine.monty.doors import (
    InvalidInput, Outcome, Strategy, as_outcome, as_strategy,
)
from sim_engine.monty.trial import TrialRecord, play_single_trial

logger = logging.getLogger("montyhall.batch")

THEORETICAL_WIN_RATE = {
    Strategy.STAY: 1 / 3,
    Strategy.SWITCH: 2 / 3,
}


@dataclass(frozen=True)
class AggregateStats:
    """Counts per (strategy, outcome) over `trials` games."""
    trials: int
    counts: dict = field(default_factory=dict)

    def count(self, strategy, outcome) -> int:
        return self.counts.get((as_strategy(strategy), as_outcome(outcome)), 0)

    def proportion(self, strategy, outcome) -> float:
        return self.count(strategy, outcome) / self.trials

    def win_rate(self, strategy) -> float:
        return self.proportion(strategy, Outcome.WIN)

    def to_dict(self) -> dict:
        digits = SimConfig.JSON_PRECISION
        return {
            "trials": self.trials,
            "strategies": {
                s.value: {
                    o.value: {
                        "count": self.count(s, o),
                        "proportion": round(self.proportion(s, o), digits),
                    }
                    for o in Outcome
                }
                for s in Strategy
            },
            "win_rate_theoretical": {
                s.value: round(THEORETICAL_WIN_RATE[s], digits) for s in Strategy
            },
            "win_rate_measured": {
                s.value: round(self.win_rate(s), digits) for s in Strategy
            },
        }


@dataclass(frozen=True)
class BatchResult:
    records: list
    stats: AggregateStats


def validate_trial_count(n) -> int:
    """Return `n` if it is a positive int, else raise InvalidInput."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidInput(f"Trial count must be an integer, got {n!r}")
    if n <= 0:
        raise InvalidInput(f"Trial count must be positive, got {n}")
    return n


def aggregate(records) -> AggregateStats:
    """Group records by (strategy, outcome) and count each group."""
    records = list(records)
    if not records:
        raise InvalidInput("Cannot aggregate an empty set of trials")
    counts = Counter(
        (strategy, record.outcome(strategy))
        for record in records
        for strategy in Strategy
    )
    return AggregateStats(
        trials=len(records),
        counts={(s, o): counts.get((s, o), 0) for s in Strategy for o in Outcome},
    )


def run_batch(n: int = 100, rng=None, seed: int = None) -> BatchResult:
    """Play `n` games and aggregate them. `seed` is used only when `rng` is None."""
    validate_trial_count(n)
    if rng is None and seed is not None:
        rng = random.Random(seed)

    logger.debug(f"Running {n:,} trials (seed={seed})")
    records = [play_single_trial(rng) for _ in range(n)]
    stats = aggregate(records)
    logger.info(
        f"{n:,} trials: stay wins {stats.win_rate(Strategy.STAY):.4f}, "
        f"switch wins {stats.win_rate(Strategy.SWITCH):.4f}"
    )
    return BatchResult(records=records, stats=stats)


# ═══════════════════════════════════════════════════════════════
# Reporting
# ═══════════════════════════════════════════════════════════════

def render_proportion_table(stats: AggregateStats, precision: int = None) -> Table:
    """Strategy rows × outcome columns, each cell a share of that strategy's games."""
    precision = SimConfig.TABLE_PRECISION if precision is None else precision
    table = Table(title=f"Monty Hall - {stats.trials:,} trials")
    table.add_column("Strategy", style="cyan")
    for outcome in Outcome:
        table.add_column(outcome.name, justify="right")
    for strategy in Strategy:
        table.add_row(
            strategy.name,
            *(f"{stats.proportion(strategy, o):.{precision}f}" for o in Outcome),
        )
    return table


def render_count_table(stats: AggregateStats) -> Table:
    table = Table(title="Counts")
    table.add_column("Strategy", style="cyan")
    for outcome in Outcome:
        table.add_column(outcome.name, justify="right")
    for strategy in Strategy:
        table.add_row(strategy.name, *(str(stats.count(strategy, o)) for o in Outcome))
    return table


def play_n_trials(n: int = 100, rng=None, seed: int = None,
                  console: Console = None) -> list[TrialRecord]:
    """Play `n` games, print the proportion table, and return the records."""
    result = run_batch(n, rng=rng, seed=seed)
    console = console if console is not None else Console()
    console.print(render_proportion_table(result.stats))
    return result.records
