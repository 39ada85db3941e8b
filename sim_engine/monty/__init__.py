"""
MONTYHALL - Monty Hall Trial Simulator

Three doors, one prize. The contestant picks, the host opens a losing
door, and the contestant stays or switches. Playing both strategies on
the same games shows switching wins about 2/3 of the time.

Usage:
    from sim_engine.monty import play_n_trials, run_batch
    records = play_n_trials(10_000)          # prints the proportion table
    stats = run_batch(10_000, seed=7).stats
    stats.win_rate("switch")
"""

from sim_engine.monty.doors import (
    DOORS, Arrangement, DoorContent, InvalidInput, Outcome, Strategy,
    as_arrangement, as_outcome, as_strategy,
    check_door, compute_final_door, create_arrangement, judge_outcome,
    reveal_host_door, select_first_door,
)
from sim_engine.monty.trial import TrialRecord, play_single_trial
from sim_engine.monty.batch import (
    THEORETICAL_WIN_RATE, AggregateStats, BatchResult,
    aggregate, play_n_trials, render_count_table, render_proportion_table,
    run_batch, validate_trial_count,
)

__all__ = [
    "DOORS", "Arrangement", "DoorContent", "InvalidInput", "Outcome", "Strategy",
    "as_arrangement", "as_outcome", "as_strategy",
    "check_door", "compute_final_door", "create_arrangement", "judge_outcome",
    "reveal_host_door", "select_first_door",
    "TrialRecord", "play_single_trial",
    "THEORETICAL_WIN_RATE", "AggregateStats", "BatchResult",
    "aggregate", "play_n_trials", "render_count_table", "render_proportion_table",
    "run_batch", "validate_trial_count",
]
