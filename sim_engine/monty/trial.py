"""MONTYHALL - Single game, both strategies played on the same doors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sim_engine.monty.doors import (
    Arrangement, Outcome, Strategy, as_strategy,
    compute_final_door, create_arrangement, judge_outcome,
    reveal_host_door, select_first_door,
)


@dataclass(frozen=True)
class TrialRecord:
    """Result of one game under STAY and under SWITCH."""
    stay_outcome: Outcome
    switch_outcome: Outcome
    arrangement: Optional[Arrangement] = None
    first_choice: Optional[int] = None
    revealed_door: Optional[int] = None

    def outcome(self, strategy) -> Outcome:
        if as_strategy(strategy) is Strategy.STAY:
            return self.stay_outcome
        return self.switch_outcome

    def to_dict(self) -> dict:
        return {
            "arrangement": self.arrangement.to_list() if self.arrangement else None,
            "first_choice": self.first_choice,
            "revealed_door": self.revealed_door,
            "stay": self.stay_outcome.value,
            "switch": self.switch_outcome.value,
        }


def play_single_trial(rng=None) -> TrialRecord:
    """Play one game. The host opens a door once; both strategies share it."""
    arrangement = create_arrangement(rng)
    first_choice = select_first_door(rng)
    revealed = reveal_host_door(arrangement, first_choice, rng)

    stay_door = compute_final_door(Strategy.STAY, revealed, first_choice)
    switch_door = compute_final_door(Strategy.SWITCH, revealed, first_choice)

    return TrialRecord(
        stay_outcome=judge_outcome(stay_door, arrangement),
        switch_outcome=judge_outcome(switch_door, arrangement),
        arrangement=arrangement,
        first_choice=first_choice,
        revealed_door=revealed,
    )
