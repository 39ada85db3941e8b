"""
MONTYHALL - Door Primitives

The five pure steps of a single game: set up the doors, take the
contestant's first pick, let the host open a door, apply a strategy,
and judge the final door.

Every function that draws randomness takes an optional `rng` (anything
with the `random.Random` interface). When omitted, the module-level
`random` generator is used.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum


DOORS = (1, 2, 3)


class InvalidInput(ValueError):
    """A door, arrangement, strategy or trial count outside its valid range."""


# ═══════════════════════════════════════════════════════════════
# Enums
# ═══════════════════════════════════════════════════════════════

class DoorContent(str, Enum):
    PRIZE     = "prize"
    NON_PRIZE = "non_prize"


class Strategy(str, Enum):
    STAY   = "stay"
    SWITCH = "switch"


class Outcome(str, Enum):
    WIN  = "win"
    LOSE = "lose"


# ═══════════════════════════════════════════════════════════════
# Arrangement
# ═══════════════════════════════════════════════════════════════

def check_door(door) -> int:
    """Return `door` if it is a valid door index, else raise InvalidInput."""
    if isinstance(door, bool) or not isinstance(door, int) or door not in DOORS:
        raise InvalidInput(f"Door must be one of {list(DOORS)}, got {door!r}")
    return door


@dataclass(frozen=True)
class Arrangement:
    """What sits behind doors 1..3. Exactly one door holds the prize."""
    contents: tuple

    def __post_init__(self):
        try:
            contents = tuple(DoorContent(c) for c in self.contents)
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Invalid door content in {self.contents!r}") from e
        if len(contents) != len(DOORS):
            raise InvalidInput(f"Arrangement needs {len(DOORS)} doors, got {len(contents)}")
        if contents.count(DoorContent.PRIZE) != 1:
            raise InvalidInput(f"Arrangement needs exactly one prize: {contents}")
        object.__setattr__(self, "contents", contents)

    def __getitem__(self, door: int) -> DoorContent:
        return self.contents[check_door(door) - 1]

    def __iter__(self):
        return iter(self.contents)

    def __len__(self) -> int:
        return len(self.contents)

    @property
    def prize_door(self) -> int:
        return self.contents.index(DoorContent.PRIZE) + 1

    @property
    def non_prize_doors(self) -> list[int]:
        return [d for d in DOORS if self[d] is DoorContent.NON_PRIZE]

    def to_list(self) -> list[str]:
        return [c.value for c in self.contents]


def as_arrangement(value) -> Arrangement:
    """Accept an Arrangement or any 3-item sequence of door contents."""
    if isinstance(value, Arrangement):
        return value
    return Arrangement(value)


def as_strategy(value) -> Strategy:
    try:
        return Strategy(value)
    except ValueError as e:
        raise InvalidInput(f"Unknown strategy: {value!r}") from e


def as_outcome(value) -> Outcome:
    try:
        return Outcome(value)
    except ValueError as e:
        raise InvalidInput(f"Unknown outcome: {value!r}") from e


# ═══════════════════════════════════════════════════════════════
# Game Steps
# ═══════════════════════════════════════════════════════════════

def create_arrangement(rng=None) -> Arrangement:
    """Shuffle one prize and two non-prizes behind the three doors."""
    rng = rng if rng is not None else random
    pool = [DoorContent.PRIZE, DoorContent.NON_PRIZE, DoorContent.NON_PRIZE]
    return Arrangement(tuple(rng.sample(pool, len(pool))))


def select_first_door(rng=None) -> int:
    """Contestant's opening pick. They know nothing yet, so it is uniform."""
    rng = rng if rng is not None else random
    return rng.choice(DOORS)


def reveal_host_door(arrangement: Arrangement, first_choice: int, rng=None) -> int:
    """Door the host opens.

    The host always opens a non-prize door the contestant did not pick.
    If the contestant is already on the prize, either non-prize door will
    do and the host picks one at random. Otherwise only one door qualifies.
    """
    arrangement = as_arrangement(arrangement)
    check_door(first_choice)
    candidates = [d for d in arrangement.non_prize_doors if d != first_choice]
    if len(candidates) == 1:
        return candidates[0]
    rng = rng if rng is not None else random
    return rng.choice(candidates)


def compute_final_door(strategy, revealed_door: int, first_choice: int) -> int:
    """Contestant's final door under `strategy` (Strategy or "stay"/"switch")."""
    strategy = as_strategy(strategy)
    check_door(revealed_door)
    check_door(first_choice)
    if revealed_door == first_choice:
        raise InvalidInput(f"Host cannot open the contestant's door ({first_choice})")

    if strategy is Strategy.STAY:
        return first_choice
    # only one door is neither picked nor opened
    return next(d for d in DOORS if d not in (revealed_door, first_choice))


def judge_outcome(final_door: int, arrangement: Arrangement) -> Outcome:
    if as_arrangement(arrangement)[final_door] is DoorContent.PRIZE:
        return Outcome.WIN
    return Outcome.LOSE
