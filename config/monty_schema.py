"""
Monty Hall Simulator - Run Configuration Schema

Validated parameters for one batch run. The CLI builds a RunConfig from
its arguments and the environment defaults in config.settings.

Usage:
    from config.monty_schema import RunConfig
    run = RunConfig(trials=10_000, seed=7)
    json_str = run.model_dump_json(indent=2)
"""

from __future__ import annotations
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from config.settings import SimConfig


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


class RunConfig(BaseModel):
    """One batch of trials and how to report it."""
    trials: int = Field(default_factory=lambda: SimConfig.DEFAULT_TRIALS, gt=0, strict=True)
    seed: Optional[int] = Field(default_factory=lambda: SimConfig.SEED)
    output: OutputFormat = OutputFormat.TABLE
    show_counts: bool = False          # also print raw counts (table output only)
