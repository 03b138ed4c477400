"""Pocket clearing configuration: tolerances and defaults, overridable from the environment."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, FiniteFloat

# Two coordinates closer than this are treated as the same point (mm)
DEFAULT_PRECISION = 1e-5
# Fraction of the tool diameter left on each interval end for the finishing pass
DEFAULT_MARGIN_RATIO = 0.1


class PocketConfig(BaseModel):
    precision: FiniteFloat = Field(default=DEFAULT_PRECISION, gt=0)
    margin_ratio: FiniteFloat = Field(default=DEFAULT_MARGIN_RATIO, ge=0, lt=0.5)
    traverse_z: FiniteFloat = 5.0  # safe retract height between cuts (mm)
    resolution: FiniteFloat = Field(default=1.0, gt=0)  # default row spacing (mm)
    max_rows: int = Field(default=100_000, gt=0)  # rows one pocket may sample


def load_config(env_file: str | Path | None = None) -> PocketConfig:
    """Build a PocketConfig from POCKET_* environment variables.

    Variables that are unset keep the PocketConfig defaults.
    """
    load_dotenv(env_file or Path(__file__).parent.parent / ".env")

    overrides: dict[str, float] = {}
    for field, var in (
        ("precision", "POCKET_PRECISION"),
        ("margin_ratio", "POCKET_MARGIN_RATIO"),
        ("traverse_z", "POCKET_TRAVERSE_Z"),
        ("resolution", "POCKET_RESOLUTION"),
    ):
        raw = os.environ.get(var)
        if raw is None or raw == "":
            continue
        try:
            overrides[field] = float(raw)
        except ValueError as e:
            raise ValueError(f"{var} must be a number, got {raw!r}") from e

    return PocketConfig(**overrides)
