"""Pydantic schemas for pocket clearing data."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, FiniteFloat, field_validator


# --- Tool / Material ---


class Tool(BaseModel):
    diameter: FiniteFloat = Field(gt=0)  # mm
    type: Literal["endmill", "ballnose", "v_bit"] = "endmill"
    flutes: int = 2
    plunge_rate: float = 20.0  # mm/s, used by feed-controlled descents


class MaterialExtent(BaseModel):
    """Y extent of the stock the pocket rows are sampled across."""

    origin_y: FiniteFloat = 0.0  # offset of the material origin along Y
    height: FiniteFloat = Field(ge=0)  # material size along Y (mm)


# --- Pocket ---


class Interval(BaseModel):
    """A clear x-range on a single row, already margined inward."""

    start: float
    end: float

    @property
    def length(self) -> float:
        return abs(self.end - self.start)


class PocketRow(BaseModel):
    y: float
    intervals: list[Interval] = []


class Pocket(BaseModel):
    """Scan rows of clear intervals, ordered by ascending y.

    Rows are owned exclusively by the pocket; subtraction mutates them in
    place.
    """

    resolution: float
    rows: list[PocketRow] = []

    @property
    def segment_count(self) -> int:
        return sum(len(row.intervals) for row in self.rows)

    @property
    def row_count(self) -> int:
        return len(self.rows)


# --- Motion ---


MotionKind = Literal["comment", "retract", "rapid_move", "rapid_plunge", "descend", "line_to"]


class MotionCommand(BaseModel):
    kind: MotionKind
    x: float | None = None
    y: float | None = None
    z: float | None = None
    text: str | None = None


# --- API ---


class PocketRequest(BaseModel):
    """Outline (and optional exclusion outlines) to clear at one depth."""

    outline: list[list[float]]  # [[x, y], ...]
    holes: list[list[list[float]]] = []  # interior rings of the outline
    exclusions: list[list[list[float]]] = []  # outlines subtracted from the pocket
    tool: Tool
    material: MaterialExtent
    resolution: FiniteFloat | None = None  # row spacing; None = config default
    cut_depth: FiniteFloat
    rapid_depth: FiniteFloat  # depths at or above this are reached with a rapid plunge

    @field_validator("outline")
    @classmethod
    def validate_outline(cls, v):
        if len(v) < 3:
            raise ValueError("outline needs at least 3 points")
        for point in v:
            if len(point) != 2:
                raise ValueError("outline points must be [x, y] pairs")
        return v


class PocketResult(BaseModel):
    rows: list[PocketRow]
    segment_count: int
    commands: list[MotionCommand]
