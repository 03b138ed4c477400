"""Test configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add backend to path so imports work
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import PocketConfig
from nodes.boundary import chain_from_coords
from nodes.motion import MotionRecorder
from schemas import Interval, MaterialExtent, MotionCommand, Pocket, PocketRow, Tool


@pytest.fixture
def tool() -> Tool:
    """2mm flat endmill."""
    return Tool(diameter=2.0)


@pytest.fixture
def config() -> PocketConfig:
    return PocketConfig()


@pytest.fixture
def square_chain():
    """10x10 square with its lower-left corner at the origin."""
    return chain_from_coords([[0, 0], [10, 0], [10, 10], [0, 10]])


@pytest.fixture
def material() -> MaterialExtent:
    """Stock covering y = 0..10."""
    return MaterialExtent(origin_y=0.0, height=10.0)


def make_pocket_from_rows(rows: list[list[tuple[float, float]]], resolution: float = 1.0) -> Pocket:
    """Pocket with row i at y=i holding the given (start, end) intervals."""
    return Pocket(
        resolution=resolution,
        rows=[
            PocketRow(y=i * resolution, intervals=[Interval(start=s, end=e) for s, e in row])
            for i, row in enumerate(rows)
        ],
    )


def spans(row: PocketRow) -> list[tuple[float, float]]:
    return [(iv.start, iv.end) for iv in row.intervals]


def assert_spans(row: PocketRow, expected: list[tuple[float, float]]) -> None:
    """Compare a row's intervals against (start, end) pairs, approximately."""
    assert len(row.intervals) == len(expected), spans(row)
    for iv, (start, end) in zip(row.intervals, expected):
        assert iv.start == pytest.approx(start)
        assert iv.end == pytest.approx(end)


def motions(recorder: MotionRecorder) -> list[MotionCommand]:
    """Recorded commands that move the machine (everything but comments)."""
    return [c for c in recorder.commands if c.kind != "comment"]


def motion_kinds(recorder: MotionRecorder) -> list[str]:
    return [c.kind for c in motions(recorder)]
