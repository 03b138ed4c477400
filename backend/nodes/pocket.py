"""Scanline pocket clearing: row intervals, pocket subtraction, zig-zag motion.

A pocket is sampled as horizontal rows spaced by the resolution. Each row
holds the clear x-intervals between boundary crossings (even-odd rule),
nudged inward by a margin so the perimeter pass leaves a clean wall.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence

from config import PocketConfig
from nodes.boundary import BoundaryElement
from nodes.motion import MotionSink
from schemas import Interval, MaterialExtent, Pocket, PocketRow, Tool

logger = logging.getLogger(__name__)

ToolLookup = Callable[[BoundaryElement], Tool]


class PocketError(ValueError):
    """Raised when a pocket operation is given an invalid configuration."""


class InvalidResolutionError(PocketError):
    """Raised when the row spacing is not strictly positive."""


class RowGridMismatchError(PocketError):
    """Raised when two pockets are not sampled on the same rows."""


def remove_duplicate_scalars(values: Sequence[float], precision: float) -> list[float]:
    """Collapse runs of sorted values closer than precision into one value."""
    result: list[float] = []
    for v in values:
        if result and abs(v - result[-1]) < precision:
            continue
        result.append(v)
    return result


def build_pocket(
    chain: Sequence[BoundaryElement],
    tool: Tool,
    material: MaterialExtent,
    resolution: float,
    start: int = 0,
    end: int | None = None,
    config: PocketConfig | None = None,
) -> Pocket:
    """Sample the material's Y extent into rows of clear intervals.

    Elements chain[start:end] are evaluated at every row. Sorted crossings
    are paired (even-odd); pairs no wider than the tool diameter are
    dropped, the rest are shrunk by margin_ratio * diameter on each end.
    """
    config = config or PocketConfig()
    if not (resolution > 0 and math.isfinite(resolution)):
        raise InvalidResolutionError(
            f"Pocket resolution must be positive and finite, got {resolution}"
        )

    elements = chain[start:end]
    margin = config.margin_ratio * tool.diameter
    y_start = -material.origin_y
    y_end = material.height - material.origin_y
    rows_needed = 1 + material.height / resolution
    if not rows_needed <= config.max_rows:
        raise PocketError(
            f"Pocket needs {rows_needed:g} rows, more than the {config.max_rows} allowed"
        )
    max_rows = int(rows_needed)

    pocket = Pocket(resolution=resolution)
    for i in range(max_rows):
        y = y_start + i * resolution
        if y > y_end:
            break

        crossings: list[float] = []
        for element in elements:
            element.eval_crossings(y, crossings)
        crossings.sort()
        crossings = remove_duplicate_scalars(crossings, config.precision)

        row = PocketRow(y=y)
        for a, b in zip(crossings[0::2], crossings[1::2]):
            # Spans no wider than the tool are left to the perimeter pass
            if abs(b - a) > tool.diameter:
                row.intervals.append(Interval(start=a + margin, end=b - margin))
        pocket.rows.append(row)

    logger.debug(
        "Built pocket: %d rows, %d segments (resolution=%g, tool=%g)",
        pocket.row_count, pocket.segment_count, resolution, tool.diameter,
    )
    return pocket


def build_pocket_for_chain(
    chain: Sequence[BoundaryElement],
    tool_lookup: ToolLookup,
    material: MaterialExtent,
    resolution: float,
    start: int = 0,
    end: int | None = None,
    config: PocketConfig | None = None,
) -> Pocket:
    """Like build_pocket, with the tool resolved from the first chain element."""
    if not chain[start:end]:
        raise PocketError(f"Boundary chain range [{start}:{end}] is empty")
    tool = tool_lookup(chain[start])
    return build_pocket(chain, tool, material, resolution, start, end, config)


def _check_same_grid(a: Pocket, b: Pocket, precision: float) -> None:
    if a.row_count != b.row_count:
        raise RowGridMismatchError(
            f"Row count mismatch: {a.row_count} != {b.row_count}"
        )
    for i, (row_a, row_b) in enumerate(zip(a.rows, b.rows)):
        if abs(row_a.y - row_b.y) > precision:
            raise RowGridMismatchError(
                f"Row {i} y mismatch: {row_a.y} != {row_b.y}"
            )


def subtract_pocket(
    minuend: Pocket,
    subtrahend: Pocket,
    config: PocketConfig | None = None,
) -> None:
    """Remove subtrahend's intervals from minuend, row by row, in place.

    Per minuend interval and subtrahend interval on the same row:
      contained   *---+---+---*   split minuend around the subtrahend
      overlap R   *---+---*---+   trim minuend end to subtrahend start
      overlap L   +---*---+---*   trim minuend start to subtrahend end
    ('*' minuend, '+' subtrahend). After a split, the remaining subtrahend
    intervals are compared against the right-hand piece only.
    """
    config = config or PocketConfig()
    eps = config.precision
    _check_same_grid(minuend, subtrahend, eps)

    splits = 0
    for row_a, row_b in zip(minuend.rows, subtrahend.rows):
        lines = row_a.intervals
        j = 0
        while j < len(lines):
            for b in row_b.intervals:
                a = lines[j]
                if (
                    b.start + eps >= a.start
                    and b.start - eps <= a.end
                    and b.end + eps >= a.start
                    and b.end - eps <= a.end
                ):
                    lines.insert(j + 1, Interval(start=b.end, end=a.end))
                    a.end = b.start
                    splits += 1
                    j += 1
                elif a.start < b.start < a.end:
                    a.end = b.start
                elif a.start < b.end < a.end:
                    a.start = b.end
            j += 1

    logger.debug("Subtracted pocket: %d splits, %d segments remain", splits, minuend.segment_count)


def make_pocket(
    pocket: Pocket,
    cut_depth: float,
    rapid_depth: float,
    tool: Tool,
    output: MotionSink,
    config: PocketConfig | None = None,
) -> None:
    """Emit zig-zag clearing motion for every interval of the pocket.

    Even rows run left to right, odd rows right to left. Every interval is
    entered from the traverse height and cut at cut_depth; intervals
    narrower than the tool are skipped.
    """
    if pocket.segment_count == 0:
        return

    config = config or PocketConfig()
    output.comment(f"Pass depth: {cut_depth:.4f}")

    for i, row in enumerate(pocket.rows):
        left_to_right = i % 2 == 0
        intervals = row.intervals if left_to_right else reversed(row.intervals)

        for interval in intervals:
            if interval.length < tool.diameter:
                continue

            if left_to_right:
                entry, exit_x = interval.start, interval.end
            else:
                entry, exit_x = interval.end, interval.start

            output.retract()
            output.rapid_move(entry, row.y)
            if rapid_depth >= cut_depth - config.precision:
                output.rapid_plunge(cut_depth)
            else:
                output.descend(cut_depth, tool)
            output.line_to(exit_x, row.y)

    output.retract()
