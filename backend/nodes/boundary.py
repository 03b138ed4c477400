"""Boundary chain elements and their scan-row crossing evaluation."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from shapely.geometry import MultiPolygon, Polygon

# Angular tolerance (degrees) for matching a crossing to an arc endpoint
_ANGLE_EPS = 1e-9


class BoundaryElement(ABC):
    """One element of a closed boundary chain."""

    @abstractmethod
    def eval_crossings(self, y: float, collector: list[float]) -> None:
        """Append every x where this element crosses the row at y."""


@dataclass(frozen=True)
class LineElement(BoundaryElement):
    start: tuple[float, float]
    end: tuple[float, float]

    def eval_crossings(self, y: float, collector: list[float]) -> None:
        (x0, y0), (x1, y1) = self.start, self.end
        # Horizontal lines never cross a row; the neighbours' endpoints do
        if y0 == y1:
            return
        # Half-open in y: a vertex shared by two monotone edges counts once
        if min(y0, y1) <= y < max(y0, y1):
            collector.append(x0 + (y - y0) * (x1 - x0) / (y1 - y0))


@dataclass(frozen=True)
class ArcElement(BoundaryElement):
    """Circular arc. Angles in degrees, positive sweep is counter-clockwise."""

    center: tuple[float, float]
    radius: float
    start_angle: float
    sweep: float

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Arc radius must be positive, got {self.radius}")
        if self.sweep == 0:
            raise ValueError("Arc sweep must be non-zero")

    @property
    def end_angle(self) -> float:
        return self.start_angle + self.sweep

    def eval_crossings(self, y: float, collector: list[float]) -> None:
        cx, cy = self.center
        dy = y - cy
        if abs(dy) >= self.radius:
            # Outside, or a tangent touch which does not change parity
            return
        dx = math.sqrt(self.radius * self.radius - dy * dy)

        for x in (cx - dx, cx + dx):
            angle = math.degrees(math.atan2(dy, x - cx))
            if self._counts(angle):
                collector.append(x)

    def _counts(self, angle: float) -> bool:
        span = abs(self.sweep)
        if span >= 360.0:
            return True

        direction = 1.0 if self.sweep > 0 else -1.0
        offset = (direction * (angle - self.start_angle)) % 360.0

        if offset <= _ANGLE_EPS or offset >= 360.0 - _ANGLE_EPS:
            # Arc start: counts when the arc leaves it upward
            return direction * math.cos(math.radians(self.start_angle)) > 0
        if abs(offset - span) <= _ANGLE_EPS:
            # Arc end: walking back into the arc must also go upward
            return -direction * math.cos(math.radians(self.end_angle)) > 0
        return offset < span


def chain_from_coords(coords: list[list[float]] | list[tuple[float, float]]) -> list[BoundaryElement]:
    """Build a closed chain of line elements from a ring of [x, y] points.

    The ring is closed automatically; zero-length edges are skipped.
    """
    points = [(float(c[0]), float(c[1])) for c in coords]
    if len(points) < 3:
        raise ValueError(f"A closed boundary needs at least 3 points, got {len(points)}")
    if points[0] != points[-1]:
        points.append(points[0])

    chain: list[BoundaryElement] = []
    for a, b in zip(points, points[1:]):
        if a == b:
            continue
        chain.append(LineElement(a, b))
    return chain


def chain_from_polygon(polygon: Polygon | MultiPolygon, offset: float = 0.0) -> list[BoundaryElement]:
    """Chain the exterior and all interior rings of a Shapely polygon.

    A non-zero offset buffers the polygon first (negative shrinks it,
    mitred corners). Every part of a MultiPolygon is chained. Even-odd
    filling makes the interior rings holes of the pocket.
    """
    if offset:
        polygon = polygon.buffer(offset, join_style="mitre")
    if polygon.is_empty:
        return []

    parts = polygon.geoms if isinstance(polygon, MultiPolygon) else [polygon]
    chain: list[BoundaryElement] = []
    for part in parts:
        chain.extend(chain_from_coords(list(part.exterior.coords)))
        for ring in part.interiors:
            chain.extend(chain_from_coords(list(ring.coords)))
    return chain
