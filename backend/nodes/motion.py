"""Motion primitives consumed by the pocket emitter, and an in-memory recorder."""

from __future__ import annotations

from typing import Protocol

from schemas import MotionCommand, Tool


class MotionSink(Protocol):
    """Ordered, append-only target for machine motion."""

    def comment(self, text: str) -> None: ...

    def retract(self) -> None:
        """Lift to the traverse-safe height."""

    def rapid_move(self, x: float, y: float) -> None: ...

    def rapid_plunge(self, z: float) -> None: ...

    def descend(self, z: float, tool: Tool) -> None:
        """Feed-controlled vertical move at the tool's plunge rate."""

    def line_to(self, x: float, y: float) -> None: ...


class MotionRecorder:
    """MotionSink that keeps every primitive as a MotionCommand."""

    def __init__(self, traverse_z: float = 5.0):
        self.traverse_z = traverse_z
        self.commands: list[MotionCommand] = []

    def comment(self, text: str) -> None:
        self.commands.append(MotionCommand(kind="comment", text=text))

    def retract(self) -> None:
        self.commands.append(MotionCommand(kind="retract", z=self.traverse_z))

    def rapid_move(self, x: float, y: float) -> None:
        self.commands.append(MotionCommand(kind="rapid_move", x=x, y=y))

    def rapid_plunge(self, z: float) -> None:
        self.commands.append(MotionCommand(kind="rapid_plunge", z=z))

    def descend(self, z: float, tool: Tool) -> None:
        self.commands.append(
            MotionCommand(kind="descend", z=z, text=f"F{tool.plunge_rate:g}")
        )

    def line_to(self, x: float, y: float) -> None:
        self.commands.append(MotionCommand(kind="line_to", x=x, y=y))
