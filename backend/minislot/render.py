"""Declarative rendering commands and the surfaces that receive them.

The game never draws pixels. It submits commands describing what the
screen should show; a surface (canvas, terminal, test recorder) applies them.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Protocol

from minislot.logic.models import Grid, PayLine, Symbol


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrawGrid:
    """Place all nine symbol glyphs at their fixed cells."""

    grid: tuple[tuple[Symbol, ...], ...]

    @classmethod
    def of(cls, grid: Grid) -> "DrawGrid":
        return cls(grid=tuple(tuple(row) for row in grid))


@dataclass(frozen=True)
class ScrollReel:
    """Scroll one reel to a position, showing the given top/middle/bottom symbols."""

    column: int
    position: int
    symbols: tuple[Symbol, ...]


@dataclass(frozen=True)
class SetOverlays:
    """Replace every payline overlay with exactly these lines."""

    lines: tuple[PayLine, ...] = ()


@dataclass(frozen=True)
class DrawText:
    """Render static UI text into a named slot (title, credits, bet, message)."""

    slot: str
    text: str


RenderCommand = DrawGrid | ScrollReel | SetOverlays | DrawText


class RenderSurface(Protocol):
    """Protocol for rendering surfaces."""

    def submit(self, command: RenderCommand) -> None:
        """Apply one rendering command."""
        ...


@dataclass
class RecordingSurface:
    """
    Surface that keeps what is currently on screen.

    Used headless and by the HTTP layer to report overlays and reel
    positions; the last commands are kept for inspection.
    """

    history_size: int = 256
    grid: tuple[tuple[Symbol, ...], ...] | None = None
    overlays: tuple[PayLine, ...] = ()
    reel_positions: dict[int, int] = field(default_factory=dict)
    texts: dict[str, str] = field(default_factory=dict)
    history: deque = field(init=False)

    def __post_init__(self) -> None:
        self.history = deque(maxlen=self.history_size)

    def submit(self, command: RenderCommand) -> None:
        logger.debug("render %s", command)
        self.history.append(command)
        if isinstance(command, DrawGrid):
            self.grid = command.grid
        elif isinstance(command, ScrollReel):
            self.reel_positions[command.column] = command.position
        elif isinstance(command, SetOverlays):
            self.overlays = command.lines
        elif isinstance(command, DrawText):
            self.texts[command.slot] = command.text
        else:
            raise TypeError(f"unknown render command {command!r}")

    def commands_of(self, kind: type) -> list:
        """Recorded commands of one type, oldest first."""
        return [c for c in self.history if isinstance(c, kind)]
