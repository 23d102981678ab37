"""Reel engine: tick-driven spin, settle and grid readout for the 3x3 reels."""
import logging
from collections.abc import Callable, Sequence

from minislot.config import VISIBLE_ROWS, settings
from minislot.errors import EngineNotSettled, SpinInProgress
from minislot.logic.models import SYMBOLS, Grid, PayLine, Symbol
from minislot.logic.rng import ProductionRNG, RNGBase
from minislot.render import (
    DrawGrid,
    RecordingSurface,
    RenderCommand,
    RenderSurface,
    ScrollReel,
    SetOverlays,
)


logger = logging.getLogger(__name__)

REELS = 3
ROWS = VISIBLE_ROWS


class SpinEndSignal:
    """
    One-shot completion signal for a single spin.

    Fires at most once, after the last reel has stopped. A signal that was
    aborted never fires.
    """

    def __init__(self, spin_id: int):
        self.spin_id = spin_id
        self._callbacks: list[Callable[[], object]] = []
        self._fired = False
        self._aborted = False

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def aborted(self) -> bool:
        return self._aborted

    def subscribe(self, callback: Callable[[], object]) -> None:
        if self._fired or self._aborted:
            raise RuntimeError(f"spin {self.spin_id} already finished")
        self._callbacks.append(callback)

    def _fire(self) -> None:
        if self._fired or self._aborted:
            return
        self._fired = True
        for callback in self._callbacks:
            callback()

    def _abort(self) -> None:
        self._aborted = True
        self._callbacks.clear()


class Reel:
    """One column: three visible symbols plus its travel counters."""

    def __init__(self, index: int, symbols: list[Symbol]):
        if len(symbols) != ROWS:
            raise ValueError(f"reel needs {ROWS} symbols, got {len(symbols)}")
        self.index = index
        self.symbols = symbols
        self.position = 0
        self.travelled = 0
        self.target = 0
        self.in_motion = False

    def start(self, target: int) -> None:
        self.travelled = 0
        self.target = target
        self.in_motion = True

    def step(self, draw: Callable[[], Symbol]) -> bool:
        """
        Advance one cell.

        The bottom cell leaves the window and re-enters at the top with a
        fresh symbol. Returns True when this step settles the reel.
        """
        self.symbols = [draw()] + self.symbols[:-1]
        self.position += 1
        self.travelled += 1
        if self.travelled >= self.target:
            self.in_motion = False
            return True
        return False

    def stop(self) -> None:
        self.in_motion = False


class ReelEngine:
    """
    Owns the 3x3 logical grid and drives its spin lifecycle.

    The engine is the only writer of reel state. Each tick moves every
    in-motion reel one step; reel i travels base_steps + i * stagger_steps
    steps so reels stop left to right. When the last reel stops the spin's
    completion signal fires exactly once.
    """

    def __init__(
        self,
        rng: RNGBase | None = None,
        surface: RenderSurface | None = None,
        base_steps: int | None = None,
        stagger_steps: int | None = None,
    ):
        self.rng = rng or ProductionRNG()
        self.surface = surface if surface is not None else RecordingSurface()
        self.base_steps = settings.base_steps if base_steps is None else base_steps
        self.stagger_steps = settings.stagger_steps if stagger_steps is None else stagger_steps
        if self.base_steps < ROWS:
            raise ValueError(f"base_steps must be >= {ROWS}, got {self.base_steps}")
        if self.stagger_steps < 0:
            raise ValueError(f"stagger_steps must be >= 0, got {self.stagger_steps}")

        self.reels = [
            Reel(index, [self._draw() for _ in range(ROWS)]) for index in range(REELS)
        ]
        self._signal: SpinEndSignal | None = None
        self._remaining = 0
        self._spin_count = 0
        self._overlays: tuple[PayLine, ...] = ()
        self._render_errors = 0

        self.render(DrawGrid.of(self._grid()))

    def _draw(self) -> Symbol:
        return self.rng.choice(SYMBOLS)

    def _grid(self) -> Grid:
        return [[reel.symbols[row] for reel in self.reels] for row in range(ROWS)]

    def render(self, command: RenderCommand) -> None:
        """Submit a command to the surface. Surface failures never reach reel state."""
        try:
            self.surface.submit(command)
        except Exception as e:
            self._render_errors += 1
            logger.warning(
                "Render surface error (count=%d): %s - %s",
                self._render_errors,
                type(command).__name__,
                str(e),
            )

    @property
    def is_spinning(self) -> bool:
        return any(reel.in_motion for reel in self.reels)

    @property
    def overlays(self) -> tuple[PayLine, ...]:
        return self._overlays

    @property
    def spin_count(self) -> int:
        return self._spin_count

    @property
    def render_errors(self) -> int:
        return self._render_errors

    def targets(self) -> list[int]:
        """Travel target of each reel for the next spin."""
        return [self.base_steps + i * self.stagger_steps for i in range(REELS)]

    def spin(self) -> SpinEndSignal:
        """
        Start all reels.

        A spin request while any reel moves is rejected with SpinInProgress
        and changes nothing.
        """
        if self.is_spinning or self._signal is not None:
            raise SpinInProgress("Reels are already spinning.")

        self._spin_count += 1
        signal = SpinEndSignal(self._spin_count)
        for reel, target in zip(self.reels, self.targets()):
            reel.start(target)
        self._signal = signal
        self._remaining = REELS
        logger.debug("spin %d started, targets=%s", signal.spin_id, self.targets())
        return signal

    def tick(self) -> bool:
        """Advance every in-motion reel one step. Returns True while any reel moves."""
        if self._signal is None:
            return False

        for reel in self.reels:
            if not reel.in_motion:
                continue
            if reel.step(self._draw):
                self._remaining -= 1
                logger.debug("reel %d settled on %s", reel.index, [s.value for s in reel.symbols])
            self.render(
                ScrollReel(column=reel.index, position=reel.position, symbols=tuple(reel.symbols))
            )

        if self._remaining == 0:
            signal, self._signal = self._signal, None
            self.render(DrawGrid.of(self._grid()))
            logger.debug("spin %d ended", signal.spin_id)
            signal._fire()

        return self.is_spinning

    def run_until_settled(self, max_ticks: int = 10_000) -> int:
        """Tick synchronously until the current spin ends. Returns ticks used."""
        ticks = 0
        while self._signal is not None:
            if ticks >= max_ticks:
                raise RuntimeError(f"spin did not settle within {max_ticks} ticks")
            self.tick()
            ticks += 1
        return ticks

    def get_result(self) -> Grid:
        """Settled grid, row-major, top row first. Read from logical reel state only."""
        moving = [reel.index for reel in self.reels if reel.in_motion]
        if moving:
            raise EngineNotSettled(moving)
        return self._grid()

    def highlight_paylines(self, lines: Sequence[PayLine]) -> None:
        """Replace the overlay with exactly the given lines; empty clears it."""
        self._overlays = tuple(lines)
        self.render(SetOverlays(lines=self._overlays))

    def abort(self) -> None:
        """Hard stop. Reels freeze in place and the pending signal never fires."""
        if self._signal is not None:
            logger.warning("spin %d aborted", self._signal.spin_id)
            self._signal._abort()
            self._signal = None
        for reel in self.reels:
            reel.stop()
        self._remaining = 0
