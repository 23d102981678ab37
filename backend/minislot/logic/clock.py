"""Animation clock: the single cooperative ticker that drives the reel engine."""
import asyncio
import logging

from minislot.config import settings
from minislot.logic.reels import ReelEngine


logger = logging.getLogger(__name__)


class AnimationClock:
    """Ticks the engine on the running event loop until its spin ends."""

    def __init__(self, engine: ReelEngine, interval: float | None = None):
        self.engine = engine
        self.interval = settings.tick_interval_seconds if interval is None else interval
        if self.interval < 0:
            raise ValueError(f"tick interval must be >= 0, got {self.interval}")
        self._task: asyncio.Task | None = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Start ticking. Must be called from a running event loop."""
        if self.running:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval)
                self.ticks += 1
                if not self.engine.tick():
                    break
        except asyncio.CancelledError:
            logger.debug("animation clock cancelled after %d ticks", self.ticks)
            raise
        except Exception:
            logger.exception("animation clock failed after %d ticks", self.ticks)
            raise

    async def wait_idle(self) -> None:
        """Wait for the current spin to end. Cancelling the waiter leaves the clock running."""
        if self._task is None:
            return
        await asyncio.shield(self._task)

    async def stop(self) -> None:
        """Cancel ticking. Reels left in motion must be aborted by the caller."""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
