"""The running game session: one engine, one controller, one clock."""
import asyncio
import logging

from minislot.audio import AudioService, AudioSink
from minislot.config import settings
from minislot.logic.clock import AnimationClock
from minislot.logic.controller import RoundController
from minislot.logic.models import RoundState
from minislot.logic.reels import ReelEngine, SpinEndSignal
from minislot.logic.rng import RNGBase
from minislot.render import RecordingSurface
from minislot.telemetry import TelemetryService


logger = logging.getLogger(__name__)


class GameSession:
    """
    Wires the reel engine, round controller and animation clock together.

    Credits live for the lifetime of the session only.
    """

    def __init__(self, **kwargs):
        self.reset(**kwargs)

    def reset(
        self,
        rng: RNGBase | None = None,
        tick_interval: float | None = None,
        credits: int | None = None,
        base_steps: int | None = None,
        stagger_steps: int | None = None,
        audio_sink: AudioSink | None = None,
        telemetry: TelemetryService | None = None,
    ) -> None:
        """Start a fresh session. Any clock from the previous session must be stopped first."""
        self.surface = RecordingSurface()
        self.engine = ReelEngine(
            rng=rng,
            surface=self.surface,
            base_steps=base_steps,
            stagger_steps=stagger_steps,
        )
        state = RoundState(credits=settings.starting_credits, bet=settings.bet_per_spin)
        if credits is not None:
            state.reset_for_new_session(credits)
        self.controller = RoundController(
            self.engine,
            state=state,
            audio=AudioService(audio_sink),
            telemetry=telemetry,
        )
        self.clock = AnimationClock(self.engine, interval=tick_interval)

    @property
    def state(self) -> RoundState:
        return self.controller.state

    @property
    def spinning(self) -> bool:
        return self.state.spin_locked

    def spin(self) -> SpinEndSignal:
        """
        Start a round and the clock that animates it.

        Must be called from a running event loop; outside one it raises
        RuntimeError before any credits move.
        """
        asyncio.get_running_loop()
        signal = self.controller.request_spin()
        self.clock.start()
        return signal

    async def wait_settled(self) -> None:
        await self.clock.wait_idle()

    async def shutdown(self) -> None:
        """Stop the clock and abort any unsettled round."""
        await self.clock.stop()
        if self.spinning:
            self.controller.abort()
        logger.info("Session closed with %d credits", self.state.credits)


# Global instance
game_session = GameSession()
