"""Round controller: sequences a spin from bet debit to payout."""
import logging
import uuid

from minislot.audio import AudioCue, AudioService
from minislot.config import settings
from minislot.config_hash import get_config_hash
from minislot.errors import GameError
from minislot.logic.models import Evaluation, RoundState
from minislot.logic.paytable import PayTable, evaluate_grid
from minislot.logic.reels import ReelEngine, SpinEndSignal
from minislot.render import DrawText
from minislot.telemetry import (
    SpinAbortedEvent,
    SpinRejectedEvent,
    SpinSettledEvent,
    TelemetryService,
    telemetry_service,
)
from minislot.validators import validate_spin_request


logger = logging.getLogger(__name__)

TITLE = "Mini Slot"


class RoundController:
    """
    Owns RoundState and drives one round at a time.

    Implements:
    - spin preconditions (lock, credits) and bet debit
    - subscription to the engine's one-shot completion signal
    - evaluation, payout and highlight requests on settle
    - lock release after every settle or abort

    Reel state is read only through engine.get_result().
    """

    def __init__(
        self,
        engine: ReelEngine,
        state: RoundState | None = None,
        paytable: PayTable | None = None,
        audio: AudioService | None = None,
        telemetry: TelemetryService | None = None,
    ):
        self.engine = engine
        self.state = state or RoundState(
            credits=settings.starting_credits, bet=settings.bet_per_spin
        )
        self.paytable = paytable or PayTable.from_settings()
        self.audio = audio or AudioService()
        self.telemetry = telemetry or telemetry_service
        self._config_hash = get_config_hash()

        self.engine.render(DrawText("title", TITLE))
        self._render_status("Press spin to play.")

    def _render_status(self, message: str) -> None:
        render = self.engine.render
        render(DrawText("credits", f"Credits: {self.state.credits}"))
        render(DrawText("bet", f"Bet per spin: {self.state.bet}"))
        render(DrawText("message", message))

    def request_spin(self) -> SpinEndSignal:
        """
        Start a round.

        Raises SpinInProgress or InsufficientCredits with state unchanged.
        """
        state = self.state
        try:
            validate_spin_request(state, reels_moving=self.engine.is_spinning)
        except GameError as e:
            logger.info("Spin rejected: %s", e.message)
            self.telemetry.emit_spin_rejected(
                SpinRejectedEvent(
                    reason=e.code.value,
                    credits=state.credits,
                    spin_locked=state.spin_locked,
                )
            )
            raise

        previous_round_id = state.round_id
        state.credits -= state.bet
        state.spin_locked = True
        state.round_id = str(uuid.uuid4())
        self.engine.highlight_paylines([])

        self.audio.play(AudioCue.SPIN_START)
        signal = None
        try:
            signal = self.engine.spin()
            signal.subscribe(self.on_spin_end)
        except Exception:
            # No spin started: refund the bet and release the lock.
            if signal is not None:
                self.engine.abort()
            state.credits += state.bet
            state.spin_locked = False
            state.round_id = previous_round_id
            logger.exception("Engine failed to start a spin; bet returned")
            raise

        self._render_status("Spinning...")
        logger.info(
            "Round %s started: bet=%d credits=%d", state.round_id, state.bet, state.credits
        )
        return signal

    def on_spin_end(self) -> Evaluation:
        """Evaluate the settled grid and pay out. Invoked once per spin by the engine."""
        state = self.state
        try:
            grid = self.engine.get_result()
            evaluation = evaluate_grid(grid, self.paytable)

            self.audio.play(AudioCue.SPIN_STOP)
            if evaluation.total_win > 0:
                state.credits += evaluation.total_win
                self.engine.highlight_paylines(evaluation.lines)
                self.audio.play(AudioCue.WIN)
            else:
                self.engine.highlight_paylines([])
                self.audio.play(AudioCue.LOSE)

            state.last_grid = grid
            state.last_evaluation = evaluation
            state.spins_played += 1
        finally:
            state.spin_locked = False

        self._render_status(" ".join(evaluation.messages))
        logger.info(
            "Round %s settled: outcome=%s win=%d credits=%d",
            state.round_id,
            evaluation.outcome.value,
            evaluation.total_win,
            state.credits,
        )
        self.telemetry.emit_spin_settled(
            SpinSettledEvent(
                round_id=state.round_id,
                bet=state.bet,
                total_win=evaluation.total_win,
                credits_after=state.credits,
                outcome=evaluation.outcome.value,
                config_hash=self._config_hash,
                lines=[line.label() for line in evaluation.lines],
            )
        )
        return evaluation

    def abort(self) -> None:
        """Tear down the round in flight. The debited bet is not refunded."""
        if not self.state.spin_locked and not self.engine.is_spinning:
            return
        self.engine.abort()
        self.state.spin_locked = False
        logger.warning("Round %s aborted", self.state.round_id)
        self.telemetry.emit_spin_aborted(
            SpinAbortedEvent(round_id=self.state.round_id, credits=self.state.credits)
        )
