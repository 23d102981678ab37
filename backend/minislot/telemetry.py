"""Round telemetry: settled, rejected and aborted spins."""
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class TelemetrySink(Protocol):
    """Protocol for telemetry sinks."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Emit a telemetry event."""
        ...


class LoggingTelemetrySink:
    """Default sink that logs telemetry events."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Log telemetry event."""
        logger.info("TELEMETRY %s: %s", event_name, data)


@dataclass
class SpinSettledEvent:
    """spin_settled: a round finished and was paid out."""

    round_id: str
    bet: int
    total_win: int
    credits_after: int
    outcome: str  # "win" | "lose"
    config_hash: str
    lines: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "round_id": self.round_id,
            "bet": self.bet,
            "total_win": self.total_win,
            "credits_after": self.credits_after,
            "outcome": self.outcome,
            "config_hash": self.config_hash,
            "lines": list(self.lines),
        }


@dataclass
class SpinRejectedEvent:
    """spin_rejected: a spin request failed its preconditions."""

    reason: str  # "SPIN_IN_PROGRESS" | "INSUFFICIENT_CREDITS"
    credits: int
    spin_locked: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "reason": self.reason,
            "credits": self.credits,
            "spin_locked": self.spin_locked,
        }


@dataclass
class SpinAbortedEvent:
    """spin_aborted: a round was torn down before settling. The bet stays debited."""

    round_id: str | None
    credits: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {"round_id": self.round_id, "credits": self.credits}


class TelemetryService:
    """Service for emitting round telemetry events."""

    def __init__(self, sink: TelemetrySink | None = None):
        self._sink = sink or LoggingTelemetrySink()
        self._sink_errors = 0

    @property
    def sink_errors(self) -> int:
        return self._sink_errors

    def set_sink(self, sink: TelemetrySink) -> None:
        """Set the telemetry sink (useful for testing)."""
        self._sink = sink

    def _safe_emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Sink failures MUST NOT break a round."""
        try:
            self._sink.emit(event_name, data)
        except Exception as e:
            self._sink_errors += 1
            logger.warning(
                "Telemetry sink error (count=%d): %s - %s",
                self._sink_errors,
                event_name,
                str(e),
            )

    def emit_spin_settled(self, event: SpinSettledEvent) -> None:
        self._safe_emit("spin_settled", event.to_dict())

    def emit_spin_rejected(self, event: SpinRejectedEvent) -> None:
        self._safe_emit("spin_rejected", event.to_dict())

    def emit_spin_aborted(self, event: SpinAbortedEvent) -> None:
        self._safe_emit("spin_aborted", event.to_dict())


# Global instance
telemetry_service = TelemetryService()
