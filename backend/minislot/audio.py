"""Fire-and-forget audio cues."""
import logging
from enum import Enum
from typing import Protocol


logger = logging.getLogger(__name__)


class AudioCue(str, Enum):
    """Named sound triggers."""

    SPIN_START = "spin-start"
    SPIN_STOP = "spin-stop"
    WIN = "win"
    LOSE = "lose"


class AudioSink(Protocol):
    """Protocol for audio sinks."""

    def play(self, cue: AudioCue) -> None:
        """Trigger a cue. Return value is ignored."""
        ...


class LoggingAudioSink:
    """Default sink for headless sessions: logs cues instead of playing them."""

    def play(self, cue: AudioCue) -> None:
        logger.debug("AUDIO %s", cue.value)


class AudioService:
    """Plays cues on a sink without letting sink failures reach the round."""

    def __init__(self, sink: AudioSink | None = None):
        self._sink = sink or LoggingAudioSink()
        self._sink_errors = 0

    @property
    def sink_errors(self) -> int:
        return self._sink_errors

    def set_sink(self, sink: AudioSink) -> None:
        """Set the audio sink (useful for testing)."""
        self._sink = sink

    def play(self, cue: AudioCue) -> None:
        try:
            self._sink.play(cue)
        except Exception as e:
            self._sink_errors += 1
            logger.warning(
                "Audio sink error (count=%d): %s - %s",
                self._sink_errors,
                cue.value,
                str(e),
            )
