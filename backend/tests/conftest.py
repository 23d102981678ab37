"""Pytest fixtures for backend tests."""
import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from minislot.audio import AudioCue, AudioService
from minislot.logic.controller import RoundController
from minislot.logic.models import SYMBOLS, Grid, RoundState, Symbol
from minislot.logic.reels import ReelEngine
from minislot.logic.rng import RNGBase, SeededRNG
from minislot.render import RecordingSurface
from minislot.telemetry import TelemetryService


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (long headless simulations)"
    )


class ScriptedRNG(RNGBase):
    """
    RNG that replays queued symbol draws, then falls back to a seeded stream.

    Queue symbols with load(); each engine draw consumes one.
    """

    def __init__(self, seed: int = 0):
        self._fallback = random.Random(seed)
        self._queue: list[int] = []

    def load(self, symbols: list[Symbol]) -> None:
        self._queue.extend(SYMBOLS.index(symbol) for symbol in symbols)

    @property
    def pending(self) -> int:
        return len(self._queue)

    def randint(self, a: int, b: int) -> int:
        if self._queue:
            return a + self._queue.pop(0)
        return self._fallback.randint(a, b)


def draws_for_grid(engine: ReelEngine, grid: Grid) -> list[Symbol]:
    """
    Draw sequence that makes the engine's next spin settle on `grid`.

    Each tick draws once per moving reel, left to right. A reel's final
    draw lands on the top row, the one before on the middle row, and so on.
    """
    targets = engine.targets()
    filler = Symbol.CHERRY
    draws: list[Symbol] = []
    for tick in range(1, max(targets) + 1):
        for col, target in enumerate(targets):
            if tick > target:
                continue
            row = target - tick
            draws.append(grid[row][col] if row < 3 else filler)
    return draws


@dataclass
class FlakySurface(RecordingSurface):
    """Recording surface that raises once on the first command matching fail_when."""

    fail_when: Callable[[Any], bool] | None = None

    def submit(self, command) -> None:
        if self.fail_when is not None and self.fail_when(command):
            self.fail_when = None
            raise RuntimeError("render surface lost")
        super().submit(command)


class RecordingAudioSink:
    """Audio sink that keeps every cue."""

    def __init__(self):
        self.cues: list[AudioCue] = []

    def play(self, cue: AudioCue) -> None:
        self.cues.append(cue)


class RecordingTelemetrySink:
    """Telemetry sink that keeps every event."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))

    def get_events(self, event_name: str) -> list[dict[str, Any]]:
        return [data for name, data in self.events if name == event_name]


# Grids used across tests
LOSING_GRID: Grid = [
    [Symbol.CHERRY, Symbol.LEMON, Symbol.BAR],
    [Symbol.BAR, Symbol.SEVEN, Symbol.CHERRY],
    [Symbol.LEMON, Symbol.CHERRY, Symbol.SEVEN],
]

MIDDLE_SEVENS_GRID: Grid = [
    [Symbol.CHERRY, Symbol.LEMON, Symbol.BAR],
    [Symbol.SEVEN, Symbol.SEVEN, Symbol.SEVEN],
    [Symbol.LEMON, Symbol.CHERRY, Symbol.CHERRY],
]


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def audio_sink() -> RecordingAudioSink:
    return RecordingAudioSink()


@pytest.fixture
def telemetry_sink() -> RecordingTelemetrySink:
    return RecordingTelemetrySink()


@pytest.fixture
def scripted_rng() -> ScriptedRNG:
    return ScriptedRNG(seed=7)


@pytest.fixture
def engine(surface: RecordingSurface) -> ReelEngine:
    """Seeded engine with short travel: targets 3, 5, 7."""
    return ReelEngine(rng=SeededRNG(seed=42), surface=surface, base_steps=3, stagger_steps=2)


@pytest.fixture
def scripted_engine(scripted_rng: ScriptedRNG, surface: RecordingSurface) -> ReelEngine:
    return ReelEngine(rng=scripted_rng, surface=surface, base_steps=3, stagger_steps=2)


@pytest.fixture
def controller(
    scripted_engine: ReelEngine,
    audio_sink: RecordingAudioSink,
    telemetry_sink: RecordingTelemetrySink,
) -> RoundController:
    """Controller with 100 credits and bet 10 over a scripted engine."""
    return RoundController(
        scripted_engine,
        state=RoundState(credits=100, bet=10),
        audio=AudioService(audio_sink),
        telemetry=TelemetryService(telemetry_sink),
    )


@pytest.fixture
def client_factory() -> Generator:
    """
    Build a TestClient over a freshly reset global game session.

    Keyword arguments go to GameSession.reset(); the client runs the app
    lifespan so the session clock lives on the client's event loop.
    """
    from minislot.main import app
    from minislot.session import game_session

    clients: list[TestClient] = []

    def make(**reset_kwargs) -> TestClient:
        reset_kwargs.setdefault("telemetry", TelemetryService(RecordingTelemetrySink()))
        game_session.reset(**reset_kwargs)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield make

    for client in clients:
        client.__exit__(None, None, None)
    game_session.reset()


@pytest.fixture
def client(client_factory) -> TestClient:
    """TestClient over a seeded session whose reels settle without delay."""
    return client_factory(rng=SeededRNG(seed=1234), tick_interval=0.0)
