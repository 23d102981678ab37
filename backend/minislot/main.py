"""Mini Slot FastAPI Application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query

from minislot.config import settings
from minislot.errors import ErrorCode, GameError
from minislot.logging_config import setup_logging
from minislot.middleware import ErrorHandlerMiddleware
from minislot.protocol import (
    InitResponse,
    LineWinView,
    RoundView,
    SpinResponse,
    StateResponse,
)
from minislot.session import GameSession, game_session


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and abort any unsettled round on shutdown."""
    setup_logging(settings.log_level)
    yield
    await game_session.shutdown()


app = FastAPI(
    title="Mini Slot",
    version="0.1.0",
    description="3x3 slot machine game server",
    lifespan=lifespan,
)

app.add_middleware(ErrorHandlerMiddleware)


def build_round_view(session: GameSession) -> RoundView:
    """Snapshot the session for the player. The grid is only shown once settled."""
    state = session.state
    evaluation = state.last_evaluation
    spinning = session.spinning

    grid = None
    if not spinning and state.last_grid is not None:
        grid = [[symbol.value for symbol in row] for row in state.last_grid]

    view = RoundView(
        credits=state.credits,
        betPerSpin=state.bet,
        spinning=spinning,
        roundId=state.round_id,
        spinsPlayed=state.spins_played,
        grid=grid,
        overlays=list(session.engine.overlays),
        reelPositions=[reel.position for reel in session.engine.reels],
    )
    if evaluation is not None and not spinning:
        view.outcome = evaluation.outcome.value
        view.totalWin = evaluation.total_win
        view.messages = list(evaluation.messages)
        view.winningLines = [
            LineWinView(
                line=win.line,
                symbol=win.symbol.value,
                amount=win.amount,
                jackpot=win.jackpot,
            )
            for win in evaluation.wins
        ]
    return view


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/init")
async def init() -> dict:
    """Returns configuration and the current round state."""
    response = InitResponse(state=build_round_view(game_session))
    return response.model_dump(mode="json")


@app.post("/spin")
async def spin() -> dict:
    """
    Start a round.

    Implements:
    - spin-lock (SPIN_IN_PROGRESS while the previous round is unsettled)
    - credit check (INSUFFICIENT_CREDITS when credits < bet)
    - bet debit, then reel animation on the session clock
    """
    game_session.spin()
    state = game_session.state
    response = SpinResponse(roundId=state.round_id, state=build_round_view(game_session))
    return response.model_dump(mode="json")


_FLAG_VALUES = {"true": True, "1": True, "false": False, "0": False}


@app.get("/state")
async def get_state(wait_for_settle: str = Query(default="false", alias="waitForSettle")) -> dict:
    """Current round state; optionally waits for the spin in flight to settle."""
    flag = _FLAG_VALUES.get(wait_for_settle.lower())
    if flag is None:
        raise GameError(
            ErrorCode.INVALID_REQUEST,
            f"waitForSettle must be true or false, got {wait_for_settle!r}",
        )
    if flag:
        await game_session.wait_settled()
    response = StateResponse(state=build_round_view(game_session))
    return response.model_dump(mode="json")
