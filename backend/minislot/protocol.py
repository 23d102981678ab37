"""HTTP protocol models for the slot server."""
from pydantic import BaseModel, Field

from minislot.config import settings
from minislot.logic.models import SYMBOLS, PayLine
from minislot.logic.paytable import PAYLINES


# === Response Models ===


class PayTableView(BaseModel):
    """Credits per winning line."""

    row: int = settings.payout_row
    diagonal: int = settings.payout_diagonal
    jackpot: int = settings.payout_jackpot


class Configuration(BaseModel):
    """Configuration object in /init response."""

    betPerSpin: int = settings.bet_per_spin
    startingCredits: int = settings.starting_credits
    payTable: PayTableView = Field(default_factory=PayTableView)
    symbols: list[str] = [symbol.value for symbol in SYMBOLS]
    paylines: list[PayLine] = list(PAYLINES)


class LineWinView(BaseModel):
    """One paid line."""

    line: PayLine
    symbol: str
    amount: int
    jackpot: bool


class RoundView(BaseModel):
    """What the player sees: credits, lock, last outcome and overlays."""

    credits: int
    betPerSpin: int
    spinning: bool
    roundId: str | None = None
    spinsPlayed: int = 0
    grid: list[list[str]] | None = None
    outcome: str | None = None
    totalWin: int = 0
    winningLines: list[LineWinView] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)
    overlays: list[PayLine] = Field(default_factory=list)
    reelPositions: list[int] = Field(default_factory=list)


class InitResponse(BaseModel):
    """GET /init response."""

    protocolVersion: str = settings.protocol_version
    configuration: Configuration = Field(default_factory=Configuration)
    state: RoundView


class SpinResponse(BaseModel):
    """POST /spin response."""

    protocolVersion: str = settings.protocol_version
    roundId: str
    state: RoundView


class StateResponse(BaseModel):
    """GET /state response."""

    protocolVersion: str = settings.protocol_version
    state: RoundView
