"""Error codes and exceptions for the slot round lifecycle."""
from enum import Enum

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from minislot.config import settings


class ErrorCode(str, Enum):
    """Error codes surfaced to callers."""

    INVALID_REQUEST = "INVALID_REQUEST"
    INSUFFICIENT_CREDITS = "INSUFFICIENT_CREDITS"
    SPIN_IN_PROGRESS = "SPIN_IN_PROGRESS"
    ENGINE_NOT_SETTLED = "ENGINE_NOT_SETTLED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.INSUFFICIENT_CREDITS: 402,
    ErrorCode.SPIN_IN_PROGRESS: 409,
    ErrorCode.ENGINE_NOT_SETTLED: 500,
    ErrorCode.INTERNAL_ERROR: 500,
}

# Recoverable errors leave the round state untouched; the player may retry.
ERROR_RECOVERABLE: dict[ErrorCode, bool] = {
    ErrorCode.INVALID_REQUEST: False,
    ErrorCode.INSUFFICIENT_CREDITS: True,
    ErrorCode.SPIN_IN_PROGRESS: True,
    ErrorCode.ENGINE_NOT_SETTLED: False,
    ErrorCode.INTERNAL_ERROR: True,
}


class ErrorBody(BaseModel):
    """Error body shape."""

    code: str
    message: str
    recoverable: bool


class ErrorResponse(BaseModel):
    """Full error response."""

    protocolVersion: str = settings.protocol_version
    error: ErrorBody


class GameError(Exception):
    """Base game error that maps to a protocol error response."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or f"Error: {code.value}"
        self.status_code = ERROR_HTTP_STATUS[code]
        self.recoverable = ERROR_RECOVERABLE[code]
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        """Convert to JSONResponse."""
        return JSONResponse(
            status_code=self.status_code,
            content=ErrorResponse(
                error=ErrorBody(
                    code=self.code.value,
                    message=self.message,
                    recoverable=self.recoverable,
                )
            ).model_dump(),
        )


class InsufficientCredits(GameError):
    """Spin requested with fewer credits than the bet."""

    def __init__(self, credits: int, bet: int):
        self.credits = credits
        self.bet = bet
        super().__init__(
            ErrorCode.INSUFFICIENT_CREDITS,
            f"Not enough credits: have {credits}, bet is {bet}.",
        )


class SpinInProgress(GameError):
    """Spin requested while a previous spin has not settled."""

    def __init__(self, message: str | None = None):
        super().__init__(
            ErrorCode.SPIN_IN_PROGRESS,
            message or "A spin is already in progress.",
        )


class EngineNotSettled(GameError):
    """Result read while reels are still moving. Contract violation, never recovered."""

    def __init__(self, moving_reels: list[int]):
        self.moving_reels = moving_reels
        super().__init__(
            ErrorCode.ENGINE_NOT_SETTLED,
            f"Reels still in motion: {moving_reels}",
        )
