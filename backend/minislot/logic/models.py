"""Game state models: symbols, paylines, evaluations and round state."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Symbol(str, Enum):
    """Reel symbols."""
    CHERRY = "cherry"
    LEMON = "lemon"
    BAR = "bar"
    SEVEN = "seven"


SYMBOLS: tuple[Symbol, ...] = tuple(Symbol)

# Grid is indexed [row][column], row 0 is the top row.
Grid = list[list[Symbol]]


class PayLineKind(str, Enum):
    """Shape of a payline."""
    ROW = "row"
    DIAGONAL_DOWN_RIGHT = "diagonalDownRight"
    DIAGONAL_DOWN_LEFT = "diagonalDownLeft"


class PayLine(BaseModel):
    """
    A line checked for a three-of-a-kind.

    Rows carry their row index; diagonals carry none.
    """
    model_config = ConfigDict(frozen=True)

    kind: PayLineKind
    row: int | None = None

    @model_validator(mode="after")
    def _check_row(self) -> "PayLine":
        if self.kind == PayLineKind.ROW:
            if self.row is None or not 0 <= self.row <= 2:
                raise ValueError("row paylines need a row index in 0..2")
        elif self.row is not None:
            raise ValueError("diagonal paylines take no row index")
        return self

    @classmethod
    def for_row(cls, row: int) -> "PayLine":
        return cls(kind=PayLineKind.ROW, row=row)

    @property
    def is_diagonal(self) -> bool:
        return self.kind != PayLineKind.ROW

    def cells(self) -> tuple[tuple[int, int], ...]:
        """(row, column) cells covered by this line, left to right."""
        if self.kind == PayLineKind.ROW:
            return tuple((self.row, col) for col in range(3))
        if self.kind == PayLineKind.DIAGONAL_DOWN_RIGHT:
            return ((0, 0), (1, 1), (2, 2))
        return ((0, 2), (1, 1), (2, 0))

    def label(self) -> str:
        if self.kind == PayLineKind.ROW:
            return f"row {self.row + 1}"
        if self.kind == PayLineKind.DIAGONAL_DOWN_RIGHT:
            return "diagonal ↘"
        return "diagonal ↙"


class Outcome(str, Enum):
    """Result of a settled spin."""
    WIN = "win"
    LOSE = "lose"


class LineWin(BaseModel):
    """A single winning payline and what it paid."""
    line: PayLine
    symbol: Symbol
    amount: int
    jackpot: bool = False


class Evaluation(BaseModel):
    """Evaluation of a settled grid. Winning lines keep evaluation order."""
    wins: list[LineWin] = Field(default_factory=list)
    total_win: int = 0
    messages: list[str] = Field(default_factory=list)

    @property
    def lines(self) -> list[PayLine]:
        return [win.line for win in self.wins]

    @property
    def outcome(self) -> Outcome:
        return Outcome.WIN if self.total_win > 0 else Outcome.LOSE


class RoundState(BaseModel):
    """
    Player round state, owned by the round controller.

    Tracks:
    - credits (never negative)
    - the fixed bet per spin
    - spin lock held from debit until settlement
    - the last settled grid and its evaluation
    """
    credits: int = Field(default=0, ge=0)
    bet: int = Field(default=10, gt=0)
    spin_locked: bool = False
    round_id: str | None = None
    spins_played: int = 0
    last_grid: Grid | None = None
    last_evaluation: Evaluation | None = None

    def reset_for_new_session(self, credits: int) -> None:
        """Reset state for a new session."""
        self.credits = credits
        self.spin_locked = False
        self.round_id = None
        self.spins_played = 0
        self.last_grid = None
        self.last_evaluation = None
