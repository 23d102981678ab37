"""Paylines, paytable and grid evaluation."""
from dataclasses import dataclass

from minislot.config import Settings, settings
from minislot.logic.models import (
    Evaluation,
    Grid,
    LineWin,
    PayLine,
    PayLineKind,
    Symbol,
)

ROWS = 3
COLUMNS = 3

# Evaluation order: rows top to bottom, then ↘, then ↙.
PAYLINES: tuple[PayLine, ...] = (
    PayLine.for_row(0),
    PayLine.for_row(1),
    PayLine.for_row(2),
    PayLine(kind=PayLineKind.DIAGONAL_DOWN_RIGHT),
    PayLine(kind=PayLineKind.DIAGONAL_DOWN_LEFT),
)

JACKPOT_SYMBOL = Symbol.SEVEN


@dataclass(frozen=True)
class PayTable:
    """Credits paid per winning line."""

    row: int = 30
    diagonal: int = 50
    jackpot: int = 100

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "PayTable":
        config = config or settings
        return cls(
            row=config.payout_row,
            diagonal=config.payout_diagonal,
            jackpot=config.payout_jackpot,
        )

    def amount_for(self, line: PayLine, symbol: Symbol) -> int:
        """Jackpot replaces the line amount when the matched symbol is seven."""
        if symbol == JACKPOT_SYMBOL:
            return self.jackpot
        return self.diagonal if line.is_diagonal else self.row


def _check_grid(grid: Grid) -> None:
    if len(grid) != ROWS or any(len(row) != COLUMNS for row in grid):
        raise ValueError(f"grid must be {ROWS}x{COLUMNS}, got {[len(r) for r in grid]}")
    for row in grid:
        for cell in row:
            if not isinstance(cell, Symbol):
                raise ValueError(f"grid cell {cell!r} is not a Symbol")


def _line_message(line: PayLine, symbol: Symbol, amount: int) -> str:
    if symbol == JACKPOT_SYMBOL:
        return f"JACKPOT! Three {symbol.value}s on {line.label()}: +{amount}"
    return f"Three {symbol.value}s on {line.label()}: +{amount}"


def evaluate_grid(grid: Grid, paytable: PayTable | None = None) -> Evaluation:
    """
    Evaluate every payline of a settled grid.

    Every satisfied line pays; there is no early exit and no mutual
    exclusion between rows and diagonals.
    """
    _check_grid(grid)
    paytable = paytable or PayTable.from_settings()

    wins: list[LineWin] = []
    messages: list[str] = []
    total_win = 0

    for line in PAYLINES:
        first, second, third = (grid[r][c] for r, c in line.cells())
        if not first == second == third:
            continue
        amount = paytable.amount_for(line, first)
        wins.append(
            LineWin(
                line=line,
                symbol=first,
                amount=amount,
                jackpot=first == JACKPOT_SYMBOL,
            )
        )
        messages.append(_line_message(line, first, amount))
        total_win += amount

    if total_win > 0:
        messages.append(f"You win {total_win} credits!")
    else:
        messages.append("No winning lines.")

    return Evaluation(wins=wins, total_win=total_win, messages=messages)


def theoretical_return(paytable: PayTable | None = None, symbol_count: int = 4) -> float:
    """
    Expected credits paid per spin with uniform, independent cells.

    Each line is three independent draws: any triple has probability
    symbol_count / symbol_count**3, a seven triple 1 / symbol_count**3.
    """
    paytable = paytable or PayTable.from_settings()
    p_triple = 1 / symbol_count**3
    expected = 0.0
    for line in PAYLINES:
        base = paytable.diagonal if line.is_diagonal else paytable.row
        expected += (symbol_count - 1) * p_triple * base + p_triple * paytable.jackpot
    return expected
