#!/usr/bin/env python3
"""
Headless round simulation.

Plays seeded rounds through the real round controller and reel engine
(no clock, reels ticked synchronously) and reports return, hit frequency
and per-cell symbol uniformity.

Usage:
    python -m scripts.audit_sim --rounds 100000 --seed AUDIT_2026 --out out/audit.csv
"""
import argparse
import csv
import hashlib
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from minislot.config import settings
from minislot.config_hash import get_config_hash
from minislot.logic.controller import RoundController
from minislot.logic.models import SYMBOLS, RoundState, Symbol
from minislot.logic.paytable import PayTable, theoretical_return
from minislot.logic.reels import REELS, ROWS, ReelEngine
from minislot.logic.rng import SeededRNG
from minislot.render import RecordingSurface
from minislot.telemetry import TelemetryService


class _NullTelemetrySink:
    """Drops events; a simulation emits one per round."""

    def emit(self, event_name, data) -> None:
        pass


@dataclass
class SimulationStats:
    """Statistics accumulated during simulation."""
    total_wagered: int = 0
    total_won: int = 0
    rounds: int = 0
    wins: int = 0
    jackpot_lines: int = 0
    max_win: int = 0
    # cell_counts[(row, col)][symbol] -> occurrences
    cell_counts: dict[tuple[int, int], dict[Symbol, int]] = field(
        default_factory=lambda: {
            (r, c): {s: 0 for s in SYMBOLS} for r in range(ROWS) for c in range(REELS)
        }
    )

    @property
    def rtp(self) -> float:
        return (self.total_won / self.total_wagered * 100) if self.total_wagered > 0 else 0.0

    @property
    def hit_freq(self) -> float:
        return (self.wins / self.rounds * 100) if self.rounds > 0 else 0.0

    def cell_frequency(self, row: int, col: int, symbol: Symbol) -> float:
        return self.cell_counts[(row, col)][symbol] / self.rounds if self.rounds > 0 else 0.0

    def max_cell_deviation(self) -> float:
        """Largest |frequency - 1/len(SYMBOLS)| over all cells and symbols."""
        expected = 1 / len(SYMBOLS)
        return max(
            abs(self.cell_frequency(r, c, s) - expected)
            for (r, c) in self.cell_counts
            for s in SYMBOLS
        )


def get_timestamp_iso() -> str:
    """Get ISO 8601 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def seed_to_int(seed_str: str) -> int:
    """Convert string seed to integer deterministically."""
    return int(hashlib.sha256(seed_str.encode()).hexdigest(), 16) % (2**31)


def run_simulation(
    rounds: int,
    seed_str: str,
    base_steps: int | None = None,
    stagger_steps: int | None = None,
    verbose: bool = False,
) -> SimulationStats:
    """
    Run headless simulation.

    Credits are topped up so every round can be played; wagers and wins
    are tracked separately.
    """
    rng = SeededRNG(seed=seed_to_int(seed_str))
    engine = ReelEngine(
        rng=rng,
        surface=RecordingSurface(history_size=8),
        base_steps=base_steps,
        stagger_steps=stagger_steps,
    )
    bet = settings.bet_per_spin
    controller = RoundController(
        engine,
        state=RoundState(credits=bet, bet=bet),
        paytable=PayTable.from_settings(),
        telemetry=TelemetryService(_NullTelemetrySink()),
    )
    state = controller.state

    stats = SimulationStats()
    progress_interval = max(1, rounds // 100)

    for round_count in range(rounds):
        if verbose and round_count % progress_interval == 0:
            pct = (round_count / rounds) * 100
            print(f"\rProgress: {pct:.1f}%", end="", flush=True)

        if state.credits < bet:
            state.credits += bet
        controller.request_spin()
        engine.run_until_settled()

        evaluation = state.last_evaluation
        stats.rounds += 1
        stats.total_wagered += bet
        stats.total_won += evaluation.total_win
        if evaluation.total_win > 0:
            stats.wins += 1
        stats.jackpot_lines += sum(1 for win in evaluation.wins if win.jackpot)
        stats.max_win = max(stats.max_win, evaluation.total_win)

        for r, row in enumerate(state.last_grid):
            for c, symbol in enumerate(row):
                stats.cell_counts[(r, c)][symbol] += 1

    if verbose:
        print("\rProgress: 100.0%")

    return stats


def generate_csv(rounds: int, seed_str: str, stats: SimulationStats, output_path: str) -> None:
    """Write a one-row audit CSV."""
    theoretical_rtp = theoretical_return() / settings.bet_per_spin * 100
    row = {
        "timestamp": get_timestamp_iso(),
        "config_hash": get_config_hash(),
        "rounds": rounds,
        "seed": seed_str,
        "bet": settings.bet_per_spin,
        "rtp": f"{stats.rtp:.4f}",
        "theoretical_rtp": f"{theoretical_rtp:.4f}",
        "hit_freq": f"{stats.hit_freq:.4f}",
        "jackpot_lines": stats.jackpot_lines,
        "max_win": stats.max_win,
        "max_cell_deviation": f"{stats.max_cell_deviation():.6f}",
    }

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=row.keys())
        writer.writeheader()
        writer.writerow(row)

    print(f"CSV written to: {output_path}")


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Headless mini slot simulation")
    parser.add_argument("--rounds", type=int, default=10_000, help="Number of rounds to simulate")
    parser.add_argument("--seed", default="AUDIT_2026", help="Seed string for reproducibility")
    parser.add_argument("--out", default=None, help="Output CSV path (optional)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print progress")
    args = parser.parse_args()

    if args.rounds <= 0:
        parser.error("--rounds must be positive")

    stats = run_simulation(rounds=args.rounds, seed_str=args.seed, verbose=args.verbose)

    print(f"Rounds:             {stats.rounds}")
    print(f"RTP:                {stats.rtp:.2f}%")
    print(f"Hit frequency:      {stats.hit_freq:.2f}%")
    print(f"Jackpot lines:      {stats.jackpot_lines}")
    print(f"Max win:            {stats.max_win}")
    print(f"Max cell deviation: {stats.max_cell_deviation():.4f}")

    if args.out:
        generate_csv(args.rounds, args.seed, stats, args.out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
