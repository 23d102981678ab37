"""
Audit sanity gate test.

Runs a quick headless simulation (20k rounds) with seed AUDIT_2026 and
checks return and symbol uniformity against the closed-form paytable.

Usage:
    pytest tests/test_audit_sanity.py -v

Note: Marked as @slow - requires running simulation. Skipped in quick CI.
"""
import csv

import pytest

pytestmark = pytest.mark.slow  # All tests in this module are slow
from scripts.audit_sim import generate_csv, run_simulation, seed_to_int
from minislot.config import settings
from minislot.logic.models import SYMBOLS
from minislot.logic.paytable import theoretical_return

THEORETICAL_RTP = theoretical_return() / settings.bet_per_spin * 100
RTP_TOLERANCE_20K = 10.0  # ±10 points for 20k rounds
MAX_CELL_DEVIATION = 0.02
MIN_HIT_FREQUENCY = 15.0


class TestAuditSanity:
    """Quick audit gate test with 20k rounds."""

    @pytest.fixture(scope="class")
    def simulation_stats(self):
        """Run simulation once for all tests in this class."""
        return run_simulation(rounds=20000, seed_str="AUDIT_2026", verbose=False)

    def test_rounds_and_wagers(self, simulation_stats):
        stats = simulation_stats
        assert stats.rounds == 20000
        assert stats.total_wagered == 20000 * settings.bet_per_spin

    def test_rtp_near_theoretical(self, simulation_stats):
        """Observed return must sit close to the closed-form expectation."""
        rtp = simulation_stats.rtp
        rtp_min = THEORETICAL_RTP - RTP_TOLERANCE_20K
        rtp_max = THEORETICAL_RTP + RTP_TOLERANCE_20K

        assert rtp >= rtp_min, f"RTP {rtp:.2f}% below minimum {rtp_min:.2f}%"
        assert rtp <= rtp_max, f"RTP {rtp:.2f}% above maximum {rtp_max:.2f}%"

    def test_hit_frequency_sanity(self, simulation_stats):
        hit_freq = simulation_stats.hit_freq
        assert hit_freq >= MIN_HIT_FREQUENCY, f"Hit frequency {hit_freq:.2f}% below sanity minimum {MIN_HIT_FREQUENCY}%"

    def test_cells_are_uniform(self, simulation_stats):
        """Every cell shows every symbol about a quarter of the time."""
        deviation = simulation_stats.max_cell_deviation()
        assert deviation < MAX_CELL_DEVIATION, f"Cell deviation {deviation:.4f} exceeds {MAX_CELL_DEVIATION}"

    def test_every_symbol_seen_in_every_cell(self, simulation_stats):
        for cell, counts in simulation_stats.cell_counts.items():
            assert set(counts) == set(SYMBOLS)
            assert all(count > 0 for count in counts.values()), f"cell {cell} missed a symbol"

    def test_max_win_bounded_by_all_lines(self, simulation_stats):
        """Nothing can pay more than five jackpot lines."""
        assert simulation_stats.max_win <= 5 * settings.payout_jackpot


class TestDeterminism:
    def test_same_seed_same_result(self):
        first = run_simulation(rounds=300, seed_str="DETERMINISM")
        second = run_simulation(rounds=300, seed_str="DETERMINISM")

        assert first.total_won == second.total_won
        assert first.cell_counts == second.cell_counts

    def test_seed_to_int_is_stable(self):
        assert seed_to_int("AUDIT_2026") == seed_to_int("AUDIT_2026")
        assert seed_to_int("AUDIT_2026") != seed_to_int("AUDIT_2027")
        assert 0 <= seed_to_int("x") < 2**31

    def test_csv_output(self, tmp_path):
        stats = run_simulation(rounds=200, seed_str="CSV")
        out = tmp_path / "nested" / "audit.csv"

        generate_csv(200, "CSV", stats, str(out))

        with open(out, newline="") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 1
        assert rows[0]["rounds"] == "200"
        assert rows[0]["seed"] == "CSV"
        assert len(rows[0]["config_hash"]) == 16
