"""Config hash shared by telemetry and the audit simulation.

The hash MUST be computed identically in both places so simulated and
live rounds can be correlated.
"""
import hashlib
import json

from minislot.config import Settings, settings


def get_config_hash(config: Settings | None = None) -> str:
    """
    Hash the paytable and reel timing snapshot.

    Returns 16-char hex hash.
    """
    config = config or settings
    config_snapshot = {
        "bet_per_spin": config.bet_per_spin,
        "payout_row": config.payout_row,
        "payout_diagonal": config.payout_diagonal,
        "payout_jackpot": config.payout_jackpot,
        "base_steps": config.base_steps,
        "stagger_steps": config.stagger_steps,
    }
    canonical = json.dumps(config_snapshot, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]
