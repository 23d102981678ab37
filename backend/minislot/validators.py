"""Spin request preconditions."""
from minislot.errors import InsufficientCredits, SpinInProgress
from minislot.logic.models import RoundState


def validate_not_locked(state: RoundState, reels_moving: bool = False) -> None:
    """
    Reject a spin while the previous one is unsettled.

    Raises SPIN_IN_PROGRESS if the lock is held or any reel still moves.
    """
    if state.spin_locked or reels_moving:
        raise SpinInProgress()


def validate_credits(state: RoundState) -> None:
    """
    Validate the player can cover the bet.

    Raises INSUFFICIENT_CREDITS if credits < bet.
    """
    if state.credits < state.bet:
        raise InsufficientCredits(state.credits, state.bet)


def validate_spin_request(state: RoundState, reels_moving: bool = False) -> None:
    """Run all validations on a spin request. The lock is checked first."""
    validate_not_locked(state, reels_moving)
    validate_credits(state)
