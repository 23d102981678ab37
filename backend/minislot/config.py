"""Application configuration: paytable, bet and reel timing constants."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Visible rows per reel; a reel must travel at least this far to redraw every cell.
VISIBLE_ROWS = 3


class Settings(BaseSettings):
    """Game settings with the fixed defaults of the mini slot."""

    model_config = SettingsConfigDict(env_prefix="MINISLOT_")

    # Server
    debug: bool = False
    log_level: str = "INFO"

    # Protocol
    protocol_version: str = "1.0"

    # Round economics
    starting_credits: int = 100
    bet_per_spin: int = 10

    # Paytable (credits per winning line)
    payout_row: int = 30
    payout_diagonal: int = 50
    payout_jackpot: int = 100

    # Reel animation (steps are ticks; one step recycles one cell per reel)
    base_steps: int = 12
    stagger_steps: int = 6
    tick_interval_seconds: float = 0.05

    @field_validator("starting_credits", "stagger_steps")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be >= 0")
        return value

    @field_validator("bet_per_spin", "payout_row", "payout_diagonal", "payout_jackpot")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be > 0")
        return value

    @field_validator("base_steps")
    @classmethod
    def _covers_window(cls, value: int) -> int:
        if value < VISIBLE_ROWS:
            raise ValueError(f"must be >= {VISIBLE_ROWS} so every visible cell is redrawn")
        return value

    @field_validator("tick_interval_seconds")
    @classmethod
    def _non_negative_interval(cls, value: float) -> float:
        if value < 0:
            raise ValueError("must be >= 0")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return level


settings = Settings()
