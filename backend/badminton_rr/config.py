"""
Matchmaking configuration.

Tuning constants for partner ordering and court balancing are carried in an
explicit ``MatchmakingConfig`` value that callers pass into the services.
Defaults can be overridden from the environment (or a ``.env`` file).
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_NUM_COURTS = int(os.getenv("NUM_COURTS", "5"))

PLAYERS_PER_COURT = 4


@dataclass(frozen=True)
class MatchmakingConfig:
    # lossStreak >= this marks a player as a streaker
    streak_threshold: int = 3

    # Soft partner ordering for streakers: 0 = off, 1 = mild, 2 = strong
    partner_bias: float = 1.0
    partner_jitter: float = 0.1

    # Court balance protection when a streaker is on court
    low_balance_threshold: int = 3
    low_balance_penalty: float = 3.0

    # Cost noise (breaks deterministic traps); max_noise is a hard cap
    base_noise: float = 0.15
    streak_noise: float = 0.15
    max_noise: float = 0.35

    def __post_init__(self) -> None:
        for name in (
            "streak_threshold",
            "partner_bias",
            "partner_jitter",
            "low_balance_threshold",
            "low_balance_penalty",
            "base_noise",
            "streak_noise",
            "max_noise",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.partner_bias > 2:
            raise ValueError(f"partner_bias must be <= 2, got {self.partner_bias}")

    @classmethod
    def from_env(cls) -> "MatchmakingConfig":
        """Build a config from MATCHMAKING_* environment variables."""
        defaults = cls()
        return cls(
            streak_threshold=int(os.getenv("MATCHMAKING_STREAK_THRESHOLD", defaults.streak_threshold)),
            partner_bias=float(os.getenv("MATCHMAKING_PARTNER_BIAS", defaults.partner_bias)),
            partner_jitter=defaults.partner_jitter,
            low_balance_threshold=defaults.low_balance_threshold,
            low_balance_penalty=float(os.getenv("MATCHMAKING_LOW_BALANCE_PENALTY", defaults.low_balance_penalty)),
            base_noise=float(os.getenv("MATCHMAKING_BASE_NOISE", defaults.base_noise)),
            streak_noise=float(os.getenv("MATCHMAKING_STREAK_NOISE", defaults.streak_noise)),
            max_noise=float(os.getenv("MATCHMAKING_MAX_NOISE", defaults.max_noise)),
        )


DEFAULT_CONFIG = MatchmakingConfig.from_env()
