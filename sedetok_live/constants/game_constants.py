"""Game-related constants shared across UI, server and core layers."""

PIN_LENGTH: int = 6
ACCESS_CODE_LENGTH: int = 8
ACCESS_CODE_ALPHABET: str = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

MIN_OPTIONS: int = 2
MAX_OPTIONS: int = 4
DEFAULT_TIME_LIMIT_SECONDS: int = 20
DEFAULT_POINTS: int = 1000
MIN_POINTS_FRACTION: float = 0.5

JOIN_POLL_INTERVAL_MS: int = 2000
GAME_POLL_INTERVAL_MS: int = 2000
COUNTDOWN_TICK_MS: int = 1000
FEEDBACK_DELAY_MS: int = 1500

SUBMIT_MAX_ATTEMPTS: int = 4
SUBMIT_BASE_DELAY_MS: int = 500
SUBMIT_MAX_DELAY_MS: int = 4000

LEADERBOARD_SIZE: int = 5
