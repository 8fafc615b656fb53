"""Network configuration constants for Sedetok Live."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
