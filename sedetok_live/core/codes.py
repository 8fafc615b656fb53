"""Normalization and generation of game PINs and access codes."""

from __future__ import annotations

import random
import re

from sedetok_live.constants.game_constants import (
    ACCESS_CODE_ALPHABET,
    ACCESS_CODE_LENGTH,
    PIN_LENGTH,
)

_NON_DIGITS = re.compile(r"\D")
_NON_ALNUM = re.compile(r"[^A-Z0-9]")

_rng = random.SystemRandom()


def normalize_pin(raw: str | None) -> str:
    """Keep digits only and truncate to the PIN length."""
    if not raw:
        return ""
    return _NON_DIGITS.sub("", raw.strip().upper())[:PIN_LENGTH]


def is_valid_pin(pin: str) -> bool:
    return len(pin) == PIN_LENGTH and pin.isdigit()


def generate_pin(taken: set[str] | None = None) -> str:
    """Return a random PIN not present in `taken`."""
    taken = taken or set()
    while True:
        pin = "".join(_rng.choice("0123456789") for _ in range(PIN_LENGTH))
        if pin not in taken:
            return pin


def normalize_access_code(raw: str | None) -> str:
    if not raw:
        return ""
    return _NON_ALNUM.sub("", raw.strip().upper())[:ACCESS_CODE_LENGTH]


def generate_access_code(taken: set[str] | None = None) -> str:
    taken = taken or set()
    while True:
        code = "".join(_rng.choice(ACCESS_CODE_ALPHABET) for _ in range(ACCESS_CODE_LENGTH))
        if code not in taken:
            return code
