"""Speed-weighted scoring for live game answers."""

from __future__ import annotations

import math

from sedetok_live.constants.game_constants import MIN_POINTS_FRACTION


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_points(
    is_correct: bool,
    max_points: int,
    response_time_ms: int,
    time_limit_ms: int,
) -> int:
    """Return the points earned by one answer.

    A wrong or expired answer earns nothing. A correct answer earns the full
    budget at 0 ms and decays linearly towards half the budget as the response
    time approaches the limit. Answering exactly at the limit counts as a
    timeout. The result is never below 1 for a correct, in-time answer.
    """
    if not is_correct or max_points <= 0 or time_limit_ms <= 0:
        return 0

    elapsed = max(0, response_time_ms)
    if elapsed >= time_limit_ms:
        return 0

    speed_factor = 1 - (elapsed / time_limit_ms) * (1 - MIN_POINTS_FRACTION)
    points = _round_half_up(max_points * speed_factor)
    floor = _round_half_up(max_points * MIN_POINTS_FRACTION)
    return max(points, floor, 1)
