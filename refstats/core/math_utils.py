"""Shared float helpers for display rounding and clamping.

Rounding works on the binary float, half toward +inf: 4.145 is stored as
4.14499..., so it rounds to 4.14, and -0.125 rounds to -0.12.
"""

from __future__ import annotations

import math


def round_half_up(value: float, places: int = 0) -> float:
    scale = 10 ** places
    return math.floor(value * scale + 0.5) / scale


def q_cards(value: float) -> float:
    return round_half_up(value, 2)


def q_pct(value: float) -> float:
    return round_half_up(value, 1)


def q_int(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, lo: float, hi: float) -> float:
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value
