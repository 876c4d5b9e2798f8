"""Poisson primitives for card-count thresholds.

Card totals per match rarely exceed a dozen, so factorials up to
FACTORIAL_TABLE_MAX are precomputed once at import and never mutated.
"""
from __future__ import annotations

import math

FACTORIAL_TABLE_MAX = 30
_FACTORIALS = tuple(math.factorial(i) for i in range(FACTORIAL_TABLE_MAX + 1))


def factorial(n: int) -> int:
    """n! from the lookup table; negative n returns 1 instead of failing."""
    if n < 0:
        return 1
    if n <= FACTORIAL_TABLE_MAX:
        return _FACTORIALS[n]
    return math.factorial(n)


def poisson_pmf(k: int, lam: float) -> float:
    """Poisson probability mass function P(X=k | lam)."""
    if lam <= 0:
        return 1.0 if k == 0 else 0.0
    return (lam ** k) * math.exp(-lam) / factorial(k)


def poisson_at_least(k: int, lam: float) -> float:
    """P(X >= k) as one minus the PMF mass below k."""
    below = 0.0
    for i in range(k):
        below += poisson_pmf(i, lam)
    return 1.0 - below


def over_line_probability(line: float, lam: float) -> float:
    """Probability of finishing over a half-goal style line, e.g. 3.5 -> P(X >= 4)."""
    return poisson_at_least(math.ceil(line), lam)
