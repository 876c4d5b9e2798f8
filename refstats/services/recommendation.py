"""Betting recommendation from a finished forecast.

Rules are checked in order and the first match wins, so a strong Over 4.5
signal shadows the weaker lines below it. Predicates read the rounded
ForecastResult fields, never raw probabilities. Percentages in the reasoning
round halves up (72.5 reads as 73%).
"""
from __future__ import annotations

from typing import Callable, List, Tuple

from refstats.core.math_utils import q_int, q_pct
from refstats.domain import ForecastResult, Recommendation

Predicate = Callable[[ForecastResult], bool]
Builder = Callable[[ForecastResult], Tuple[str, str, str, List[str]]]

CONFIDENCE_LABELS = {
    "high": "High Confidence",
    "medium": "Medium Confidence",
    "low": "Low Confidence",
}

SKIP_PICK = "Skip - No Clear Edge"


def _over45(f: ForecastResult) -> Tuple[str, str, str, List[str]]:
    reasoning = (
        f"Strong {q_int(f.over45_probability)}% probability for 5+ cards. "
        f"Referee shows {q_pct(f.expected_total_cards):.1f} cards on average."
    )
    return "Over 4.5 Cards", "2.00 - 2.50", reasoning, ["Over 3.5 Cards (safer)"]


def _over35(f: ForecastResult) -> Tuple[str, str, str, List[str]]:
    reasoning = f"Good {q_int(f.over35_probability)}% probability for 4+ cards based on historical data."
    alternatives = []
    if f.over45_probability >= 40:
        alternatives.append("Over 4.5 Cards (value)")
    alternatives.append("Over 2.5 Cards (safer)")
    return "Over 3.5 Cards", "1.70 - 2.00", reasoning, alternatives


def _over25(f: ForecastResult) -> Tuple[str, str, str, List[str]]:
    reasoning = f"High {q_int(f.over25_probability)}% probability for 3+ cards. Conservative but reliable."
    return "Over 2.5 Cards", "1.40 - 1.60", reasoning, []


def _under35(f: ForecastResult) -> Tuple[str, str, str, List[str]]:
    reasoning = f"{q_int(f.under35_probability)}% probability for under 4 cards. Lenient referee expected."
    return "Under 3.5 Cards", "1.80 - 2.20", reasoning, ["Under 4.5 Cards (safer)"]


def _skip(f: ForecastResult) -> Tuple[str, str, str, List[str]]:
    return SKIP_PICK, "N/A", "Probabilities are too close to call. Wait for better opportunity.", []


RULES: List[Tuple[Predicate, Builder]] = [
    (lambda f: f.over45_probability >= 60, _over45),
    (lambda f: f.over35_probability >= 65, _over35),
    (lambda f: f.over25_probability >= 70, _over25),
    (lambda f: f.under35_probability >= 60, _under35),
    (lambda f: True, _skip),
]


def recommend(forecast: ForecastResult) -> Recommendation:
    builder = next(b for predicate, b in RULES if predicate(forecast))
    pick, odds_range, reasoning, alternatives = builder(forecast)
    return Recommendation(
        primary_pick=pick,
        primary_odds_range=odds_range,
        confidence_label=CONFIDENCE_LABELS.get(forecast.confidence, "Low Confidence"),
        reasoning=reasoning,
        alternative_picks=tuple(alternatives),
    )
