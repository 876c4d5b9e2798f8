"""Referee form and trend analysis over a short recent-match window.

Trend labels are framed for the bettor backing fewer cards: a rising card
count is "declining" form, a falling one is "improving". Keep that mapping.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from refstats.core.math_utils import clamp, q_cards, q_int
from refstats.domain import FormAnalysis, Trend

TREND_MIN_MATCHES = 3
TREND_THRESHOLD = 0.15


def _trend_score(cards: np.ndarray) -> float:
    """OLS slope of cards against match index, halved and clamped to [-1, 1]."""
    if cards.size < TREND_MIN_MATCHES:
        return 0.0
    x = np.arange(cards.size, dtype=np.float64)
    dx = x - x.mean()
    denominator = float((dx ** 2).sum())
    if denominator == 0:
        return 0.0
    slope = float((dx * (cards - cards.mean())).sum()) / denominator
    return clamp(slope / 2, -1.0, 1.0)


def _classify(trend_score: float) -> Trend:
    if trend_score > TREND_THRESHOLD:
        return "declining"
    if trend_score < -TREND_THRESHOLD:
        return "improving"
    return "stable"


def analyze_form(recent_cards: Sequence[float], season_avg: float) -> FormAnalysis:
    """Summarize recent card counts against the season average.

    Args:
        recent_cards: Cards per match, oldest first. Usually the last five
            matches, but any length is accepted.
        season_avg: Season cards-per-match average, echoed back.

    Returns:
        FormAnalysis. form_rating is a consistency score (10 - 2 * volatility,
        clamped to 1..10), not a quality score.
    """
    if len(recent_cards) == 0:
        return FormAnalysis(
            trend="stable",
            trend_score=0.0,
            avg_last5=season_avg,
            avg_season=season_avg,
            volatility=0.0,
            form_rating=5,
        )

    cards = np.asarray(recent_cards, dtype=np.float64)
    avg_last5 = float(cards.mean())
    trend_score = _trend_score(cards)
    volatility = float(cards.std())  # population std (ddof=0)

    return FormAnalysis(
        trend=_classify(trend_score),
        trend_score=q_cards(trend_score),
        avg_last5=q_cards(avg_last5),
        avg_season=season_avg,
        volatility=q_cards(volatility),
        form_rating=q_int(clamp(10 - volatility * 2, 1.0, 10.0)),
    )
