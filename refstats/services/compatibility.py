"""Referee-team compatibility from head-to-head history."""
from __future__ import annotations

from typing import Sequence

from refstats.core.math_utils import clamp, q_cards, q_int
from refstats.domain import (
    CardTendency,
    CompatibilityRating,
    CompatibilityResult,
    HistoricalMatchOutcome,
)

BASE_SCORE = 50.0
DEVIATION_WEIGHT = 0.3
WIN_RATE_WEIGHT = 0.4
# Win rate of a team picked at random from win/draw/loss.
BASELINE_WIN_RATE = 33.33
TENDENCY_THRESHOLD = 15.0


def _rating(score: float) -> CompatibilityRating:
    if score >= 70:
        return "excellent"
    if score >= 55:
        return "good"
    if score >= 45:
        return "neutral"
    if score >= 30:
        return "poor"
    return "very_poor"


def _tendency(deviation_percent: float) -> CardTendency:
    if deviation_percent <= -TENDENCY_THRESHOLD:
        return "fewer"
    if deviation_percent >= TENDENCY_THRESHOLD:
        return "more"
    return "normal"


def compatibility(
    history: Sequence[HistoricalMatchOutcome],
    referee_season_avg_yellow: float,
    team_season_avg_yellow: float,
) -> CompatibilityResult:
    """Score how well a team fares under a referee, 0-100 (higher is better for the team).

    Cards above the referee/team expectation pull the score down, wins above
    a one-in-three rate push it up, and larger samples earn a small bonus.
    Both averages should be positive; a zero expectation yields a deviation
    of 0 rather than an error.
    """
    if not history:
        return CompatibilityResult(
            score=50,
            rating="neutral",
            card_tendency="normal",
            historical_matches=0,
            avg_cards_in_history=0.0,
        )

    n = len(history)
    total_cards = sum(m.yellow_cards + m.red_cards for m in history)
    avg_cards = total_cards / n

    expected_cards = (referee_season_avg_yellow + team_season_avg_yellow) / 2
    deviation_percent = 0.0
    if expected_cards > 0:
        deviation_percent = (avg_cards - expected_cards) / expected_cards * 100

    wins = sum(1 for m in history if m.result == "win")
    win_rate = wins / n * 100

    score = BASE_SCORE
    score -= deviation_percent * DEVIATION_WEIGHT
    score += (win_rate - BASELINE_WIN_RATE) * WIN_RATE_WEIGHT
    if n >= 5:
        score += 5
    if n >= 10:
        score += 5
    score = clamp(score, 0.0, 100.0)

    return CompatibilityResult(
        score=q_int(score),
        rating=_rating(score),
        card_tendency=_tendency(deviation_percent),
        historical_matches=n,
        avg_cards_in_history=q_cards(avg_cards),
    )
