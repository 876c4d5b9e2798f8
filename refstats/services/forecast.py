"""Expected cards forecaster.

Blends referee, team and league base rates into a Poisson rate for total
cards, then reads over/under probabilities and a sample-size confidence off
that rate. Inputs are season aggregates; nothing is validated, so negative
averages simply flow through the arithmetic (expected values are floored at
zero before the Poisson step).
"""
from __future__ import annotations

from typing import Optional

from refstats.core.config import settings
from refstats.core.logger import get_logger
from refstats.core.math_utils import q_cards, q_pct
from refstats.domain import (
    Confidence,
    ForecastResult,
    RefereeAggregate,
    TeamAggregate,
    TeamPair,
)
from refstats.services.poisson import poisson_at_least

log = get_logger("services.forecast")

REFEREE_WEIGHT = 0.45
TEAM_WEIGHT = 0.35
LEAGUE_WEIGHT = 0.20

FORM_WEIGHT = 0.15
FORM_MIN_MATCHES = 3
FORM_CONFIDENT_MATCHES = 5

HIGH_CONFIDENCE = 70
MEDIUM_CONFIDENCE = 40


def _mean(values) -> float:
    return sum(values) / len(values)


def _blend(referee_rate: float, team_rate: float, league_rate: float) -> float:
    return referee_rate * REFEREE_WEIGHT + team_rate * TEAM_WEIGHT + league_rate * LEAGUE_WEIGHT


def _referee_sample_points(matches_officiated: int) -> int:
    if matches_officiated >= 20:
        return 40
    if matches_officiated >= 10:
        return 25
    if matches_officiated >= 5:
        return 15
    return 0


def _team_sample_points(teams: Optional[TeamPair]) -> int:
    # Without a full pair the forecast is referee-only and gets a flat base.
    if teams is None:
        return 10
    home_played = teams.home.matches_played
    away_played = teams.away.matches_played
    if home_played >= 10 and away_played >= 10:
        return 35
    if home_played >= 5 and away_played >= 5:
        return 20
    return 0


def confidence_score(referee: RefereeAggregate, teams: Optional[TeamPair]) -> int:
    """Additive sample-size score in [0, 100]."""
    score = _referee_sample_points(referee.matches_officiated)
    score += _team_sample_points(teams)
    if len(referee.recent_form) >= FORM_CONFIDENT_MATCHES:
        score += 25
    return min(100, score)


def confidence_label(score: int) -> Confidence:
    if score >= HIGH_CONFIDENCE:
        return "high"
    if score >= MEDIUM_CONFIDENCE:
        return "medium"
    return "low"


def forecast_pair(
    referee: RefereeAggregate,
    teams: Optional[TeamPair] = None,
    league_avg_yellow: Optional[float] = None,
) -> ForecastResult:
    """Forecast card counts for one match.

    Args:
        referee: Season aggregate of the appointed referee.
        teams: Home/away aggregates, or None for a referee-only forecast.
        league_avg_yellow: League yellow-card baseline; defaults to
            settings.league_avg_yellow.

    Returns:
        ForecastResult with expected cards rounded to 2 decimals and
        probabilities (percent) rounded to 1 decimal. Under probabilities are
        exact complements of the rounded over probabilities.
    """
    if league_avg_yellow is None:
        league_avg_yellow = settings.league_avg_yellow

    expected_yellow = referee.avg_yellow_cards
    expected_red = referee.avg_red_cards

    if teams is not None:
        team_yellow = teams.home.avg_yellow_received + teams.away.avg_yellow_received
        team_red = teams.home.avg_red_received + teams.away.avg_red_received
        expected_yellow = _blend(referee.avg_yellow_cards, team_yellow, league_avg_yellow)
        expected_red = _blend(referee.avg_red_cards, team_red, settings.league_avg_red)

    # Recent form only nudges yellows.
    if len(referee.recent_form) >= FORM_MIN_MATCHES:
        recent_avg = _mean(referee.recent_form)
        expected_yellow += (recent_avg - referee.avg_yellow_cards) * FORM_WEIGHT

    expected_yellow = max(0.0, expected_yellow)
    expected_red = max(0.0, expected_red)
    expected_total = expected_yellow + expected_red

    over25 = q_pct(poisson_at_least(3, expected_total) * 100)
    over35 = q_pct(poisson_at_least(4, expected_total) * 100)
    over45 = q_pct(poisson_at_least(5, expected_total) * 100)

    score = confidence_score(referee, teams)

    result = ForecastResult(
        expected_yellow_cards=q_cards(expected_yellow),
        expected_red_cards=q_cards(expected_red),
        expected_total_cards=q_cards(expected_total),
        over25_probability=over25,
        over35_probability=over35,
        over45_probability=over45,
        under25_probability=q_pct(100 - over25),
        under35_probability=q_pct(100 - over35),
        confidence=confidence_label(score),
        confidence_score=score,
    )
    log.debug(
        "forecast lam=%.3f teams=%s form=%d -> o2.5=%.1f o3.5=%.1f o4.5=%.1f conf=%d",
        expected_total,
        teams is not None,
        len(referee.recent_form),
        over25,
        over35,
        over45,
        score,
    )
    return result


def forecast(
    referee: RefereeAggregate,
    home_team: Optional[TeamAggregate] = None,
    away_team: Optional[TeamAggregate] = None,
    league_avg_yellow: Optional[float] = None,
) -> ForecastResult:
    """Forecast from loose home/away aggregates; a missing side drops team data entirely."""
    return forecast_pair(referee, TeamPair.from_optional(home_team, away_team), league_avg_yellow)
