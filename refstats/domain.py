"""Value records passed in and out of the card prediction services.

All records are frozen dataclasses built fresh per call. Aggregates come
from the stats layer already averaged over completed matches; nothing here
validates them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

Confidence = Literal["low", "medium", "high"]
Trend = Literal["improving", "stable", "declining"]
CompatibilityRating = Literal["excellent", "good", "neutral", "poor", "very_poor"]
CardTendency = Literal["fewer", "normal", "more"]
MatchResult = Literal["win", "draw", "loss"]


@dataclass(frozen=True)
class RefereeAggregate:
    avg_yellow_cards: float
    avg_red_cards: float
    matches_officiated: int
    strictness_index: float
    # Cards (yellow + red) per recent match, oldest first.
    recent_form: Tuple[float, ...] = ()


@dataclass(frozen=True)
class TeamAggregate:
    avg_yellow_received: float
    avg_red_received: float
    avg_fouls_committed: float
    matches_played: int


@dataclass(frozen=True)
class TeamPair:
    """Home and away aggregates; team data is only used when both sides exist."""

    home: TeamAggregate
    away: TeamAggregate

    @classmethod
    def from_optional(
        cls,
        home: Optional[TeamAggregate],
        away: Optional[TeamAggregate],
    ) -> Optional["TeamPair"]:
        if home is None or away is None:
            return None
        return cls(home=home, away=away)


@dataclass(frozen=True)
class ForecastResult:
    expected_yellow_cards: float
    expected_red_cards: float
    expected_total_cards: float
    over25_probability: float
    over35_probability: float
    over45_probability: float
    under25_probability: float
    under35_probability: float
    confidence: Confidence
    confidence_score: int


@dataclass(frozen=True)
class HistoricalMatchOutcome:
    yellow_cards: int
    red_cards: int
    fouls: int
    result: MatchResult


@dataclass(frozen=True)
class FormAnalysis:
    trend: Trend
    trend_score: float
    avg_last5: float
    avg_season: float
    volatility: float
    form_rating: int


@dataclass(frozen=True)
class CompatibilityResult:
    score: int
    rating: CompatibilityRating
    card_tendency: CardTendency
    historical_matches: int
    avg_cards_in_history: float


@dataclass(frozen=True)
class Recommendation:
    primary_pick: str
    primary_odds_range: str
    confidence_label: str
    reasoning: str
    alternative_picks: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OddsQuote:
    market: str
    odds: float
    bookmaker: str = "Avg"


@dataclass(frozen=True)
class MarketComparison:
    market: str
    bookmaker: str
    odds: float
    our_probability: float
    implied_probability: float
    fair_odds: float
    ev: float
    edge: float
    is_value: bool
    # Margin-free implied probability, set when the same bookmaker quotes both sides of the line.
    no_vig_probability: Optional[float] = None


@dataclass(frozen=True)
class ValueBet:
    fixture_id: int
    market: str
    our_probability: float
    odds: float
    implied_probability: float
    ev_percent: float
    confidence: Confidence
    expected_cards: float
