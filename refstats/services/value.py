"""Bookmaker odds comparison and value-bet detection for card markets.

Probabilities here are percentages (0-100), matching ForecastResult. EV is
returned as a fraction (0.05 = +5%) by compare_odds and as a percentage by
find_value_bets.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from refstats.core.config import settings
from refstats.core.logger import get_logger
from refstats.domain import Confidence, ForecastResult, MarketComparison, OddsQuote, ValueBet

log = get_logger("services.value")

# Fair odds shown when we give a market no chance at all.
MAX_FAIR_ODDS = 99.0
# Over 5.5 is not modelled directly; scale the Over 4.5 probability.
OVER55_FROM_OVER45 = 0.6
UNKNOWN_MARKET_PROBABILITY = 50.0

FixtureQuotes = Tuple[int, ForecastResult, Iterable[OddsQuote]]


def implied_probability(odds: float) -> float:
    """Bookmaker implied probability in percent.

    Raises:
        ValueError: If odds <= 0
    """
    if odds <= 0:
        raise ValueError(f"Odds must be > 0, got: {odds}")
    return 100.0 / odds


def fair_odds(probability: float) -> float:
    if probability <= 0:
        return MAX_FAIR_ODDS
    return 100.0 / probability


def expected_value(probability: float, odds: float) -> float:
    """EV per unit staked: (p * odds) - 1, with p given in percent."""
    return probability / 100.0 * odds - 1.0


def remove_overround_binary(
    over_odds: Optional[float],
    under_odds: Optional[float],
) -> Tuple[Optional[float], Optional[float]]:
    """Strip the bookmaker margin from an over/under pair.

    Args:
        over_odds: Odds on the over side
        under_odds: Odds on the under side

    Returns:
        Tuple (over_pct, under_pct) summing to 100, or (None, None) if a side is missing.

    Raises:
        ValueError: If either odd is <= 0
    """
    if over_odds is None or under_odds is None:
        return (None, None)

    if over_odds <= 0 or under_odds <= 0:
        raise ValueError(f"Odds must be > 0, got: over={over_odds}, under={under_odds}")

    imp_over = 1.0 / over_odds
    imp_under = 1.0 / under_odds
    total = imp_over + imp_under
    return (imp_over / total * 100.0, imp_under / total * 100.0)


def market_probability(forecast: ForecastResult, market: str) -> float:
    """Our probability (percent) for a card market label such as "Over 3.5 Cards"."""
    if "Over 2.5" in market:
        return forecast.over25_probability
    if "Over 3.5" in market:
        return forecast.over35_probability
    if "Over 4.5" in market:
        return forecast.over45_probability
    if "Over 5.5" in market:
        return forecast.over45_probability * OVER55_FROM_OVER45
    if "Under 2.5" in market:
        return forecast.under25_probability
    if "Under 3.5" in market:
        return forecast.under35_probability
    if "Under 4.5" in market:
        return 100.0 - forecast.over45_probability
    return UNKNOWN_MARKET_PROBABILITY


def _split_market(market: str) -> Optional[Tuple[str, str]]:
    """("Over", "3.5") for "Over 3.5 Cards"; None for anything else."""
    parts = market.split()
    if len(parts) < 2 or parts[0] not in ("Over", "Under"):
        return None
    return parts[0], parts[1]


def _no_vig_probabilities(quotes: List[OddsQuote]) -> Dict[int, float]:
    """Margin-free probability per quote index, for lines quoted on both sides by one bookmaker."""
    sides: Dict[Tuple[str, str, str], Tuple[int, float]] = {}
    for i, quote in enumerate(quotes):
        split = _split_market(quote.market)
        if split is not None:
            sides[(quote.bookmaker, split[1], split[0])] = (i, quote.odds)

    out: Dict[int, float] = {}
    for (bookmaker, line, side), (i, _) in sides.items():
        if side != "Over":
            continue
        under = sides.get((bookmaker, line, "Under"))
        if under is None:
            continue
        over_pct, under_pct = remove_overround_binary(quotes[i].odds, under[1])
        out[i] = over_pct
        out[under[0]] = under_pct
    return out


def compare_odds(forecast: ForecastResult, quotes: Iterable[OddsQuote]) -> List[MarketComparison]:
    quotes = list(quotes)
    no_vig = _no_vig_probabilities(quotes)
    out: List[MarketComparison] = []
    for i, quote in enumerate(quotes):
        ours = market_probability(forecast, quote.market)
        implied = implied_probability(quote.odds)
        ev = expected_value(ours, quote.odds)
        out.append(
            MarketComparison(
                market=quote.market,
                bookmaker=quote.bookmaker,
                odds=quote.odds,
                our_probability=ours,
                implied_probability=implied,
                fair_odds=fair_odds(ours),
                ev=ev,
                edge=ours - implied,
                is_value=ev > settings.value_ev_threshold,
                no_vig_probability=no_vig.get(i),
            )
        )
    return out


def _value_confidence(ev_percent: float) -> Confidence:
    if ev_percent > 15:
        return "high"
    if ev_percent > 8:
        return "medium"
    return "low"


def find_value_bets(
    fixtures: Iterable[FixtureQuotes],
    min_ev_percent: Optional[float] = None,
) -> List[ValueBet]:
    """Collect positive-EV quotes across fixtures, best EV first.

    Args:
        fixtures: (fixture_id, forecast, quotes) triples.
        min_ev_percent: Minimum EV in percent; defaults to settings.min_ev_percent.
    """
    if min_ev_percent is None:
        min_ev_percent = settings.min_ev_percent

    bets: List[ValueBet] = []
    scanned = 0
    for fixture_id, forecast, quotes in fixtures:
        for quote in quotes:
            scanned += 1
            ours = market_probability(forecast, quote.market)
            ev_percent = expected_value(ours, quote.odds) * 100
            if ev_percent <= 0 or ev_percent < min_ev_percent:
                continue
            bets.append(
                ValueBet(
                    fixture_id=fixture_id,
                    market=quote.market,
                    our_probability=ours,
                    odds=quote.odds,
                    implied_probability=implied_probability(quote.odds),
                    ev_percent=ev_percent,
                    confidence=_value_confidence(ev_percent),
                    expected_cards=forecast.expected_total_cards,
                )
            )

    bets.sort(key=lambda b: b.ev_percent, reverse=True)
    log.debug("value scan quotes=%d value_bets=%d min_ev=%.1f", scanned, len(bets), min_ev_percent)
    return bets
