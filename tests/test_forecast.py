"""Tests for refstats/services/forecast.py."""
import math

import pytest

from refstats.core.math_utils import q_pct
from refstats.domain import RefereeAggregate, TeamPair
from refstats.services.forecast import (
    confidence_label,
    confidence_score,
    forecast,
    forecast_pair,
)
from refstats.services.poisson import poisson_at_least


class TestWorkedExample:
    def test_referee_only_expected_cards(self, referee):
        result = forecast(referee)
        assert result.expected_yellow_cards == pytest.approx(4.0)
        assert result.expected_red_cards == pytest.approx(0.15)
        assert result.expected_total_cards == pytest.approx(4.15)

    def test_referee_only_over25(self, referee):
        """lam=4.15 -> P(X>=3) = 1 - e^-4.15 * 13.76125 ~ 78.3%."""
        result = forecast(referee)
        lam = 4.15
        raw = (1 - math.exp(-lam) * (1 + lam + lam ** 2 / 2)) * 100
        assert result.over25_probability == pytest.approx(raw, abs=0.05)
        assert result.over25_probability == pytest.approx(78.3)

    def test_referee_only_confidence(self, referee):
        """40 (25 matches) + 10 (no team data) = 50 -> medium."""
        result = forecast(referee)
        assert result.confidence_score == 50
        assert result.confidence == "medium"


class TestTeamBlend:
    def test_blend_with_both_teams(self, referee, team_factory):
        """yellow = 0.45*4 + 0.35*(2+2) + 0.2*4 = 4.0; red = 0.45*0.2 + 0.35*0.2 + 0.2*0.15 = 0.19."""
        ref = RefereeAggregate(4.0, 0.2, 25, 4.5)
        home = team_factory(yellow=2.0, red=0.1)
        away = team_factory(yellow=2.0, red=0.1)
        result = forecast(ref, home, away)
        assert result.expected_yellow_cards == pytest.approx(4.0)
        assert result.expected_red_cards == pytest.approx(0.19)
        assert result.expected_total_cards == pytest.approx(4.19)

    def test_league_average_override(self, team_factory):
        """League weight 0.2: raising league yellow by 1.0 adds 0.2 expected yellows."""
        ref = RefereeAggregate(4.0, 0.2, 25, 4.5)
        home = team_factory(yellow=2.0)
        away = team_factory(yellow=2.0)
        base = forecast(ref, home, away)
        higher = forecast(ref, home, away, league_avg_yellow=5.0)
        assert higher.expected_yellow_cards - base.expected_yellow_cards == pytest.approx(0.2)

    def test_one_team_missing_uses_referee_baseline(self, team_factory):
        ref = RefereeAggregate(3.5, 0.1, 12, 3.0)
        result = forecast(ref, home_team=team_factory(yellow=3.0))
        assert result.expected_yellow_cards == pytest.approx(3.5)
        assert result.expected_red_cards == pytest.approx(0.1)

    def test_one_team_missing_gets_referee_only_points(self, team_factory):
        """25 (12 matches) + 10 (no pair) = 35 -> low."""
        ref = RefereeAggregate(3.5, 0.1, 12, 3.0)
        result = forecast(ref, away_team=team_factory())
        assert result.confidence_score == 35
        assert result.confidence == "low"

    def test_forecast_pair_matches_forecast(self, referee, team_factory):
        home = team_factory(yellow=1.8)
        away = team_factory(yellow=2.4)
        assert forecast(referee, home, away) == forecast_pair(referee, TeamPair(home, away))


class TestRecentForm:
    def test_form_nudges_yellow_only(self):
        """recent mean 5.0 vs avg 4.0 -> +0.15 yellow; red unchanged."""
        ref = RefereeAggregate(4.0, 0.15, 25, 4.5, recent_form=(5.0, 5.0, 5.0))
        result = forecast(ref)
        assert result.expected_yellow_cards == pytest.approx(4.15)
        assert result.expected_red_cards == pytest.approx(0.15)

    def test_short_form_is_ignored(self):
        ref = RefereeAggregate(4.0, 0.15, 25, 4.5, recent_form=(9.0, 9.0))
        assert forecast(ref).expected_yellow_cards == pytest.approx(4.0)

    def test_form_nudge_uses_referee_average_after_blend(self, team_factory):
        """blend = 0.45*3 + 0.35*4 + 0.2*4 = 3.55; form mean 6 vs referee avg 3.0 -> +0.45 = 4.0.
        Measuring form against the blended 3.55 would give 3.92 instead."""
        ref = RefereeAggregate(3.0, 0.2, 25, 4.5, recent_form=(6.0, 6.0, 6.0))
        result = forecast(ref, team_factory(yellow=2.0, red=0.1), team_factory(yellow=2.0, red=0.1))
        assert result.expected_yellow_cards == pytest.approx(4.0)
        assert result.expected_red_cards == pytest.approx(0.19)

    def test_three_entries_add_no_confidence(self):
        ref = RefereeAggregate(4.0, 0.15, 25, 4.5, recent_form=(4.0, 4.0, 4.0))
        assert forecast(ref).confidence_score == 50


class TestConfidence:
    def test_high_confidence_tier(self, team_factory):
        """40 + 35 + 25 = 100 -> high."""
        ref = RefereeAggregate(4.0, 0.15, 25, 4.5, recent_form=(4, 5, 3, 4, 6))
        result = forecast(ref, team_factory(played=15), team_factory(played=15))
        assert result.confidence == "high"
        assert result.confidence_score >= 70
        assert result.confidence_score == 100

    def test_mid_sample_teams(self, team_factory):
        """25 (10 matches) + 20 (teams with 5-9) = 45 -> medium."""
        ref = RefereeAggregate(4.0, 0.15, 10, 4.5)
        pair = TeamPair(team_factory(played=7), team_factory(played=12))
        assert confidence_score(ref, pair) == 45

    def test_small_team_samples_score_nothing(self, team_factory):
        ref = RefereeAggregate(4.0, 0.15, 25, 4.5)
        pair = TeamPair(team_factory(played=3), team_factory(played=20))
        assert confidence_score(ref, pair) == 40

    def test_new_referee(self):
        """Fewer than 5 matches earns no referee points."""
        ref = RefereeAggregate(4.0, 0.15, 4, 4.5)
        assert confidence_score(ref, None) == 10
        ref = RefereeAggregate(4.0, 0.15, 5, 4.5)
        assert confidence_score(ref, None) == 25

    def test_labels(self):
        assert confidence_label(70) == "high"
        assert confidence_label(69) == "medium"
        assert confidence_label(40) == "medium"
        assert confidence_label(39) == "low"


class TestProbabilities:
    def test_negative_inputs_are_floored(self):
        ref = RefereeAggregate(-1.0, -0.5, 25, 0.0)
        result = forecast(ref)
        assert result.expected_yellow_cards == 0.0
        assert result.expected_red_cards == 0.0
        assert result.expected_total_cards == 0.0
        assert result.over25_probability == 0.0
        assert result.under25_probability == 100.0

    @pytest.mark.parametrize("yellow", [0.0, 0.8, 2.5, 3.9, 4.6, 6.2, 9.0, 14.0])
    def test_bounds_and_complements(self, yellow, team_factory):
        ref = RefereeAggregate(yellow, 0.2, 18, 4.0, recent_form=(yellow, yellow + 1, yellow + 2))
        result = forecast(ref, team_factory(yellow=yellow / 2), team_factory(yellow=yellow / 2))
        for p in (
            result.over25_probability,
            result.over35_probability,
            result.over45_probability,
            result.under25_probability,
            result.under35_probability,
        ):
            assert 0.0 <= p <= 100.0
        assert result.under25_probability == q_pct(100 - result.over25_probability)
        assert result.under35_probability == q_pct(100 - result.over35_probability)
        assert result.over25_probability + result.under25_probability == pytest.approx(100.0)
        assert result.over25_probability >= result.over35_probability >= result.over45_probability

    def test_probabilities_match_poisson(self, referee):
        result = forecast(referee)
        assert result.over35_probability == q_pct(poisson_at_least(4, 4.15) * 100)
        assert result.over45_probability == q_pct(poisson_at_least(5, 4.15) * 100)


class TestRounding:
    def test_stored_half_rounds_down(self):
        """0.145 * 100 = 14.4999... and 4.145 * 100 = 414.4999... -> 0.14 and 4.14."""
        result = forecast(RefereeAggregate(4.0, 0.145, 25, 4.5))
        assert result.expected_red_cards == 0.14
        assert result.expected_total_cards == 4.14
