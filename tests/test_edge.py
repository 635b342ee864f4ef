"""
Tests for edge and expected value
Run with: pytest tests/test_edge.py -v
"""

import math

import pytest

from edgerunner.core.edge import compute_edge, fair_decimal_odds
from edgerunner.core.errors import InvalidOdds, InvalidProbability
from edgerunner.core.odds_math import implied_probability


class TestComputeEdge:
    """Edge against the implied probability"""

    def test_positive_edge(self):
        metrics = compute_edge(2.0, 0.6)

        assert metrics.implied_probability == 0.5
        assert metrics.edge == pytest.approx(0.1)
        assert metrics.ev_per_unit_stake == pytest.approx(0.2)

    def test_negative_edge(self):
        # American -200 is decimal 1.5
        metrics = compute_edge(1.5, 0.5)

        assert metrics.implied_probability == pytest.approx(2 / 3)
        assert metrics.edge == pytest.approx(-1 / 6)
        assert metrics.ev_per_unit_stake == pytest.approx(-0.25)

    @pytest.mark.parametrize("d, p", [
        (2.0, 0.6),
        (1.909, 0.55),
        (3.5, 0.2),
        (1.01, 0.999),
        (10.0, 0.0),
    ])
    def test_edge_is_exact_difference(self, d, p):
        """Edge equals p minus implied probability with no rounding"""
        assert compute_edge(d, p).edge == p - implied_probability(d)

    def test_edge_and_ev_share_sign(self):
        for p in (0.1, 0.3, 0.45, 0.55, 0.8):
            metrics = compute_edge(2.2, p)
            assert (metrics.edge > 0) == (metrics.ev_per_unit_stake > 0)

    def test_probability_zero(self):
        metrics = compute_edge(2.5, 0.0)
        assert metrics.ev_per_unit_stake == -1.0

    def test_probability_one(self):
        metrics = compute_edge(2.5, 1.0)
        assert metrics.ev_per_unit_stake == pytest.approx(1.5)

    def test_metrics_are_read_only(self):
        metrics = compute_edge(2.0, 0.6)
        with pytest.raises(AttributeError):
            metrics.edge = 0.0


class TestEdgeValidation:
    """Invalid inputs raise typed errors"""

    @pytest.mark.parametrize("p", [-0.01, 1.01, math.nan, "0.5", None])
    def test_invalid_probability(self, p):
        with pytest.raises(InvalidProbability):
            compute_edge(2.0, p)

    def test_invalid_odds(self):
        with pytest.raises(InvalidOdds):
            compute_edge(1.0, 0.5)


class TestFairOdds:
    """Zero-edge price for the bettor's probability"""

    def test_fair_odds(self):
        assert fair_decimal_odds(0.5) == 2.0
        assert fair_decimal_odds(0.25) == 4.0

    def test_zero_probability_has_no_fair_price(self):
        assert fair_decimal_odds(0.0) is None

    def test_subnormal_probability_has_no_fair_price(self):
        assert fair_decimal_odds(1e-320) is None
        assert math.isfinite(fair_decimal_odds(1e-300))

    def test_fair_odds_have_zero_edge(self):
        fair = fair_decimal_odds(0.4)
        assert compute_edge(fair, 0.4).edge == pytest.approx(0.0, abs=1e-12)

    def test_rejects_invalid_probability(self):
        with pytest.raises(InvalidProbability):
            fair_decimal_odds(1.5)
