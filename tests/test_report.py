"""
Tests for evaluation display rendering
Run with: pytest tests/test_report.py -v
"""

import pytest

from edgerunner.calculator import evaluate
from edgerunner.core.odds_math import AmericanOdds, DecimalOdds
from edgerunner.core.settings import CalculatorSettings
from edgerunner.services.report import (
    MISSING,
    STATUS_DANGER,
    STATUS_SUCCESS,
    STATUS_WARNING,
    evaluation_display,
    format_evaluation,
    fraction_display_is_exact,
    kelly_status,
    odds_in_all_formats,
)


@pytest.fixture
def value_bet():
    """Even money with a 60% estimate, half Kelly on 1000"""
    return evaluate(DecimalOdds(2.0), 0.6, 1000, 0.5)


class TestKellyStatus:

    def test_modest_edge_is_success(self, value_bet):
        assert kelly_status(value_bet) == STATUS_SUCCESS

    def test_large_full_kelly_is_warning(self):
        # f* = 0.8 at even money with p = 0.9
        result = evaluate(DecimalOdds(2.0), 0.9, 1000, 0.25)
        assert kelly_status(result) == STATUS_WARNING

    def test_no_edge_is_danger(self):
        result = evaluate(DecimalOdds(1.5), 0.5, 1000, 1.0)
        assert kelly_status(result) == STATUS_DANGER

    def test_threshold_is_configurable(self, value_bet):
        assert kelly_status(value_bet, warning_fraction=0.1) == STATUS_WARNING


class TestEvaluationDisplay:

    def test_percentages_and_stake(self, value_bet):
        display = evaluation_display(value_bet)

        assert display["implied_probability"] == "50.00%"
        assert display["estimated_probability"] == "60.00%"
        assert display["edge"] == "+10.00%"
        assert display["ev_per_unit_stake"] == "+0.2000"
        assert display["full_kelly_fraction"] == "20.00%"
        assert display["applied_fraction"] == "10.00%"
        assert display["recommended_stake"] == "100.00"
        assert display["status"] == STATUS_SUCCESS

    def test_odds_in_every_notation(self, value_bet):
        display = evaluation_display(value_bet)
        assert display["odds"] == {"decimal": "2.000", "american": "+100", "fractional": "1/1"}

    def test_fair_odds(self, value_bet):
        display = evaluation_display(value_bet)
        assert display["fair_odds"] == {"decimal": "1.667", "american": "-150", "fractional": "2/3"}

    def test_preset_stakes(self, value_bet):
        display = evaluation_display(value_bet)
        assert display["preset_stakes"] == {"full": "200.00", "half": "100.00", "quarter": "50.00"}

    def test_log_growth_in_basis_points(self, value_bet):
        assert evaluation_display(value_bet)["log_growth_bp"] == "+201.355 bp"

    def test_negative_edge_sign(self):
        display = evaluation_display(evaluate(AmericanOdds(-200), 0.5, 1000, 1.0))

        assert display["edge"] == "-16.67%"
        assert display["recommended_stake"] == "0.00"

    def test_zero_probability_has_no_fair_odds(self):
        display = evaluation_display(evaluate(DecimalOdds(2.0), 0.0, 1000, 1.0))
        assert set(display["fair_odds"].values()) == {MISSING}

    def test_custom_precision(self, value_bet):
        settings = CalculatorSettings(display_places=1, odds_places=2)
        display = evaluation_display(value_bet, settings)

        assert display["implied_probability"] == "50.0%"
        assert display["recommended_stake"] == "100.0"
        assert display["odds"]["decimal"] == "2.00"

    def test_display_does_not_change_values(self, value_bet):
        evaluation_display(value_bet, CalculatorSettings(display_places=0))
        assert value_bet.edge == pytest.approx(0.1)


class TestOddsInAllFormats:

    def test_price_at_floor_is_missing(self):
        assert odds_in_all_formats(1.0, CalculatorSettings()) == {
            "decimal": MISSING, "american": MISSING, "fractional": MISSING,
        }

    def test_fraction_denominator_bound(self):
        settings = CalculatorSettings(fraction_max_denominator=10)
        assert odds_in_all_formats(1.909, settings)["fractional"] == "9/10"

    def test_price_near_floor_has_no_fraction(self):
        rendered = odds_in_all_formats(1.0001, CalculatorSettings())

        assert rendered["decimal"] == "1.000"
        assert rendered["american"] == "-1000000"
        assert rendered["fractional"] == MISSING

    def test_near_floor_evaluation_still_displays(self):
        display = evaluation_display(evaluate(DecimalOdds(1.0001), 0.9999, 1000, 1.0))
        assert display["odds"]["fractional"] == MISSING


class TestFractionDisplayIsExact:

    def test_exact(self):
        assert fraction_display_is_exact(3.5, CalculatorSettings())
        assert fraction_display_is_exact(1.0 + 100 / 110, CalculatorSettings())

    def test_approximate(self):
        settings = CalculatorSettings(fraction_max_denominator=10)
        assert not fraction_display_is_exact(1.909, settings)

    def test_epsilon_controls_tolerance(self):
        settings = CalculatorSettings(fraction_max_denominator=10, epsilon=0.01)
        assert fraction_display_is_exact(1.909, settings)

    def test_unrepresentable(self):
        assert not fraction_display_is_exact(1.0001, CalculatorSettings())


class TestFormatEvaluation:

    def test_value_bet_ticket(self, value_bet):
        ticket = format_evaluation(value_bet)

        assert ticket.startswith("Odds: 2.000 | +100 | 1/1")
        assert "Edge: +10.00%" in ticket
        assert "Recommended stake: 100.00" in ticket
        assert "Full / Half / Quarter: 200.00 / 100.00 / 50.00" in ticket
        assert "No betting edge" not in ticket

    def test_no_edge_ticket(self):
        ticket = format_evaluation(evaluate(DecimalOdds(1.5), 0.5, 1000, 1.0))

        assert "No betting edge detected. Kelly suggests no bet." in ticket
        assert "Recommended stake" not in ticket

    def test_aggressive_ticket_suggests_fractional(self):
        ticket = format_evaluation(evaluate(DecimalOdds(2.0), 0.9, 1000, 1.0))
        assert "Consider fractional Kelly sizing" in ticket
