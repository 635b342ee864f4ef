"""
Display rendering for calculator evaluations.

Rounding happens here and only here: the core keeps full float precision and
this module applies :class:`~edgerunner.core.settings.CalculatorSettings`
display precision (2 places for percentages and stakes, 3 for decimal odds
by default).
"""

import logging
from typing import Dict, Optional

from edgerunner.calculator import Evaluation
from edgerunner.core.errors import InvalidOdds
from edgerunner.core.odds_math import OddsFormat, decimal_to_fraction, format_odds
from edgerunner.core.settings import CalculatorSettings

logger = logging.getLogger(__name__)

STATUS_DANGER = "danger"
STATUS_WARNING = "warning"
STATUS_SUCCESS = "success"

# Placeholder for values with no finite representation (e.g. fair odds at p=0)
MISSING = "—"


def kelly_status(evaluation: Evaluation, warning_fraction: float = 0.25) -> str:
    """
    Classify a recommendation for display.

    Returns:
        "danger" when nothing should be staked, "warning" when full Kelly
        exceeds ``warning_fraction`` of bankroll, "success" otherwise.
    """
    if evaluation.applied_fraction == 0.0:
        return STATUS_DANGER
    if evaluation.full_kelly_fraction > warning_fraction:
        return STATUS_WARNING
    return STATUS_SUCCESS


def odds_in_all_formats(
    decimal_odds: Optional[float],
    settings: CalculatorSettings,
) -> Dict[str, str]:
    """Render a price in every notation, keyed by format name.

    A notation that cannot express the price (a fraction for odds within
    ``1 / fraction_max_denominator`` of 1.0, say) is shown as ``MISSING``.
    """
    if decimal_odds is None or decimal_odds <= 1.0:
        return {fmt.value: MISSING for fmt in OddsFormat}

    rendered = {}
    for fmt in OddsFormat:
        try:
            rendered[fmt.value] = format_odds(
                decimal_odds,
                fmt,
                odds_places=settings.odds_places,
                max_denominator=settings.fraction_max_denominator,
            )
        except InvalidOdds:
            logger.debug("No %s rendering for decimal odds %r", fmt.value, decimal_odds)
            rendered[fmt.value] = MISSING
    return rendered


def fraction_display_is_exact(decimal_odds: float, settings: CalculatorSettings) -> bool:
    """True when the displayed fraction reproduces the price within ``settings.epsilon``."""
    try:
        shown = decimal_to_fraction(decimal_odds, settings.fraction_max_denominator)
    except InvalidOdds:
        return False
    return abs(float(shown) - (decimal_odds - 1.0)) < settings.epsilon


def evaluation_display(
    evaluation: Evaluation,
    settings: Optional[CalculatorSettings] = None,
) -> Dict[str, object]:
    """
    Build the display strings for an evaluation.

    Args:
        evaluation: Result of ``evaluate``.
        settings: Display precision; defaults to the house values.

    Returns:
        Dict of preformatted strings plus the Kelly status.
    """
    settings = settings or CalculatorSettings()
    places = settings.display_places

    return {
        "odds": odds_in_all_formats(evaluation.decimal_odds, settings),
        "fair_odds": odds_in_all_formats(evaluation.fair_decimal_odds, settings),
        "implied_probability": f"{evaluation.implied_probability:.{places}%}",
        "estimated_probability": f"{evaluation.estimated_probability:.{places}%}",
        "edge": f"{evaluation.edge:+.{places}%}",
        "ev_per_unit_stake": f"{evaluation.ev_per_unit_stake:+.{places + 2}f}",
        "full_kelly_fraction": f"{evaluation.full_kelly_fraction:.{places}%}",
        "applied_fraction": f"{evaluation.applied_fraction:.{places}%}",
        "recommended_stake": f"{evaluation.recommended_stake:.{places}f}",
        "preset_stakes": {
            name: f"{stake:.{places}f}" for name, stake in evaluation.preset_stakes.items()
        },
        "log_growth_bp": f"{evaluation.log_growth_full_kelly * 10_000:+.3f} bp",
        "status": kelly_status(evaluation, settings.warning_fraction),
    }


def format_evaluation(
    evaluation: Evaluation,
    settings: Optional[CalculatorSettings] = None,
) -> str:
    """
    Format an evaluation as a human-readable ticket.

    Args:
        evaluation: Result of ``evaluate``.
        settings: Display precision; defaults to the house values.

    Returns:
        Multi-line string for terminals and logs
    """
    display = evaluation_display(evaluation, settings)
    odds = display["odds"]
    fair = display["fair_odds"]

    lines = []
    lines.append(f"Odds: {odds['decimal']} | {odds['american']} | {odds['fractional']}")
    lines.append(
        f"   Implied: {display['implied_probability']}   "
        f"Yours: {display['estimated_probability']}   Edge: {display['edge']}"
    )
    lines.append(f"   EV per unit: {display['ev_per_unit_stake']}")
    lines.append(f"   Fair odds: {fair['decimal']} | {fair['american']} | {fair['fractional']}")
    lines.append(
        f"   Kelly: {display['full_kelly_fraction']} full, "
        f"{display['applied_fraction']} applied (x{evaluation.kelly_multiplier:g})"
    )

    if display["status"] == STATUS_DANGER:
        lines.append("   No betting edge detected. Kelly suggests no bet.")
    else:
        lines.append(f"   Recommended stake: {display['recommended_stake']}")
        presets = display["preset_stakes"]
        lines.append(
            "   Full / Half / Quarter: "
            + " / ".join(presets[name] for name in ("full", "half", "quarter"))
        )
        lines.append(f"   Log growth @ full Kelly: {display['log_growth_bp']}")
        if display["status"] == STATUS_WARNING:
            lines.append(
                "   Consider fractional Kelly sizing (Half/Quarter) to reduce volatility"
            )

    logger.debug("Formatted evaluation: stake=%.4f status=%s",
                 evaluation.recommended_stake, display["status"])
    return "\n".join(lines)
