"""Kelly criterion sizing — the single source of truth for stake math.

All functions here are **pure**: no I/O, no logging.
Import from this module; never reimplement Kelly in services or the API.

The functions cover the three sizing questions a single bet raises:

1. :func:`full_kelly_fraction` — the unconstrained Kelly fraction, which is
   negative when the bet has no edge.
2. :func:`compute_kelly` — floor-at-zero, fractional multiplier and the
   bankroll-bounded recommended stake.
3. :func:`expected_log_growth` — the expected log-wealth growth per bet at a
   given fraction, i.e. the quantity Kelly maximises.

Design decisions
----------------
* **Fractional Kelly** is expressed as a *multiplier* in ``(0, 1]``
  (1.0 full, 0.5 half, 0.25 quarter).  Full Kelly maximises long-run
  log-wealth only when the probability estimate is exact; scaling it down
  trades growth for a large cut in variance.
* A multiplier of 0 is **rejected** rather than treated as "never bet".
  Declining a recommendation is the caller's choice, not a configuration.
* A non-positive full-Kelly fraction yields a stake of exactly 0.  Betting
  against one's own probability estimate is never recommended.  Invalid
  inputs still raise.

Run tests with::

    pytest tests/test_kelly.py -v
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Final

from edgerunner.core.edge import validate_probability
from edgerunner.core.errors import (
    DivisionByZero,
    InvalidBankroll,
    InvalidInput,
    InvalidOdds,
)

# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


class KellyPreset(str, Enum):
    """Named fractional-Kelly multipliers."""

    FULL = "full"
    HALF = "half"
    QUARTER = "quarter"

    @property
    def multiplier(self) -> float:
        return KELLY_PRESETS[self.value]


#: Multiplier for each named preset.  Any other value in ``(0, 1]`` is a
#: valid custom multiplier.
KELLY_PRESETS: Final[dict[str, float]] = {
    "full": 1.0,
    "half": 0.5,
    "quarter": 0.25,
}


def resolve_multiplier(multiplier: float | str | KellyPreset) -> float:
    """Turn a preset name or a custom number into a validated multiplier.

    Examples::

        resolve_multiplier("half")              → 0.5
        resolve_multiplier(KellyPreset.QUARTER) → 0.25
        resolve_multiplier(0.33)                → 0.33

    Raises:
        InvalidInput: For unknown preset names and numbers outside ``(0, 1]``.
    """
    if isinstance(multiplier, str):
        name = multiplier.value if isinstance(multiplier, KellyPreset) else multiplier
        try:
            return KELLY_PRESETS[name.strip().lower()]
        except KeyError:
            raise InvalidInput(
                f"Unknown Kelly preset {multiplier!r}; expected one of "
                f"{', '.join(KELLY_PRESETS)} or a number in (0, 1]."
            ) from None
    return validate_multiplier(multiplier)


def validate_multiplier(kelly_multiplier: float) -> float:
    """Return ``kelly_multiplier`` unchanged if it lies in ``(0, 1]``.

    Raises:
        InvalidInput: Otherwise, including 0, NaN and non-numeric input.
    """
    if isinstance(kelly_multiplier, bool) or not isinstance(kelly_multiplier, (int, float)):
        raise InvalidInput(f"Kelly multiplier must be a number, got {kelly_multiplier!r}.")
    if math.isnan(kelly_multiplier) or not (0.0 < kelly_multiplier <= 1.0):
        raise InvalidInput(
            f"Kelly multiplier must be in (0, 1], got {kelly_multiplier!r}."
        )
    return kelly_multiplier


def validate_bankroll(bankroll: float) -> float:
    """Return ``bankroll`` unchanged if it is finite and ≥ 0.

    Raises:
        InvalidBankroll: For negative, NaN, infinite or non-numeric input.
    """
    if isinstance(bankroll, bool) or not isinstance(bankroll, (int, float)):
        raise InvalidBankroll(f"Bankroll must be a number, got {bankroll!r}.")
    if not math.isfinite(bankroll) or bankroll < 0.0:
        raise InvalidBankroll(f"Bankroll must be finite and ≥ 0, got {bankroll!r}.")
    return bankroll


# ---------------------------------------------------------------------------
# Standard Kelly
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class KellyResult:
    """Read-only sizing for one bet.

    Attributes:
        full_kelly_fraction: Unconstrained Kelly fraction ``(b·p − q) / b``.
            Negative when the bet has no edge.
        applied_fraction: ``clamp(full, 0, 1) × kelly_multiplier``.
        recommended_stake: ``applied_fraction × bankroll``, never more than
            the bankroll.
    """

    full_kelly_fraction: float
    applied_fraction: float
    recommended_stake: float


def full_kelly_fraction(decimal_odds: float, estimated_probability: float) -> float:
    """Unconstrained Kelly fraction for a simple win/loss bet.

    The Kelly criterion maximises the expected logarithm of wealth by
    solving::

        max_f  E[log(1 + f · X)]

    where ``X`` pays ``b = decimal_odds − 1`` with probability ``p`` and
    ``−1`` with probability ``q = 1 − p``.  The closed-form solution
    (Kelly 1956) is::

        f*  =  (p · b − q) / b  =  p − q / b                     (1)

    Args:
        decimal_odds: Decimal odds for the bet.  Profit per unit is
            ``decimal_odds − 1``.
        estimated_probability: Bettor's win probability in ``[0, 1]``.

    Returns:
        ``f*``, which may be negative (no edge) and never exceeds 1.

    Raises:
        InvalidProbability: If ``estimated_probability`` is outside ``[0, 1]``.
        DivisionByZero: If ``decimal_odds == 1.0`` (zero net odds).
        InvalidOdds: If ``decimal_odds < 1.0`` or not finite.

    Examples::

        full_kelly_fraction(2.0, 0.60)   →  0.20
        full_kelly_fraction(1.5, 0.50)   → -0.50

    References:
        Kelly, J. L. (1956). A New Interpretation of Information Rate.
        *Bell System Technical Journal*, 35(4), 917–926.
    """
    p = validate_probability(estimated_probability)
    if not isinstance(decimal_odds, (int, float)) or not math.isfinite(decimal_odds):
        raise InvalidOdds(f"Decimal odds must be finite, got {decimal_odds!r}.")

    profit_per_unit = decimal_odds - 1.0
    if profit_per_unit == 0.0:
        raise DivisionByZero(
            "Decimal odds of 1.0 leave zero net odds; the Kelly fraction is undefined."
        )
    if profit_per_unit < 0.0:
        raise InvalidOdds(f"Decimal odds must be > 1.0, got {decimal_odds!r}.")

    loss_prob = 1.0 - p
    # Full Kelly (equation 1)
    return (p * profit_per_unit - loss_prob) / profit_per_unit


def compute_kelly(
    decimal_odds: float,
    estimated_probability: float,
    bankroll: float,
    kelly_multiplier: float,
) -> KellyResult:
    """Size a bet with fractional Kelly and bound it by the bankroll.

    Args:
        decimal_odds: Decimal odds > 1.0.
        estimated_probability: Bettor's win probability in ``[0, 1]``.
        bankroll: Current bankroll, ≥ 0.
        kelly_multiplier: Fraction of full Kelly to bet, in ``(0, 1]``.

    Returns:
        A :class:`KellyResult`.  When the full-Kelly fraction is ≤ 0 the
        applied fraction and stake are exactly 0.

    Raises:
        InvalidProbability: Probability outside ``[0, 1]``.
        InvalidBankroll: Negative bankroll.
        InvalidInput: Multiplier outside ``(0, 1]``.
        DivisionByZero: Decimal odds of exactly 1.0.
        InvalidOdds: Decimal odds below 1.0.

    Examples::

        compute_kelly(2.0, 0.6, 1000, 0.5)  → KellyResult(0.2, 0.1, 100.0)
        compute_kelly(1.5, 0.5, 1000, 1.0)  → KellyResult(-0.5, 0.0, 0.0)
    """
    validate_probability(estimated_probability)
    bankroll = validate_bankroll(bankroll)
    kelly_multiplier = validate_multiplier(kelly_multiplier)

    full_kelly = full_kelly_fraction(decimal_odds, estimated_probability)

    # Negative or zero edge: do not bet.
    clamped = min(max(full_kelly, 0.0), 1.0)
    applied = clamped * kelly_multiplier
    stake = min(applied * bankroll, bankroll)

    return KellyResult(
        full_kelly_fraction=full_kelly,
        applied_fraction=applied,
        recommended_stake=stake,
    )


def preset_stakes(
    decimal_odds: float,
    estimated_probability: float,
    bankroll: float,
) -> dict[str, float]:
    """Recommended stake at every named preset, keyed by preset name."""
    return {
        name: compute_kelly(
            decimal_odds, estimated_probability, bankroll, multiplier
        ).recommended_stake
        for name, multiplier in KELLY_PRESETS.items()
    }


# ---------------------------------------------------------------------------
# Growth
# ---------------------------------------------------------------------------


def expected_log_growth(
    decimal_odds: float,
    estimated_probability: float,
    fraction: float,
) -> float:
    """Expected log-wealth growth per bet when staking ``fraction``.

    ::

        g(f)  =  p · ln(1 + f · b)  +  q · ln(1 − f)

    ``g`` is maximised at the full-Kelly fraction.  Outcomes with zero
    probability contribute nothing, so ``p = 1`` at ``f = 1`` is finite.

    Args:
        decimal_odds: Decimal odds > 1.0.
        estimated_probability: Bettor's win probability in ``[0, 1]``.
        fraction: Fraction of bankroll staked, in ``[0, 1]``.

    Returns:
        Growth in natural-log units.  0.0 when ``fraction == 0``;
        ``-inf`` when the whole bankroll is staked on a bet that can lose.

    Raises:
        InvalidInput: If ``fraction`` is outside ``[0, 1]``.
        InvalidProbability: Probability outside ``[0, 1]``.
        InvalidOdds: Decimal odds ≤ 1.0.

    Examples::

        expected_log_growth(2.0, 0.6, 0.2) → 0.0201
        expected_log_growth(2.0, 0.6, 0.0) → 0.0
    """
    p = validate_probability(estimated_probability)
    if not (0.0 <= fraction <= 1.0):
        raise InvalidInput(f"Stake fraction must be in [0, 1], got {fraction!r}.")
    if not isinstance(decimal_odds, (int, float)) or not decimal_odds > 1.0:
        raise InvalidOdds(f"Decimal odds must be > 1.0, got {decimal_odds!r}.")
    if fraction == 0.0:
        return 0.0

    q = 1.0 - p
    growth = 0.0
    if p > 0.0:
        growth += p * math.log1p(fraction * (decimal_odds - 1.0))
    if q > 0.0:
        if fraction == 1.0:
            return -math.inf
        growth += q * math.log1p(-fraction)
    return growth
