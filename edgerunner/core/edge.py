"""Edge and expected value of a single bet against the quoted price.

All functions here are **pure**: no I/O, no logging.

The bettor's *edge* is the gap between their estimated win probability and
the probability the price implies::

    edge  =  p  −  1 / d

The *expected value per unit stake* is the mean net profit of a one-unit
bet at decimal odds ``d``::

    EV  =  p · (d − 1)  −  (1 − p)

Both are positive exactly when the bet has positive expectation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from edgerunner.core.errors import InvalidProbability
from edgerunner.core.odds_math import implied_probability


@dataclass(frozen=True, slots=True)
class EdgeMetrics:
    """Read-only edge summary for one price / probability pair.

    Attributes:
        implied_probability: ``1 / decimal_odds``, in ``(0, 1)``.
        edge: Estimated minus implied probability, in ``[-1, 1]``.
        ev_per_unit_stake: Expected net profit per unit staked.
    """

    implied_probability: float
    edge: float
    ev_per_unit_stake: float


def validate_probability(estimated_probability: float) -> float:
    """Return ``estimated_probability`` unchanged if it lies in ``[0, 1]``.

    Raises:
        InvalidProbability: For values outside ``[0, 1]``, NaN and
            non-numeric input.
    """
    if isinstance(estimated_probability, bool) or not isinstance(
        estimated_probability, (int, float)
    ):
        raise InvalidProbability(
            f"Estimated probability must be a number, got {estimated_probability!r}."
        )
    if math.isnan(estimated_probability) or not (0.0 <= estimated_probability <= 1.0):
        raise InvalidProbability(
            f"Estimated probability must be in [0, 1], got {estimated_probability!r}."
        )
    return estimated_probability


def compute_edge(decimal_odds: float, estimated_probability: float) -> EdgeMetrics:
    """Compare the bettor's probability with the market's.

    Args:
        decimal_odds: Decimal odds > 1.0.
        estimated_probability: Bettor's win probability in ``[0, 1]``.

    Raises:
        InvalidProbability: If ``estimated_probability`` is outside ``[0, 1]``.
        InvalidOdds: If ``decimal_odds ≤ 1.0``.

    Examples::

        compute_edge(2.0, 0.6)  → EdgeMetrics(0.5, 0.1, 0.2)
        compute_edge(1.5, 0.5)  → EdgeMetrics(0.667, -0.167, -0.25)
    """
    p = validate_probability(estimated_probability)
    implied = implied_probability(decimal_odds)
    return EdgeMetrics(
        implied_probability=implied,
        edge=p - implied,
        ev_per_unit_stake=p * (decimal_odds - 1.0) - (1.0 - p),
    )


def fair_decimal_odds(estimated_probability: float) -> float | None:
    """Decimal odds at which ``estimated_probability`` has exactly zero edge.

    Returns:
        ``1 / p``, or ``None`` when ``p == 0`` or ``1 / p`` overflows (no
        finite fair price).
        ``p == 1`` gives 1.0, a price no book can offer.
    """
    p = validate_probability(estimated_probability)
    if p == 0.0:
        return None
    fair = 1.0 / p
    # Subnormal p overflows to inf
    return fair if math.isfinite(fair) else None
