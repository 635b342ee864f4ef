"""
Single-bet Kelly calculator — the one operation presentation layers call.

A caller builds an immutable :class:`BetInput` snapshot and passes it to
:func:`evaluate_input` (or passes the four fields to :func:`evaluate`).  The
pipeline runs strictly downstream:

    odds value → decimal odds → implied probability → edge / EV → Kelly stake

Nothing here holds state between calls.  Identical snapshots produce
bit-identical :class:`Evaluation` records, so a form can simply re-evaluate
on every change and keep the latest result.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from edgerunner.core.edge import compute_edge, fair_decimal_odds
from edgerunner.core.kelly import (
    KellyPreset,
    compute_kelly,
    expected_log_growth,
    preset_stakes,
    resolve_multiplier,
    validate_bankroll,
)
from edgerunner.core.errors import InvalidInput
from edgerunner.core.odds_math import (
    DecimalOdds,
    OddsValue,
    complement_decimal,
    from_decimal,
    odds_from_probability,
    to_decimal,
)


class BetSide(str, Enum):
    """Which side of a two-way market the bettor is backing."""

    EVENT = "event"
    OPPOSITE = "opposite"


@dataclass(frozen=True)
class BetInput:
    """Immutable snapshot of everything one evaluation needs.

    ``kelly_multiplier`` accepts a preset name (``"full"``, ``"half"``,
    ``"quarter"``) as well as a custom number; it is resolved to a number
    when the snapshot is evaluated.
    """

    odds: OddsValue
    estimated_probability: float
    bankroll: float
    kelly_multiplier: float | str | KellyPreset = KellyPreset.HALF


@dataclass(frozen=True)
class Evaluation:
    """Complete evaluation output for one :class:`BetInput`."""

    # Market
    decimal_odds: float
    implied_probability: float

    # Edge
    edge: float
    ev_per_unit_stake: float

    # Sizing
    full_kelly_fraction: float
    applied_fraction: float
    recommended_stake: float

    # Echoed inputs
    estimated_probability: float
    bankroll: float
    kelly_multiplier: float

    # Supplementary
    fair_decimal_odds: Optional[float]
    log_growth_full_kelly: float
    preset_stakes: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def evaluate(
    odds: OddsValue,
    estimated_probability: float,
    bankroll: float,
    kelly_multiplier: float | str | KellyPreset,
) -> Evaluation:
    """Evaluate a single bet end to end.

    Args:
        odds: Quoted price in any supported notation.
        estimated_probability: Bettor's win probability in ``[0, 1]``.
        bankroll: Current bankroll, ≥ 0.
        kelly_multiplier: Preset name or custom multiplier in ``(0, 1]``.

    Returns:
        An :class:`Evaluation`.  No partial result is ever returned.

    Raises:
        InvalidOdds, InvalidProbability, InvalidBankroll, InvalidInput:
            Whichever invariant the input violates first, checked in
            pipeline order (odds, probability, bankroll, multiplier).
    """
    decimal_odds = to_decimal(odds)
    edge = compute_edge(decimal_odds, estimated_probability)
    validate_bankroll(bankroll)
    multiplier = resolve_multiplier(kelly_multiplier)
    kelly = compute_kelly(decimal_odds, estimated_probability, bankroll, multiplier)

    # Growth is reported at full Kelly clamped to [0, 1], the log-optimal stake.
    growth_fraction = min(max(kelly.full_kelly_fraction, 0.0), 1.0)

    return Evaluation(
        decimal_odds=decimal_odds,
        implied_probability=edge.implied_probability,
        edge=edge.edge,
        ev_per_unit_stake=edge.ev_per_unit_stake,
        full_kelly_fraction=kelly.full_kelly_fraction,
        applied_fraction=kelly.applied_fraction,
        recommended_stake=kelly.recommended_stake,
        estimated_probability=estimated_probability,
        bankroll=bankroll,
        kelly_multiplier=multiplier,
        fair_decimal_odds=fair_decimal_odds(estimated_probability),
        log_growth_full_kelly=expected_log_growth(
            decimal_odds, estimated_probability, growth_fraction
        ),
        preset_stakes=preset_stakes(decimal_odds, estimated_probability, bankroll),
    )


def evaluate_input(bet: BetInput) -> Evaluation:
    """Evaluate a :class:`BetInput` snapshot."""
    return evaluate(
        bet.odds,
        bet.estimated_probability,
        bet.bankroll,
        bet.kelly_multiplier,
    )


def market_odds(
    market_probability: float,
    side: BetSide | str = BetSide.EVENT,
) -> DecimalOdds:
    """Price a side from the market's probability that the event happens.

    Used when no explicit odds are quoted.  Backing the opposite side prices
    it at ``1 − market_probability``.

    Raises:
        InvalidProbability: If ``market_probability`` is not in ``(0, 1)``.
        InvalidInput: If ``side`` is not a known side.
    """
    try:
        side = BetSide(side)
    except ValueError:
        raise InvalidInput(f"Unknown bet side {side!r}.") from None
    priced = market_probability if side is BetSide.EVENT else 1.0 - market_probability
    return DecimalOdds(odds_from_probability(priced))


def flip_side(bet: BetInput) -> BetInput:
    """Return the snapshot for backing the other side of the same market.

    The price becomes its no-vig complement (kept in the same notation) and
    the estimated probability is mirrored to ``1 − p``.

    Raises:
        InvalidOdds: If the odds cannot be converted.
    """
    flipped = complement_decimal(to_decimal(bet.odds))
    return replace(
        bet,
        odds=from_decimal(flipped, bet.odds.format),
        estimated_probability=1.0 - bet.estimated_probability,
    )
