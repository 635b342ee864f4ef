"""Fundamental odds mathematics — the single source of truth.

Every function here is **pure**: no I/O, no logging, no side effects.
Import from this module; never reimplement conversions in services or the API.

The three pillars exposed are:

1. **Odds values** — a closed set of frozen variants (:class:`DecimalOdds`,
   :class:`AmericanOdds`, :class:`FractionalOdds`) validated on construction.
2. **Odds conversion** — any notation ↔ decimal, plus implied probability.
3. **Odds text** — parsing user-typed prices and formatting them for display.

Design decisions
----------------
* Decimal odds are the canonical representation.  Every other notation is
  converted to decimal before any probability or Kelly math runs.
* American odds are kept **exact** when produced by :func:`from_decimal`
  (``1.909`` → ``-110.011…``, not ``-110``).  Rounding to the integral
  sportsbook convention is a display concern handled by :func:`format_odds`.
  This keeps decimal → American → decimal within ``ROUND_TRIP_EPSILON``.
* Fractional odds produced by :func:`from_decimal` use a bounded denominator
  (``10**7``), which keeps the round-trip error below ``1e-7``.  Display uses
  a much smaller bound (1000) so prices read like ``5/2`` instead of
  ``2500001/1000000``.
* No overround (vig) correction is applied to implied probabilities.

Run tests with::

    pytest tests/test_odds_math.py -v
"""

from __future__ import annotations

import math
import numbers
import re
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import ClassVar, Final, Union

from edgerunner.core.errors import InvalidOdds, InvalidProbability

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

#: Maximum error tolerated when converting decimal odds to another notation
#: and back.
ROUND_TRIP_EPSILON: Final[float] = 1e-6

#: Denominator bound used by :func:`from_decimal` for fractional odds.
ROUND_TRIP_MAX_DENOMINATOR: Final[int] = 10_000_000

#: Denominator bound used when rendering fractional odds for display.
DISPLAY_MAX_DENOMINATOR: Final[int] = 1_000

#: Even money in decimal notation.  Decimal odds at or above this are shown
#: as positive American odds, below it as negative.
_EVEN_MONEY: Final[float] = 2.0

_AMERICAN_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[+-]?\d+$")


class OddsFormat(str, Enum):
    """Supported odds notations."""

    DECIMAL = "decimal"
    AMERICAN = "american"
    FRACTIONAL = "fractional"


def _require_real(value: object, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidOdds(f"{label} must be a real number, got {value!r}.")
    if not math.isfinite(value):
        raise InvalidOdds(f"{label} must be finite, got {value!r}.")
    return float(value)


# ---------------------------------------------------------------------------
# Odds values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DecimalOdds:
    """Total payout per unit staked, stake included.

    Attributes:
        value: Decimal odds, strictly greater than 1.0.  Exactly 1.0 pays no
            profit and is rejected.
    """

    value: float

    format: ClassVar[OddsFormat] = OddsFormat.DECIMAL

    def __post_init__(self) -> None:
        if _require_real(self.value, "Decimal odds") <= 1.0:
            raise InvalidOdds(
                f"Decimal odds {self.value!r} must be > 1.0; "
                "1.0 returns the stake with zero profit."
            )


@dataclass(frozen=True, slots=True)
class AmericanOdds:
    """Signed moneyline odds.

    Attributes:
        value: Positive = profit per 100 staked (underdog); negative = stake
            needed to profit 100 (favourite).  Zero is not a price.  Usually
            an integer, but exact (non-integral) values are allowed so that
            conversions from decimal odds are lossless.
    """

    value: float

    format: ClassVar[OddsFormat] = OddsFormat.AMERICAN

    def __post_init__(self) -> None:
        if _require_real(self.value, "American odds") == 0:
            raise InvalidOdds("American odds cannot be 0.")
        _require_profit(self)


@dataclass(frozen=True, slots=True)
class FractionalOdds:
    """Profit-to-stake ratio ``numerator/denominator`` (e.g. ``5/2``).

    Attributes:
        numerator: Profit side of the ratio, > 0.
        denominator: Stake side of the ratio, > 0.
    """

    numerator: float
    denominator: float

    format: ClassVar[OddsFormat] = OddsFormat.FRACTIONAL

    def __post_init__(self) -> None:
        num = _require_real(self.numerator, "Fractional numerator")
        den = _require_real(self.denominator, "Fractional denominator")
        if num <= 0 or den <= 0:
            raise InvalidOdds(
                f"Fractional odds {self.numerator!r}/{self.denominator!r} "
                "need a positive numerator and denominator."
            )
        _require_profit(self)


def _require_profit(odds: AmericanOdds | FractionalOdds) -> None:
    # Extreme ratios (e.g. American -1e300) collapse to decimal 1.0 in floats.
    if to_decimal(odds) <= 1.0:
        raise InvalidOdds(
            f"{odds!r} is too close to even stakes: its decimal odds round to 1.0."
        )


#: Closed union of every supported notation.
OddsValue = Union[DecimalOdds, AmericanOdds, FractionalOdds]


# ---------------------------------------------------------------------------
# Odds conversion
# ---------------------------------------------------------------------------


def american_to_decimal(american: int | float) -> float:
    """Convert American odds to decimal (European) format.

    Examples::

        american_to_decimal(-110) → 1.9091   (risk 110 to win 100)
        american_to_decimal(+150) → 2.5000   (risk 100 to win 150)

    Raises:
        InvalidOdds: If ``american`` is zero or not finite.
    """
    return to_decimal(AmericanOdds(american))


def decimal_to_american(decimal_odds: float) -> float:
    """Convert decimal odds to exact American odds.

    Inverse of :func:`american_to_decimal`.  No rounding is applied; use
    :func:`format_odds` for the conventional integral display.

    Returns:
        Positive American odds for ``decimal_odds ≥ 2.0`` (underdog),
        negative otherwise (favourite).

    Raises:
        InvalidOdds: If ``decimal_odds ≤ 1.0``.
    """
    decimal_odds = DecimalOdds(decimal_odds).value
    if decimal_odds >= _EVEN_MONEY:
        return (decimal_odds - 1.0) * 100.0
    # Favourite: decimal < 2.0 → negative American
    return -100.0 / (decimal_odds - 1.0)


def decimal_to_fraction(
    decimal_odds: float,
    max_denominator: int = ROUND_TRIP_MAX_DENOMINATOR,
    *,
    smallest_if_zero: bool = False,
) -> Fraction:
    """Best rational approximation of the profit ratio ``decimal_odds − 1``.

    Args:
        decimal_odds: Decimal odds > 1.0.
        max_denominator: Largest denominator allowed.
        smallest_if_zero: When the approximation rounds to 0, return
            ``1/max_denominator`` (the nearest positive fraction) instead of
            raising.

    Raises:
        InvalidOdds: If ``decimal_odds ≤ 1.0``, or the price is too close to
            1.0 to be expressed with a denominator of at most
            ``max_denominator`` and ``smallest_if_zero`` is False.
    """
    decimal_odds = DecimalOdds(decimal_odds).value
    profit = Fraction(decimal_odds - 1.0).limit_denominator(max_denominator)
    if profit <= 0 and smallest_if_zero:
        return Fraction(1, max_denominator)
    if profit <= 0:
        raise InvalidOdds(
            f"Decimal odds {decimal_odds!r} are too close to 1.0 to express "
            f"as a fraction with denominator ≤ {max_denominator}."
        )
    return profit


def to_decimal(odds: OddsValue) -> float:
    """Normalise any odds value to decimal odds.

    Args:
        odds: A :class:`DecimalOdds`, :class:`AmericanOdds` or
            :class:`FractionalOdds`.  Values are validated on construction,
            so the result is always strictly greater than 1.0.

    Returns:
        Decimal odds > 1.0.

    Raises:
        InvalidOdds: If ``odds`` is not one of the supported variants.

    Examples::

        to_decimal(DecimalOdds(2.5))          → 2.5
        to_decimal(AmericanOdds(-200))        → 1.5
        to_decimal(FractionalOdds(5, 2))      → 3.5
    """
    match odds:
        case DecimalOdds(value=value):
            return float(value)
        case AmericanOdds(value=value) if value > 0:
            return 1.0 + value / 100.0
        case AmericanOdds(value=value):
            # Negative: risk |american| to win 100
            return 1.0 + 100.0 / abs(value)
        case FractionalOdds(numerator=num, denominator=den):
            return 1.0 + num / den
        case _:
            raise InvalidOdds(f"Unsupported odds value {odds!r}.")


def from_decimal(
    decimal_odds: float,
    target: OddsFormat | str,
    *,
    max_denominator: int = ROUND_TRIP_MAX_DENOMINATOR,
) -> OddsValue:
    """Express decimal odds in the requested notation.

    Algebraic inverse of :func:`to_decimal`.  For every valid ``d``::

        abs(to_decimal(from_decimal(d, fmt)) - d) < ROUND_TRIP_EPSILON

    Args:
        decimal_odds: Decimal odds > 1.0.
        target: Desired notation, as an :class:`OddsFormat` or its string
            value.
        max_denominator: Bound on the fractional denominator.

    Raises:
        InvalidOdds: If ``decimal_odds ≤ 1.0`` or ``target`` is unknown.
    """
    match _coerce_format(target):
        case OddsFormat.DECIMAL:
            return DecimalOdds(decimal_odds)
        case OddsFormat.AMERICAN:
            return AmericanOdds(decimal_to_american(decimal_odds))
        case OddsFormat.FRACTIONAL:
            profit = decimal_to_fraction(
                decimal_odds, max_denominator, smallest_if_zero=True
            )
            return FractionalOdds(profit.numerator, profit.denominator)


def convert(odds: OddsValue, target: OddsFormat | str) -> OddsValue:
    """Re-express ``odds`` in another notation via decimal odds."""
    return from_decimal(to_decimal(odds), target)


def _coerce_format(fmt: OddsFormat | str) -> OddsFormat:
    try:
        return OddsFormat(fmt)
    except ValueError:
        raise InvalidOdds(
            f"Unknown odds format {fmt!r}; expected one of "
            f"{', '.join(f.value for f in OddsFormat)}."
        ) from None


# ---------------------------------------------------------------------------
# Implied probability
# ---------------------------------------------------------------------------


def implied_probability(decimal_odds: float) -> float:
    """Raw implied probability from decimal odds (vig-inclusive).

    This is the price's *stated* probability.  No overround correction is
    performed.

    Returns:
        ``1 / decimal_odds``, strictly inside ``(0, 1)``.

    Raises:
        InvalidOdds: If ``decimal_odds ≤ 1.0``.

    Examples::

        implied_probability(2.0)   → 0.5000
        implied_probability(1.909) → 0.5238
    """
    return 1.0 / DecimalOdds(decimal_odds).value


def odds_from_probability(probability: float) -> float:
    """Decimal odds that a market probability implies, ``1 / probability``.

    Used when no explicit price is quoted and the market is described by a
    probability instead.

    Raises:
        InvalidProbability: If ``probability`` is not strictly inside
            ``(0, 1)``; 0 has no finite price and 1 pays no profit.
    """
    if not (0.0 < probability < 1.0):
        raise InvalidProbability(
            f"Market probability must be in (0, 1), got {probability!r}."
        )
    return 1.0 / probability


def complement_decimal(decimal_odds: float) -> float:
    """No-vig decimal odds for the opposite side of a two-way price.

    ``d_opposite = d / (d − 1)``; e.g. 1.5 ↔ 3.0, 2.0 ↔ 2.0.

    Raises:
        InvalidOdds: If ``decimal_odds ≤ 1.0``.
    """
    decimal_odds = DecimalOdds(decimal_odds).value
    return decimal_odds / (decimal_odds - 1.0)


# ---------------------------------------------------------------------------
# Odds text
# ---------------------------------------------------------------------------


def _parse_number(text: str) -> float | None:
    try:
        return float(text)
    except ValueError:
        return None


def _detect_format(text: str) -> OddsFormat:
    if "/" in text:
        return OddsFormat.FRACTIONAL
    is_american = bool(_AMERICAN_PATTERN.match(text.replace(",", "")))
    if is_american and text[0] in "+-":
        return OddsFormat.AMERICAN
    number = _parse_number(text)
    if number is not None and (number > 1.0 or not is_american):
        return OddsFormat.DECIMAL
    if is_american:
        return OddsFormat.AMERICAN
    raise InvalidOdds(f"Unrecognised odds notation {text!r}.")


def parse_odds(text: str, fmt: OddsFormat | str | None = None) -> OddsValue:
    """Parse user-typed odds such as ``"2.5"``, ``"+150"`` or ``"5/2"``.

    Args:
        text: Raw odds text.  Surrounding whitespace is ignored; American
            odds may carry a sign and thousands separators (``"+1,200"``).
        fmt: Expected notation.  When ``None`` the notation is detected:
            anything containing ``/`` is fractional, a signed integer is
            American, any other number above 1.0 is decimal, and a bare
            integer that is not a valid decimal price is American.

    Returns:
        A validated odds value.

    Raises:
        InvalidOdds: If the text is empty, does not match the notation, or
            parses to an out-of-domain price.

    Examples::

        parse_odds("2.5")            → DecimalOdds(2.5)
        parse_odds("-110")           → AmericanOdds(-110)
        parse_odds("11/10")          → FractionalOdds(11.0, 10.0)
        parse_odds("150", "american") → AmericanOdds(150)
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidOdds("Odds text is empty.")
    cleaned = text.strip()
    notation = _detect_format(cleaned) if fmt is None else _coerce_format(fmt)

    match notation:
        case OddsFormat.DECIMAL:
            value = _parse_number(cleaned)
            if value is None:
                raise InvalidOdds(f"{text!r} is not valid decimal odds.")
            return DecimalOdds(value)
        case OddsFormat.AMERICAN:
            digits = cleaned.replace(",", "")
            if not _AMERICAN_PATTERN.match(digits):
                raise InvalidOdds(f"{text!r} is not valid American odds.")
            return AmericanOdds(int(digits))
        case OddsFormat.FRACTIONAL:
            parts = cleaned.split("/")
            if len(parts) != 2:
                raise InvalidOdds(f"{text!r} is not valid fractional odds.")
            num = _parse_number(parts[0].strip())
            den = _parse_number(parts[1].strip())
            if num is None or den is None:
                raise InvalidOdds(f"{text!r} is not valid fractional odds.")
            return FractionalOdds(num, den)


def format_odds(
    odds: OddsValue | float,
    fmt: OddsFormat | str | None = None,
    *,
    odds_places: int = 3,
    max_denominator: int = DISPLAY_MAX_DENOMINATOR,
) -> str:
    """Render odds for display.

    Args:
        odds: An odds value, or bare decimal odds.
        fmt: Notation to render in.  Defaults to the value's own notation
            (decimal for bare floats).
        odds_places: Decimal places for decimal notation.
        max_denominator: Denominator bound for fractional notation.

    Examples::

        format_odds(1.909, "american")   → "-110"
        format_odds(3.5, "fractional")   → "5/2"
        format_odds(AmericanOdds(150))   → "+150"
    """
    if isinstance(odds, (DecimalOdds, AmericanOdds, FractionalOdds)):
        notation = odds.format if fmt is None else _coerce_format(fmt)
        decimal_odds = to_decimal(odds)
    else:
        notation = OddsFormat.DECIMAL if fmt is None else _coerce_format(fmt)
        decimal_odds = DecimalOdds(odds).value

    match notation:
        case OddsFormat.DECIMAL:
            return f"{decimal_odds:.{odds_places}f}"
        case OddsFormat.AMERICAN:
            return f"{round(decimal_to_american(decimal_odds)):+d}"
        case OddsFormat.FRACTIONAL:
            profit = decimal_to_fraction(decimal_odds, max_denominator)
            return f"{profit.numerator}/{profit.denominator}"
