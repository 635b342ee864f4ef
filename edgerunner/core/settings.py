"""Calculator configuration — display precision and defaults in one place.

This module is the **registry** for every tunable the calculator exposes.
Nowhere else in the codebase should display precision, the default bankroll
or the Kelly status threshold be hard-coded.

Architecture
------------
:class:`CalculatorSettings` is a frozen dataclass whose defaults are the
documented house values.  :meth:`CalculatorSettings.from_env` overlays
``EDGERUNNER_*`` environment variables (a ``.env`` file is loaded first via
``python-dotenv``).  The pure core never reads settings itself; the API,
report service and CLI pass the relevant values in as arguments.

Typical usage::

    from edgerunner.core.settings import CalculatorSettings

    settings = CalculatorSettings.from_env()

    # Override a single value for one report:
    from dataclasses import replace
    precise = replace(settings, display_places=4)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Final, Mapping, TypeVar

from dotenv import load_dotenv

from edgerunner.core.kelly import KELLY_PRESETS

_T = TypeVar("_T")

#: Environment variable prefix shared by every calculator setting.
ENV_PREFIX: Final[str] = "EDGERUNNER_"


@dataclass(frozen=True)
class CalculatorSettings:
    """Immutable configuration bundle for the calculator surfaces.

    Attributes:
        epsilon: Tolerance for float comparisons such as the odds round-trip
            check.  ``EDGERUNNER_EPSILON``.
        display_places: Decimal places for percentages and stake amounts.
            ``EDGERUNNER_DISPLAY_PLACES``.
        odds_places: Decimal places for decimal odds.
            ``EDGERUNNER_ODDS_PLACES``.
        fraction_max_denominator: Largest denominator shown for fractional
            odds.  ``EDGERUNNER_FRACTION_MAX_DEN``.
        default_bankroll: Bankroll used when a caller omits one.
            ``EDGERUNNER_DEFAULT_BANKROLL``.
        default_preset: Kelly preset used when a caller omits the
            multiplier.  ``EDGERUNNER_DEFAULT_PRESET``.
        warning_fraction: Full-Kelly fraction above which a recommendation
            is flagged as aggressive.  ``EDGERUNNER_WARNING_FRACTION``.
    """

    epsilon: float = 1e-6
    display_places: int = 2
    odds_places: int = 3
    fraction_max_denominator: int = 1_000
    default_bankroll: float = 1000.0
    default_preset: str = "half"
    warning_fraction: float = 0.25

    def __post_init__(self) -> None:
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be > 0, got {self.epsilon!r}.")
        if self.display_places < 0 or self.odds_places < 0:
            raise ValueError("display_places and odds_places must be ≥ 0.")
        if self.fraction_max_denominator < 1:
            raise ValueError(
                f"fraction_max_denominator must be ≥ 1, got {self.fraction_max_denominator!r}."
            )
        if self.default_bankroll < 0:
            raise ValueError(
                f"default_bankroll must be ≥ 0, got {self.default_bankroll!r}."
            )
        if self.default_preset not in KELLY_PRESETS:
            raise ValueError(
                f"default_preset must be one of {', '.join(KELLY_PRESETS)}, "
                f"got {self.default_preset!r}."
            )
        if not (0.0 < self.warning_fraction <= 1.0):
            raise ValueError(
                f"warning_fraction must be in (0, 1], got {self.warning_fraction!r}."
            )

    # ------------------------------------------------------------------ #
    #  Named constructors                                                  #
    # ------------------------------------------------------------------ #

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CalculatorSettings:
        """Build settings from ``EDGERUNNER_*`` variables.

        Args:
            environ: Mapping to read from.  When ``None`` a ``.env`` file is
                loaded into the process environment and ``os.environ`` is
                used.

        Raises:
            ValueError: If a variable is set but cannot be parsed, or the
                parsed value is out of range.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        defaults = cls()
        return cls(
            epsilon=_read(environ, "EPSILON", float, defaults.epsilon),
            display_places=_read(environ, "DISPLAY_PLACES", int, defaults.display_places),
            odds_places=_read(environ, "ODDS_PLACES", int, defaults.odds_places),
            fraction_max_denominator=_read(
                environ, "FRACTION_MAX_DEN", int, defaults.fraction_max_denominator
            ),
            default_bankroll=_read(
                environ, "DEFAULT_BANKROLL", float, defaults.default_bankroll
            ),
            default_preset=_read(
                environ, "DEFAULT_PRESET", lambda s: s.strip().lower(), defaults.default_preset
            ),
            warning_fraction=_read(
                environ, "WARNING_FRACTION", float, defaults.warning_fraction
            ),
        )

    @property
    def default_multiplier(self) -> float:
        """Multiplier of :attr:`default_preset`."""
        return KELLY_PRESETS[self.default_preset]


def _read(
    environ: Mapping[str, str],
    name: str,
    parse: Callable[[str], _T],
    default: _T,
) -> _T:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw)
    except ValueError:
        raise ValueError(
            f"{ENV_PREFIX}{name}={raw!r} could not be parsed."
        ) from None
