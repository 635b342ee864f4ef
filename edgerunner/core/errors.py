"""Typed failures raised by the calculator core.

Each error carries a stable ``kind`` string so the HTTP layer and the CLI can
report the failure category without inspecting the message text.  Validation
errors also subclass :class:`ValueError` so callers that only know about the
built-in exception keep working.
"""

from __future__ import annotations

from typing import Final


class EdgeRunnerError(Exception):
    """Base class for every failure the core can raise."""

    kind: str = "EdgeRunnerError"


class InvalidOdds(EdgeRunnerError, ValueError):
    """Malformed or out-of-domain odds in any notation."""

    kind = "InvalidOdds"


class InvalidProbability(EdgeRunnerError, ValueError):
    """Estimated probability outside ``[0, 1]``."""

    kind = "InvalidProbability"


class InvalidBankroll(EdgeRunnerError, ValueError):
    """Negative or non-finite bankroll."""

    kind = "InvalidBankroll"


class InvalidInput(EdgeRunnerError, ValueError):
    """Kelly multiplier outside ``(0, 1]`` or an unknown preset name."""

    kind = "InvalidInput"


class DivisionByZero(EdgeRunnerError, ZeroDivisionError):
    """Zero net odds reached the Kelly formula.

    Unreachable through a validated odds value: decimal odds of exactly 1.0
    are rejected by the converter before any division happens.
    """

    kind = "DivisionByZero"


#: Every concrete error kind, in taxonomy order.
ERROR_KINDS: Final[tuple[str, ...]] = (
    InvalidOdds.kind,
    InvalidProbability.kind,
    InvalidBankroll.kind,
    InvalidInput.kind,
    DivisionByZero.kind,
)
