"""
Pydantic request/response schemas for the EdgeRunner API.

Schemas validate *shape* only (types, required fields, which of odds or
market probability is given).  Domain ranges such as probability in [0, 1]
or a positive bankroll are enforced by the calculator core so that every
violation surfaces with its typed error kind rather than a generic
validation message.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from edgerunner.calculator import BetSide
from edgerunner.core.errors import InvalidOdds
from edgerunner.core.odds_math import (
    AmericanOdds,
    DecimalOdds,
    OddsFormat,
    OddsValue,
    parse_odds,
)


# ---------------------------------------------------------------------------
# Odds
# ---------------------------------------------------------------------------

class OddsPayload(BaseModel):
    """
    A quoted price in one notation.

    ``value`` may be text exactly as a user typed it ("+150", "5/2",
    "2.50") or, for decimal and American odds, a bare number.
    """

    format: Literal["decimal", "american", "fractional"] = Field(
        ..., description="Odds notation"
    )
    value: Union[float, str] = Field(..., description='e.g. 2.5, -110 or "5/2"')

    def to_odds_value(self) -> OddsValue:
        """Build the validated odds value; raises InvalidOdds."""
        if isinstance(self.value, str):
            return parse_odds(self.value, self.format)
        if self.format == OddsFormat.DECIMAL.value:
            return DecimalOdds(self.value)
        if self.format == OddsFormat.AMERICAN.value:
            return AmericanOdds(self.value)
        raise InvalidOdds(
            f"Fractional odds must be sent as text like '5/2', got {self.value!r}."
        )

    model_config = {
        "json_schema_extra": {
            "example": {"format": "american", "value": "-110"}
        }
    }


class OddsConversionResponse(BaseModel):
    """The same price in every notation."""
    decimal_odds: float
    american_odds: float
    fractional_numerator: int
    fractional_denominator: int
    implied_probability: float
    display: Dict[str, str]
    display_fraction_exact: bool = Field(
        ..., description="Displayed fraction reproduces the price within epsilon"
    )


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

class EvaluateRequest(BaseModel):
    """
    Payload for POST /api/evaluate.

    Supply exactly one of ``odds`` (the price of the side being backed) or
    ``market_probability`` (the market's probability that the event
    happens; ``side`` then selects which side is priced).  ``bankroll`` and
    ``kelly_multiplier`` fall back to the configured defaults.
    """

    odds: Optional[OddsPayload] = None
    market_probability: Optional[float] = Field(
        None, description="Market probability of the event, used when no odds are quoted"
    )
    side: BetSide = Field(BetSide.EVENT, description="Side priced from market_probability")

    estimated_probability: float = Field(..., description="Your win probability, 0-1")
    bankroll: Optional[float] = Field(None, description="Defaults to the configured bankroll")
    kelly_multiplier: Optional[Union[float, str]] = Field(
        None, description='Preset ("full", "half", "quarter") or custom value in (0, 1]'
    )

    @model_validator(mode="after")
    def exactly_one_price(self) -> "EvaluateRequest":
        if (self.odds is None) == (self.market_probability is None):
            raise ValueError("Provide exactly one of 'odds' or 'market_probability'")
        return self

    model_config = {
        "json_schema_extra": {
            "example": {
                "odds": {"format": "decimal", "value": 2.0},
                "estimated_probability": 0.6,
                "bankroll": 1000.0,
                "kelly_multiplier": "half",
            }
        }
    }


class EvaluateResponse(BaseModel):
    """Full evaluation plus display strings."""
    decimal_odds: float
    implied_probability: float
    edge: float
    ev_per_unit_stake: float
    full_kelly_fraction: float
    applied_fraction: float
    recommended_stake: float

    estimated_probability: float
    bankroll: float
    kelly_multiplier: float

    fair_decimal_odds: Optional[float]
    log_growth_full_kelly: float
    preset_stakes: Dict[str, float]

    display: Dict[str, Any]


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------

class PresetsResponse(BaseModel):
    """Named Kelly presets and the configured default."""
    presets: Dict[str, float]
    default: str


class ErrorResponse(BaseModel):
    """Body returned for a rejected calculation."""
    error: str = Field(..., description="Error kind, e.g. InvalidOdds")
    detail: str
