"""
FastAPI application for the EdgeRunner Kelly calculator
Exposes single-bet evaluation and odds conversion to front ends
"""

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
import logging
import os

from dotenv import load_dotenv

from edgerunner import __version__
from edgerunner.calculator import evaluate, market_odds
from edgerunner.core.errors import EdgeRunnerError
from edgerunner.core.kelly import KELLY_PRESETS
from edgerunner.core.odds_math import (
    decimal_to_american,
    decimal_to_fraction,
    implied_probability,
    to_decimal,
)
from edgerunner.core.settings import CalculatorSettings
from edgerunner.schemas import (
    ErrorResponse,
    EvaluateRequest,
    EvaluateResponse,
    OddsConversionResponse,
    OddsPayload,
    PresetsResponse,
)
from edgerunner.services.report import (
    evaluation_display,
    fraction_display_is_exact,
    odds_in_all_formats,
)

load_dotenv()

# Logging setup
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> CalculatorSettings:
    """Calculator settings, read from the environment once per process."""
    return CalculatorSettings.from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    settings = get_settings()
    logger.info(
        "Starting EdgeRunner %s (default preset=%s, bankroll=%.2f)",
        __version__, settings.default_preset, settings.default_bankroll,
    )
    yield
    logger.info("Shutting down EdgeRunner")


app = FastAPI(
    title="EdgeRunner",
    description="Kelly criterion calculator for optimal single-bet sizing",
    version=__version__,
    lifespan=lifespan,
)

# CORS (comma-separated origins; adjust for production)
_cors_origins = [
    origin.strip()
    for origin in os.getenv(
        "EDGERUNNER_CORS_ORIGINS", "http://localhost:3000,http://localhost:8080"
    ).split(",")
    if origin.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EdgeRunnerError)
async def edgerunner_error_handler(request: Request, exc: EdgeRunnerError):
    """Report a rejected calculation with its error kind."""
    logger.warning("%s %s rejected: %s: %s", request.method, request.url.path, exc.kind, exc)
    body = ErrorResponse(error=exc.kind, detail=str(exc))
    return JSONResponse(status_code=422, content=body.model_dump())


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """Service banner"""
    return {
        "app": "EdgeRunner",
        "version": __version__,
        "status": "operational",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


@app.get("/api/presets", response_model=PresetsResponse)
async def get_presets(settings: CalculatorSettings = Depends(get_settings)):
    """Named Kelly multipliers"""
    return PresetsResponse(presets=dict(KELLY_PRESETS), default=settings.default_preset)


@app.post("/api/evaluate", response_model=EvaluateResponse)
async def evaluate_bet(
    payload: EvaluateRequest,
    settings: CalculatorSettings = Depends(get_settings),
):
    """Evaluate a single bet: implied probability, edge, EV and Kelly stake."""
    if payload.odds is not None:
        odds = payload.odds.to_odds_value()
    else:
        odds = market_odds(payload.market_probability, payload.side)

    bankroll = settings.default_bankroll if payload.bankroll is None else payload.bankroll
    multiplier = (
        settings.default_preset
        if payload.kelly_multiplier is None
        else payload.kelly_multiplier
    )

    result = evaluate(odds, payload.estimated_probability, bankroll, multiplier)
    logger.info(
        "Evaluated bet: odds=%.4f p=%.4f edge=%+.4f stake=%.2f",
        result.decimal_odds, result.estimated_probability,
        result.edge, result.recommended_stake,
    )

    return EvaluateResponse(
        **result.to_dict(),
        display=evaluation_display(result, settings),
    )


@app.post("/api/odds/convert", response_model=OddsConversionResponse)
async def convert_odds(
    payload: OddsPayload,
    settings: CalculatorSettings = Depends(get_settings),
):
    """Express a price in every notation."""
    decimal_odds = to_decimal(payload.to_odds_value())
    fraction = decimal_to_fraction(decimal_odds, smallest_if_zero=True)

    return OddsConversionResponse(
        decimal_odds=decimal_odds,
        american_odds=decimal_to_american(decimal_odds),
        fractional_numerator=fraction.numerator,
        fractional_denominator=fraction.denominator,
        implied_probability=implied_probability(decimal_odds),
        display=odds_in_all_formats(decimal_odds, settings),
        display_fraction_exact=fraction_display_is_exact(decimal_odds, settings),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
