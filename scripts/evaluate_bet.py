"""
evaluate_bet.py — Kelly stake recommendation for a single bet from the shell.

Odds may be typed in any notation; the format is detected unless --format
is given.  Supply --market-prob instead of odds to price the bet from the
market's probability of the event.

Usage
-----
  python scripts/evaluate_bet.py 2.0 --prob 0.6 --bankroll 1000 --kelly half
  python scripts/evaluate_bet.py -- -110 --prob 0.55            # American
  python scripts/evaluate_bet.py 5/2 --prob 0.35 --kelly 0.3   # fractional
  python scripts/evaluate_bet.py --market-prob 0.6 --side opposite --prob 0.45
  python scripts/evaluate_bet.py 2.0 --prob 0.6 --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Ensure the project root (one level up from scripts/) is on sys.path so that
# `from edgerunner.xxx import ...` resolves correctly when the script is run
# directly (e.g.  python scripts/evaluate_bet.py).
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from edgerunner.calculator import BetSide, evaluate, market_odds  # noqa: E402
from edgerunner.core.errors import EdgeRunnerError  # noqa: E402
from edgerunner.core.odds_math import OddsFormat, parse_odds  # noqa: E402
from edgerunner.core.settings import CalculatorSettings  # noqa: E402
from edgerunner.services.report import evaluation_display, format_evaluation  # noqa: E402

logger = logging.getLogger("evaluate_bet")


def _multiplier(text: str):
    """Accept a preset name or a number; the core validates the range."""
    try:
        return float(text)
    except ValueError:
        return text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Kelly criterion stake recommendation for a single bet."
    )
    parser.add_argument(
        "odds",
        nargs="?",
        help='Quoted odds, e.g. 2.5, +150, -110 or 5/2.',
    )
    parser.add_argument(
        "--format",
        choices=[fmt.value for fmt in OddsFormat],
        help="Odds notation.  Detected from the text when omitted.",
    )
    parser.add_argument(
        "--market-prob",
        type=float,
        help="Market probability of the event (0-1), used instead of odds.",
    )
    parser.add_argument(
        "--side",
        choices=[side.value for side in BetSide],
        default=BetSide.EVENT.value,
        help="Side priced from --market-prob (default: event).",
    )
    parser.add_argument(
        "--prob",
        type=float,
        required=True,
        help="Your estimated win probability for the backed side (0-1).",
    )
    parser.add_argument(
        "--bankroll",
        type=float,
        help="Bankroll.  Defaults to EDGERUNNER_DEFAULT_BANKROLL.",
    )
    parser.add_argument(
        "--kelly",
        type=_multiplier,
        help="full, half, quarter or a custom multiplier in (0, 1].",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the raw evaluation as JSON instead of a ticket.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    if (args.odds is None) == (args.market_prob is None):
        parser.error("provide exactly one of ODDS or --market-prob")

    try:
        settings = CalculatorSettings.from_env()
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    bankroll = settings.default_bankroll if args.bankroll is None else args.bankroll
    multiplier = settings.default_preset if args.kelly is None else args.kelly

    try:
        if args.odds is not None:
            odds = parse_odds(args.odds, args.format)
        else:
            odds = market_odds(args.market_prob, args.side)
        result = evaluate(odds, args.prob, bankroll, multiplier)
    except EdgeRunnerError as exc:
        logger.debug("Evaluation rejected", exc_info=True)
        print(f"{exc.kind}: {exc}", file=sys.stderr)
        return 1

    if args.json:
        payload = result.to_dict()
        payload["display"] = evaluation_display(result, settings)
        print(json.dumps(payload, indent=2))
    else:
        print(format_evaluation(result, settings))
    return 0


if __name__ == "__main__":
    sys.exit(main())
