"""Command line front end for the odds calculator.

Usage::

    python -m pokerodds AhAs KdKc
    python -m pokerodds AhAs KdKc --board 2c3c4c --iterations 50000 --seed 7
    python -m pokerodds AhKh QsQd --board 2h7hTc9d --streets
    python -m pokerodds Ah9h KsKd --variant short_deck --json

Environment variables (optional, command line flags win)
--------------------------------------------------------
``POKERODDS_ENGINE_ITERATIONS``     Default trial count.
``POKERODDS_ENGINE_WORKERS``        Worker threads (``0`` = one per CPU).
``POKERODDS_ENGINE_TIME_BUDGET``    Sampling time cap in seconds.
``POKERODDS_NO_COLOR``              Disable ANSI colours.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from .core.errors import PokerOddsError
from .core.models import GameVariant
from .tools.equity_tool import OddsCalculator, street_progression
from .utils.config import EngineConfig
from .utils.logger import OddsLogger

EXIT_OK = 0
EXIT_INPUT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pokerodds",
        description="Showdown equity for two or more Hold'em hands.",
    )
    parser.add_argument("players", nargs="+", help="hole cards per player, e.g. AhKs TdTc")
    parser.add_argument("--board", "-b", default=None, help="known community cards, e.g. 7d9dTs")
    parser.add_argument(
        "--variant",
        default=None,
        choices=[variant.value for variant in GameVariant],
        help="game variant (default from config)",
    )
    parser.add_argument("--iterations", "-n", type=int, default=None, help="Monte-Carlo trials")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible sampling")
    parser.add_argument("--workers", type=int, default=None, help="worker threads (0 = one per CPU)")
    parser.add_argument("--time-budget", type=float, default=None, help="sampling time cap in seconds (0 = no cap)")
    exact = parser.add_mutually_exclusive_group()
    exact.add_argument("--exact", dest="exact", action="store_true", default=None, help="force enumeration")
    exact.add_argument("--sample", dest="exact", action="store_false", default=None, help="force Monte-Carlo sampling")
    parser.add_argument("--streets", action="store_true", help="show equity on every street reached")
    parser.add_argument("--json", action="store_true", help="print the result snapshot as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    out = OddsLogger("Equity")

    config = EngineConfig()
    if args.workers is not None:
        config.workers = max(0, args.workers)

    options = {"seed": args.seed, "exact": args.exact, "time_budget": args.time_budget}
    try:
        calculator = OddsCalculator(variant=args.variant, iterations=args.iterations, config=config)
        if args.streets:
            progression = street_progression(
                args.players,
                args.board,
                variant=calculator.variant,
                iterations=calculator.iterations,
                config=config,
                **options,
            )
        else:
            progression = [("", calculator.calculate(args.players, args.board, **options))]
    except (PokerOddsError, ValueError) as exc:
        out.error(str(exc))
        return EXIT_INPUT_ERROR

    if args.json:
        payload = [dict(result.as_dict(), street=street) if street else result.as_dict() for street, result in progression]
        print(json.dumps(payload if args.streets else payload[0], indent=2))
        return EXIT_OK

    for street, result in progression:
        out.result(result, street.capitalize() if street else None)
        if not result.exact and result.iterations < calculator.iterations:
            out.warn(f"time budget hit after {result.iterations} of {calculator.iterations} trials")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
