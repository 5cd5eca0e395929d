"""Public odds calculator.

Wraps :class:`pokerodds.core.math_engine.SimulationEngine` with notation
parsing and input validation, and converts the raw tally into an
:class:`~pokerodds.core.models.OddsResult`.

Usage::

    from pokerodds import calculate

    result = calculate(["AhAs", "KdKc"], board="2c3c4c")
    print(result.describe())
"""

from __future__ import annotations

import logging
import time
from typing import Iterable, Sequence

from ..core.aggregator import check_conservation
from ..core.cards import BOARD_SIZE, Board, Card, PlayerHand, format_cards, full_deck, parse_cards
from ..core.errors import (
    DuplicateCardAcrossInputs,
    InvalidBoardNotation,
    InvalidCardForVariant,
    InvalidHandNotation,
    InvalidNotation,
    InvalidPlayerCount,
)
from ..core.math_engine import SimulationEngine
from ..core.models import GameVariant, OddsResult
from ..utils.config import EngineConfig

_log = logging.getLogger("pokerodds.calculator")

VALID_BOARD_SIZES = (0, 3, 4, 5)
STREET_BOARD_SIZES = (("preflop", 0), ("flop", 3), ("turn", 4), ("river", 5))

HandInput = str | Sequence[str] | Sequence[Card]
BoardInput = str | Sequence[str] | Sequence[Card] | None


def parse_hand(notation: HandInput) -> list[Card]:
    """Parse one player's hole cards; exactly two cards are required."""
    try:
        cards = parse_cards(notation)  # type: ignore[arg-type]
    except InvalidNotation as exc:
        raise InvalidHandNotation(notation, f"bad card {exc.notation!r}") from exc
    if len(cards) != 2:
        raise InvalidHandNotation(notation, f"expected 2 cards, got {len(cards)}")
    return cards


def parse_board(notation: BoardInput) -> list[Card]:
    """Parse the community cards; ``None`` or ``""`` is an empty board."""
    if notation is None or (isinstance(notation, str) and not notation.strip()):
        return []
    try:
        cards = parse_cards(notation)  # type: ignore[arg-type]
    except InvalidNotation as exc:
        raise InvalidBoardNotation(notation, f"bad card {exc.notation!r}") from exc
    if len(cards) not in VALID_BOARD_SIZES:
        raise InvalidBoardNotation(notation, f"board must have 0, 3, 4 or 5 cards, got {len(cards)}")
    return cards


def find_duplicates(cards: Iterable[Card]) -> list[str]:
    seen: set[Card] = set()
    duplicates: set[str] = set()
    for card in cards:
        if card in seen:
            duplicates.add(card.notation)
        seen.add(card)
    return sorted(duplicates)


def validate(hands: Sequence[Sequence[Card]], board: Sequence[Card], variant: GameVariant) -> None:
    """Reject impossible deals before any simulation starts."""
    if len(hands) < 2:
        raise InvalidPlayerCount(len(hands))
    max_players = (len(full_deck(variant)) - BOARD_SIZE) // 2
    if len(hands) > max_players:
        raise InvalidPlayerCount(len(hands), max_players)

    all_cards = [card for hand in hands for card in hand] + list(board)
    for card in all_cards:
        if not card.is_valid_for(variant):
            raise InvalidCardForVariant(card.notation, variant.value)

    duplicates = find_duplicates(all_cards)
    if duplicates:
        raise DuplicateCardAcrossInputs(duplicates)


class OddsCalculator:
    """Facade over :class:`SimulationEngine` for equity calculation."""

    def __init__(
        self,
        variant: GameVariant | str | None = None,
        iterations: int | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.config = config if config is not None else EngineConfig()
        self.variant = GameVariant.parse(variant if variant is not None else self.config.variant)
        self.iterations = int(iterations) if iterations is not None else self.config.iterations
        if self.iterations < 1:
            raise ValueError(f"iterations must be a positive integer, got {iterations}")
        self.engine = SimulationEngine(self.variant, self.config)

    def calculate(
        self,
        players: Sequence[HandInput],
        board: BoardInput = None,
        *,
        seed: int | None = None,
        exact: bool | None = None,
        time_budget: float | None = None,
    ) -> OddsResult:
        """Compute showdown equity for every player.

        Args:
            players:     Hole cards per player, as ``"AhKs"`` or ``["Ah", "Ks"]``.
            board:       Known community cards (``"7d9dTs"``) or ``None``.
            seed:        Seed for reproducible Monte-Carlo runs.
            exact:       Force enumeration or sampling; ``None`` decides.
            time_budget: Wall-clock cap for sampling in seconds; ``0`` disables
                         it, ``None`` uses the config value.

        Returns:
            :class:`OddsResult` with one entry per player, in input order.

        Raises:
            InvalidPlayerCount, InvalidHandNotation, InvalidBoardNotation,
            InvalidCardForVariant, DuplicateCardAcrossInputs.
        """
        if len(players) < 2:
            raise InvalidPlayerCount(len(players))
        hands = [parse_hand(player) for player in players]
        board_cards = parse_board(board)
        return self.calculate_cards(hands, board_cards, seed=seed, exact=exact, time_budget=time_budget)

    def calculate_cards(
        self,
        hands: Sequence[Sequence[Card]],
        board: Sequence[Card] = (),
        *,
        seed: int | None = None,
        exact: bool | None = None,
        time_budget: float | None = None,
    ) -> OddsResult:
        """Same as :meth:`calculate` for already parsed cards."""
        started = time.perf_counter()
        for hand in hands:
            if len(hand) != 2:
                raise InvalidHandNotation(format_cards(hand), f"expected 2 cards, got {len(hand)}")
        if len(board) not in VALID_BOARD_SIZES:
            raise InvalidBoardNotation(format_cards(board), f"board must have 0, 3, 4 or 5 cards, got {len(board)}")
        validate(hands, board, self.variant)
        seats = [PlayerHand(index, tuple(hand)) for index, hand in enumerate(hands)]
        known = Board(tuple(board))

        report = self.engine.run(
            [seat.cards for seat in seats],
            known.cards,
            self.iterations,
            seed=seed,
            exact=exact,
            time_budget=time_budget,
        )
        equities = report.tally.to_results([seat.notation for seat in seats])
        check_conservation(equities)
        elapsed = time.perf_counter() - started

        result = OddsResult(
            equities=tuple(equities),
            iterations=report.iterations,
            execution_time=elapsed,
            game_variant=self.variant,
            board=known.notation,
            exact=report.exact,
            metadata={"workers": report.workers, "chunks": report.chunks, "seed": seed, "street": known.street},
        )
        _log.info(
            "%s board=%s %s iterations=%d time=%.1fms equity=[%s]",
            self.variant.value,
            result.board or "-",
            "exact" if report.exact else "sampled",
            report.iterations,
            elapsed * 1000,
            ", ".join(f"{eq.hand}:{eq.equity:.2f}" for eq in equities),
        )
        return result


# ── Module-level conveniences ─────────────────────────────────────


def calculate(
    players: Sequence[HandInput],
    board: BoardInput = None,
    variant: GameVariant | str | None = None,
    iterations: int | None = None,
    *,
    seed: int | None = None,
    exact: bool | None = None,
    time_budget: float | None = None,
    config: EngineConfig | None = None,
) -> OddsResult:
    """One-shot equity calculation; see :meth:`OddsCalculator.calculate`.

    *variant* defaults to ``engine.variant`` from the config.
    """
    calculator = OddsCalculator(variant=variant, iterations=iterations, config=config)
    return calculator.calculate(players, board, seed=seed, exact=exact, time_budget=time_budget)


def calculate_preflop(players: Sequence[HandInput], **kwargs) -> OddsResult:
    return calculate(players, None, **kwargs)


def calculate_postflop(players: Sequence[HandInput], board: BoardInput, **kwargs) -> OddsResult:
    return calculate(players, board, **kwargs)


def street_progression(
    players: Sequence[HandInput],
    board: BoardInput,
    **kwargs,
) -> list[tuple[str, OddsResult]]:
    """Equity on every street the *board* has reached.

    Calls :func:`calculate` once per board prefix (0, 3, 4 and 5 cards) and
    returns ``(street, result)`` pairs in street order.
    """
    known = Board(tuple(parse_board(board)))
    progression: list[tuple[str, OddsResult]] = []
    for street, size in STREET_BOARD_SIZES:
        if size > len(known.cards):
            break
        progression.append((street, calculate(players, known.prefix(size).cards, **kwargs)))
    return progression
