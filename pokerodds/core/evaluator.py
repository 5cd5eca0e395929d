"""Poker hand evaluator for 5 to 7 cards.

The best five-card hand of a 6- or 7-card set is found directly from rank
and suit counts instead of scoring every 5-card subset one by one.  The
result is identical to taking the maximum over all C(n, 5) subsets; the
slower subset search is still available through :func:`best_five` when the
caller wants the five cards themselves.

Ranks compare as plain tuples: ``(strength, kickers, category)``.  The
strength already orders categories for the active variant, so in Short Deck
a flush outranks a full house without any special casing at comparison time.
"""

from __future__ import annotations

from enum import IntEnum
from itertools import combinations
from typing import NamedTuple, Sequence

from .cards import RANK_NAMES, SUITS, Card
from .errors import DuplicateCard, InsufficientCards, TooManyCards
from .models import GameVariant


class HandCategory(IntEnum):
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    HandCategory.HIGH_CARD: "High Card",
    HandCategory.ONE_PAIR: "One Pair",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.FLUSH: "Flush",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
}


_HOLDEM_STRENGTH = {category: int(category) for category in HandCategory}

_SHORT_DECK_STRENGTH = dict(_HOLDEM_STRENGTH)
_SHORT_DECK_STRENGTH[HandCategory.FLUSH] = int(HandCategory.FULL_HOUSE)
_SHORT_DECK_STRENGTH[HandCategory.FULL_HOUSE] = int(HandCategory.FLUSH)


class HandRank(NamedTuple):
    """Totally ordered hand value; equal ranks split the pot."""

    strength: int
    kickers: tuple[int, ...]
    category: HandCategory

    @property
    def name(self) -> str:
        if self.category is HandCategory.STRAIGHT_FLUSH and self.kickers[0] == 14:
            return "Royal Flush"
        return self.category.label

    def describe(self) -> str:
        """Human readable summary, e.g. ``"Two Pair, Kings and Nines"``."""
        top = RANK_NAMES[self.kickers[0]]
        if self.category in (HandCategory.STRAIGHT, HandCategory.STRAIGHT_FLUSH):
            if self.name == "Royal Flush":
                return self.name
            return f"{self.name}, {top} high"
        if self.category is HandCategory.TWO_PAIR:
            return f"{self.name}, {_plural(self.kickers[0])} and {_plural(self.kickers[1])}"
        if self.category is HandCategory.FULL_HOUSE:
            return f"{self.name}, {_plural(self.kickers[0])} full of {_plural(self.kickers[1])}"
        if self.category in (HandCategory.FLUSH, HandCategory.HIGH_CARD):
            return f"{self.name}, {top} high"
        return f"{self.name}, {_plural(self.kickers[0])}"


def _plural(rank: int) -> str:
    name = RANK_NAMES[rank]
    return name + "es" if name.endswith("x") else name + "s"


def _straight_table(short_deck: bool) -> tuple[tuple[int, int], ...]:
    """``(high_card, rank_bitmask)`` for every straight, best first."""
    lowest = 10 if short_deck else 6
    table = [(high, sum(1 << r for r in range(high - 4, high + 1))) for high in range(14, lowest - 1, -1)]
    wheel = (14, 6, 7, 8, 9) if short_deck else (14, 2, 3, 4, 5)
    table.append((wheel[-1], sum(1 << r for r in wheel)))
    return tuple(table)


_STRAIGHTS = {False: _straight_table(False), True: _straight_table(True)}


def _straight_high(mask: int, short_deck: bool) -> int:
    for high, pattern in _STRAIGHTS[short_deck]:
        if mask & pattern == pattern:
            return high
    return 0


def _top_ranks(mask: int, count: int) -> tuple[int, ...]:
    ranks: list[int] = []
    rank = 14
    while rank >= 2 and len(ranks) < count:
        if mask >> rank & 1:
            ranks.append(rank)
        rank -= 1
    return tuple(ranks)


def rank_cards(ranks: Sequence[int], suits: Sequence[int], short_deck: bool = False) -> HandRank:
    """Score 5..7 cards given as parallel rank / suit-index sequences.

    No validation; this is the engine hot path.
    """
    strength = _SHORT_DECK_STRENGTH if short_deck else _HOLDEM_STRENGTH

    counts = [0] * 15
    suit_masks = [0, 0, 0, 0]
    rank_mask = 0
    for rank, suit in zip(ranks, suits):
        counts[rank] += 1
        bit = 1 << rank
        rank_mask |= bit
        suit_masks[suit] |= bit

    flush_mask = 0
    for suit in range(4):
        if suits.count(suit) >= 5:
            flush_mask = suit_masks[suit]
            break

    if flush_mask:
        high = _straight_high(flush_mask, short_deck)
        if high:
            category = HandCategory.STRAIGHT_FLUSH
            return HandRank(strength[category], (high,), category)

    quads: list[int] = []
    trips: list[int] = []
    pairs: list[int] = []
    for rank in range(14, 1, -1):
        count = counts[rank]
        if count == 4:
            quads.append(rank)
        elif count == 3:
            trips.append(rank)
        elif count == 2:
            pairs.append(rank)

    if quads:
        quad = quads[0]
        category = HandCategory.FOUR_OF_A_KIND
        return HandRank(strength[category], (quad,) + _top_ranks(rank_mask & ~(1 << quad), 1), category)

    full_house: HandRank | None = None
    if trips and (len(trips) > 1 or pairs):
        pair = max(trips[1] if len(trips) > 1 else 0, pairs[0] if pairs else 0)
        category = HandCategory.FULL_HOUSE
        full_house = HandRank(strength[category], (trips[0], pair), category)

    flush: HandRank | None = None
    if flush_mask:
        category = HandCategory.FLUSH
        flush = HandRank(strength[category], _top_ranks(flush_mask, 5), category)

    if full_house is not None or flush is not None:
        return max(hand for hand in (full_house, flush) if hand is not None)

    high = _straight_high(rank_mask, short_deck)
    if high:
        category = HandCategory.STRAIGHT
        return HandRank(strength[category], (high,), category)

    if trips:
        trip = trips[0]
        category = HandCategory.THREE_OF_A_KIND
        return HandRank(strength[category], (trip,) + _top_ranks(rank_mask & ~(1 << trip), 2), category)

    if len(pairs) >= 2:
        high_pair, low_pair = pairs[0], pairs[1]
        rest = rank_mask & ~(1 << high_pair) & ~(1 << low_pair)
        category = HandCategory.TWO_PAIR
        return HandRank(strength[category], (high_pair, low_pair) + _top_ranks(rest, 1), category)

    if pairs:
        pair = pairs[0]
        category = HandCategory.ONE_PAIR
        return HandRank(strength[category], (pair,) + _top_ranks(rank_mask & ~(1 << pair), 3), category)

    category = HandCategory.HIGH_CARD
    return HandRank(strength[category], _top_ranks(rank_mask, 5), category)


def _validate(cards: Sequence[Card]) -> None:
    if len(cards) < 5:
        raise InsufficientCards(len(cards))
    if len(cards) > 7:
        raise TooManyCards(len(cards))
    seen: set[Card] = set()
    for card in cards:
        if card in seen:
            raise DuplicateCard(card.notation)
        seen.add(card)


def evaluate_unchecked(cards: Sequence[Card], variant: GameVariant = GameVariant.TEXAS_HOLDEM) -> HandRank:
    return rank_cards(
        [card.rank for card in cards],
        [SUITS.index(card.suit) for card in cards],
        variant.uses_short_deck,
    )


def evaluate(cards: Sequence[Card], variant: GameVariant = GameVariant.TEXAS_HOLDEM) -> HandRank:
    """Return the rank of the best five-card hand among 5..7 *cards*.

    Raises:
        InsufficientCards: fewer than five cards.
        TooManyCards:      more than seven cards.
        DuplicateCard:     the same card appears twice.
    """
    _validate(cards)
    return evaluate_unchecked(cards, variant)


def best_five(
    cards: Sequence[Card],
    variant: GameVariant = GameVariant.TEXAS_HOLDEM,
) -> tuple[HandRank, tuple[Card, ...]]:
    """Find the best hand by scoring every five-card subset.

    Returns the winning rank together with the five cards that make it.
    """
    _validate(cards)
    return max(
        ((evaluate_unchecked(combo, variant), combo) for combo in combinations(cards, 5)),
        key=lambda scored: scored[0],
    )


def compare(a: Sequence[Card], b: Sequence[Card], variant: GameVariant = GameVariant.TEXAS_HOLDEM) -> int:
    """``1`` if *a* beats *b*, ``-1`` if it loses, ``0`` on a split."""
    rank_a = evaluate(a, variant)
    rank_b = evaluate(b, variant)
    return (rank_a > rank_b) - (rank_a < rank_b)
