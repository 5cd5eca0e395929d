"""Card values, notation parsing and the deck abstraction.

Maps the standard 52-card deck to a flat ``[0, 51]`` integer space which
doubles as the stable base ordering of every :class:`Deck`.

Encoding: ``index = rank_idx * 4 + suit_idx``
where ``RANKS = '23456789TJQKA'`` and ``SUITS = 'cdhs'``.

Sampling never touches a module-level random generator; callers inject a
:class:`numpy.random.Generator` so runs are reproducible from a seed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from itertools import combinations
from typing import Iterable, Iterator, Sequence

import numpy as np

from .errors import InvalidNotation
from .models import GameVariant

RANKS = "23456789TJQKA"
"""Ordered rank characters (``2``–``A``). Index position is the rank id."""

SUITS = "cdhs"
"""Ordered suit characters (clubs, diamonds, hearts, spades)."""

RANK_NAMES: dict[int, str] = {
    2: "Two", 3: "Three", 4: "Four", 5: "Five", 6: "Six", 7: "Seven",
    8: "Eight", 9: "Nine", 10: "Ten", 11: "Jack", 12: "Queen", 13: "King", 14: "Ace",
}

SUIT_SYMBOLS: dict[str, str] = {"c": "♣", "d": "♦", "h": "♥", "s": "♠"}

SHORT_DECK_MIN_RANK = 6

BOARD_SIZE = 5

_SEPARATORS = re.compile(r"[\s,;|]+")


@dataclass(frozen=True, slots=True, order=False)
class Card:
    """A single playing card.

    Attributes:
        rank:       Numeric rank, ``2`` through ``14`` (ace high).
        suit:       Suit character, one of ``c d h s``.
        confidence: Recognition confidence carried through from the caller;
                    ignored by equality, hashing and all equity math.
    """

    rank: int
    suit: str
    confidence: float = field(default=1.0, compare=False, hash=False)

    def __post_init__(self) -> None:
        if not 2 <= self.rank <= 14:
            raise InvalidNotation(self.rank, "rank must be between 2 and 14")
        if self.suit not in SUITS:
            raise InvalidNotation(self.suit, "suit must be one of 'cdhs'")

    @property
    def index(self) -> int:
        return (self.rank - 2) * len(SUITS) + SUITS.index(self.suit)

    @property
    def notation(self) -> str:
        return f"{RANKS[self.rank - 2]}{self.suit}"

    @property
    def display_name(self) -> str:
        return f"{RANKS[self.rank - 2]}{SUIT_SYMBOLS[self.suit]}"

    def is_valid_for(self, variant: GameVariant) -> bool:
        if variant.uses_short_deck:
            return self.rank >= SHORT_DECK_MIN_RANK
        return True

    def __str__(self) -> str:
        return self.notation

    def __repr__(self) -> str:
        return f"Card({self.notation!r})"


_DECK: tuple[Card, ...] = tuple(Card(rank, suit) for rank in range(2, 15) for suit in SUITS)


# ── Index encoding ────────────────────────────────────────────────


def card_from_index(index: int) -> Card:
    """Return the card at position *index* of the base ordering."""
    if not 0 <= index <= 51:
        raise ValueError(f"Card index out of range [0, 51]: {index}")
    return _DECK[index]


# ── Parsing ───────────────────────────────────────────────────────


def parse_card(notation: str, confidence: float = 1.0) -> Card:
    """Parse a card such as ``"Ah"``, ``"td"`` or ``"10s"``.

    Raises :class:`InvalidNotation` for anything else.
    """
    if not isinstance(notation, str):
        raise InvalidNotation(notation, "not a string")
    cleaned = notation.strip()
    if cleaned.startswith("10"):
        cleaned = "T" + cleaned[2:]
    if len(cleaned) != 2:
        raise InvalidNotation(notation)
    rank_char, suit_char = cleaned[0].upper(), cleaned[1].lower()
    if rank_char not in RANKS:
        raise InvalidNotation(notation, f"unknown rank {cleaned[0]!r}")
    if suit_char not in SUITS:
        raise InvalidNotation(notation, f"unknown suit {cleaned[1]!r}")
    card = _DECK[RANKS.index(rank_char) * len(SUITS) + SUITS.index(suit_char)]
    if confidence != 1.0:
        return Card(card.rank, card.suit, confidence)
    return card


def _tokenize(notation: str) -> list[str]:
    """Split a concatenated card string into 2- or 3-character tokens."""
    compact = _SEPARATORS.sub("", notation)
    tokens: list[str] = []
    i = 0
    while i < len(compact):
        width = 3 if compact.startswith("10", i) else 2
        token = compact[i : i + width]
        if len(token) != width:
            raise InvalidNotation(notation, f"dangling characters {token!r}")
        tokens.append(token)
        i += width
    return tokens


def parse_cards(notation: str | Iterable[str]) -> list[Card]:
    """Parse ``"AhKs"``, ``"7d 9d Ts"`` or ``["Ah", "Ks"]`` into cards."""
    if isinstance(notation, str):
        return [parse_card(token) for token in _tokenize(notation)]
    cards: list[Card] = []
    for item in notation:
        if isinstance(item, Card):
            cards.append(item)
        elif isinstance(item, str):
            cards.extend(parse_card(token) for token in _tokenize(item))
        else:
            raise InvalidNotation(item, "not a string")
    return cards


def format_cards(cards: Iterable[Card]) -> str:
    """Render cards as concatenated canonical notation (``"AhKs"``)."""
    return "".join(card.notation for card in cards)


def street_from_board(board: Sequence[object]) -> str:
    """Infer the current street from the number of community cards."""
    count = len(board)
    if count >= 5:
        return "river"
    if count == 4:
        return "turn"
    if count >= 3:
        return "flop"
    return "preflop"


def full_deck(variant: GameVariant = GameVariant.TEXAS_HOLDEM) -> list[Card]:
    """Every card of *variant* in base order (rank-major, suit-minor)."""
    return [card for card in _DECK if card.is_valid_for(variant)]


@dataclass(frozen=True, slots=True)
class PlayerHand:
    """Two hole cards bound to a seat; card order does not matter."""

    player_index: int
    cards: tuple[Card, ...]

    @property
    def notation(self) -> str:
        return format_cards(self.cards)


@dataclass(frozen=True, slots=True)
class Board:
    """Known community cards, revealed left to right."""

    cards: tuple[Card, ...] = ()

    @property
    def notation(self) -> str:
        return format_cards(self.cards)

    @property
    def street(self) -> str:
        return street_from_board(self.cards)

    @property
    def missing(self) -> int:
        """Cards still to come before the river."""
        return BOARD_SIZE - len(self.cards)

    def prefix(self, size: int) -> "Board":
        return Board(self.cards[:size])


# ── Deck ──────────────────────────────────────────────────────────


class Deck:
    """Remaining cards once the known hole and board cards are removed.

    The deck never changes after construction.  Draws return new lists and
    leave the deck untouched, so one deck can be shared read-only by any
    number of workers.
    """

    __slots__ = ("_cards", "variant")

    def __init__(self, cards: Iterable[Card], variant: GameVariant = GameVariant.TEXAS_HOLDEM) -> None:
        self._cards: tuple[Card, ...] = tuple(cards)
        self.variant = variant

    @classmethod
    def excluding(
        cls,
        used: Iterable[Card],
        variant: GameVariant = GameVariant.TEXAS_HOLDEM,
    ) -> "Deck":
        blocked = set(used)
        return cls((card for card in full_deck(variant) if card not in blocked), variant)

    @property
    def cards(self) -> tuple[Card, ...]:
        return self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __contains__(self, card: object) -> bool:
        return card in self._cards

    def __repr__(self) -> str:
        return f"Deck({len(self)} cards, {self.variant.value})"

    def _check_draw(self, n: int) -> None:
        if n < 0:
            raise ValueError(f"Cannot draw a negative number of cards: {n}")
        if n > len(self._cards):
            raise ValueError(f"Not enough cards left in deck: need {n}, have {len(self._cards)}")

    def sample_without_replacement(self, n: int, rng: np.random.Generator) -> list[Card]:
        """Draw *n* distinct cards; every n-subset is equally likely."""
        self._check_draw(n)
        if n == 0:
            return []
        picks = rng.choice(len(self._cards), size=n, replace=False)
        return [self._cards[int(i)] for i in picks]

    def sample_batch(self, n: int, trials: int, rng: np.random.Generator) -> np.ndarray:
        """Draw *trials* independent n-subsets as deck positions.

        Each row holds the positions of the *n* smallest keys out of
        ``len(deck)`` iid uniform keys, which is a uniformly random subset.
        Returns an ``int`` array of shape ``(trials, n)``.
        """
        self._check_draw(n)
        if n == 0 or trials <= 0:
            return np.empty((max(trials, 0), n), dtype=np.intp)
        keys = rng.random((trials, len(self._cards)))
        if n == len(self._cards):
            return np.argsort(keys, axis=1)
        return np.argpartition(keys, n - 1, axis=1)[:, :n]

    def combinations(self, n: int) -> Iterator[tuple[Card, ...]]:
        """Every n-subset of the deck in lexicographic base order."""
        self._check_draw(n)
        return combinations(self._cards, n)
