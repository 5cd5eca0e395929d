"""Exception taxonomy for the equity engine.

Every failure raised by :mod:`pokerodds` is a caller input error or an
internal invariant violation.  None of them is transient, so nothing in the
package retries.  All errors derive from :class:`PokerOddsError`, which is a
``ValueError`` so generic ``except ValueError`` handlers keep working.
"""

from __future__ import annotations

from typing import Iterable


class PokerOddsError(ValueError):
    """Base class for every error raised by the engine."""


# ── Notation ──────────────────────────────────────────────────────


class InvalidNotation(PokerOddsError):
    """A card string is not a valid rank followed by a valid suit."""

    def __init__(self, notation: object, reason: str = "") -> None:
        self.notation = notation
        message = f"Invalid card notation: {notation!r}. Use format like 'Ah', 'Ks', 'Td'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidHandNotation(InvalidNotation):
    """A player's hole-card string does not describe exactly two cards."""


class InvalidBoardNotation(InvalidNotation):
    """The board string does not describe 0, 3, 4 or 5 cards."""


# ── Evaluator invariants ──────────────────────────────────────────


class EvaluationError(PokerOddsError):
    """The evaluator was handed an impossible card set."""


class InsufficientCards(EvaluationError):
    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Need at least 5 cards to evaluate a hand, got {count}")


class TooManyCards(EvaluationError):
    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Cannot evaluate more than 7 cards, got {count}")


class DuplicateCard(EvaluationError):
    def __init__(self, card: str) -> None:
        self.card = card
        super().__init__(f"Duplicate card in evaluated hand: {card}")


# ── Calculator input validation ───────────────────────────────────


class InvalidPlayerCount(PokerOddsError):
    def __init__(self, count: int, maximum: int | None = None) -> None:
        self.count = count
        if maximum is not None and count > maximum:
            message = f"Too many players for this deck: {count} (max {maximum})"
        else:
            message = f"Need at least 2 players, got {count}"
        super().__init__(message)


class DuplicateCardAcrossInputs(PokerOddsError):
    """The same physical card was assigned twice across hands and board."""

    def __init__(self, cards: Iterable[str]) -> None:
        self.cards = sorted(set(cards))
        super().__init__(f"Duplicate cards found: {', '.join(self.cards)}")


class InvalidCardForVariant(PokerOddsError):
    def __init__(self, card: str, variant: str) -> None:
        self.card = card
        self.variant = variant
        super().__init__(f"Card {card} is not part of the {variant} deck")


class EquityConservationError(PokerOddsError):
    """Player equities do not sum to 100%; indicates an aggregation bug."""

    def __init__(self, total: float) -> None:
        self.total = total
        super().__init__(f"Player equities sum to {total:.9f}%, expected 100%")
