"""Poker equity engine: exact enumeration or Monte-Carlo showdown odds."""

from .core.cards import Board, Card, Deck, PlayerHand, format_cards, parse_card, parse_cards
from .core.errors import (
    DuplicateCard,
    DuplicateCardAcrossInputs,
    InsufficientCards,
    InvalidBoardNotation,
    InvalidCardForVariant,
    InvalidHandNotation,
    InvalidNotation,
    InvalidPlayerCount,
    PokerOddsError,
)
from .core.evaluator import HandCategory, HandRank, evaluate
from .core.models import EquityResult, GameVariant, OddsResult
from .tools.equity_tool import OddsCalculator, calculate, street_progression

__version__ = "0.1.0"

__all__ = [
    "Board",
    "Card",
    "Deck",
    "PlayerHand",
    "format_cards",
    "parse_card",
    "parse_cards",
    "DuplicateCard",
    "DuplicateCardAcrossInputs",
    "InsufficientCards",
    "InvalidBoardNotation",
    "InvalidCardForVariant",
    "InvalidHandNotation",
    "InvalidNotation",
    "InvalidPlayerCount",
    "PokerOddsError",
    "HandCategory",
    "HandRank",
    "evaluate",
    "EquityResult",
    "GameVariant",
    "OddsResult",
    "OddsCalculator",
    "calculate",
    "street_progression",
]
