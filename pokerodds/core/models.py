"""Value types shared by the engine and the calculator facade."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class GameVariant(str, Enum):
    """Supported game variants.

    ``SHORT_DECK`` plays with 36 cards (six through ace); a flush beats a
    full house and A-6-7-8-9 is the lowest straight.
    """

    TEXAS_HOLDEM = "texas_holdem"
    SHORT_DECK = "short_deck"

    @property
    def uses_short_deck(self) -> bool:
        return self is GameVariant.SHORT_DECK

    @classmethod
    def parse(cls, value: "GameVariant | str") -> "GameVariant":
        """Accept an enum member, its value or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        token = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        for member in cls:
            if token in (member.value, member.name.lower()):
                return member
        if token in {"holdem", "nlhe", "texas"}:
            return cls.TEXAS_HOLDEM
        if token in {"6plus", "six_plus", "shortdeck"}:
            return cls.SHORT_DECK
        raise ValueError(f"Unknown game variant: {value!r}")


@dataclass(frozen=True, slots=True)
class EquityResult:
    """Showdown statistics for one player.

    Attributes:
        player_index: Position of the player in the input list.
        hand:         Hole cards in concatenated notation (``"AhKs"``).
        wins:         Trials won outright.
        ties:         Trials that ended in a split including this player.
        losses:       Trials lost.
        tie_share:    Sum of ``1 / group_size`` over every tie trial.
        equity:       Pot share in percent, ``[0, 100]``.
    """

    player_index: int
    hand: str
    wins: int
    ties: int
    losses: int
    tie_share: float
    equity: float

    @property
    def total(self) -> int:
        return self.wins + self.ties + self.losses

    @property
    def win_rate(self) -> float:
        return self.wins / self.total if self.total else 0.0

    @property
    def tie_rate(self) -> float:
        return self.ties / self.total if self.total else 0.0

    def equity_percentage(self) -> str:
        return f"{self.equity:.2f}%"

    def as_dict(self) -> dict[str, Any]:
        return {
            "player_index": self.player_index,
            "hand": self.hand,
            "equity": self.equity,
            "wins": self.wins,
            "ties": self.ties,
            "losses": self.losses,
            "tie_share": self.tie_share,
        }


@dataclass(frozen=True, slots=True)
class OddsResult:
    """Immutable outcome of one calculator call.

    Attributes:
        equities:       One :class:`EquityResult` per input player, same order.
        iterations:     Trials actually run (enumerated boards when ``exact``).
        execution_time: Wall-clock seconds spent in the call.
        game_variant:   Variant the odds were computed for.
        board:          Known board cards at calculation time.
        exact:          ``True`` when every runout was enumerated.
    """

    equities: tuple[EquityResult, ...]
    iterations: int
    execution_time: float
    game_variant: GameVariant = GameVariant.TEXAS_HOLDEM
    board: str = ""
    exact: bool = False
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def equity_of(self, player_index: int) -> float:
        return self.equities[player_index].equity

    def describe(self) -> str:
        mode = "exact" if self.exact else "monte-carlo"
        lines = [
            f"Poker Odds Result ({self.game_variant.value}, {mode}):",
            f"Board: {self.board or '-'}",
            f"Iterations: {self.iterations}, Time: {self.execution_time * 1000:.2f}ms",
            "",
        ]
        for equity in self.equities:
            lines.append(f"Player {equity.player_index + 1} ({equity.hand}): {equity.equity_percentage()}")
            lines.append(f"  Wins: {equity.wins}, Ties: {equity.ties}, Losses: {equity.losses}")
        return "\n".join(lines)

    def as_dict(self) -> dict[str, Any]:
        """Snapshot suitable for persisting next to a recorded hand."""
        return {
            "game_variant": self.game_variant.value,
            "board": self.board,
            "iterations": self.iterations,
            "execution_time": self.execution_time,
            "exact": self.exact,
            "equities": [equity.as_dict() for equity in self.equities],
        }
