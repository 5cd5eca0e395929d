"""Win / tie / loss accounting and conversion to equity percentages.

Each worker owns an :class:`EquityTally` and records one showdown per
trial.  Tallies are merged with ``+`` once the workers finish; the merge is
a plain field-wise sum, so the final counts do not depend on how trials
were partitioned or in which order partial tallies are combined.

Split pots are tracked as integer counts keyed by the size of the tying
group.  The fractional tie share (``1 / group_size`` per split) is only
computed when results are produced, which keeps the merge exact.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from fractions import Fraction
from functools import reduce
from typing import Iterable, Sequence

from .errors import EquityConservationError
from .models import EquityResult

EPSILON = 1e-6


@dataclass(slots=True)
class PlayerTally:
    """Counters for a single player.

    Attributes:
        wins:   Trials won outright.
        ties:   Trials split with at least one other player.
        losses: Trials lost.
        splits: Number of ties per tying group size (``{2: 10, 3: 1}``).
    """

    wins: int = 0
    ties: int = 0
    losses: int = 0
    splits: Counter = field(default_factory=Counter)

    @property
    def tie_share(self) -> Fraction:
        return sum((Fraction(count, size) for size, count in self.splits.items()), Fraction(0))

    def __add__(self, other: "PlayerTally") -> "PlayerTally":
        return PlayerTally(
            wins=self.wins + other.wins,
            ties=self.ties + other.ties,
            losses=self.losses + other.losses,
            splits=self.splits + other.splits,
        )


@dataclass(slots=True)
class EquityTally:
    """Showdown counters for every player of one calculation."""

    players: list[PlayerTally]
    trials: int = 0

    @classmethod
    def empty(cls, player_count: int) -> "EquityTally":
        return cls(players=[PlayerTally() for _ in range(player_count)])

    def record(self, winners: Sequence[int]) -> None:
        """Apply one trial outcome given the indices of the best hands."""
        self.trials += 1
        group = len(winners)
        if group == 1:
            sole = winners[0]
            for index, player in enumerate(self.players):
                if index == sole:
                    player.wins += 1
                else:
                    player.losses += 1
            return
        for index, player in enumerate(self.players):
            if index in winners:
                player.ties += 1
                player.splits[group] += 1
            else:
                player.losses += 1

    def __add__(self, other: "EquityTally") -> "EquityTally":
        if len(self.players) != len(other.players):
            raise ValueError("Cannot merge tallies for different player counts")
        return EquityTally(
            players=[a + b for a, b in zip(self.players, other.players)],
            trials=self.trials + other.trials,
        )

    def to_results(self, hands: Sequence[str]) -> list[EquityResult]:
        results: list[EquityResult] = []
        for index, (player, hand) in enumerate(zip(self.players, hands)):
            share = player.tie_share
            equity = float(100 * (player.wins + share) / self.trials) if self.trials else 0.0
            results.append(
                EquityResult(
                    player_index=index,
                    hand=hand,
                    wins=player.wins,
                    ties=player.ties,
                    losses=player.losses,
                    tie_share=float(share),
                    equity=equity,
                )
            )
        return results


def merge(tallies: Iterable[EquityTally], player_count: int) -> EquityTally:
    """Sum partial tallies; an empty iterable yields an empty tally."""
    return reduce(lambda a, b: a + b, tallies, EquityTally.empty(player_count))


def find_winners(ranks: Sequence[object]) -> list[int]:
    """Indices of every player holding the maximal hand rank."""
    best = max(ranks)  # type: ignore[type-var]
    return [index for index, rank in enumerate(ranks) if rank == best]


def check_conservation(results: Sequence[EquityResult], tolerance: float = EPSILON) -> float:
    """Return the equity total, raising if it is not 100% within *tolerance*.

    A calculation with zero trials has nothing to conserve and is skipped.
    """
    total = sum(result.equity for result in results)
    if results and results[0].total == 0:
        return total
    if abs(total - 100.0) > 100.0 * tolerance:
        raise EquityConservationError(total)
    return total
