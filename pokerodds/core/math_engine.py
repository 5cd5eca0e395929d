"""Showdown simulation engine: exact enumeration or Monte-Carlo sampling.

For every trial the missing board cards are drawn from the deck (all known
hole and board cards removed), each player's best hand is ranked from their
two hole cards plus the five board cards, and the outcome is recorded in an
:class:`~pokerodds.core.aggregator.EquityTally`.

Mode selection:
    If the number of possible runouts ``C(deck, missing)`` is at most
    ``enumeration_threshold`` every runout is evaluated once (exact, seed
    independent).  Otherwise ``iterations`` random runouts are sampled.

Work partitioning:
    Sampling is split into fixed-size chunks.  Chunk ``k`` always draws from
    the ``k``-th child of ``SeedSequence(seed)``, so a given seed reproduces
    the same counts whatever the number of worker threads.  Each chunk fills
    its own tally; tallies are summed once all chunks finish, which needs no
    locking.

Performance:
    With the default threshold, Hold'em flop and turn spots are always
    enumerated (at most 990 runouts) and preflop spots are sampled.  Worker
    threads share the GIL, so the thread pool mostly pays off when numpy
    batch draws dominate; results are identical either way.
"""

from __future__ import annotations

import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from itertools import combinations
from typing import Iterable, Iterator, Sequence

import numpy as np

from ..utils.config import EngineConfig
from .aggregator import EquityTally, find_winners, merge
from .cards import BOARD_SIZE, SUITS, Card, Deck
from .evaluator import rank_cards
from .models import GameVariant

_log = logging.getLogger("pokerodds.engine")


@dataclass(slots=True)
class SimulationReport:
    """Raw output of one engine run.

    Attributes:
        tally:      Merged win/tie/loss counters.
        iterations: Trials actually completed.
        exact:      ``True`` when every runout was enumerated.
        workers:    Worker threads used.
        chunks:     Number of independently processed work units.
    """

    tally: EquityTally
    iterations: int
    exact: bool
    workers: int
    chunks: int


def runouts(size: int, missing: int, firsts: Iterable[int]) -> Iterator[tuple[int, ...]]:
    """Sorted *missing*-subsets of ``range(size)`` whose lowest element is in *firsts*."""
    if missing == 0:
        yield ()
        return
    for first in firsts:
        for rest in combinations(range(first + 1, size), missing - 1):
            yield (first,) + rest


class _Showdown:
    """Pre-split rank / suit lists for one calculation (hot path helper)."""

    __slots__ = ("holes", "board_ranks", "board_suits", "deck_ranks", "deck_suits", "short_deck")

    def __init__(self, hands: Sequence[Sequence[Card]], board: Sequence[Card], deck: Deck) -> None:
        self.holes = [
            ([card.rank for card in hand], [SUITS.index(card.suit) for card in hand]) for hand in hands
        ]
        self.board_ranks = [card.rank for card in board]
        self.board_suits = [SUITS.index(card.suit) for card in board]
        self.deck_ranks = [card.rank for card in deck]
        self.deck_suits = [SUITS.index(card.suit) for card in deck]
        self.short_deck = deck.variant.uses_short_deck

    def winners(self, positions: Sequence[int]) -> list[int]:
        """Indices of the players holding the best hand for one runout."""
        board_ranks = self.board_ranks + [self.deck_ranks[p] for p in positions]
        board_suits = self.board_suits + [self.deck_suits[p] for p in positions]
        scores = [
            rank_cards(hole_ranks + board_ranks, hole_suits + board_suits, self.short_deck)
            for hole_ranks, hole_suits in self.holes
        ]
        return find_winners(scores)


class SimulationEngine:
    """Stateless equity simulator; safe to share between threads."""

    def __init__(
        self,
        variant: GameVariant = GameVariant.TEXAS_HOLDEM,
        config: EngineConfig | None = None,
    ) -> None:
        self.variant = variant
        self.config = config if config is not None else EngineConfig()

    @staticmethod
    def count_runouts(deck_size: int, missing: int) -> int:
        return math.comb(deck_size, missing)

    def should_enumerate(self, deck_size: int, missing: int) -> bool:
        return self.count_runouts(deck_size, missing) <= self.config.enumeration_threshold

    def _workers_for(self, trials: int) -> int:
        workers = self.config.effective_workers()
        if workers <= 1 or trials < self.config.parallel_threshold:
            return 1
        return workers

    def run(
        self,
        hands: Sequence[Sequence[Card]],
        board: Sequence[Card],
        iterations: int | None = None,
        *,
        seed: int | None = None,
        exact: bool | None = None,
        time_budget: float | None = None,
    ) -> SimulationReport:
        """Simulate the showdown for already validated *hands* and *board*.

        Args:
            hands:       Two hole cards per player.
            board:       Known community cards (0..5).
            iterations:  Monte-Carlo trials; defaults to the config value.
            seed:        Seed for the sampling path; ignored when exact.
            exact:       Force enumeration (``True``) or sampling (``False``);
                         ``None`` picks by the enumeration threshold.
            time_budget: Stop sampling after this many seconds; ``0`` disables
                         the cap and ``None`` uses the config value.

        Returns:
            :class:`SimulationReport` with the merged tally.
        """
        known = [card for hand in hands for card in hand] + list(board)
        deck = Deck.excluding(known, self.variant)
        missing = BOARD_SIZE - len(board)
        showdown = _Showdown(hands, board, deck)

        if exact is None:
            exact = self.should_enumerate(len(deck), missing)
        if exact:
            return self._enumerate(showdown, deck, missing, len(hands))

        trials = self.config.iterations if iterations is None else int(iterations)
        if trials < 1:
            raise ValueError(f"iterations must be a positive integer, got {iterations}")
        budget = self.config.time_budget if time_budget is None else max(0.0, float(time_budget))
        return self._sample(showdown, deck, missing, len(hands), trials, seed, budget)

    # ── Exact enumeration ─────────────────────────────────────────

    def _enumerate(self, showdown: _Showdown, deck: Deck, missing: int, players: int) -> SimulationReport:
        total = self.count_runouts(len(deck), missing)
        workers = self._workers_for(total)
        # chunks own disjoint sets of lowest positions
        firsts = range(len(deck) - missing + 1) if missing else range(1)
        chunks = max(1, min(workers, len(firsts)))
        _log.debug("Enumerating %d runouts over %d chunk(s)", total, chunks)

        def run_chunk(offset: int) -> EquityTally:
            tally = EquityTally.empty(players)
            for positions in runouts(len(deck), missing, firsts[offset::chunks]):
                tally.record(showdown.winners(positions))
            return tally

        tallies = self._map(run_chunk, range(chunks), workers)
        tally = merge(tallies, players)
        return SimulationReport(tally=tally, iterations=tally.trials, exact=True, workers=workers, chunks=chunks)

    # ── Monte-Carlo sampling ──────────────────────────────────────

    def _sample(
        self,
        showdown: _Showdown,
        deck: Deck,
        missing: int,
        players: int,
        trials: int,
        seed: int | None,
        time_budget: float,
    ) -> SimulationReport:
        batch_size = self.config.batch_size
        sizes = [batch_size] * (trials // batch_size)
        if trials % batch_size:
            sizes.append(trials % batch_size)
        seeds = np.random.SeedSequence(seed).spawn(len(sizes))
        workers = self._workers_for(trials)
        deadline = time.perf_counter() + time_budget if time_budget > 0 else None
        _log.debug(
            "Sampling %d trials in %d chunk(s) on %d worker(s), budget=%s",
            trials,
            len(sizes),
            workers,
            time_budget or "none",
        )

        def run_chunk(index: int) -> EquityTally:
            tally = EquityTally.empty(players)
            # the first chunk always completes one trial so a result exists
            guaranteed = 1 if index == 0 else 0
            if deadline is not None and guaranteed == 0 and time.perf_counter() >= deadline:
                return tally
            rng = np.random.default_rng(seeds[index])
            batch = deck.sample_batch(missing, sizes[index], rng)
            for positions in batch.tolist():
                if deadline is not None and tally.trials >= guaranteed and time.perf_counter() >= deadline:
                    break
                tally.record(showdown.winners(positions))
            return tally

        tallies = self._map(run_chunk, range(len(sizes)), workers)
        tally = merge(tallies, players)
        if tally.trials < trials:
            _log.info("Time budget reached after %d of %d trials", tally.trials, trials)
        return SimulationReport(
            tally=tally, iterations=tally.trials, exact=False, workers=workers, chunks=len(sizes)
        )

    @staticmethod
    def _map(func, items: range, workers: int) -> list[EquityTally]:
        if workers <= 1 or len(items) <= 1:
            return [func(item) for item in items]
        with ThreadPoolExecutor(max_workers=min(workers, len(items)), thread_name_prefix="pokerodds") as pool:
            return list(pool.map(func, items))
