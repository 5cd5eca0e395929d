"""Runtime configuration for the equity engine.

Every field reads its default through :data:`pokerodds.utils.odds_config.cfg`
at construction time (``env > config.yaml > built-in``).  Override
individual fields when constructing from code (e.g. in tests).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .odds_config import cfg

DEFAULT_ITERATIONS = 10_000
DEFAULT_ENUMERATION_THRESHOLD = 100_000
DEFAULT_PARALLEL_THRESHOLD = 5_000
DEFAULT_BATCH_SIZE = 2_048


@dataclass(slots=True)
class EngineConfig:
    """Tuning knobs for :class:`pokerodds.core.math_engine.SimulationEngine`.

    NOTE: all fields use ``default_factory`` so that environment variables
    are read at **instantiation** time, not at import time.  This keeps
    ``monkeypatch.setenv`` working in tests.

    Attributes:
        iterations:            Monte-Carlo trials when the caller gives none.
        enumeration_threshold: Largest runout count enumerated exhaustively.
        parallel_threshold:    Smallest trial count worth spreading over threads.
        workers:               Worker threads; ``0`` means one per CPU.
        batch_size:            Trials drawn per vectorised sampling batch.
        time_budget:           Wall-clock cap in seconds; ``0`` disables it.
        variant:               Default game variant name.
    """

    iterations: int = field(default_factory=lambda: cfg.get_int("engine.iterations", DEFAULT_ITERATIONS))
    enumeration_threshold: int = field(
        default_factory=lambda: cfg.get_int("engine.enumeration_threshold", DEFAULT_ENUMERATION_THRESHOLD)
    )
    parallel_threshold: int = field(
        default_factory=lambda: cfg.get_int("engine.parallel_threshold", DEFAULT_PARALLEL_THRESHOLD)
    )
    workers: int = field(default_factory=lambda: cfg.get_int("engine.workers", 0))
    batch_size: int = field(default_factory=lambda: cfg.get_int("engine.batch_size", DEFAULT_BATCH_SIZE))
    time_budget: float = field(default_factory=lambda: cfg.get_float("engine.time_budget", 0.0))
    variant: str = field(default_factory=lambda: cfg.get_str("engine.variant", "texas_holdem"))

    def __post_init__(self) -> None:
        self.iterations = max(1, int(self.iterations))
        self.enumeration_threshold = max(0, int(self.enumeration_threshold))
        self.parallel_threshold = max(1, int(self.parallel_threshold))
        self.workers = max(0, int(self.workers))
        self.batch_size = max(1, int(self.batch_size))
        self.time_budget = max(0.0, float(self.time_budget))

    def effective_workers(self) -> int:
        """Resolve ``workers=0`` to the CPU count."""
        if self.workers > 0:
            return self.workers
        return max(1, os.cpu_count() or 1)
