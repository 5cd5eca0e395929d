from __future__ import annotations

import os
import sys

import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from pokerodds.utils.config import EngineConfig


@pytest.fixture
def engine_config() -> EngineConfig:
    """Deterministic single-threaded config independent of env / config.yaml."""
    return EngineConfig(
        iterations=2_000,
        enumeration_threshold=100_000,
        parallel_threshold=5_000,
        workers=1,
        batch_size=512,
        time_budget=0.0,
        variant="texas_holdem",
    )
