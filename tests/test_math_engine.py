from __future__ import annotations

from dataclasses import replace
from itertools import combinations

import pytest

from pokerodds.core.cards import parse_cards
from pokerodds.core.math_engine import SimulationEngine, runouts
from pokerodds.core.models import GameVariant
from pokerodds.utils.config import EngineConfig


def _hands(*notations: str) -> list[list]:
    return [parse_cards(notation) for notation in notations]


def test_mode_selection(engine_config: EngineConfig) -> None:
    engine = SimulationEngine(config=engine_config)
    assert engine.count_runouts(45, 2) == 990
    assert engine.should_enumerate(45, 2) is True
    assert engine.should_enumerate(48, 5) is False


def test_turn_enumerates_every_river(engine_config: EngineConfig) -> None:
    engine = SimulationEngine(config=engine_config)
    report = engine.run(_hands("AhAs", "KdKc"), parse_cards("2c3c4c5c"))
    assert report.exact is True
    assert report.iterations == 44
    assert report.tally.trials == 44


def test_flop_enumeration_ignores_seed(engine_config: EngineConfig) -> None:
    engine = SimulationEngine(config=engine_config)
    first = engine.run(_hands("AhKh", "QsQd"), parse_cards("2h7hTc"), seed=1)
    second = engine.run(_hands("AhKh", "QsQd"), parse_cards("2h7hTc"), seed=2)
    assert first.iterations == 990
    assert first.tally == second.tally


def test_sampling_runs_requested_iterations(engine_config: EngineConfig) -> None:
    engine = SimulationEngine(config=engine_config)
    report = engine.run(_hands("AhAs", "KdKc"), [], 1_234, seed=5)
    assert report.exact is False
    assert report.iterations == 1_234
    assert report.chunks == 3


def test_seed_reproduces_counts(engine_config: EngineConfig) -> None:
    engine = SimulationEngine(config=engine_config)
    first = engine.run(_hands("AhAs", "KdKc", "7c2d"), [], 1_500, seed=42)
    second = engine.run(_hands("AhAs", "KdKc", "7c2d"), [], 1_500, seed=42)
    assert first.tally == second.tally


def test_worker_count_does_not_change_results(engine_config: EngineConfig) -> None:
    sequential = SimulationEngine(config=engine_config)
    threaded = SimulationEngine(config=replace(engine_config, workers=4, parallel_threshold=1))
    hands = _hands("AhAs", "KdKc")
    a = sequential.run(hands, [], 3_000, seed=9)
    b = threaded.run(hands, [], 3_000, seed=9)
    assert b.workers == 4
    assert a.tally == b.tally


def test_parallel_enumeration_matches_sequential(engine_config: EngineConfig) -> None:
    sequential = SimulationEngine(config=engine_config)
    threaded = SimulationEngine(config=replace(engine_config, workers=3, parallel_threshold=1))
    hands = _hands("AhKh", "QsQd", "9c9d")
    board = parse_cards("2h7hTc")
    a = sequential.run(hands, board)
    b = threaded.run(hands, board)
    assert b.chunks == 3
    assert a.tally == b.tally


def test_time_budget_stops_early_but_completes_one_trial(engine_config: EngineConfig) -> None:
    engine = SimulationEngine(config=engine_config)
    report = engine.run(_hands("AhAs", "KdKc"), [], 50_000, seed=1, time_budget=1e-9)
    assert 1 <= report.iterations < 50_000
    assert report.tally.trials == report.iterations


def test_forced_sampling_on_complete_board(engine_config: EngineConfig) -> None:
    engine = SimulationEngine(config=engine_config)
    report = engine.run(_hands("AhAs", "KdKc"), parse_cards("2c7d9hJsQc"), 100, exact=False, seed=3)
    assert report.iterations == 100
    assert report.tally.players[0].wins == 100


def test_forced_enumeration(engine_config: EngineConfig) -> None:
    engine = SimulationEngine(config=replace(engine_config, enumeration_threshold=0))
    report = engine.run(_hands("AhAs", "KdKc"), parse_cards("2c3c4c5c"), exact=True)
    assert report.exact is True
    assert report.iterations == 44


def test_invalid_iterations(engine_config: EngineConfig) -> None:
    engine = SimulationEngine(config=engine_config)
    with pytest.raises(ValueError):
        engine.run(_hands("AhAs", "KdKc"), [], 0)


def test_short_deck_uses_36_card_deck(engine_config: EngineConfig) -> None:
    engine = SimulationEngine(GameVariant.SHORT_DECK, engine_config)
    report = engine.run(_hands("AhAs", "KdKc"), parse_cards("6c7c8c9d"))
    # 36 - 8 known cards
    assert report.iterations == 28


def test_zero_time_budget_disables_configured_budget(engine_config: EngineConfig) -> None:
    engine = SimulationEngine(config=replace(engine_config, time_budget=1e-9))
    report = engine.run(_hands("AhAs", "KdKc"), [], 20_000, seed=1, time_budget=0)
    assert report.iterations == 20_000
    capped = engine.run(_hands("AhAs", "KdKc"), [], 20_000, seed=1)
    assert capped.iterations < 20_000


def test_runout_chunks_partition_every_combination() -> None:
    firsts = range(10 - 3 + 1)
    chunks = [list(runouts(10, 3, firsts[offset::4])) for offset in range(4)]
    flat = [positions for chunk in chunks for positions in chunk]
    assert len(flat) == len(set(flat))
    assert set(flat) == set(combinations(range(10), 3))
    assert list(runouts(5, 0, range(1))) == [()]


def test_enumeration_with_more_workers_than_needed(engine_config: EngineConfig) -> None:
    sequential = SimulationEngine(config=engine_config)
    threaded = SimulationEngine(config=replace(engine_config, workers=8, parallel_threshold=1))
    hands = _hands("AhAs", "KdKc")
    board = parse_cards("2c3c4c5c")
    a = sequential.run(hands, board)
    b = threaded.run(hands, board)
    assert b.iterations == 44
    assert a.tally == b.tally
