"""Tests for tools.equity_tool — the public odds calculator."""

from __future__ import annotations

from dataclasses import replace

import pytest

from pokerodds import calculate as top_level_calculate
from pokerodds.core.errors import (
    DuplicateCardAcrossInputs,
    InvalidBoardNotation,
    InvalidCardForVariant,
    InvalidHandNotation,
    InvalidNotation,
    InvalidPlayerCount,
    PokerOddsError,
)
from pokerodds.core.cards import format_cards, full_deck, parse_cards
from pokerodds.core.models import GameVariant
from pokerodds.tools.equity_tool import (
    OddsCalculator,
    calculate,
    calculate_postflop,
    calculate_preflop,
    parse_board,
    street_progression,
)
from pokerodds.utils.config import EngineConfig


# ── Showdown properties ───────────────────────────────────────────


class TestProperties:
    def test_equity_conservation(self, engine_config: EngineConfig) -> None:
        spots = [
            (["AhAs", "KdKc"], None),
            (["AhKh", "QsQd", "9c8c"], "2h7hTc"),
            (["AhAs", "KdKc"], "2c3c4c5c"),
            (["AhKd", "AsKc"], "2c3c4c5c6c"),
        ]
        for players, board in spots:
            result = calculate(players, board, iterations=1_000, seed=7, config=engine_config)
            assert sum(eq.equity for eq in result.equities) == pytest.approx(100.0)
            for eq in result.equities:
                assert eq.wins + eq.ties + eq.losses == result.iterations

    def test_heads_up_symmetry(self, engine_config: EngineConfig) -> None:
        forward = calculate(["AhAs", "KdKc"], None, iterations=2_000, seed=11, config=engine_config)
        swapped = calculate(["KdKc", "AhAs"], None, iterations=2_000, seed=11, config=engine_config)
        assert forward.equities[0].equity == swapped.equities[1].equity
        assert forward.equities[1].equity == swapped.equities[0].equity
        assert forward.equities[0].wins == swapped.equities[1].wins
        assert forward.equities[0].ties == swapped.equities[1].ties

    def test_determinism_under_full_enumeration(self, engine_config: EngineConfig) -> None:
        results = [
            calculate(["AhAs", "KdKc"], "2c3c4c5c", seed=seed, config=engine_config) for seed in (None, 1, 2)
        ]
        assert all(result.exact for result in results)
        assert {result.iterations for result in results} == {44}
        assert len({result.equities for result in results}) == 1

    def test_dominance(self, engine_config: EngineConfig) -> None:
        result = calculate(["AsAh", "2c7d"], None, iterations=2_000, seed=3, config=engine_config)
        assert result.equities[0].equity > 50.0
        assert result.equities[0].equity > result.equities[1].equity

    def test_board_straight_flush_ties(self, engine_config: EngineConfig) -> None:
        result = calculate(["AhKd", "AsKc"], "2c3c4c5c6c", config=engine_config)
        assert result.iterations >= 1
        for eq in result.equities:
            assert eq.ties == result.iterations
            assert eq.wins == 0
            assert eq.losses == 0
            assert eq.equity == pytest.approx(50.0)

    def test_duplicate_rejection(self, engine_config: EngineConfig) -> None:
        with pytest.raises(DuplicateCardAcrossInputs) as excinfo:
            calculate(["AhAs", "AhKd"], None, config=engine_config)
        assert excinfo.value.cards == ["Ah"]

    def test_iteration_count_honesty(self, engine_config: EngineConfig) -> None:
        result = calculate(["AhAs", "KdKc"], None, iterations=1_500, seed=2, config=engine_config)
        assert result.exact is False
        assert result.iterations == 1_500

    def test_river_is_decided(self, engine_config: EngineConfig) -> None:
        result = calculate(["AhAs", "KdKc"], "2c7d9hJsQc", config=engine_config)
        assert result.iterations == 1
        assert result.equities[0].equity == 100.0
        assert result.equities[1].equity == 0.0


# ── Validation ────────────────────────────────────────────────────


class TestValidation:
    def test_single_player(self, engine_config: EngineConfig) -> None:
        with pytest.raises(InvalidPlayerCount):
            calculate(["AhAs"], config=engine_config)

    def test_too_many_players(self, engine_config: EngineConfig) -> None:
        deck = full_deck()
        players = [format_cards(deck[2 * i : 2 * i + 2]) for i in range(24)]
        with pytest.raises(InvalidPlayerCount, match="Too many players"):
            calculate(players, config=engine_config)

    def test_bad_hand_notation(self, engine_config: EngineConfig) -> None:
        with pytest.raises(InvalidHandNotation):
            calculate(["AhXs", "KdKc"], config=engine_config)

    def test_hand_with_wrong_card_count(self, engine_config: EngineConfig) -> None:
        with pytest.raises(InvalidHandNotation, match="expected 2 cards"):
            calculate(["AhAsAd", "KdKc"], config=engine_config)

    def test_bad_board_notation(self, engine_config: EngineConfig) -> None:
        with pytest.raises(InvalidBoardNotation):
            calculate(["AhAs", "KdKc"], "2c3c4", config=engine_config)

    @pytest.mark.parametrize("board", ["2c", "2c3c", "2c3c4c5c6c7c"])
    def test_board_with_wrong_card_count(self, board: str, engine_config: EngineConfig) -> None:
        with pytest.raises(InvalidBoardNotation):
            calculate(["AhAs", "KdKc"], board, config=engine_config)

    def test_duplicate_between_hand_and_board(self, engine_config: EngineConfig) -> None:
        with pytest.raises(DuplicateCardAcrossInputs):
            calculate(["AhAs", "KdKc"], "Kd2c3c", config=engine_config)

    def test_error_hierarchy(self) -> None:
        assert issubclass(InvalidHandNotation, InvalidNotation)
        assert issubclass(InvalidBoardNotation, InvalidNotation)
        assert issubclass(DuplicateCardAcrossInputs, PokerOddsError)
        assert issubclass(PokerOddsError, ValueError)

    def test_short_deck_rejects_low_cards(self, engine_config: EngineConfig) -> None:
        with pytest.raises(InvalidCardForVariant):
            calculate(["AhAs", "5d5c"], variant="short_deck", config=engine_config)

    def test_non_positive_iterations(self, engine_config: EngineConfig) -> None:
        with pytest.raises(ValueError):
            OddsCalculator(iterations=0, config=engine_config)


# ── Inputs and outputs ────────────────────────────────────────────


class TestCalculator:
    def test_pairs_of_notations_and_list_board(self, engine_config: EngineConfig) -> None:
        a = calculate([["Ah", "As"], ["Kd", "Kc"]], ["2c", "3c", "4c", "5c"], config=engine_config)
        b = calculate(["AhAs", "KdKc"], "2c3c4c5c", config=engine_config)
        assert a.equities == b.equities

    def test_result_snapshot(self, engine_config: EngineConfig) -> None:
        result = calculate(["AhAs", "KdKc"], "2c3c4c5c", config=engine_config)
        snapshot = result.as_dict()
        assert snapshot["game_variant"] == "texas_holdem"
        assert snapshot["board"] == "2c3c4c5c"
        assert snapshot["iterations"] == 44
        assert snapshot["exact"] is True
        assert [eq["hand"] for eq in snapshot["equities"]] == ["AhAs", "KdKc"]
        assert result.execution_time >= 0.0

    def test_describe(self, engine_config: EngineConfig) -> None:
        text = calculate(["AhAs", "KdKc"], "2c3c4c5c", config=engine_config).describe()
        assert "Player 1 (AhAs)" in text
        assert "Iterations: 44" in text

    def test_result_is_immutable(self, engine_config: EngineConfig) -> None:
        result = calculate(["AhAs", "KdKc"], "2c3c4c5c", config=engine_config)
        with pytest.raises(AttributeError):
            result.iterations = 1  # type: ignore[misc]

    def test_calculator_instance_reuse(self, engine_config: EngineConfig) -> None:
        calculator = OddsCalculator(GameVariant.TEXAS_HOLDEM, iterations=800, config=engine_config)
        first = calculator.calculate(["AhAs", "KdKc"], seed=4)
        second = calculator.calculate(["AhAs", "KdKc"], seed=4)
        assert first.equities == second.equities
        assert first.iterations == 800

    def test_calculate_cards(self, engine_config: EngineConfig) -> None:
        calculator = OddsCalculator(config=engine_config)
        result = calculator.calculate_cards([parse_cards("AhAs"), parse_cards("KdKc")], parse_cards("2c3c4c5c"))
        assert result.iterations == 44

    def test_short_deck(self, engine_config: EngineConfig) -> None:
        result = calculate(["AhKh", "QsQd"], "6h7hTc", variant=GameVariant.SHORT_DECK, config=engine_config)
        assert result.game_variant is GameVariant.SHORT_DECK
        # 36 - 7 known cards, two to come
        assert result.iterations == 406
        assert sum(eq.equity for eq in result.equities) == pytest.approx(100.0)

    def test_multiway_tie_credit_is_split(self, engine_config: EngineConfig) -> None:
        result = calculate(["2h3d", "2s3c", "4h4d"], "AhKsQdJcTs", config=engine_config)
        assert [eq.ties for eq in result.equities] == [1, 1, 1]
        for eq in result.equities:
            assert eq.equity == pytest.approx(100 / 3)

    def test_zero_time_budget_runs_every_iteration(self, engine_config: EngineConfig) -> None:
        config = replace(engine_config, time_budget=1e-9)
        result = calculate(["AhAs", "KdKc"], None, iterations=20_000, seed=1, config=config, time_budget=0)
        assert result.iterations == 20_000

    def test_variant_defaults_to_config(self, engine_config: EngineConfig) -> None:
        config = replace(engine_config, variant="short_deck")
        result = calculate(["AhKh", "QsQd"], "6h7hTc", config=config)
        assert result.game_variant is GameVariant.SHORT_DECK
        assert result.iterations == 406

    def test_top_level_export(self, engine_config: EngineConfig) -> None:
        assert top_level_calculate is calculate


# ── Conveniences ──────────────────────────────────────────────────


class TestConveniences:
    def test_preflop_and_postflop(self, engine_config: EngineConfig) -> None:
        pre = calculate_preflop(["AhAs", "KdKc"], iterations=600, seed=1, config=engine_config)
        post = calculate_postflop(["AhAs", "KdKc"], "2c3c4c", config=engine_config)
        assert pre.board == ""
        assert post.board == "2c3c4c"
        assert post.exact is True

    def test_street_progression(self, engine_config: EngineConfig) -> None:
        progression = street_progression(
            ["AhAs", "KdKc"], "2c3c4c5c6c", iterations=600, seed=1, config=engine_config
        )
        assert [street for street, _ in progression] == ["preflop", "flop", "turn", "river"]
        assert [len(parse_board(result.board)) for _, result in progression] == [0, 3, 4, 5]
        river = progression[-1][1]
        assert river.equities[0].ties == river.iterations

    def test_street_progression_stops_at_known_board(self, engine_config: EngineConfig) -> None:
        progression = street_progression(["AhAs", "KdKc"], "2c3c4c", iterations=600, seed=1, config=engine_config)
        assert [street for street, _ in progression] == ["preflop", "flop"]
