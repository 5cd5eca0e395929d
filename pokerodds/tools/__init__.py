"""Caller-facing tools built on the core engine."""

from .equity_tool import OddsCalculator, calculate, calculate_postflop, calculate_preflop, street_progression

__all__ = ["OddsCalculator", "calculate", "calculate_postflop", "calculate_preflop", "street_progression"]
