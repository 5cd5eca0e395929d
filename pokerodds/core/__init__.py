"""Card model, hand evaluator, simulation engine and equity aggregation."""
