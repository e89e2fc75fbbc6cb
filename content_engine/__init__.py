"""Deterministic FAQ, product and comparison page synthesis."""
