"""Deterministic text helpers shared by question and block builders."""

from collections.abc import Sequence


def join_items(items: Sequence[str], conjunction: str = "and") -> str:
    """Join items as `a, b and c`."""
    values = [item for item in items if item]
    if not values:
        return ""
    if len(values) == 1:
        return values[0]
    return f"{', '.join(values[:-1])} {conjunction} {values[-1]}"


def format_price(amount: float, currency: str) -> str:
    return f"{currency} {amount:,.2f}"
