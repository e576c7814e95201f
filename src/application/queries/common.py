"""Helpers shared by the query modules."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero (22.5 -> 23), unlike the built-in round()."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def name_key(name: str) -> tuple[str, str]:
    """Sort key approximating a default locale compare.

    Case-insensitive first ("apple" < "Tomato"); on a case-only tie the
    lowercase spelling sorts first ("tomato" < "Tomato").
    """
    return name.casefold(), name.swapcase()
