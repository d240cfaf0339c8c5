"""Text rendering helpers for report output."""

from ledgerkit.domain.entities import BalanceSide, Direction
from ledgerkit.domain.money import Money


def format_money(amount: Money) -> str:
    """Amount with thousands separators, e.g. "-1,234.50"."""
    return f"{amount.to_decimal():,.{amount.scale}f}"


def format_balance(amount: Money, direction: Direction) -> str:
    """Balance as side label plus magnitude, e.g. "借 1,000.00" or "平 0.00"."""
    side = BalanceSide.of(amount, direction)
    return f"{side.label} {format_money(amount.abs())}"

