"""Amount parsing utilities."""

import re

from ledgerkit.domain.money import DEFAULT_SCALE, Money

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥]")


def parse_money(amount_str: str, scale: int = DEFAULT_SCALE) -> Money:
    """Parse a user-entered amount into Money.

    Handles various formats:
    - "123.45"
    - "¥123.45" / "$123.45"
    - "-1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string
        scale: Number of minor-unit digits

    Returns:
        Money amount

    Raises:
        PrecisionOverflow: If the amount has more fractional digits than ``scale``
        ValidationError: If the amount cannot be parsed
    """
    if amount_str is None or not amount_str.strip():
        return Money.from_decimal_string("", scale)

    text = amount_str.strip()
    is_negative = text.startswith("(") and text.endswith(")")
    if is_negative:
        text = text[1:-1]

    text = _CURRENCY_SYMBOLS.sub("", text).replace(",", "").strip()
    amount = Money.from_decimal_string(text, scale)
    return -amount if is_negative else amount
