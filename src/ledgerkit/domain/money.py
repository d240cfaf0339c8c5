"""Fixed-point money value type.

Amounts are held as a signed integer count of minor units (cents) together
with the scale (number of minor-unit digits). Arithmetic is plain integer
arithmetic; ``decimal.Decimal`` is used only at the string boundary, so no
value ever passes through binary floating point.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from ledgerkit.domain.errors import (
    PrecisionOverflow,
    ScaleMismatch,
    ValidationError,
    precision_overflow,
)

DEFAULT_SCALE = 2


@dataclass(frozen=True)
class Money:
    """Exact amount in minor units."""

    minor_units: int
    scale: int = DEFAULT_SCALE

    def __post_init__(self):
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise ValidationError(
                f"Money minor units must be an integer, got {type(self.minor_units).__name__}"
            )
        if isinstance(self.scale, bool) or not isinstance(self.scale, int) or self.scale < 0:
            raise ValidationError(f"Invalid money scale: {self.scale!r}")

    @classmethod
    def zero(cls, scale: int = DEFAULT_SCALE) -> "Money":
        return cls(0, scale)

    @classmethod
    def sum(cls, values: Iterable["Money"], scale: int = DEFAULT_SCALE) -> "Money":
        """Add up money values; an empty iterable yields zero at ``scale``."""
        total = cls.zero(scale)
        for value in values:
            total = total.add(value)
        return total

    @classmethod
    def from_decimal_string(cls, text: str, scale: int = DEFAULT_SCALE) -> "Money":
        """Parse a plain decimal string such as ``"-1234.50"``.

        Args:
            text: Decimal string (no currency symbols or separators)
            scale: Number of minor-unit digits

        Returns:
            Money value

        Raises:
            PrecisionOverflow: If the string has more fractional digits than ``scale``
            ValidationError: If the string is not a finite decimal number
        """
        if text is None or not str(text).strip():
            raise ValidationError("Empty amount string")
        stripped = str(text).strip()
        try:
            value = Decimal(stripped)
        except InvalidOperation:
            raise ValidationError(f"Could not parse amount '{stripped}'")
        if not value.is_finite():
            raise ValidationError(f"Could not parse amount '{stripped}'")

        exponent = value.as_tuple().exponent
        # Digit count, not value: "1.500" is rejected at scale 2 like "10.005"
        if exponent < 0 and -exponent > scale:
            raise PrecisionOverflow(precision_overflow(stripped, scale))

        return cls(int(value.scaleb(scale)), scale)

    def to_decimal(self) -> Decimal:
        return Decimal(self.minor_units).scaleb(-self.scale)

    def to_decimal_string(self, scale: Optional[int] = None) -> str:
        """Render as a decimal string with ``scale`` fractional digits.

        Rendering at a smaller scale than the value's own would lose digits,
        so that is rejected rather than rounded.
        """
        target = self.scale if scale is None else scale
        if target < self.scale:
            factor = 10 ** (self.scale - target)
            if self.minor_units % factor:
                raise PrecisionOverflow(precision_overflow(str(self.to_decimal()), target))
        sign = "-" if self.minor_units < 0 else ""
        units = abs(self.minor_units)
        if target >= self.scale:
            units *= 10 ** (target - self.scale)
        else:
            units //= 10 ** (self.scale - target)
        if target == 0:
            return f"{sign}{units}"
        whole, fraction = divmod(units, 10**target)
        return f"{sign}{whole}.{fraction:0{target}d}"

    def _check_scale(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise ValidationError(f"Cannot combine Money with {type(other).__name__}")
        if other.scale != self.scale:
            raise ScaleMismatch(
                f"Cannot combine amounts with scale {self.scale} and {other.scale}"
            )

    def add(self, other: "Money") -> "Money":
        self._check_scale(other)
        return Money(self.minor_units + other.minor_units, self.scale)

    def sub(self, other: "Money") -> "Money":
        self._check_scale(other)
        return Money(self.minor_units - other.minor_units, self.scale)

    def negate(self) -> "Money":
        return Money(-self.minor_units, self.scale)

    def compare_to(self, other: "Money") -> int:
        """Return -1, 0 or 1 as this amount is below, equal to or above ``other``."""
        self._check_scale(other)
        return (self.minor_units > other.minor_units) - (self.minor_units < other.minor_units)

    def is_zero(self) -> bool:
        return self.minor_units == 0

    def is_positive(self) -> bool:
        return self.minor_units > 0

    def is_negative(self) -> bool:
        return self.minor_units < 0

    def abs(self) -> "Money":
        return Money(abs(self.minor_units), self.scale)

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.sub(other)

    def __neg__(self) -> "Money":
        return self.negate()

    def __lt__(self, other: "Money") -> bool:
        return self.compare_to(other) < 0

    def __le__(self, other: "Money") -> bool:
        return self.compare_to(other) <= 0

    def __gt__(self, other: "Money") -> bool:
        return self.compare_to(other) > 0

    def __ge__(self, other: "Money") -> bool:
        return self.compare_to(other) >= 0

    def __str__(self) -> str:
        return self.to_decimal_string()
