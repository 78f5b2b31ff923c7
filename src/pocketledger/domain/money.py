"""Fixed-point money amounts.

Amounts are held as integer minor units (cents) so sums and splits never
drift the way binary floating point does. The type is currency agnostic;
callers keep the currency next to the amount.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Union

from pocketledger.domain.errors import ValidationError

MINOR_DIGITS = 2
_QUANTUM = Decimal(1).scaleb(-MINOR_DIGITS)
# Largest magnitude a 64-bit INTEGER column holds
MAX_MINOR = 2**63 - 1

MoneyLike = Union["Money", Decimal, int, float, str]


@dataclass(frozen=True, order=True)
class Money:
    """Signed amount in minor units."""

    minor: int

    @classmethod
    def zero(cls) -> "Money":
        return cls(0)

    @classmethod
    def of(cls, value: MoneyLike) -> "Money":
        """Build a Money from a numeric value in major units.

        Args:
            value: Money, Decimal, int, float or numeric string (e.g. "12.50")

        Returns:
            Money instance

        Raises:
            ValidationError: If the value is not a finite number, has more
                than two decimal places or does not fit in 64-bit minor units
        """
        if isinstance(value, Money):
            return value
        if isinstance(value, bool):
            raise ValidationError(f"Invalid amount: {value!r}")
        try:
            if isinstance(value, float):
                # repr() gives the shortest string that round-trips
                amount = Decimal(repr(value))
            elif isinstance(value, (int, str, Decimal)):
                amount = Decimal(value)
            else:
                raise ValidationError(f"Invalid amount: {value!r}")
            if not amount.is_finite():
                raise ValidationError(f"Amount must be a finite number, got {value!r}")
            quantized = amount.quantize(_QUANTUM)
        except InvalidOperation:
            raise ValidationError(f"Invalid amount: {value!r}")

        if quantized != amount:
            raise ValidationError(
                f"Amount {value!r} has more than {MINOR_DIGITS} decimal places"
            )
        minor = int(quantized.scaleb(MINOR_DIGITS))
        if abs(minor) > MAX_MINOR:
            raise ValidationError(f"Amount {value!r} is too large")
        return cls(minor)

    @classmethod
    def total(cls, amounts: Iterable["Money"]) -> "Money":
        """Sum an iterable of Money values (zero when empty)."""
        return cls(sum(amount.minor for amount in amounts))

    def to_decimal(self) -> Decimal:
        return Decimal(self.minor).scaleb(-MINOR_DIGITS)

    def is_positive(self) -> bool:
        return self.minor > 0

    def is_negative(self) -> bool:
        return self.minor < 0

    def is_zero(self) -> bool:
        return self.minor == 0

    def split_evenly(self, parts: int) -> list["Money"]:
        """Divide into ``parts`` shares that sum exactly to this amount.

        Every share gets the floor of the division; the whole remainder in
        minor units goes to the first share.

        Raises:
            ValidationError: If parts is not positive
        """
        if parts <= 0:
            raise ValidationError("Cannot split an amount among zero participants")
        share, remainder = divmod(self.minor, parts)
        return [Money(share + remainder)] + [Money(share)] * (parts - 1)

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.minor + other.minor)

    def __sub__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.minor - other.minor)

    def __neg__(self) -> "Money":
        return Money(-self.minor)

    def __abs__(self) -> "Money":
        return Money(abs(self.minor))

    def __str__(self) -> str:
        return str(self.to_decimal())
