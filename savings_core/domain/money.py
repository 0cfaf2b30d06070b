"""Decimal money helpers with currency-scale ROUND_HALF_UP rounding"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from savings_core.domain.exceptions import CurrencyMismatchError

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Currency:
    """ISO currency with its minor-unit precision"""

    code: str
    decimal_places: int = 2


def to_decimal(value) -> Decimal:
    """Convert int/str/Decimal input to Decimal without passing through float."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise TypeError("Monetary values must not be floats")
    return Decimal(str(value))


def quantize_money(value: Decimal, decimal_places: int = 2) -> Decimal:
    """Round to the currency's minor unit using ROUND_HALF_UP."""
    quantum = Decimal(1).scaleb(-decimal_places)
    return value.quantize(quantum, rounding=ROUND_HALF_UP)


def percentage_of(amount: Decimal, percentage: Decimal, decimal_places: int = 2) -> Decimal:
    """amount * percentage / 100, rounded to minor units"""
    return quantize_money(amount * percentage / HUNDRED, decimal_places)


@dataclass(frozen=True)
class Money:
    """Amount bound to a currency; arithmetic refuses to mix currencies"""

    amount: Decimal
    currency: Currency

    @classmethod
    def of(cls, currency: Currency, amount) -> "Money":
        return cls(amount=quantize_money(to_decimal(amount), currency.decimal_places), currency=currency)

    def _check_currency(self, other: "Money") -> None:
        if other.currency.code != self.currency.code:
            raise CurrencyMismatchError(expected=self.currency.code, actual=other.currency.code)

    def plus(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money.of(self.currency, self.amount + other.amount)

    def is_greater_than(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount > other.amount
