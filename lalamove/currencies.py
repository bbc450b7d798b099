"""ISO 4217 currencies and money amounts as they appear in price breakdowns."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

import pycountry

from lalamove.errors import CurrencyNotFound, MoneyParseError

# ISO 4217 reserves XXX for "no currency"; a price in it is meaningless.
_NO_CURRENCY = "XXX"


@dataclass(frozen=True)
class Currency:
    code: str

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: Currency

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"


def find(code: str) -> Currency | None:
    """Return the currency for an ISO 4217 alphabetic code, or None."""
    code = code.strip().upper()
    if code == _NO_CURRENCY:
        return None
    currency = pycountry.currencies.get(alpha_3=code)
    if currency is None:
        return None
    return Currency(code=currency.alpha_3)


def parse_money(amount: str, code: str) -> Money:
    """Parse a price breakdown total against its currency code.

    Args:
        amount: Decimal amount as a string, e.g. "123.45".
        code: ISO 4217 currency code, e.g. "PHP".

    Returns:
        The amount as Money.

    Raises:
        CurrencyNotFound: If ``code`` is not a known ISO 4217 currency.
        MoneyParseError: If ``amount`` is not a finite decimal number.
    """
    currency = find(code)
    if currency is None:
        raise CurrencyNotFound(code)

    try:
        value = Decimal(amount.replace(",", "").strip())
    except (InvalidOperation, AttributeError) as exc:
        raise MoneyParseError(str(amount), currency.code) from exc
    if not value.is_finite():
        raise MoneyParseError(amount, currency.code)

    return Money(amount=value, currency=currency)
