"""Currency conversion between the purchase (PLN) and sale (CZK) currencies."""

import logging
import threading
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from resaletrack.config import DEFAULT_EXCHANGE_RATE
from resaletrack.domain.errors import ValidationError

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def to_sale_currency(amount: Decimal, rate: Decimal) -> Decimal:
    """Convert a purchase-currency amount into the sale currency."""
    return Decimal(amount) * Decimal(rate)


def net_profit(selling_price: Decimal, purchase_price: Decimal, rate: Decimal) -> Decimal:
    """Return the sale price minus the converted purchase price, to 2 places."""
    profit = Decimal(selling_price) - to_sale_currency(purchase_price, rate)
    return profit.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_rate(raw: Any, default: Decimal = DEFAULT_EXCHANGE_RATE) -> Decimal:
    """Parse a stored exchange rate, falling back to ``default``.

    Args:
        raw: Value as read from the settings document (number, string or None)
        default: Rate used when ``raw`` is absent, malformed or not positive

    Returns:
        A positive Decimal rate
    """
    if raw is None or isinstance(raw, bool):
        return default
    try:
        rate = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        logger.warning("Ignoring malformed exchange rate %r, using %s", raw, default)
        return default
    if not rate.is_finite() or rate <= 0:
        logger.warning("Ignoring non-positive exchange rate %r, using %s", raw, default)
        return default
    return rate


class ExchangeRate:
    """Process-wide exchange rate shared by every profit computation.

    Readers call ``current()`` once and keep the returned value for the
    whole computation.
    """

    def __init__(self, value: Decimal = DEFAULT_EXCHANGE_RATE):
        self._lock = threading.Lock()
        self._value = Decimal(value)

    def current(self) -> Decimal:
        """Return the rate in effect right now."""
        with self._lock:
            return self._value

    def set(self, value: Decimal | str | float | int) -> Decimal:
        """Replace the rate.

        Raises:
            ValidationError: If the value is not a positive number
        """
        try:
            rate = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError(f"Exchange rate must be a number, got '{value}'")
        if not rate.is_finite() or rate <= 0:
            raise ValidationError("Exchange rate must be greater than zero")
        with self._lock:
            self._value = rate
        return rate
