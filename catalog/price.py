"""
Price handling: turning raw spreadsheet cells into base prices, and base
prices into display strings for a given `PricingConfig`.

    >>> normalize_price("$1,250.00")
    1250.0
    >>> display_price(120, PricingConfig(exchange_rate=98, fixed_markup=1500))
    '13,260 ₽'
"""
from __future__ import annotations

import math
import numbers
import re
from decimal import Decimal
from typing import Any, Iterable, List, Optional

from config.settings import settings
from catalog.models import DisplayProduct, PricingConfig, ProductRecord

_NON_NUMERIC_RE = re.compile(r"[^0-9.]")
# Leading decimal number of the filtered string ("1.2.3" -> "1.2")
_LEADING_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def _clean_number(value: float) -> Optional[float]:
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def normalize_price(raw: Any) -> Optional[float]:
    """Return the base price held in a spreadsheet cell, or None when unpriced.

    Numbers are used as-is. Strings are stripped of everything except digits
    and '.', so currency symbols, thousands separators and words are ignored.
    Zero, negative, NaN and unparsable values are all unpriced.
    """
    if isinstance(raw, bool) or raw is None:
        return None

    if isinstance(raw, (numbers.Real, Decimal)):
        return _clean_number(float(raw))

    if isinstance(raw, str):
        filtered = _NON_NUMERIC_RE.sub("", raw)
        match = _LEADING_NUMBER_RE.match(filtered)
        if not match:
            return None
        return _clean_number(float(match.group(0)))

    return None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def final_price(base_price: Optional[float], config: PricingConfig) -> Optional[int]:
    """Converted and marked-up price in whole units, or None if nothing positive remains."""
    if base_price is None:
        return None
    value = _round_half_up(base_price * config.exchange_rate + config.fixed_markup)
    # A markup that drives the price to zero or below shows "on request"
    if value <= 0:
        return None
    return value


def display_price(
    base_price: Optional[float],
    config: PricingConfig,
    currency_suffix: str = settings.CURRENCY_SUFFIX,
    on_request_label: str = settings.PRICE_ON_REQUEST_LABEL,
) -> str:
    value = final_price(base_price, config)
    if value is None:
        return on_request_label
    return f"{value:,} {currency_suffix}"


def apply_pricing(catalog: Iterable[ProductRecord], config: PricingConfig, **kwargs) -> List[DisplayProduct]:
    """Derive display products for the whole catalog.

    Call again whenever either the catalog or the config changes; results are
    never cached here.
    """
    return [
        DisplayProduct(record=record, display_price=display_price(record.base_price, config, **kwargs))
        for record in catalog
    ]
