"""
Data model for the product catalog.

A catalog is a plain ordered list of `ProductRecord` (source row order).
`base_price` is either a finite positive float or `None` meaning "unpriced";
display prices are derived on demand from a `PricingConfig` and never stored.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config.settings import settings


@dataclass(frozen=True)
class ProductRecord:
    id: str
    brand: str
    name: str
    base_price: Optional[float] = None
    # Source columns other than brand/name/price, kept as-is
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_priced(self) -> bool:
        return self.base_price is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "brand": self.brand,
            "name": self.name,
            "base_price": self.base_price,
            "extra": dict(self.extra),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductRecord":
        """Rebuild a record from its persisted form; raises on malformed data."""
        if not isinstance(data, dict):
            raise TypeError(f"Stored product must be an object, got {type(data).__name__}")
        base_price = data.get("base_price")
        if base_price is not None:
            base_price = float(base_price)
            if not math.isfinite(base_price) or base_price <= 0:
                raise ValueError(f"Invalid stored base price: {data.get('base_price')!r}")
        return cls(
            id=str(data["id"]),
            brand=str(data.get("brand") or "N/A"),
            name=str(data.get("name") or ""),
            base_price=base_price,
            extra=dict(data.get("extra") or {}),
        )


Catalog = List[ProductRecord]


@dataclass(frozen=True)
class PricingConfig:
    """Exchange rate and fixed markup applied to base prices at display time."""

    exchange_rate: float = settings.DEFAULT_EXCHANGE_RATE
    fixed_markup: float = settings.DEFAULT_FIXED_MARKUP

    def __post_init__(self):
        rate = float(self.exchange_rate)
        markup = float(self.fixed_markup)
        if not math.isfinite(rate) or rate <= 0:
            raise ValueError(f"exchange_rate must be a positive number, got {self.exchange_rate!r}")
        if not math.isfinite(markup):
            raise ValueError(f"fixed_markup must be a finite number, got {self.fixed_markup!r}")
        object.__setattr__(self, "exchange_rate", rate)
        object.__setattr__(self, "fixed_markup", markup)


@dataclass(frozen=True)
class DisplayProduct:
    record: ProductRecord
    display_price: str

    @property
    def brand(self) -> str:
        return self.record.brand

    @property
    def name(self) -> str:
        return self.record.name

    def as_line(self) -> str:
        return f"{self.record.brand} | {self.record.name} | {self.display_price}"
