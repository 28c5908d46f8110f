"""
Column inference for human-authored price lists.

Headers vary from sheet to sheet ("Бренд", "Brand", "Марка", "Fragrance name",
"Цена, $" ...). Each role is resolved by the first header matching that role's
patterns (for the name role, headers that also look like a brand header are
considered last); a role with no match falls back to column position
(brand, name, price = 1st, 2nd, 3rd column).
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence

BRAND_PATTERN = re.compile(r"brand|бренд|марка|производитель|manufacturer|maker|vendor", re.IGNORECASE)
NAME_PATTERN = re.compile(
    r"name|title|fragrance|model|product|item|назв|наимен|аромат|модел|товар|продукт",
    re.IGNORECASE,
)
PRICE_PATTERN = re.compile(r"price|cost|value|amount|цен|стоим|прайс|сумм", re.IGNORECASE)


@dataclass(frozen=True)
class ColumnMapping:
    brand_field: Optional[str]
    name_field: Optional[str]
    price_field: Optional[str]


def _match_field(field_names: Sequence[str], pattern: Pattern) -> Optional[str]:
    for field_name in field_names:
        if pattern.search(str(field_name)):
            return field_name
    return None


def _positional(field_names: Sequence[str], position: int) -> Optional[str]:
    return field_names[position] if position < len(field_names) else None


def _resolve(field_names: Sequence[str], pattern: Pattern, position: int) -> Optional[str]:
    matched = _match_field(field_names, pattern)
    if matched is not None:
        return matched
    return _positional(field_names, position)


def _resolve_name(field_names: Sequence[str]) -> Optional[str]:
    # "Brand name" style headers only take the name role when nothing else matches
    non_brand = [f for f in field_names if not BRAND_PATTERN.search(str(f))]
    matched = _match_field(non_brand, NAME_PATTERN)
    if matched is not None:
        return matched
    return _resolve(field_names, NAME_PATTERN, 1)


def infer_columns(field_names: Sequence[str]) -> ColumnMapping:
    """Guess which fields hold brand, item name and price.

    Never raises. A role that neither matches a pattern nor has a column at its
    fallback position is returned as None.
    """
    field_names = list(field_names)
    return ColumnMapping(
        brand_field=_resolve(field_names, BRAND_PATTERN, 0),
        name_field=_resolve_name(field_names),
        price_field=_resolve(field_names, PRICE_PATTERN, 2),
    )
