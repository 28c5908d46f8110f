"""
Relevance filter: picks the catalog entries handed to the language model as
grounding context for one user question.

Matching is plain substring / token overlap on brand and name, with no
ranking. Results keep catalog order and are capped at `limit`.
"""
from __future__ import annotations

from typing import Iterable, List

from config.settings import settings
from catalog.models import PricingConfig, ProductRecord
from catalog.price import apply_pricing

NO_MATCHES_MARKER = "NO MATCHING PRODUCTS IN THE PRICE LIST"


def _query_tokens(query: str, min_token_length: int) -> List[str]:
    return [t for t in query.split() if len(t) > min_token_length]


def matches(record: ProductRecord, query: str, tokens: List[str]) -> bool:
    """`query` and `tokens` are expected lowercase."""
    brand = record.brand.lower()
    name = record.name.lower()
    if query in brand or query in name:
        return True
    return any(t in brand or t in name for t in tokens)


def select(
    query: str,
    catalog: Iterable[ProductRecord],
    limit: int = settings.CONTEXT_LIMIT,
    min_token_length: int = settings.MIN_TOKEN_LENGTH,
) -> List[ProductRecord]:
    """Return up to `limit` records matching `query`, in catalog order.

    A blank query selects nothing.
    """
    needle = query.strip().lower()
    if not needle or limit <= 0:
        return []
    tokens = _query_tokens(needle, min_token_length)

    selected: List[ProductRecord] = []
    for record in catalog:
        if matches(record, needle, tokens):
            selected.append(record)
            if len(selected) >= limit:
                break
    return selected


def format_context(records: Iterable[ProductRecord], config: PricingConfig) -> str:
    """One `brand | name | price` line per record, or the no-matches marker."""
    lines = [p.as_line() for p in apply_pricing(records, config)]
    if not lines:
        return NO_MATCHES_MARKER
    return "\n".join(lines)


def build_context(
    query: str,
    catalog: Iterable[ProductRecord],
    config: PricingConfig,
    limit: int = settings.CONTEXT_LIMIT,
) -> str:
    return format_context(select(query, catalog, limit=limit), config)
