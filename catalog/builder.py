"""
Catalog builder: turns parsed spreadsheet rows into canonical product records.

Each row is a mapping of header -> raw cell. Columns are inferred per row
(rows from different sources may carry different keys), prices are normalized,
and rows that fail to convert are skipped and logged. An import that leaves
no usable rows raises `EmptyCatalogError`.
"""
from __future__ import annotations

import math
import time
from typing import Any, Iterable, Mapping, Optional

from catalog.columns import infer_columns
from catalog.errors import EmptyCatalogError
from catalog.models import Catalog, ProductRecord
from catalog.price import normalize_price
from utils.logger import get_ingest_logger

logger = get_ingest_logger()

MISSING_BRAND = "N/A"


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def _cell(row: Mapping[str, Any], field_name: Optional[str]) -> Any:
    if field_name is None:
        return None
    return row.get(field_name)


def build_record(row: Mapping[str, Any], record_id: str) -> ProductRecord:
    mapping = infer_columns(list(row.keys()))
    used = {mapping.brand_field, mapping.name_field, mapping.price_field}

    return ProductRecord(
        id=record_id,
        brand=_cell_text(_cell(row, mapping.brand_field)) or MISSING_BRAND,
        name=_cell_text(_cell(row, mapping.name_field)),
        base_price=normalize_price(_cell(row, mapping.price_field)),
        extra={k: v for k, v in row.items() if k not in used and v is not None},
    )


def build_catalog(rows: Iterable[Mapping[str, Any]], imported_at: Optional[int] = None) -> Catalog:
    """Build a catalog from spreadsheet rows, preserving row order.

    `imported_at` (milliseconds) is combined with the row index to form ids;
    defaults to the current time.
    """
    stamp = imported_at if imported_at is not None else int(time.time() * 1000)
    catalog: Catalog = []
    skipped = 0
    total = 0

    for index, row in enumerate(rows):
        total += 1
        try:
            if not any(_cell_text(v) for v in row.values()):
                skipped += 1
                continue
            catalog.append(build_record(row, f"{stamp}-{index}"))
        except Exception as exc:
            skipped += 1
            logger.warning(
                "Skipping unreadable row", extra={"row_index": index, "error": str(exc)}
            )

    if not catalog:
        logger.error("Import produced no usable rows", extra={"rows_total": total})
        raise EmptyCatalogError(f"No usable rows found (rows read: {total})")

    logger.info(
        "Catalog built",
        extra={
            "rows_total": total,
            "records": len(catalog),
            "skipped": skipped,
            "unpriced": sum(1 for r in catalog if not r.is_priced),
        },
    )
    return catalog
