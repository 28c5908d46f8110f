"""
Spreadsheet reading for uploaded price lists.

Only the first sheet of a workbook is read. Each data row becomes a dict of
header -> cell value; blank cells are None so every row carries the full
header set.

Usage:
    rows = read_price_list("uploads/prices.xlsx")
    rows = read_price_list(uploaded_bytes, filename="prices.csv")
"""
from __future__ import annotations

import io
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from catalog.builder import build_catalog
from catalog.errors import ParseError
from catalog.models import Catalog
from utils.logger import get_ingest_logger

logger = get_ingest_logger()

# Workbook suffix -> pandas engine
EXCEL_ENGINES = {".xlsx": "openpyxl", ".xlsm": "openpyxl", ".xls": "xlrd"}
CSV_SUFFIXES = {".csv"}

Source = Union[str, Path, bytes]


def _suffix_for(source: Source, filename: Optional[str]) -> str:
    if filename:
        return Path(filename).suffix.lower()
    if isinstance(source, (str, Path)):
        return Path(source).suffix.lower()
    # Raw bytes without a name: assume a workbook
    return ".xlsx"


def _clean_cell(value: Any) -> Any:
    """Return a plain Python value, or None for a blank cell."""
    if value is None or value is pd.NaT:
        return None
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        # numpy scalar -> python scalar
        try:
            value = value.item()
        except (ValueError, TypeError):
            pass
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _frame_to_rows(frame: pd.DataFrame) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    columns = [str(c).strip() for c in frame.columns]
    for values in frame.itertuples(index=False, name=None):
        row = {}
        for column, value in zip(columns, values):
            row[column] = _clean_cell(value)
        rows.append(row)
    return rows


def read_price_list(source: Source, filename: Optional[str] = None) -> List[Dict[str, Any]]:
    """Read the first sheet of a price list into row dicts.

    Raises ParseError for unsupported formats and unreadable files.
    """
    suffix = _suffix_for(source, filename)
    if suffix not in EXCEL_ENGINES and suffix not in CSV_SUFFIXES:
        raise ParseError(f"Unsupported file format: {suffix or 'unknown'}")

    handle = io.BytesIO(source) if isinstance(source, bytes) else source
    try:
        if suffix in CSV_SUFFIXES:
            frame = pd.read_csv(handle, dtype=object)
        else:
            frame = pd.read_excel(handle, sheet_name=0, engine=EXCEL_ENGINES[suffix], dtype=object)
    except Exception as exc:
        logger.exception(
            "Failed to read price list", extra={"source": filename or str(source)[:200]}
        )
        raise ParseError(f"Could not read price list: {exc}") from exc

    rows = _frame_to_rows(frame)
    logger.info(
        "Price list read",
        extra={"source": filename or str(source)[:200], "rows": len(rows), "columns": list(frame.columns)},
    )
    return rows


def import_price_list(source: Source, filename: Optional[str] = None) -> Catalog:
    """Read and build a catalog. The caller replaces its catalog only on success."""
    return build_catalog(read_price_list(source, filename=filename))
