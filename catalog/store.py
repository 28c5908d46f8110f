"""
JSON-file persistence for the session state: the current catalog and the
pricing config. Display prices are never written.

A missing or corrupt state file loads as empty state; the problem is logged.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from config.settings import settings
from catalog.models import Catalog, PricingConfig, ProductRecord
from utils.logger import get_logger

logger = get_logger("store")


@dataclass
class SessionState:
    catalog: Catalog = field(default_factory=list)
    config: PricingConfig = field(default_factory=PricingConfig)


class StateStore:
    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path or settings.STATE_FILE)

    def _read_raw(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning(
                "Ignoring unreadable state file", extra={"path": str(self.path), "error": str(exc)}
            )
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring state file with unexpected shape", extra={"path": str(self.path)})
            return {}
        return data

    @staticmethod
    def _catalog_from(products: Any) -> Catalog:
        if products is None:
            return []
        if not isinstance(products, list):
            raise TypeError(f"'products' must be a list, got {type(products).__name__}")
        catalog = [ProductRecord.from_dict(p) for p in products]
        ids = [r.id for r in catalog]
        if len(set(ids)) != len(ids):
            raise ValueError("Stored catalog contains duplicate product ids")
        return catalog

    def load(self) -> SessionState:
        data = self._read_raw()
        state = SessionState()

        try:
            state.catalog = self._catalog_from(data.get("products"))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Ignoring stored catalog", extra={"path": str(self.path), "error": str(exc)})
            state.catalog = []

        if "exchange_rate" in data or "fixed_markup" in data:
            try:
                state.config = PricingConfig(
                    exchange_rate=data.get("exchange_rate", settings.DEFAULT_EXCHANGE_RATE),
                    fixed_markup=data.get("fixed_markup", settings.DEFAULT_FIXED_MARKUP),
                )
            except (TypeError, ValueError) as exc:
                logger.warning(
                    "Ignoring stored pricing config", extra={"path": str(self.path), "error": str(exc)}
                )

        logger.info("State loaded", extra={"path": str(self.path), "products": len(state.catalog)})
        return state

    def save(self, state: SessionState) -> None:
        payload = {
            "products": [r.to_dict() for r in state.catalog],
            "exchange_rate": state.config.exchange_rate,
            "fixed_markup": state.config.fixed_markup,
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, ensure_ascii=False, indent=2, default=str)
        tmp_path.replace(self.path)
        logger.info("State saved", extra={"path": str(self.path), "products": len(state.catalog)})

    def clear_catalog(self) -> SessionState:
        """Drop the stored catalog, keeping the pricing config."""
        state = self.load()
        state.catalog = []
        self.save(state)
        return state
