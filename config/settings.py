"""
Configuration settings for the price list assistant.
Loads environment variables from a .env file via python-dotenv.
Expose a single `settings` object for the rest of the codebase to import.
"""

from __future__ import annotations


import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


from dotenv import load_dotenv


# Load .env from project root (caller should ensure working dir is project root)
load_dotenv()


@dataclass(frozen=True)
class Settings:
    # Language model (optional; missing values surface per query)
    AZURE_OPENAI_ENDPOINT: Optional[str] = None
    AZURE_OPENAI_KEY: Optional[str] = None
    AZURE_OPENAI_DEPLOYMENT: Optional[str] = None
    AZURE_API_VERSION: str = "2025-01-01-preview"
    LLM_TIMEOUT: float = 60.0  # seconds
    LLM_MAX_RETRIES: int = 1
    LLM_TEMPERATURE: float = 0.3

    # Pricing defaults
    DEFAULT_EXCHANGE_RATE: float = 95.0
    DEFAULT_FIXED_MARKUP: float = 1500.0
    CURRENCY_SUFFIX: str = "₽"
    PRICE_ON_REQUEST_LABEL: str = "По запросу"

    # Retrieval
    CONTEXT_LIMIT: int = 30
    MIN_TOKEN_LENGTH: int = 3
    HISTORY_TURNS: int = 6

    # Storage / logging
    STATE_FILE: str = "data/state.json"
    LOGS_DIR: str = "logs"
    DATA_DIR: str = "data"


def _load_settings_from_env() -> Settings:
    return Settings(
        AZURE_OPENAI_ENDPOINT=os.getenv("AZURE_OPENAI_ENDPOINT") or None,
        AZURE_OPENAI_KEY=os.getenv("AZURE_OPENAI_KEY") or os.getenv("AZURE_OPENAI_API_KEY") or None,
        AZURE_OPENAI_DEPLOYMENT=os.getenv("AZURE_OPENAI_DEPLOYMENT") or None,
        AZURE_API_VERSION=os.getenv("AZURE_API_VERSION", "2025-01-01-preview"),
        LLM_TIMEOUT=float(os.getenv("LLM_TIMEOUT", "60")),
        LLM_MAX_RETRIES=int(os.getenv("LLM_MAX_RETRIES", "1")),
        LLM_TEMPERATURE=float(os.getenv("LLM_TEMPERATURE", "0.3")),
        DEFAULT_EXCHANGE_RATE=float(os.getenv("DEFAULT_EXCHANGE_RATE", "95")),
        DEFAULT_FIXED_MARKUP=float(os.getenv("DEFAULT_FIXED_MARKUP", "1500")),
        CURRENCY_SUFFIX=os.getenv("CURRENCY_SUFFIX", "₽"),
        PRICE_ON_REQUEST_LABEL=os.getenv("PRICE_ON_REQUEST_LABEL", "По запросу"),
        CONTEXT_LIMIT=int(os.getenv("CONTEXT_LIMIT", "30")),
        MIN_TOKEN_LENGTH=int(os.getenv("MIN_TOKEN_LENGTH", "3")),
        HISTORY_TURNS=int(os.getenv("HISTORY_TURNS", "6")),
        STATE_FILE=os.getenv("STATE_FILE", "data/state.json"),
        LOGS_DIR=os.getenv("LOGS_DIR", "logs"),
        DATA_DIR=os.getenv("DATA_DIR", "data"),
    )


# Singleton settings object importable across the codebase
settings = _load_settings_from_env()
Path(settings.DATA_DIR).mkdir(parents=True, exist_ok=True)
Path(settings.LOGS_DIR).mkdir(parents=True, exist_ok=True)
