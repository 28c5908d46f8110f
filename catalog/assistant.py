"""
Chat session over the current catalog.

Each question is answered by selecting relevant catalog entries, embedding
them verbatim in the persona instruction and sending that together with the
recent transcript to the language model. Upstream failures and missing
credentials become assistant messages in the transcript; the session stays
usable. Only one request may be in flight at a time.
"""
from __future__ import annotations

import threading
from typing import Dict, List, Optional

from config.settings import settings
from catalog.errors import ConfigurationMissing, SessionBusy, UpstreamUnavailable
from catalog.models import Catalog, DisplayProduct, PricingConfig
from catalog.price import apply_pricing
from catalog.relevance import NO_MATCHES_MARKER, format_context, select
from utils.llm_client import AzureChatClient, get_client
from utils.logger import get_assistant_logger
from utils.prompt import APOLOGY_MESSAGE, CONFIGURATION_MISSING_MESSAGE, build_system_prompt

logger = get_assistant_logger()

Message = Dict[str, str]


class ChatSession:
    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        config: Optional[PricingConfig] = None,
        client: Optional[AzureChatClient] = None,
        context_limit: int = settings.CONTEXT_LIMIT,
        history_turns: int = settings.HISTORY_TURNS,
    ):
        self.catalog: Catalog = list(catalog or [])
        self.config = config or PricingConfig()
        self.context_limit = context_limit
        self.history_turns = history_turns
        self.transcript: List[Message] = []
        self._client = client
        self._gate = threading.Lock()

    # -------------------------
    # Catalog / config changes
    # -------------------------
    def replace_catalog(self, catalog: Catalog) -> None:
        self.catalog = list(catalog)
        logger.info("Catalog replaced", extra={"products": len(self.catalog)})

    def reset(self) -> None:
        self.catalog = []
        self.transcript = []
        logger.info("Session reset")

    def apply_config(self, config: PricingConfig) -> None:
        self.config = config
        logger.info(
            "Pricing config applied",
            extra={"exchange_rate": config.exchange_rate, "fixed_markup": config.fixed_markup},
        )

    def display_products(self) -> List[DisplayProduct]:
        return apply_pricing(self.catalog, self.config)

    # -------------------------
    # Conversation
    # -------------------------
    @property
    def can_send(self) -> bool:
        return not self._gate.locked()

    @property
    def client(self) -> AzureChatClient:
        if self._client is None:
            self._client = get_client()
        return self._client

    def build_messages(self, question: str) -> List[Message]:
        records = select(question, self.catalog, limit=self.context_limit)
        context = format_context(records, self.config)
        system = build_system_prompt(
            context,
            on_request_label=settings.PRICE_ON_REQUEST_LABEL,
            no_matches_marker=NO_MATCHES_MARKER,
        )
        history = self.transcript[-self.history_turns:] if self.history_turns > 0 else []
        logger.info(
            "Context selected", extra={"matches": len(records), "history": len(history)}
        )
        return [{"role": "system", "content": system}, *history, {"role": "user", "content": question}]

    def ask(self, question: str) -> str:
        """Answer one question and record both turns in the transcript."""
        if not self._gate.acquire(blocking=False):
            raise SessionBusy("A request is already in progress")
        try:
            messages = self.build_messages(question)
            try:
                reply = self.client.complete(messages)
            except UpstreamUnavailable as exc:
                logger.warning("Language model unavailable", extra={"error": str(exc)})
                reply = APOLOGY_MESSAGE
            except ConfigurationMissing as exc:
                logger.error("Language model not configured", extra={"error": str(exc)})
                reply = CONFIGURATION_MISSING_MESSAGE

            self.transcript.append({"role": "user", "content": question})
            self.transcript.append({"role": "assistant", "content": reply})
            return reply
        finally:
            self._gate.release()
