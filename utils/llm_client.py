"""
Azure OpenAI wrapper used by the assistant session.

This wrapper uses the official `openai` Python SDK (`AzureOpenAI`) to run a
chat completion and return the assistant text. Every failure is reported as
`UpstreamUnavailable`; missing credentials as `ConfigurationMissing`.

Usage:
    from utils.llm_client import get_client
    text = get_client().complete(messages)

"""

from __future__ import annotations

from typing import Dict, List, Optional

from openai import AzureOpenAI
from openai.types.chat.chat_completion_message_param import ChatCompletionMessageParam

from catalog.errors import ConfigurationMissing, UpstreamUnavailable
from config.settings import settings
from utils.logger import get_logger


class AzureChatClient:
    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        deployment: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        self.endpoint = endpoint or settings.AZURE_OPENAI_ENDPOINT
        self.api_key = api_key or settings.AZURE_OPENAI_KEY
        self.deployment = deployment or settings.AZURE_OPENAI_DEPLOYMENT
        self.api_version = api_version or settings.AZURE_API_VERSION
        self.timeout = timeout if timeout is not None else settings.LLM_TIMEOUT
        self.max_retries = max_retries if max_retries is not None else settings.LLM_MAX_RETRIES
        self.temperature = temperature if temperature is not None else settings.LLM_TEMPERATURE
        self.logger = get_logger("llm")
        self._client: Optional[AzureOpenAI] = None

    def _missing_settings(self) -> List[str]:
        missing = []
        if not self.endpoint:
            missing.append("AZURE_OPENAI_ENDPOINT")
        if not self.api_key:
            missing.append("AZURE_OPENAI_KEY")
        if not self.deployment:
            missing.append("AZURE_OPENAI_DEPLOYMENT")
        return missing

    def _get_sdk_client(self) -> AzureOpenAI:
        missing = self._missing_settings()
        if missing:
            self.logger.error("Language model is not configured", extra={"missing": missing})
            raise ConfigurationMissing(f"Missing settings: {', '.join(missing)}")

        if self._client is None:
            try:
                self._client = AzureOpenAI(
                    azure_endpoint=self.endpoint,
                    api_key=self.api_key,
                    api_version=self.api_version,
                    timeout=self.timeout,
                    max_retries=self.max_retries,
                )
            except Exception as exc:
                self.logger.exception(
                    "Failed to initialize AzureOpenAI client", extra={"error": str(exc)}
                )
                raise UpstreamUnavailable(str(exc)) from exc
        return self._client

    def complete(self, messages: List[Dict[str, str]]) -> str:
        """Run one chat completion and return the assistant content string.

        Raises ConfigurationMissing when credentials are absent and
        UpstreamUnavailable when the request fails, times out or returns no text.
        """
        client = self._get_sdk_client()
        chat_messages: List[ChatCompletionMessageParam] = messages  # type: ignore

        self.logger.info(
            "Sending chat completion",
            extra={"deployment": self.deployment, "messages": len(chat_messages)},
        )
        try:
            resp = client.chat.completions.create(
                model=self.deployment,
                messages=chat_messages,
                temperature=self.temperature,
            )
        except Exception as exc:
            self.logger.exception("Azure OpenAI request failed", extra={"error": str(exc)})
            raise UpstreamUnavailable(str(exc)) from exc

        content = resp.choices[0].message.content if resp.choices else None
        if not content or not content.strip():
            self.logger.warning("Azure OpenAI returned no content", extra={"deployment": self.deployment})
            raise UpstreamUnavailable("Empty response from language model")

        return content.strip()


# Singleton client
_client: Optional[AzureChatClient] = None


def get_client() -> AzureChatClient:
    global _client
    if _client is None:
        _client = AzureChatClient()
    return _client
