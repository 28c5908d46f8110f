"""
Tests for the chat session: grounding, error absorption and the send gate.
"""

import threading
import unittest
from unittest import mock

from catalog.assistant import ChatSession
from catalog.errors import ConfigurationMissing, SessionBusy, UpstreamUnavailable
from catalog.models import PricingConfig, ProductRecord
from catalog.relevance import NO_MATCHES_MARKER
from utils.llm_client import AzureChatClient
from utils.prompt import APOLOGY_MESSAGE, CONFIGURATION_MISSING_MESSAGE

CATALOG = [
    ProductRecord(id="1", brand="Chanel", name="No.5", base_price=120.0),
    ProductRecord(id="2", brand="Dior", name="Sauvage", base_price=None),
    ProductRecord(id="3", brand="Chanel", name="Coco Mademoiselle", base_price=150.0),
]


class TestChatSession(unittest.TestCase):

    def setUp(self):
        self.client = mock.Mock(spec=AzureChatClient)
        self.client.complete.return_value = "No.5 costs 13,260 ₽."
        self.session = ChatSession(
            catalog=CATALOG,
            config=PricingConfig(exchange_rate=98, fixed_markup=1500),
            client=self.client,
            history_turns=2,
        )

    def _sent_messages(self):
        return self.client.complete.call_args[0][0]

    def test_context_holds_verbatim_display_prices(self):
        reply = self.session.ask("chanel")
        self.assertEqual(reply, "No.5 costs 13,260 ₽.")

        messages = self._sent_messages()
        system = messages[0]["content"]
        self.assertEqual(messages[0]["role"], "system")
        self.assertIn("Chanel | No.5 | 13,260 ₽", system)
        self.assertIn("Chanel | Coco Mademoiselle | 16,200 ₽", system)
        self.assertNotIn("Dior", system.split("PRICE LIST (")[1])
        self.assertEqual(messages[-1], {"role": "user", "content": "chanel"})

    def test_no_matches_marker_sent(self):
        self.session.ask("versace")
        system = self._sent_messages()[0]["content"]
        self.assertTrue(system.rstrip().endswith(NO_MATCHES_MARKER))

    def test_config_change_updates_context(self):
        self.session.apply_config(PricingConfig(exchange_rate=100, fixed_markup=0))
        self.session.ask("no.5")
        self.assertIn("Chanel | No.5 | 12,000 ₽", self._sent_messages()[0]["content"])
        self.assertEqual(self.session.display_products()[0].display_price, "12,000 ₽")

    def test_history_is_bounded(self):
        for question in ("chanel", "dior", "coco"):
            self.session.ask(question)
        messages = self._sent_messages()
        # system + last 2 transcript messages + new question
        self.assertEqual(len(messages), 4)
        self.assertEqual(messages[1], {"role": "user", "content": "dior"})
        self.assertEqual(messages[2]["role"], "assistant")
        self.assertEqual(len(self.session.transcript), 6)

    def test_upstream_failure_becomes_apology(self):
        self.client.complete.side_effect = UpstreamUnavailable("timeout")
        self.assertEqual(self.session.ask("chanel"), APOLOGY_MESSAGE)
        self.assertEqual(self.session.transcript[-1], {"role": "assistant", "content": APOLOGY_MESSAGE})

        # Session stays usable
        self.client.complete.side_effect = None
        self.assertEqual(self.session.ask("chanel"), "No.5 costs 13,260 ₽.")
        self.assertTrue(self.session.can_send)

    def test_missing_configuration_becomes_notice(self):
        self.client.complete.side_effect = ConfigurationMissing("AZURE_OPENAI_KEY")
        self.assertEqual(self.session.ask("dior"), CONFIGURATION_MISSING_MESSAGE)
        self.assertTrue(self.session.can_send)

    def test_only_one_request_in_flight(self):
        started = threading.Event()
        release = threading.Event()

        def slow_complete(messages):
            started.set()
            release.wait(5)
            return "done"

        self.client.complete.side_effect = slow_complete
        worker = threading.Thread(target=self.session.ask, args=("chanel",))
        worker.start()
        try:
            self.assertTrue(started.wait(5))
            self.assertFalse(self.session.can_send)
            with self.assertRaises(SessionBusy):
                self.session.ask("dior")
        finally:
            release.set()
            worker.join(5)
        self.assertTrue(self.session.can_send)

    def test_reset_clears_catalog_and_transcript(self):
        self.session.ask("chanel")
        self.session.reset()
        self.assertEqual(self.session.catalog, [])
        self.assertEqual(self.session.transcript, [])


class TestAzureChatClient(unittest.TestCase):

    def _client(self, **kwargs):
        client = AzureChatClient(endpoint="https://example.openai.azure.com", api_key="key", deployment="gpt", **kwargs)
        return client

    def test_missing_credentials(self):
        client = self._client()
        client.api_key = None
        with self.assertRaises(ConfigurationMissing):
            client.complete([{"role": "user", "content": "hi"}])

    @mock.patch("utils.llm_client.AzureOpenAI")
    def test_returns_content(self, azure_cls):
        completion = mock.Mock()
        completion.choices = [mock.Mock(message=mock.Mock(content="  Hello  "))]
        azure_cls.return_value.chat.completions.create.return_value = completion

        client = self._client(timeout=12)
        self.assertEqual(client.complete([{"role": "user", "content": "hi"}]), "Hello")
        self.assertEqual(azure_cls.call_args.kwargs["timeout"], 12)

    @mock.patch("utils.llm_client.AzureOpenAI")
    def test_empty_content_is_unavailable(self, azure_cls):
        completion = mock.Mock()
        completion.choices = [mock.Mock(message=mock.Mock(content=""))]
        azure_cls.return_value.chat.completions.create.return_value = completion
        with self.assertRaises(UpstreamUnavailable):
            self._client().complete([{"role": "user", "content": "hi"}])

    @mock.patch("utils.llm_client.AzureOpenAI")
    def test_request_error_is_unavailable(self, azure_cls):
        azure_cls.return_value.chat.completions.create.side_effect = RuntimeError("connection reset")
        with self.assertRaises(UpstreamUnavailable):
            self._client().complete([{"role": "user", "content": "hi"}])


if __name__ == "__main__":
    unittest.main()
