"""
Tests for the Gemini classifier.

A fake client stands in for the SDK client, so the request it would send can
be inspected without network access.
"""

from types import SimpleNamespace

import pytest

from ledger_recon.classification.gemini import GeminiClassifier, _unwrap_json_fence
from ledger_recon.config import ClassificationConfig, ProcessingMode
from ledger_recon.ingestion.documents import DocumentPart
from ledger_recon.utils.exceptions import ConfigurationError


class FakeModels:
    def __init__(self, text):
        self.text = text
        self.requests = []

    def generate_content(self, **kwargs):
        self.requests.append(kwargs)
        return SimpleNamespace(text=self.text)


class FakeClient:
    def __init__(self, text):
        self.models = FakeModels(text)


@pytest.fixture
def documents():
    bank = DocumentPart("bank.pdf", "application/pdf", b"%PDF-1.4 stub")
    ledger = DocumentPart("ledger.csv", "text/csv", b"Date,Description,Amount\n")
    return bank, ledger


class TestGeminiClassifier:
    """Tests for the request sent and the response parsing."""

    def test_fast_mode_request(self, documents):
        # Arrange
        client = FakeClient('{"matchedTransactions": []}')
        classifier = GeminiClassifier(ClassificationConfig(), client=client)

        # Act
        raw = classifier.classify(*documents, "2024-03-31", ProcessingMode.FAST)

        # Assert
        assert raw == {"matchedTransactions": []}
        (request,) = client.models.requests
        assert request["model"] == "gemini-3-flash-preview"
        assert "2024-03-31" in request["contents"][0]
        assert len(request["contents"]) == 3

        config = request["config"]
        assert config.response_mime_type == "application/json"
        assert "2024-03-31" in config.system_instruction
        assert config.thinking_config.thinking_budget == 0

    def test_thorough_mode_uses_pro_model_without_thinking_limit(self, documents):
        client = FakeClient("{}")
        classifier = GeminiClassifier(ClassificationConfig(), client=client)

        classifier.classify(*documents, "2024-03-31", ProcessingMode.THOROUGH)

        request = client.models.requests[0]
        assert request["model"] == "gemini-3-pro-preview"
        assert request["config"].thinking_config is None

    def test_fenced_response_is_unwrapped(self, documents):
        client = FakeClient('```json\n{"summary": {"asAtDate": "2024-03-31"}}\n```')
        classifier = GeminiClassifier(ClassificationConfig(), client=client)

        raw = classifier.classify(*documents, "2024-03-31", ProcessingMode.FAST)

        assert raw["summary"]["asAtDate"] == "2024-03-31"

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_response_raises(self, documents, text):
        classifier = GeminiClassifier(ClassificationConfig(), client=FakeClient(text))

        with pytest.raises(ValueError):
            classifier.classify(*documents, "2024-03-31", ProcessingMode.FAST)

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("RECON_TEST_KEY", raising=False)

        with pytest.raises(ConfigurationError, match="RECON_TEST_KEY"):
            GeminiClassifier(ClassificationConfig(api_key_env="RECON_TEST_KEY"))


class TestUnwrapJsonFence:
    @pytest.mark.parametrize(
        "payload, expected",
        [
            ('{"a": 1}', '{"a": 1}'),
            ('  ```json\n{"a": 1}\n```  ', '{"a": 1}'),
            ('```\n{"a": 1}\n```', '{"a": 1}'),
        ],
    )
    def test_unwrap(self, payload, expected):
        assert _unwrap_json_fence(payload) == expected
