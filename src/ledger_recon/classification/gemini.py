"""
Gemini-backed classifier.

Sends both documents inline with a fixed instruction set and a response
schema, and returns the parsed JSON body.
"""

from typing import Any, Optional
import json
import logging
import os
import time

from google import genai
from google.genai import types

from ..config import ClassificationConfig, ProcessingMode
from ..ingestion.documents import DocumentPart
from ..utils.exceptions import ConfigurationError
from .base import Classifier

logger = logging.getLogger(__name__)

_TRANSACTION_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "date": {"type": "STRING"},
        "description": {"type": "STRING"},
        "amount": {"type": "NUMBER"},
        "type": {"type": "STRING", "enum": ["credit", "debit"]},
    },
}

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "summary": {
            "type": "OBJECT",
            "description": "Summary metrics and closing balances.",
            "properties": {
                "ledgerBalance": {
                    "type": "NUMBER",
                    "description": "Final closing balance per General Ledger",
                },
                "bankBalance": {
                    "type": "NUMBER",
                    "description": "Final closing balance per Bank Statement",
                },
                "asAtDate": {
                    "type": "STRING",
                    "description": "The date of the reconciliation (YYYY-MM-DD)",
                },
            },
            "required": ["ledgerBalance", "bankBalance", "asAtDate"],
        },
        "matchedTransactions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "bankTransaction": _TRANSACTION_SCHEMA,
                    "ledgerTransaction": _TRANSACTION_SCHEMA,
                },
            },
        },
        "unmatchedBankTransactions": {"type": "ARRAY", "items": _TRANSACTION_SCHEMA},
        "unmatchedLedgerEntries": {"type": "ARRAY", "items": _TRANSACTION_SCHEMA},
    },
}

SYSTEM_INSTRUCTION_TEMPLATE = """You are a precision forensic accountant. Reconcile a bank statement with a general ledger (spreadsheet, Excel or PDF).

TARGET DATE: perform the reconciliation as at {as_at_date}. Ignore any transactions after this date.

RULES:
1. Transaction types:
   - Bank: "credit" = deposit, "debit" = withdrawal.
   - Ledger: "debit" = receipt (cash in), "credit" = payment (cash out).
2. Closing balances: extract both balances as at {as_at_date}.
3. Output only JSON. Use absolute positive values for 'amount'.
"""

PROMPT_TEMPLATE = (
    "Reconcile these documents for the period ending {as_at_date}. Compare values exactly."
)


class GeminiClassifier(Classifier):
    """Classifier that calls a Gemini model through the google-genai SDK."""

    def __init__(
        self,
        config: ClassificationConfig,
        client: Optional[genai.Client] = None,
    ):
        """
        Initialize the classifier.

        Args:
            config: Classification settings (models, API key variable)
            client: Pre-built client; one is created from the environment
                when omitted

        Raises:
            ConfigurationError: If no client is given and the API key
                variable is not set
        """
        self.config = config
        if client is None:
            api_key = os.environ.get(config.api_key_env)
            if not api_key:
                raise ConfigurationError(
                    f"{config.api_key_env} environment variable is not set"
                )
            client = genai.Client(api_key=api_key)
        self.client = client

    def classify(
        self,
        bank_statement: DocumentPart,
        ledger: DocumentPart,
        as_at_date: str,
        mode: ProcessingMode,
    ) -> Any:
        model = self.config.model_for(mode)
        logger.info(
            f"Requesting reconciliation: model={model} as_at={as_at_date} "
            f"bank={bank_statement.name} ledger={ledger.name}"
        )

        start = time.time()
        response = self.client.models.generate_content(
            model=model,
            contents=[
                PROMPT_TEMPLATE.format(as_at_date=as_at_date),
                types.Part.from_bytes(data=bank_statement.data, mime_type=bank_statement.mime_type),
                types.Part.from_bytes(data=ledger.data, mime_type=ledger.mime_type),
            ],
            config=self._generation_config(as_at_date, mode),
        )
        logger.info(f"Classification response received in {time.time() - start:.2f}s")

        text = response.text
        if not text:
            raise ValueError("empty response from classification service")
        return json.loads(_unwrap_json_fence(text))

    def _generation_config(
        self, as_at_date: str, mode: ProcessingMode
    ) -> types.GenerateContentConfig:
        thinking_config = None
        if mode is ProcessingMode.FAST and self.config.fast_thinking_budget is not None:
            thinking_config = types.ThinkingConfig(
                thinking_budget=self.config.fast_thinking_budget
            )

        return types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION_TEMPLATE.format(as_at_date=as_at_date),
            response_mime_type="application/json",
            response_schema=RESPONSE_SCHEMA,
            temperature=self.config.temperature,
            thinking_config=thinking_config,
        )


def _unwrap_json_fence(payload: str) -> str:
    """Strip a markdown code fence (and ``json`` tag) around a JSON body."""
    text = payload.strip()
    if text.startswith("```"):
        lines = text.splitlines()[1:]
        if lines and lines[-1].startswith("```"):
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    return text
