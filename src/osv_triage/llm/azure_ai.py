"""
Azure OpenAI chat client for disposition suggestions.

This module wraps the Azure OpenAI chat completions API behind a single
"ask a question, get a string" call and records token usage in a JSON lines
log file.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from openai import APIConnectionError, APIStatusError, AzureOpenAI, OpenAIError

from ..config import AzureAISettings, load_azure_settings

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100
DEFAULT_MODEL = "gpt-3.5-turbo"


def _preview(text: str) -> str:
    return text[:PREVIEW_LENGTH] + "..." if len(text) > PREVIEW_LENGTH else text


class AzureAIClient:
    """
    Azure OpenAI client.

    Handles:
    - Model to deployment name mapping
    - Single-turn chat completions
    - Usage logging
    - Error handling (errors are logged, never raised from ask_question)
    """

    def __init__(self, settings: Optional[AzureAISettings] = None, client: Optional[AzureOpenAI] = None):
        """
        Initialize the client.

        Args:
            settings: Connection settings (loaded from the environment if not provided)
            client: Preconfigured SDK client, mainly for tests

        Raises:
            AzureAIConfigurationError: If settings are not provided and the
                environment is incomplete.
        """
        self.settings = settings or load_azure_settings()
        self._client = client or AzureOpenAI(
            api_key=self.settings.api_key,
            api_version=self.settings.api_version,
            azure_endpoint=self.settings.base_url,
        )

    def get_deployment_name(self, model: str) -> str:
        """Map a model name to its Azure deployment."""
        if self.settings.deployment:
            return self.settings.deployment

        deployments = self.settings.deployments
        if model in deployments.values():
            return model
        if model in deployments:
            return deployments[model]

        logger.warning(f"Model '{model}' not recognised, falling back to {DEFAULT_MODEL}")
        return deployments[DEFAULT_MODEL]

    def _log_usage(self, model: str, usage: Dict[str, Any], question: str, response_text: str) -> None:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "script": os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "unknown",
            "model": model,
            "usage": usage,
            "question_length": len(question),
            "response_length": len(response_text),
            "question_preview": _preview(question),
            "response_preview": _preview(response_text),
        }
        try:
            with open(self.settings.log_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            logger.warning(f"Failed to write usage log {self.settings.log_file}: {e}")

    def ask_question(
        self,
        question: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 1000,
        temperature: float = 0.7
    ) -> Optional[str]:
        """
        Send a single user message and return the answer.

        Args:
            question: The prompt.
            model: Model name, mapped to a deployment.
            max_tokens: Completion token limit.
            temperature: Sampling temperature.

        Returns:
            The stripped answer text, or None on an empty answer or any API error.
        """
        deployment = self.get_deployment_name(model)
        try:
            completion = self._client.chat.completions.create(
                model=deployment,
                messages=[{"role": "user", "content": question}],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except APIConnectionError as e:
            logger.error(f"Connection error: {e}")
            return None
        except APIStatusError as e:
            logger.error(f"API error {e.status_code}: {e.message}")
            return None
        except OpenAIError as e:
            logger.error(f"Azure OpenAI error: {e}")
            return None

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        response_text = content.strip() if content else ""
        if not response_text:
            logger.error("Empty response from Azure OpenAI")
            return None

        usage = completion.usage
        self._log_usage(
            model,
            {
                "total_tokens": getattr(usage, "total_tokens", None),
                "prompt_tokens": getattr(usage, "prompt_tokens", None),
                "completion_tokens": getattr(usage, "completion_tokens", None),
            },
            question,
            response_text,
        )
        return response_text
