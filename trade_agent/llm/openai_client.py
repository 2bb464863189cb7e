"""
OpenAI LLM Client for Trade Agent.

Writes the counterparty GM's reply to a negotiation from its explanation
nodes. Implements the LLMClient Protocol; needs OPENAI_API_KEY.
"""

import logging
import os
from typing import Optional

import openai
from openai import OpenAI

from trade_agent.config import DEFAULT_LLM_CONFIG, LLMConfig
from trade_agent.exceptions import InfrastructureError
from trade_agent.llm.prompts import format_explanation_system, format_explanation_user
from trade_agent.models import ExplanationNode

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """The LLM call failed for a reason other than infrastructure (bad request, empty reply)."""


def _translate(e: Exception) -> Exception:
    """Map an OpenAI SDK exception to InfrastructureError (retryable) or LLMError."""
    if isinstance(e, openai.APIConnectionError):
        return InfrastructureError(f"Cannot reach OpenAI API: {e}")
    if isinstance(e, openai.APIStatusError):
        if e.status_code >= 500:
            return InfrastructureError(f"OpenAI API error ({e.status_code}): {e}")
        return LLMError(f"OpenAI API call failed ({e.status_code}): {e}")
    return LLMError(f"OpenAI API call failed: {e}")


class OpenAILLMClient:
    """
    LLMClient backed by the OpenAI chat completions API.

    Attributes:
        config: Model, temperature and token limit
        client: openai.OpenAI instance
    """

    def __init__(self, config: LLMConfig = DEFAULT_LLM_CONFIG, api_key: Optional[str] = None):
        """
        Raises:
            ValueError: If no API key is passed and OPENAI_API_KEY is unset
        """
        key = api_key or os.environ.get("OPENAI_API_KEY")
        if not key:
            raise ValueError(
                "OpenAI API key required. Set OPENAI_API_KEY or pass api_key."
            )
        self.config = config
        self.client = OpenAI(api_key=key)

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.config.temperature,
                max_completion_tokens=self.config.max_tokens,
            )
        except Exception as e:
            raise _translate(e) from e

        content = response.choices[0].message.content
        if content is None:
            raise LLMError("LLM returned empty response")
        return content.strip()

    def generate_explanation_summary(self, nodes: list[ExplanationNode]) -> str:
        """
        Reply to the proposal as the counterparty's general manager.

        Raises:
            InfrastructureError: API unreachable or 5xx
            LLMError: Any other API failure or an empty reply
        """
        summary = self._complete(format_explanation_system(), format_explanation_user(nodes))
        logger.info(f"LLM generated summary from {len(nodes)} nodes ({len(summary)} chars)")
        return summary
