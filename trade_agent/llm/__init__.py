"""
LLM module for Trade Agent.

Contains the LLM client interface and implementations for trade summaries.
"""

from trade_agent.llm.interface import LLMClient
from trade_agent.llm.mock import MockLLMClient

__all__ = [
    "LLMClient",
    "MockLLMClient",
]
