"""
LLM Client Interface for Trade Agent.

The LLM takes no part in the search. Once a negotiation has finished it
turns the structured explanation nodes into a short reply from the
counterparty's general manager. MockLLMClient and OpenAILLMClient both
satisfy this Protocol.
"""

from typing import Protocol, runtime_checkable

from trade_agent.models import ExplanationNode


@runtime_checkable
class LLMClient(Protocol):
    def generate_explanation_summary(self, nodes: list[ExplanationNode]) -> str:
        """
        2-3 sentence reply to the proposal.

        Must agree with the nodes: with an error-severity acceptance node
        there is no deal, and the reply must not offer one.
        """
        ...
