"""
Deterministic stand-in for the LLM.

Used by the API when OPENAI_API_KEY is unset, and by tests. Replies are
built from the node categories alone, so the same outcome always gets the
same text.
"""

from typing import Optional

from trade_agent.models import ExplanationNode

NO_DEAL_REPLY = "We could not find a version of this trade that works for us. We'll pass for now."
AS_PROPOSED_REPLY = "We accept the trade as proposed."
MAX_NAMED_ASSETS = 3


class MockLLMClient:
    """
    LLMClient with canned replies.

    Attributes:
        custom_summary: If set, returned for every call
        call_counts: Calls per method name
        call_history: One dict per call (method, node_count, categories)
    """

    def __init__(self, custom_summary: Optional[str] = None):
        self.custom_summary = custom_summary
        self.call_counts = {"generate_explanation_summary": 0}
        self.call_history: list[dict] = []

    def generate_explanation_summary(self, nodes: list[ExplanationNode]) -> str:
        self.call_counts["generate_explanation_summary"] += 1
        self.call_history.append(
            {
                "method": "generate_explanation_summary",
                "node_count": len(nodes),
                "categories": [n.category for n in nodes],
            }
        )

        if self.custom_summary is not None:
            return self.custom_summary

        if any(n.category == "acceptance" and n.severity == "error" for n in nodes):
            return NO_DEAL_REPLY

        added = [n.label.removeprefix("Added ") for n in nodes if n.category == "asset"]
        if not added:
            return AS_PROPOSED_REPLY

        reply = f"We can make this work if we add {', '.join(added[:MAX_NAMED_ASSETS])}."
        if len(added) > MAX_NAMED_ASSETS:
            reply += f" That includes {len(added) - MAX_NAMED_ASSETS} more assets."
        return reply

    # =========================================================================
    # Test Helpers
    # =========================================================================

    def reset_counts(self) -> None:
        for key in self.call_counts:
            self.call_counts[key] = 0
        self.call_history.clear()

    def get_total_calls(self) -> int:
        return sum(self.call_counts.values())
