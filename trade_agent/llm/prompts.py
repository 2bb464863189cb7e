"""
Prompt templates for LLM calls.

Templates are string constants that can be formatted with runtime values.
"""

from trade_agent.models import ExplanationNode

# =============================================================================
# generate_explanation_summary Prompts
# =============================================================================

GENERATE_EXPLANATION_SYSTEM = """You are the general manager of a professional basketball team
replying to a trade proposal. You will receive structured notes describing how a proposed
trade was adjusted until your team would accept it.

Write a 2-3 sentence reply in plain language:
1. Say whether you accept the trade as adjusted.
2. Mention the assets that were added, naming which team gives each one up.
3. If no deal was found, say so plainly and do not invent a counter-offer.

Do not mention valuation numbers, node ids, or how the adjustment was computed."""

GENERATE_EXPLANATION_USER = """Negotiation notes:
{nodes_json}

Write the reply."""


def format_explanation_system() -> str:
    """Format the system prompt for generate_explanation_summary."""
    return GENERATE_EXPLANATION_SYSTEM


def format_explanation_user(nodes: list[ExplanationNode]) -> str:
    """Format the user prompt for generate_explanation_summary."""
    nodes_json = "[\n"
    for node in nodes:
        nodes_json += f"  {node.model_dump_json(exclude_none=True)},\n"
    nodes_json += "]"
    return GENERATE_EXPLANATION_USER.format(nodes_json=nodes_json)
