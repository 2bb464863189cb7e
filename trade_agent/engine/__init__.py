"""
Engine module for Trade Agent.

Contains the candidate collector, the forward-selection equalizer and
explanation generation.
"""

from trade_agent.engine.candidates import (
    collect_candidates,
    expand_position_filter,
)
from trade_agent.engine.equalizer import (
    equalize,
    score_candidates,
    select_candidate,
    try_add_one_asset,
    value_change,
)
from trade_agent.engine.explanations import generate_explanation_nodes

__all__ = [
    # Candidates
    "collect_candidates",
    "expand_position_filter",
    # Equalizer
    "value_change",
    "score_candidates",
    "select_candidate",
    "try_add_one_asset",
    "equalize",
    # Explanations
    "generate_explanation_nodes",
]
