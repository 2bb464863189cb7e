"""
Orchestrator for Trade Agent.

The orchestrator is a thin coordination layer that delegates all business
logic to other modules:
- Validation: trade_agent.validation (validate_request)
- Rosters: trade_agent.roster (InMemoryRoster)
- Valuation: trade_agent.valuation (TableValuationOracle)
- Search: trade_agent.engine.equalizer (equalize)
- Explanations: trade_agent.engine.explanations (generate_explanation_nodes)
- LLM calls: trade_agent.llm (generate_explanation_summary)
"""

import logging
from typing import Optional

from trade_agent.config import (
    DEFAULT_ENGINE_CONFIG,
    DEFAULT_VALUATION_CONFIG,
    EngineConfig,
    ValuationConfig,
)
from trade_agent.engine.equalizer import equalize, value_change
from trade_agent.engine.explanations import generate_explanation_nodes
from trade_agent.llm.interface import LLMClient
from trade_agent.models import (
    EqualizeOutcome,
    EqualizeRequest,
    EqualizeResponse,
    EqualizeStatus,
    Explanation,
    NegotiationContext,
    SearchStep,
    TradeProposal,
    new_session_key,
)
from trade_agent.roster import InMemoryRoster
from trade_agent.validation import ValidationError, validate_request
from trade_agent.valuation.interface import ValuationOracle
from trade_agent.valuation.table import TableValuationOracle


logger = logging.getLogger(__name__)


# =============================================================================
# Helper Functions
# =============================================================================


def build_context(request: EqualizeRequest) -> NegotiationContext:
    """
    Build the negotiation context for one top-level run.

    A session key is generated here when the caller did not supply one,
    so the whole run, stabilization pass included, shares it.
    """
    return NegotiationContext(
        hold_requester_constant=request.hold_requester_constant,
        first_asset_filter=frozenset(pos.strip() for pos in request.looking_for_positions),
        max_assets_to_add=request.max_assets_to_add,
        session_key=request.session_key or new_session_key(),
    )


def negotiate(
    proposal: TradeProposal,
    ctx: NegotiationContext,
    roster: InMemoryRoster,
    oracle: ValuationOracle,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> EqualizeOutcome:
    """
    Run the equalizer and package its result.

    Args:
        proposal: Starting proposal
        ctx: Negotiation context
        roster: Asset store
        oracle: Valuation oracle
        config: Engine configuration

    Returns:
        EqualizeOutcome; status NO_DEAL means no acceptable deal was found
    """
    initial_dv = value_change(oracle, proposal, ctx.session_key)
    steps: list[SearchStep] = []

    result = equalize(proposal, ctx, roster, oracle, config, trace=steps)

    if result is None:
        logger.info(f"No acceptable deal found after {len(steps)} scored rounds")
        return EqualizeOutcome(
            status=EqualizeStatus.NO_DEAL,
            initial_dv=initial_dv,
            steps=steps,
            session_key=ctx.session_key,
        )

    final_dv = value_change(oracle, result, ctx.session_key)
    added_assets = [
        roster.get_asset(kind, asset_id) for _, kind, asset_id in result.added_since(proposal)
    ]
    logger.info(
        f"Deal found: {len(added_assets)} assets added, dv {initial_dv:.3f} -> {final_dv:.3f}"
    )

    return EqualizeOutcome(
        status=EqualizeStatus.OK,
        proposal=result,
        initial_dv=initial_dv,
        final_dv=final_dv,
        added_assets=added_assets,
        steps=steps,
        session_key=ctx.session_key,
    )


# =============================================================================
# Main Entry Point
# =============================================================================


def run_negotiation(
    request: EqualizeRequest,
    llm: LLMClient,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    valuation_config: ValuationConfig = DEFAULT_VALUATION_CONFIG,
    oracle: Optional[ValuationOracle] = None,
) -> EqualizeResponse:
    """
    Main entry point: answer "what would make this deal work?".

    Args:
        request: Proposal, rosters and negotiation options
        llm: LLM client for the narrative summary
        config: Engine configuration
        valuation_config: Settings for the table oracle built from the request
        oracle: Use this oracle instead of building one from the request

    Returns:
        EqualizeResponse with the outcome and its explanation

    Raises:
        ValidationError: If the request is inconsistent with its rosters

    Flow:
        1. Validate request
        2. Build roster, oracle and context
        3. Run the equalizer with a search trace
        4. Generate explanation nodes and LLM summary
    """
    errors = validate_request(request)
    if errors:
        raise ValidationError(errors)

    proposal = TradeProposal(teams=request.teams)
    roster = InMemoryRoster(request.players, request.draft_picks)
    if oracle is None:
        oracle = TableValuationOracle.from_roster(roster, valuation_config)
    ctx = build_context(request)

    outcome = negotiate(proposal, ctx, roster, oracle, config)

    nodes = generate_explanation_nodes(proposal, outcome)
    summary = llm.generate_explanation_summary(nodes)

    return EqualizeResponse(
        outcome=outcome,
        explanation=Explanation(summary=summary, nodes=nodes),
    )
