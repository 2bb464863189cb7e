"""
Explanation generation for Trade Agent.

This module turns an EqualizeOutcome into structured ExplanationNode objects.
All functions are pure and deterministic. The LLM layer uses these nodes
to generate human-readable summaries.

Node Categories:
- acceptance: Where the counterparty's valuation started and ended
- asset: One node per asset the engine added
- direction: Which way the search ran and whether it stabilized
- budget: The asset budget ended the search
"""

from trade_agent.models import (
    EqualizeOutcome,
    EqualizeStatus,
    ExplanationNode,
    SearchDirection,
    StepDecision,
    TradeProposal,
)


# =============================================================================
# Main Entry Point
# =============================================================================


def generate_explanation_nodes(
    proposal: TradeProposal,
    outcome: EqualizeOutcome,
) -> list[ExplanationNode]:
    """
    Generate structured explanation nodes from a negotiation outcome.

    Args:
        proposal: The proposal the search started from
        outcome: The negotiation outcome

    Returns:
        List of ExplanationNode objects for LLM/UI rendering
    """
    nodes: list[ExplanationNode] = []
    nodes.extend(_generate_acceptance_nodes(outcome))
    nodes.extend(_generate_asset_nodes(proposal, outcome))
    nodes.extend(_generate_direction_nodes(outcome))
    nodes.extend(_generate_budget_nodes(outcome))
    return nodes


# =============================================================================
# Acceptance Nodes
# =============================================================================


def _generate_acceptance_nodes(outcome: EqualizeOutcome) -> list[ExplanationNode]:
    if outcome.status == EqualizeStatus.OK:
        return [
            ExplanationNode(
                id="acceptance_ok",
                label="Counterparty accepts the trade",
                severity="info",
                category="acceptance",
                dv_before=outcome.initial_dv,
                dv_after=outcome.final_dv,
                detail=(
                    f"Counterparty valuation moved from {outcome.initial_dv:.2f} "
                    f"to {outcome.final_dv:.2f}"
                ),
            )
        ]
    return [
        ExplanationNode(
            id="acceptance_none",
            label="No acceptable deal found",
            severity="error",
            category="acceptance",
            dv_before=outcome.initial_dv,
            detail="No combination of available assets made the counterparty accept",
        )
    ]


# =============================================================================
# Asset Nodes
# =============================================================================


def _generate_asset_nodes(
    proposal: TradeProposal,
    outcome: EqualizeOutcome,
) -> list[ExplanationNode]:
    nodes: list[ExplanationNode] = []
    for asset in outcome.added_assets:
        giver = "requester" if asset.tid == proposal.requester.tid else "counterparty"
        nodes.append(
            ExplanationNode(
                id=f"asset_{asset.kind.value}_{asset.asset_id}",
                label=f"Added {asset.label()} from team {asset.tid}",
                severity="info",
                category="asset",
                tid=asset.tid,
                asset_ids=[asset.asset_id],
                detail=f"Given up by the {giver}",
            )
        )
    return nodes


# =============================================================================
# Direction Nodes
# =============================================================================


def _generate_direction_nodes(outcome: EqualizeOutcome) -> list[ExplanationNode]:
    nodes: list[ExplanationNode] = []

    if outcome.initial_dv > 0:
        nodes.append(
            ExplanationNode(
                id="direction_requester",
                label="Started acceptable; searched for value back to the requester",
                severity="info",
                category="direction",
                dv_before=outcome.initial_dv,
            )
        )
    else:
        nodes.append(
            ExplanationNode(
                id="direction_counterparty",
                label="Started unacceptable; added value for the counterparty",
                severity="info",
                category="direction",
                dv_before=outcome.initial_dv,
            )
        )

    if any(step.decision == StepDecision.STABILIZE for step in outcome.steps):
        nodes.append(
            ExplanationNode(
                id="direction_stabilized",
                label="Stabilization pass run after acceptance",
                severity="info",
                category="direction",
                detail="Re-running the search on this result will not change it",
            )
        )

    rollbacks = [s for s in outcome.steps if s.decision == StepDecision.ROLLED_BACK]
    for step in rollbacks:
        nodes.append(
            ExplanationNode(
                id=f"direction_rollback_{step.asset.kind.value}_{step.asset.asset_id}",
                label=f"Kept {step.asset.label()} out of the deal",
                severity="info",
                category="direction",
                tid=step.asset.tid,
                asset_ids=[step.asset.asset_id],
                dv_before=step.dv_before,
                dv_after=step.dv_after,
                detail="Adding it would have lost the counterparty's acceptance",
            )
        )

    wrong_way = [s for s in outcome.steps if s.decision == StepDecision.WRONG_DIRECTION]
    for step in wrong_way:
        toward = (
            "counterparty" if step.direction == SearchDirection.TOWARD_COUNTERPARTY else "requester"
        )
        nodes.append(
            ExplanationNode(
                id=f"direction_stalled_{step.asset.kind.value}_{step.asset.asset_id}",
                label=f"Search toward the {toward} stalled",
                severity="warning",
                category="direction",
                tid=step.asset.tid,
                asset_ids=[step.asset.asset_id],
                dv_before=step.dv_before,
                dv_after=step.dv_after,
            )
        )

    return nodes


# =============================================================================
# Budget Nodes
# =============================================================================


def _generate_budget_nodes(outcome: EqualizeOutcome) -> list[ExplanationNode]:
    stopped = [
        s
        for s in outcome.steps
        if s.decision in (StepDecision.BUDGET_EXHAUSTED, StepDecision.ACCEPTED)
    ]
    if not stopped:
        return []
    step = stopped[-1]
    return [
        ExplanationNode(
            id="budget_exhausted",
            label="Asset budget reached",
            severity="warning" if outcome.status == EqualizeStatus.NO_DEAL else "info",
            category="budget",
            dv_after=step.dv_after,
            detail=f"Search stopped after {len(outcome.added_assets)} added assets",
        )
    ]
