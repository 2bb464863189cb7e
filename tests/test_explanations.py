"""
Tests for explanation node generation.

Covers each node category:
- acceptance: ok vs no deal
- asset: one node per added asset, giver identified
- direction: start direction, stabilization, rollbacks, stalls
- budget: emitted only when the budget ended the search
"""

from trade_agent.engine.explanations import generate_explanation_nodes
from trade_agent.models import (
    Asset,
    AssetKind,
    EqualizeOutcome,
    EqualizeStatus,
    SearchDirection,
    SearchStep,
    StepDecision,
    TradeProposal,
    TradeSide,
)


# =============================================================================
# Fixtures
# =============================================================================


BASE = TradeProposal(teams=(TradeSide(tid=0), TradeSide(tid=1, pids=(10,))))


def asset(asset_id: int, tid: int = 0, kind: AssetKind = AssetKind.PLAYER) -> Asset:
    return Asset(kind=kind, asset_id=asset_id, tid=tid, position="SG" if kind == AssetKind.PLAYER else None)


def step(decision: StepDecision, a: Asset, dv_before=-5.0, dv_after=1.0, depth=0, rnd=1,
         direction=SearchDirection.TOWARD_COUNTERPARTY) -> SearchStep:
    return SearchStep(
        depth=depth,
        round=rnd,
        direction=direction,
        asset=a,
        dv_before=dv_before,
        dv_after=dv_after,
        decision=decision,
    )


def ok_outcome(**overrides) -> EqualizeOutcome:
    fields = {
        "status": EqualizeStatus.OK,
        "proposal": BASE,
        "initial_dv": -5.0,
        "final_dv": 1.0,
        "session_key": "k",
    }
    fields.update(overrides)
    return EqualizeOutcome(**fields)


def no_deal_outcome(**overrides) -> EqualizeOutcome:
    fields = {"status": EqualizeStatus.NO_DEAL, "initial_dv": -5.0, "session_key": "k"}
    fields.update(overrides)
    return EqualizeOutcome(**fields)


def ids(nodes) -> list[str]:
    return [n.id for n in nodes]


# =============================================================================
# Acceptance
# =============================================================================


class TestAcceptanceNodes:
    def test_ok(self):
        nodes = generate_explanation_nodes(BASE, ok_outcome())

        node = nodes[0]
        assert node.id == "acceptance_ok"
        assert node.severity == "info"
        assert node.dv_before == -5.0
        assert node.dv_after == 1.0

    def test_no_deal(self):
        nodes = generate_explanation_nodes(BASE, no_deal_outcome())

        node = nodes[0]
        assert node.id == "acceptance_none"
        assert node.severity == "error"
        assert node.dv_after is None


# =============================================================================
# Assets
# =============================================================================


class TestAssetNodes:
    def test_one_node_per_added_asset(self):
        added = [asset(2), asset(7, kind=AssetKind.DRAFT_PICK)]

        nodes = generate_explanation_nodes(BASE, ok_outcome(added_assets=added))

        asset_nodes = [n for n in nodes if n.category == "asset"]
        assert ids(asset_nodes) == ["asset_player_2", "asset_draft_pick_7"]
        assert asset_nodes[0].label == "Added player 2 (SG) from team 0"
        assert asset_nodes[0].detail == "Given up by the requester"

    def test_counterparty_asset(self):
        nodes = generate_explanation_nodes(BASE, ok_outcome(added_assets=[asset(11, tid=1)]))

        node = next(n for n in nodes if n.category == "asset")
        assert node.tid == 1
        assert node.detail == "Given up by the counterparty"

    def test_no_assets_on_no_deal(self):
        nodes = generate_explanation_nodes(BASE, no_deal_outcome())
        assert not [n for n in nodes if n.category == "asset"]


# =============================================================================
# Direction
# =============================================================================


class TestDirectionNodes:
    def test_started_unacceptable(self):
        nodes = generate_explanation_nodes(BASE, ok_outcome())
        assert "direction_counterparty" in ids(nodes)

    def test_started_acceptable(self):
        nodes = generate_explanation_nodes(BASE, ok_outcome(initial_dv=3.0))
        assert "direction_requester" in ids(nodes)

    def test_zero_counts_as_unacceptable(self):
        nodes = generate_explanation_nodes(BASE, no_deal_outcome(initial_dv=0.0))
        assert "direction_counterparty" in ids(nodes)

    def test_stabilized(self):
        steps = [step(StepDecision.STABILIZE, asset(2))]

        nodes = generate_explanation_nodes(BASE, ok_outcome(steps=steps))

        assert "direction_stabilized" in ids(nodes)

    def test_rollback(self):
        steps = [
            step(StepDecision.STABILIZE, asset(2)),
            step(
                StepDecision.ROLLED_BACK,
                asset(12, tid=1),
                dv_before=1.0,
                dv_after=-2.0,
                depth=1,
                direction=SearchDirection.TOWARD_REQUESTER,
            ),
        ]

        nodes = generate_explanation_nodes(BASE, ok_outcome(steps=steps))

        node = next(n for n in nodes if n.id == "direction_rollback_player_12")
        assert node.tid == 1
        assert node.dv_after == -2.0

    def test_wrong_direction(self):
        steps = [step(StepDecision.WRONG_DIRECTION, asset(3), dv_before=-5.0, dv_after=-6.0)]

        nodes = generate_explanation_nodes(BASE, no_deal_outcome(steps=steps))

        node = next(n for n in nodes if n.id == "direction_stalled_player_3")
        assert node.severity == "warning"
        assert node.label == "Search toward the counterparty stalled"


# =============================================================================
# Budget
# =============================================================================


class TestBudgetNodes:
    def test_no_budget_node_without_budget_stop(self):
        steps = [step(StepDecision.CONTINUE, asset(2))]

        nodes = generate_explanation_nodes(BASE, ok_outcome(steps=steps))

        assert "budget_exhausted" not in ids(nodes)

    def test_budget_exhausted_without_deal(self):
        steps = [step(StepDecision.BUDGET_EXHAUSTED, asset(2), dv_after=-1.0)]

        nodes = generate_explanation_nodes(BASE, no_deal_outcome(steps=steps))

        node = next(n for n in nodes if n.id == "budget_exhausted")
        assert node.severity == "warning"
        assert node.dv_after == -1.0

    def test_budget_reached_with_deal(self):
        steps = [step(StepDecision.ACCEPTED, asset(2))]

        nodes = generate_explanation_nodes(
            BASE, ok_outcome(steps=steps, added_assets=[asset(2)])
        )

        node = next(n for n in nodes if n.id == "budget_exhausted")
        assert node.severity == "info"
        assert node.detail == "Search stopped after 1 added assets"


class TestNodeOrdering:
    def test_categories_in_order(self):
        steps = [step(StepDecision.ACCEPTED, asset(2))]
        outcome = ok_outcome(steps=steps, added_assets=[asset(2)])

        nodes = generate_explanation_nodes(BASE, outcome)

        assert [n.category for n in nodes] == ["acceptance", "asset", "direction", "budget"]
