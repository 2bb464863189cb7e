"""
Forward-selection equalizer for Trade Agent.

Grows a trade proposal one asset at a time until the counterparty's
valuation oracle likes it, preferring the smallest concession that gets
there. Once a deal is acceptable, a stabilization pass pulls value back
toward the requester for as long as the counterparty still accepts, so
running the equalizer again on its own result changes nothing.

Key components:
- value_change: Counterparty dv for a proposal
- score_candidates: Oracle dv for every candidate addition
- select_candidate: Smallest positive dv, else the largest dv
- try_add_one_asset: One round of forward selection
- equalize: The full search (single entry point)
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from trade_agent.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from trade_agent.engine.candidates import collect_candidates
from trade_agent.models import (
    Asset,
    NegotiationContext,
    ScoredAsset,
    SearchDirection,
    SearchStep,
    StepDecision,
    TradeProposal,
)
from trade_agent.roster import AssetStore
from trade_agent.valuation.interface import ValuationOracle


logger = logging.getLogger(__name__)


# =============================================================================
# Scoring
# =============================================================================


def value_change(
    oracle: ValuationOracle,
    proposal: TradeProposal,
    session_key: str,
) -> float:
    """Counterparty's dv for the proposal (positive = counterparty accepts)."""
    requester, counterparty = proposal.teams
    return oracle.value_change(
        counterparty.tid,
        list(requester.pids),
        list(counterparty.pids),
        list(requester.dpids),
        list(counterparty.dpids),
        session_key,
        requester.tid,
    )


def score_candidates(
    proposal: TradeProposal,
    candidates: list[Asset],
    oracle: ValuationOracle,
    session_key: str,
    config: EngineConfig,
) -> list[ScoredAsset]:
    """
    Score each candidate by the dv of the proposal with it added.

    Evaluations are independent reads, so with config.max_workers > 1 they
    run on a thread pool. Output order matches candidates either way.
    """

    def score(asset: Asset) -> ScoredAsset:
        dv = value_change(oracle, proposal.with_asset(asset), session_key)
        return ScoredAsset(asset=asset, dv=dv)

    if config.max_workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            return list(pool.map(score, candidates))
    return [score(asset) for asset in candidates]


def select_candidate(scored: list[ScoredAsset]) -> ScoredAsset:
    """
    Pick the asset to add this round.

    Ranks by dv descending (ties broken by Asset.sort_key) and takes the
    lowest-ranked candidate that is still positive, i.e. the weakest
    concession the counterparty would take on its own. If nothing is
    positive, takes the best available so the search keeps moving.

    Args:
        scored: Non-empty list of scored candidates

    Returns:
        The chosen candidate
    """
    ranked = sorted(scored, key=lambda s: s.asset.sort_key)
    ranked.sort(key=lambda s: s.dv, reverse=True)

    positive = [s for s in ranked if s.dv > 0]
    if positive:
        return positive[-1]
    return ranked[0]


def _next_asset(
    proposal: TradeProposal,
    ctx: NegotiationContext,
    store: AssetStore,
    oracle: ValuationOracle,
    is_first_round: bool,
    config: EngineConfig,
) -> Optional[ScoredAsset]:
    candidates = collect_candidates(proposal, ctx, store, is_first_round, config)
    if not candidates:
        return None

    scored = score_candidates(proposal, candidates, oracle, ctx.session_key, config)
    choice = select_candidate(scored)
    logger.debug(
        f"Scored {len(scored)} candidates, chose {choice.asset.label()} "
        f"from team {choice.asset.tid} (dv={choice.dv:.3f})"
    )
    return choice


def try_add_one_asset(
    proposal: TradeProposal,
    ctx: NegotiationContext,
    store: AssetStore,
    oracle: ValuationOracle,
    is_first_round: bool,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> Optional[TradeProposal]:
    """
    Run one round of forward selection.

    Args:
        proposal: Current proposal
        ctx: Negotiation context (session key, requester hold, filter)
        store: Roster access and eligibility predicate
        oracle: Valuation oracle
        is_first_round: Whether the position filter applies
        config: Engine configuration

    Returns:
        New proposal with one asset added, or None if no candidate exists
    """
    choice = _next_asset(proposal, ctx, store, oracle, is_first_round, config)
    if choice is None:
        return None
    return proposal.with_asset(choice.asset)


# =============================================================================
# Equalization Search
# =============================================================================


def _sign(x: float) -> int:
    return (x > 0) - (x < 0)


def equalize(
    proposal: TradeProposal,
    ctx: NegotiationContext,
    store: AssetStore,
    oracle: ValuationOracle,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    trace: Optional[list[SearchStep]] = None,
    _depth: int = 0,
) -> Optional[TradeProposal]:
    """
    Add assets until the counterparty accepts, then stabilize.

    If the starting proposal is not acceptable, assets are added toward the
    counterparty until its dv turns positive; the stabilization pass then
    re-runs the search from that baseline. If the starting proposal is
    already acceptable, assets are added back toward the requester until the
    next addition would flip the counterparty's answer.

    Any addition that moves dv against the current direction ends the
    search and is discarded.

    Args:
        proposal: Starting proposal (teams[0] = requester)
        ctx: Negotiation context; its session key is used for every oracle call
        store: Roster access and eligibility predicate
        oracle: Valuation oracle
        config: Engine configuration
        trace: If given, every scored round is appended as a SearchStep

    Returns:
        An acceptable proposal (counterparty dv > 0), or None if no
        acceptable deal was found
    """
    prev_dv = value_change(oracle, proposal, ctx.session_key)
    if prev_dv > 0:
        direction = SearchDirection.TOWARD_REQUESTER
    else:
        direction = SearchDirection.TOWARD_COUNTERPARTY

    logger.debug(
        f"equalize depth={_depth}: initial dv={prev_dv:.3f}, direction={direction.name}, "
        f"budget={ctx.max_assets_to_add}"
    )

    if ctx.max_assets_to_add == 0:
        return proposal if prev_dv > 0 else None

    prev_proposal = proposal
    added = 0

    while True:
        choice = _next_asset(prev_proposal, ctx, store, oracle, added == 0, config)
        if choice is None:
            logger.info(f"equalize depth={_depth}: no candidates left after {added} additions")
            return prev_proposal if prev_dv > 0 else None

        added += 1
        new_proposal = prev_proposal.with_asset(choice.asset)
        dv = value_change(oracle, new_proposal, ctx.session_key)

        def record(decision: StepDecision) -> None:
            if trace is not None:
                trace.append(
                    SearchStep(
                        depth=_depth,
                        round=added,
                        direction=direction,
                        asset=choice.asset,
                        dv_before=prev_dv,
                        dv_after=dv,
                        decision=decision,
                    )
                )

        if _sign(prev_dv - dv) != direction.value:
            record(StepDecision.WRONG_DIRECTION)
            logger.info(
                f"equalize depth={_depth}: {choice.asset.label()} moved dv the wrong way "
                f"({prev_dv:.3f} -> {dv:.3f}), discarding it"
            )
            return prev_proposal if prev_dv > 0 else None

        if direction == SearchDirection.TOWARD_COUNTERPARTY and dv > 0:
            if ctx.budget_allows(added):
                record(StepDecision.STABILIZE)
                logger.info(
                    f"equalize depth={_depth}: accepted after {added} additions, stabilizing"
                )
                return equalize(
                    new_proposal,
                    ctx.for_stabilization(added),
                    store,
                    oracle,
                    config,
                    trace,
                    _depth + 1,
                )
            record(StepDecision.ACCEPTED)
            logger.info(f"equalize depth={_depth}: accepted with budget exhausted")
            return new_proposal

        if direction == SearchDirection.TOWARD_REQUESTER and dv < 0 and prev_dv > 0:
            record(StepDecision.ROLLED_BACK)
            logger.info(
                f"equalize depth={_depth}: {choice.asset.label()} would lose acceptance, "
                f"rolling back"
            )
            return prev_proposal

        if ctx.max_assets_to_add is not None and added >= ctx.max_assets_to_add:
            record(StepDecision.BUDGET_EXHAUSTED)
            logger.info(f"equalize depth={_depth}: budget of {ctx.max_assets_to_add} used up")
            return new_proposal if dv > 0 else None

        record(StepDecision.CONTINUE)
        prev_proposal = new_proposal
        prev_dv = dv
