"""
Candidate collection for the equalization engine.

Lists every asset the engine may add next to a proposal. All functions are
pure given the asset store.
"""

from typing import Iterable

from trade_agent.config import EngineConfig
from trade_agent.models import Asset, NegotiationContext, TradeProposal, TradeSide
from trade_agent.roster import AssetStore


# =============================================================================
# Position Filter
# =============================================================================


def expand_position_filter(
    requested: Iterable[str],
    config: EngineConfig,
) -> frozenset[str]:
    """
    Expand requested positions into concrete roster positions.

    With expand_position_groups on, "G" matches every known position that
    contains it (PG, SG, G, GF). Tokens that match nothing are kept as-is so
    an exact position always matches itself.

    Args:
        requested: Positions or position groups asked for
        config: Engine configuration

    Returns:
        Set of positions a first-round player may have
    """
    requested = frozenset(requested)
    if not config.expand_position_groups:
        return requested

    expanded: set[str] = set()
    for token in requested:
        matches = {pos for pos in config.positions if token in pos}
        expanded.update(matches or {token})
    return frozenset(expanded)


# =============================================================================
# Candidate Collector
# =============================================================================


def _eligible(assets: list[Asset], side: TradeSide, store: AssetStore) -> list[Asset]:
    return [a for a in assets if side.is_available(a) and store.is_tradable(a)]


def collect_candidates(
    proposal: TradeProposal,
    ctx: NegotiationContext,
    store: AssetStore,
    is_first_round: bool,
    config: EngineConfig,
) -> list[Asset]:
    """
    Every asset that could legally be added to the proposal next.

    The counterparty always contributes its eligible players and picks; the
    requester contributes nothing when ctx.hold_requester_constant is set.
    On the first round of a search with a position filter, counterparty
    players must match the filter and no draft picks are offered, so the
    first concession answers what the requester asked for.

    Args:
        proposal: Current proposal
        ctx: Negotiation context
        store: Roster access and eligibility predicate
        is_first_round: True before anything has been added in this search
        config: Engine configuration

    Returns:
        Candidates in Asset.sort_key order (empty = nothing left to try)
    """
    requester, counterparty = proposal.teams

    positions = None
    if is_first_round and ctx.first_asset_filter:
        positions = expand_position_filter(ctx.first_asset_filter, config)

    candidates: list[Asset] = []

    if not ctx.hold_requester_constant:
        candidates.extend(_eligible(store.players_owned_by(requester.tid), requester, store))

    players = _eligible(store.players_owned_by(counterparty.tid), counterparty, store)
    if positions is not None:
        players = [p for p in players if p.position in positions]
    candidates.extend(players)

    if positions is None:
        if not ctx.hold_requester_constant:
            candidates.extend(
                _eligible(store.draft_picks_owned_by(requester.tid), requester, store)
            )
        candidates.extend(
            _eligible(store.draft_picks_owned_by(counterparty.tid), counterparty, store)
        )

    candidates.sort(key=lambda a: a.sort_key)
    return candidates
