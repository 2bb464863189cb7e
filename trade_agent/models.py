"""
Pydantic models for Trade Agent.

This module contains all data models used by the equalization engine,
the orchestrator and the API. Models handle validation and serialization
only - no business logic beyond copy-on-write helpers.

Trade proposals are value types: every "mutation" returns a new proposal.
"""

import uuid
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# Enums
# =============================================================================


class AssetKind(str, Enum):
    """Kind of tradable asset."""

    PLAYER = "player"
    DRAFT_PICK = "draft_pick"


class SearchDirection(int, Enum):
    """
    Which way the search is pushing the deal.

    Values match sign(prev_dv - dv) for an addition that moves the deal
    the intended way.
    """

    TOWARD_COUNTERPARTY = -1  # deal not yet acceptable, grow it
    TOWARD_REQUESTER = 1  # deal acceptable, pull value back


class StepDecision(str, Enum):
    """What the engine did after scoring one round."""

    CONTINUE = "continue"
    ACCEPTED = "accepted"
    STABILIZE = "stabilize"
    ROLLED_BACK = "rolled_back"
    WRONG_DIRECTION = "wrong_direction"
    BUDGET_EXHAUSTED = "budget_exhausted"


class EqualizeStatus(str, Enum):
    """Outcome status from the orchestrator."""

    OK = "ok"
    NO_DEAL = "no_deal"


_KIND_ORDER = {AssetKind.PLAYER: 0, AssetKind.DRAFT_PICK: 1}


# =============================================================================
# Core Value Types
# =============================================================================


class Asset(BaseModel):
    """
    A player or draft pick owned by one team.

    Identity is (kind, asset_id); position only matters for players and
    only for the first-asset category restriction.
    """

    model_config = ConfigDict(frozen=True)

    kind: AssetKind
    asset_id: int = Field(..., ge=0, description="pid for players, dpid for picks")
    tid: int = Field(..., description="Owning team")
    position: Optional[str] = Field(None, description="Roster position (players only)")

    @property
    def sort_key(self) -> tuple[int, int, int]:
        """Total order used to break ties between equally valued candidates."""
        return (_KIND_ORDER[self.kind], self.asset_id, self.tid)

    def label(self) -> str:
        if self.kind == AssetKind.PLAYER:
            pos = f" ({self.position})" if self.position else ""
            return f"player {self.asset_id}{pos}"
        return f"draft pick {self.asset_id}"


class TradeSide(BaseModel):
    """
    One team's half of a trade proposal.

    pids/dpids are what the team gives up, in the order they were added.
    Excluded ids are never offered by the engine.
    """

    model_config = ConfigDict(frozen=True)

    tid: int
    pids: tuple[int, ...] = ()
    dpids: tuple[int, ...] = ()
    pids_excluded: frozenset[int] = frozenset()
    dpids_excluded: frozenset[int] = frozenset()

    @model_validator(mode="after")
    def _check_disjoint(self) -> "TradeSide":
        if len(set(self.pids)) != len(self.pids):
            raise ValueError(f"Team {self.tid}: duplicate player ids in pids")
        if len(set(self.dpids)) != len(self.dpids):
            raise ValueError(f"Team {self.tid}: duplicate draft pick ids in dpids")
        overlap = set(self.pids) & self.pids_excluded
        if overlap:
            raise ValueError(f"Team {self.tid}: players both included and excluded: {sorted(overlap)}")
        overlap = set(self.dpids) & self.dpids_excluded
        if overlap:
            raise ValueError(
                f"Team {self.tid}: draft picks both included and excluded: {sorted(overlap)}"
            )
        return self

    def included(self, kind: AssetKind) -> tuple[int, ...]:
        return self.pids if kind == AssetKind.PLAYER else self.dpids

    def excluded(self, kind: AssetKind) -> frozenset[int]:
        return self.pids_excluded if kind == AssetKind.PLAYER else self.dpids_excluded

    def is_available(self, asset: Asset) -> bool:
        """True if the asset is neither included nor excluded on this side."""
        return (
            asset.asset_id not in self.included(asset.kind)
            and asset.asset_id not in self.excluded(asset.kind)
        )

    def with_asset(self, asset: Asset) -> "TradeSide":
        if asset.kind == AssetKind.PLAYER:
            return self.model_copy(update={"pids": self.pids + (asset.asset_id,)})
        return self.model_copy(update={"dpids": self.dpids + (asset.asset_id,)})


class TradeProposal(BaseModel):
    """
    A complete two-team trade proposal.

    teams[0] is the requesting team (the user), teams[1] the counterparty
    whose acceptance the engine is seeking.
    """

    model_config = ConfigDict(frozen=True)

    teams: tuple[TradeSide, TradeSide]

    @model_validator(mode="after")
    def _check_sides(self) -> "TradeProposal":
        requester, counterparty = self.teams
        if requester.tid == counterparty.tid:
            raise ValueError(f"Both sides belong to team {requester.tid}")
        shared = set(requester.pids) & set(counterparty.pids)
        if shared:
            raise ValueError(f"Players included on both sides: {sorted(shared)}")
        shared = set(requester.dpids) & set(counterparty.dpids)
        if shared:
            raise ValueError(f"Draft picks included on both sides: {sorted(shared)}")
        return self

    @property
    def requester(self) -> TradeSide:
        return self.teams[0]

    @property
    def counterparty(self) -> TradeSide:
        return self.teams[1]

    def side_for(self, tid: int) -> TradeSide:
        for side in self.teams:
            if side.tid == tid:
                return side
        raise ValueError(f"Team {tid} is not part of this proposal")

    def with_asset(self, asset: Asset) -> "TradeProposal":
        """Return a new proposal with the asset added to its owner's side."""
        requester, counterparty = self.teams
        if asset.tid == requester.tid:
            return TradeProposal(teams=(requester.with_asset(asset), counterparty))
        if asset.tid == counterparty.tid:
            return TradeProposal(teams=(requester, counterparty.with_asset(asset)))
        raise ValueError(f"Asset {asset.label()} belongs to team {asset.tid}, not in proposal")

    def asset_count(self) -> int:
        return sum(len(side.pids) + len(side.dpids) for side in self.teams)

    def added_since(self, base: "TradeProposal") -> list[tuple[int, AssetKind, int]]:
        """
        Assets present here but not in base, as (tid, kind, asset_id).

        Assumes this proposal was grown from base (included ids only appended).
        """
        added: list[tuple[int, AssetKind, int]] = []
        for side, base_side in zip(self.teams, base.teams):
            for kind in (AssetKind.PLAYER, AssetKind.DRAFT_PICK):
                before = set(base_side.included(kind))
                added.extend(
                    (side.tid, kind, asset_id)
                    for asset_id in side.included(kind)
                    if asset_id not in before
                )
        return added


class ScoredAsset(BaseModel):
    """A candidate asset with the counterparty's dv if it were added this round."""

    model_config = ConfigDict(frozen=True)

    asset: Asset
    dv: float


def new_session_key() -> str:
    """Fresh opaque valuation session key."""
    return uuid.uuid4().hex


class NegotiationContext(BaseModel):
    """
    Parameters threaded through one top-level equalize call.

    The session key must reach every oracle call unchanged, including the
    stabilization pass, so any randomness inside the oracle stays fixed.
    """

    model_config = ConfigDict(frozen=True)

    hold_requester_constant: bool = Field(
        False, description="Never add assets from the requesting team"
    )
    first_asset_filter: frozenset[str] = Field(
        frozenset(), description="Positions the first added player must match"
    )
    max_assets_to_add: Optional[int] = Field(
        None, ge=0, description="Cap on assets added (None = unbounded)"
    )
    session_key: str = Field(default_factory=new_session_key)

    def budget_allows(self, added: int) -> bool:
        return self.max_assets_to_add is None or self.max_assets_to_add - added > 0

    def for_stabilization(self, added: int) -> "NegotiationContext":
        """Context for the stabilization pass: reduced budget, no category restriction."""
        remaining = None if self.max_assets_to_add is None else self.max_assets_to_add - added
        return self.model_copy(
            update={"max_assets_to_add": remaining, "first_asset_filter": frozenset()}
        )


# =============================================================================
# Search Trace
# =============================================================================


class SearchStep(BaseModel):
    """One scored round of the equalization search."""

    depth: int = Field(..., ge=0, description="0 = top level, 1 = stabilization pass")
    round: int = Field(..., ge=1, description="Assets added so far at this depth")
    direction: SearchDirection
    asset: Asset
    dv_before: float
    dv_after: float
    decision: StepDecision


class EqualizeOutcome(BaseModel):
    """
    Result of one negotiation run.

    proposal is None when no acceptable deal was found.
    """

    status: EqualizeStatus
    proposal: Optional[TradeProposal] = None
    initial_dv: float
    final_dv: Optional[float] = None
    added_assets: list[Asset] = Field(default_factory=list)
    steps: list[SearchStep] = Field(default_factory=list)
    session_key: str


# =============================================================================
# Explanation Models
# =============================================================================


class ExplanationNode(BaseModel):
    """
    A single explanation item with machine-readable metadata.
    The engine produces these; LLM/UI renders them to human text.
    """

    id: str = Field(..., description="Unique identifier for this node")
    label: str = Field(..., description="Human-readable label")
    severity: Literal["info", "warning", "error"] = Field(..., description="Severity level")
    category: Literal["acceptance", "asset", "direction", "budget"] = Field(
        ..., description="Node category"
    )
    tid: Optional[int] = Field(None, description="Team the node refers to")
    asset_ids: Optional[list[int]] = Field(None, description="Related asset IDs")
    dv_before: Optional[float] = Field(None, description="Counterparty dv before")
    dv_after: Optional[float] = Field(None, description="Counterparty dv after")
    detail: Optional[str] = Field(None, description="Additional context")


class Explanation(BaseModel):
    """Structured explanation data plus the narrative summary."""

    summary: str = Field(..., description="2-3 sentence summary")
    nodes: list[ExplanationNode] = Field(default_factory=list)


# =============================================================================
# API Models
# =============================================================================


class PlayerRecord(BaseModel):
    """A rostered player as supplied by the caller."""

    pid: int = Field(..., ge=0)
    tid: int
    position: str = Field(..., min_length=1)
    value: float = Field(..., ge=0, description="Trade value on the oracle's scale")
    untradable: bool = False
    untradable_msg: Optional[str] = None


class DraftPickRecord(BaseModel):
    """A draft pick as supplied by the caller."""

    dpid: int = Field(..., ge=0)
    tid: int
    value: float = Field(..., ge=0)
    season: Optional[int] = None
    round: Optional[int] = Field(None, ge=1)
    untradable: bool = False


class EqualizeRequest(BaseModel):
    """Request body for the equalize endpoints."""

    teams: tuple[TradeSide, TradeSide]
    players: list[PlayerRecord] = Field(default_factory=list)
    draft_picks: list[DraftPickRecord] = Field(default_factory=list)
    hold_requester_constant: bool = False
    looking_for_positions: list[str] = Field(default_factory=list)
    max_assets_to_add: Optional[int] = Field(None, ge=0)
    session_key: Optional[str] = Field(None, min_length=1)


class EqualizeResponse(BaseModel):
    """Response body for the equalize endpoints."""

    outcome: EqualizeOutcome
    explanation: Explanation


class ErrorResponse(BaseModel):
    """Error response body for API errors."""

    error: str = Field(..., description="Short error description")
    detail: Optional[str] = Field(None, description="Detailed error message")
    code: str = Field(..., description="Error code (e.g., 'VALIDATION_FAILED')")
