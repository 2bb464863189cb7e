"""
Input validation for Trade Agent.

All functions are pure and return lists of error messages. Pydantic already
enforces field types and per-side invariants; these checks cover the
relations between the proposal and the rosters it refers to.
"""

from trade_agent.models import (
    AssetKind,
    DraftPickRecord,
    EqualizeRequest,
    PlayerRecord,
    TradeSide,
)


class ValidationError(Exception):
    """
    Raised when input validation fails.

    Attributes:
        errors: List of validation error messages
    """

    def __init__(self, errors: list[str]):
        self.errors = errors
        message = "; ".join(errors) if errors else "Validation failed"
        super().__init__(message)


# =============================================================================
# Roster Validation
# =============================================================================


def _duplicates(ids: list[int]) -> list[int]:
    seen: set[int] = set()
    duplicates: set[int] = set()
    for asset_id in ids:
        if asset_id in seen:
            duplicates.add(asset_id)
        seen.add(asset_id)
    return sorted(duplicates)


def validate_roster(
    players: list[PlayerRecord],
    draft_picks: list[DraftPickRecord],
) -> list[str]:
    """
    Validate roster records. Returns list of errors.

    Checks:
    - Player ids are unique
    - Draft pick ids are unique
    - Positions are not blank
    """
    errors: list[str] = []

    duplicates = _duplicates([p.pid for p in players])
    if duplicates:
        errors.append(f"Player IDs must be unique; duplicates: {duplicates}")

    duplicates = _duplicates([dp.dpid for dp in draft_picks])
    if duplicates:
        errors.append(f"Draft pick IDs must be unique; duplicates: {duplicates}")

    for p in players:
        if not p.position.strip():
            errors.append(f"Player {p.pid}: position must not be blank")

    return errors


# =============================================================================
# Proposal Validation
# =============================================================================


def validate_side(
    side: TradeSide,
    players: dict[int, PlayerRecord],
    draft_picks: dict[int, DraftPickRecord],
) -> list[str]:
    """
    Validate one side of a proposal against the rosters. Returns list of errors.

    Every included asset must exist and belong to the side's team.
    """
    errors: list[str] = []

    for pid in side.pids:
        player = players.get(pid)
        if player is None:
            errors.append(f"Team {side.tid}: unknown player {pid}")
        elif player.tid != side.tid:
            errors.append(f"Team {side.tid}: player {pid} belongs to team {player.tid}")

    for dpid in side.dpids:
        pick = draft_picks.get(dpid)
        if pick is None:
            errors.append(f"Team {side.tid}: unknown draft pick {dpid}")
        elif pick.tid != side.tid:
            errors.append(f"Team {side.tid}: draft pick {dpid} belongs to team {pick.tid}")

    return errors


def validate_request(request: EqualizeRequest) -> list[str]:
    """
    Validate an equalize request. Returns list of errors.

    Checks:
    - Roster records are consistent
    - The two sides are different teams
    - No asset is included on both sides
    - Included assets exist and are owned by the side that gives them up
    - Requested positions are not blank
    """
    errors = validate_roster(request.players, request.draft_picks)

    requester, counterparty = request.teams
    if requester.tid == counterparty.tid:
        errors.append(f"Both sides belong to team {requester.tid}")

    for kind in (AssetKind.PLAYER, AssetKind.DRAFT_PICK):
        shared = set(requester.included(kind)) & set(counterparty.included(kind))
        if shared:
            errors.append(f"Assets ({kind.value}) included on both sides: {sorted(shared)}")

    players = {p.pid: p for p in request.players}
    draft_picks = {dp.dpid: dp for dp in request.draft_picks}
    for side in request.teams:
        errors.extend(validate_side(side, players, draft_picks))

    if any(not pos.strip() for pos in request.looking_for_positions):
        errors.append("looking_for_positions must not contain blank entries")

    return errors
