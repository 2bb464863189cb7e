"""
Asset store for Trade Agent.

The engine only sees rosters through the AssetStore protocol: which players
and draft picks a team owns, and whether a given asset may be traded at all.
InMemoryRoster is the implementation used by the API and the tests; it is
built from the player and pick records sent with each request.
"""

from typing import Iterable, Protocol, runtime_checkable

from trade_agent.models import Asset, AssetKind, DraftPickRecord, PlayerRecord


@runtime_checkable
class AssetStore(Protocol):
    """Read-only view of team rosters plus the eligibility predicate."""

    def players_owned_by(self, tid: int) -> list[Asset]:
        """Players currently on team tid."""
        ...

    def draft_picks_owned_by(self, tid: int) -> list[Asset]:
        """Draft picks currently owned by team tid."""
        ...

    def is_tradable(self, asset: Asset) -> bool:
        """False for assets that cannot be negotiated (e.g. recently signed)."""
        ...


class InMemoryRoster:
    """
    AssetStore backed by plain player and pick records.

    Attributes:
        players: pid -> PlayerRecord
        draft_picks: dpid -> DraftPickRecord
    """

    def __init__(
        self,
        players: Iterable[PlayerRecord] = (),
        draft_picks: Iterable[DraftPickRecord] = (),
    ) -> None:
        self.players: dict[int, PlayerRecord] = {p.pid: p for p in players}
        self.draft_picks: dict[int, DraftPickRecord] = {dp.dpid: dp for dp in draft_picks}

    def players_owned_by(self, tid: int) -> list[Asset]:
        return [
            Asset(kind=AssetKind.PLAYER, asset_id=p.pid, tid=p.tid, position=p.position)
            for p in self.players.values()
            if p.tid == tid
        ]

    def draft_picks_owned_by(self, tid: int) -> list[Asset]:
        return [
            Asset(kind=AssetKind.DRAFT_PICK, asset_id=dp.dpid, tid=dp.tid)
            for dp in self.draft_picks.values()
            if dp.tid == tid
        ]

    def is_tradable(self, asset: Asset) -> bool:
        if asset.kind == AssetKind.PLAYER:
            record = self.players.get(asset.asset_id)
        else:
            record = self.draft_picks.get(asset.asset_id)
        return record is not None and not record.untradable

    def get_asset(self, kind: AssetKind, asset_id: int) -> Asset:
        """
        Look up a single asset.

        Raises:
            KeyError: If the id is not on any roster
        """
        if kind == AssetKind.PLAYER:
            p = self.players[asset_id]
            return Asset(kind=kind, asset_id=p.pid, tid=p.tid, position=p.position)
        dp = self.draft_picks[asset_id]
        return Asset(kind=kind, asset_id=dp.dpid, tid=dp.tid)

    def value_of(self, kind: AssetKind, asset_id: int) -> float:
        if kind == AssetKind.PLAYER:
            return self.players[asset_id].value
        return self.draft_picks[asset_id].value

    def team_ids(self) -> set[int]:
        tids = {p.tid for p in self.players.values()}
        tids.update(dp.tid for dp in self.draft_picks.values())
        return tids
