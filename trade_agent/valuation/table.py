"""
Table-driven valuation oracle.

Scores a trade as the value the evaluating team receives minus the value it
gives up, with a premium on outgoing value so the evaluating team always
asks for a little more than an even swap. Per-asset noise is derived from
the session key, so a negotiation sees one consistent set of valuations.
"""

import random
import threading
from typing import Sequence

from trade_agent.config import DEFAULT_VALUATION_CONFIG, ValuationConfig
from trade_agent.models import AssetKind
from trade_agent.roster import InMemoryRoster


class TableValuationOracle:
    """
    ValuationOracle backed by fixed per-asset values.

    Attributes:
        player_values: pid -> value
        pick_values: dpid -> value
        config: Premium, exponent and noise settings
        call_count: Number of value_change calls (for tests and logging)
        session_keys_seen: Every session key passed to value_change
    """

    def __init__(
        self,
        player_values: dict[int, float],
        pick_values: dict[int, float],
        config: ValuationConfig = DEFAULT_VALUATION_CONFIG,
    ) -> None:
        self.player_values = dict(player_values)
        self.pick_values = dict(pick_values)
        self.config = config
        self.call_count = 0
        self.session_keys_seen: set[str] = set()
        self._lock = threading.Lock()

    @classmethod
    def from_roster(
        cls,
        roster: InMemoryRoster,
        config: ValuationConfig = DEFAULT_VALUATION_CONFIG,
    ) -> "TableValuationOracle":
        return cls(
            player_values={pid: p.value for pid, p in roster.players.items()},
            pick_values={dpid: dp.value for dpid, dp in roster.draft_picks.items()},
            config=config,
        )

    def value_change(
        self,
        perspective_tid: int,
        requester_pids: Sequence[int],
        counterparty_pids: Sequence[int],
        requester_dpids: Sequence[int],
        counterparty_dpids: Sequence[int],
        session_key: str,
        requester_tid: int,
    ) -> float:
        with self._lock:
            self.call_count += 1
            self.session_keys_seen.add(session_key)

        requester_total = self._total(requester_pids, requester_dpids, session_key)
        counterparty_total = self._total(counterparty_pids, counterparty_dpids, session_key)

        if perspective_tid == requester_tid:
            incoming, outgoing = counterparty_total, requester_total
        else:
            incoming, outgoing = requester_total, counterparty_total

        return incoming - (1 + self.config.outgoing_premium) * outgoing

    def _total(
        self,
        pids: Sequence[int],
        dpids: Sequence[int],
        session_key: str,
    ) -> float:
        total = 0.0
        for pid in pids:
            total += self._asset_value(AssetKind.PLAYER, pid, self.player_values[pid], session_key)
        for dpid in dpids:
            total += self._asset_value(
                AssetKind.DRAFT_PICK, dpid, self.pick_values[dpid], session_key
            )
        return total

    def _asset_value(
        self,
        kind: AssetKind,
        asset_id: int,
        value: float,
        session_key: str,
    ) -> float:
        scaled = value ** self.config.value_exponent
        if self.config.value_noise <= 0:
            return scaled
        rng = random.Random(f"{session_key}:{kind.value}:{asset_id}")
        return scaled * (1 + rng.uniform(-self.config.value_noise, self.config.value_noise))
