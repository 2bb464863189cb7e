"""
In-memory history of negotiation runs.

Each POST /api/runs call leaves one RunRecord here, keyed by its UUID, so a
client can fetch the full search trace later or list recent runs per league.
Nothing is persisted; a restart forgets every run.
"""

import threading
from dataclasses import dataclass
from typing import Optional

from trade_agent.models import EqualizeResponse


@dataclass
class RunRecord:
    """
    One negotiation run.

    Exactly one of response (run completed, with or without a deal) and
    error (request failed validation) is set once the run has finished.
    created_at is an ISO 8601 UTC timestamp.
    """

    run_id: str
    league_id: Optional[str]
    requester_tid: int
    counterparty_tid: int
    response: Optional[EqualizeResponse]
    error: Optional[str]
    created_at: str


class RunStore:
    """Run records in insertion order, guarded by a lock."""

    def __init__(self) -> None:
        self._runs: dict[str, RunRecord] = {}
        self._lock = threading.Lock()

    def create(self, record: RunRecord) -> None:
        """Store a record; an existing run_id keeps its position but is replaced."""
        with self._lock:
            self._runs[record.run_id] = record

    def get(self, run_id: str) -> Optional[RunRecord]:
        with self._lock:
            return self._runs.get(run_id)

    def list_runs(self, league_id: Optional[str] = None, limit: int = 10) -> list[RunRecord]:
        """Newest first, at most limit records, optionally for one league only."""
        with self._lock:
            newest_first = reversed(list(self._runs.values()))
            matching = [r for r in newest_first if league_id is None or r.league_id == league_id]
        return matching[:limit]

    def clear(self) -> None:
        with self._lock:
            self._runs.clear()


# Shared by the API process
run_store = RunStore()
