"""
Valuation Oracle Interface for Trade Agent.

The engine never prices assets itself. It asks an oracle how a hypothetical
trade changes one team's position and acts only on the sign and ordering of
the answers.
"""

from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class ValuationOracle(Protocol):
    """
    Protocol for anything that scores a hypothetical trade.

    Contract:
        - Positive return values favor perspective_tid.
        - For a fixed session_key the result is a pure function of the
          arguments: repeated calls with identical inputs return the same value.
    """

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
        """
        Net value change of the trade for perspective_tid.

        Args:
            perspective_tid: Team whose point of view is scored
            requester_pids: Players the requesting team gives up
            counterparty_pids: Players the counterparty gives up
            requester_dpids: Draft picks the requesting team gives up
            counterparty_dpids: Draft picks the counterparty gives up
            session_key: Opaque key that pins any randomness in the model
            requester_tid: The requesting team

        Returns:
            Signed value delta (positive = good for perspective_tid)
        """
        ...
