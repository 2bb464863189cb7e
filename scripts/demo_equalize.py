"""
Demo: "What would make this deal work?"

Runs a handful of negotiations against a small two-team league and prints
the adjusted trades.

Scenarios:
- Star ask: requester asks for the counterparty's best player (OK)
- Already generous: requester overpays, engine gives value back (OK)
- Trading block: requester holds its side constant, asks for a guard (OK)
- Nothing to offer: every requester asset is untradable (NO_DEAL)

Usage:
    python -m scripts.demo_equalize
    OPENAI_API_KEY=sk-... python -m scripts.demo_equalize
"""

import os

from trade_agent.config import ValuationConfig
from trade_agent.llm.interface import LLMClient
from trade_agent.llm.mock import MockLLMClient
from trade_agent.models import (
    DraftPickRecord,
    EqualizeRequest,
    EqualizeStatus,
    PlayerRecord,
    TradeSide,
)
from trade_agent.orchestrator import run_negotiation


# =============================================================================
# League
# =============================================================================

USER_TID = 0
AI_TID = 1

PLAYERS = [
    PlayerRecord(pid=1, tid=USER_TID, position="PG", value=42.0),
    PlayerRecord(pid=2, tid=USER_TID, position="SF", value=55.0),
    PlayerRecord(pid=3, tid=USER_TID, position="C", value=30.0),
    PlayerRecord(pid=4, tid=USER_TID, position="SG", value=18.0),
    PlayerRecord(pid=10, tid=AI_TID, position="PF", value=70.0),
    PlayerRecord(pid=11, tid=AI_TID, position="SG", value=35.0),
    PlayerRecord(pid=12, tid=AI_TID, position="C", value=22.0),
    PlayerRecord(pid=13, tid=AI_TID, position="PG", value=12.0),
]

DRAFT_PICKS = [
    DraftPickRecord(dpid=100, tid=USER_TID, value=15.0, season=2027, round=1),
    DraftPickRecord(dpid=101, tid=USER_TID, value=4.0, season=2027, round=2),
    DraftPickRecord(dpid=110, tid=AI_TID, value=14.0, season=2027, round=1),
]

DEMO_VALUATION = ValuationConfig(outgoing_premium=0.05, value_exponent=1.0, value_noise=0.02)


def make_request(**overrides) -> EqualizeRequest:
    fields = {
        "teams": (TradeSide(tid=USER_TID), TradeSide(tid=AI_TID)),
        "players": PLAYERS,
        "draft_picks": DRAFT_PICKS,
        "session_key": "demo",
    }
    fields.update(overrides)
    return EqualizeRequest(**fields)


SCENARIOS = {
    "Star ask": make_request(
        teams=(TradeSide(tid=USER_TID), TradeSide(tid=AI_TID, pids=(10,))),
    ),
    "Already generous": make_request(
        teams=(TradeSide(tid=USER_TID, pids=(2, 1)), TradeSide(tid=AI_TID, pids=(11,))),
    ),
    "Trading block": make_request(
        teams=(TradeSide(tid=USER_TID, pids=(3,)), TradeSide(tid=AI_TID)),
        hold_requester_constant=True,
        looking_for_positions=["G"],
    ),
    "Nothing to offer": make_request(
        teams=(TradeSide(tid=USER_TID), TradeSide(tid=AI_TID, pids=(10,))),
        players=[
            p.model_copy(update={"untradable": True}) if p.tid == USER_TID else p
            for p in PLAYERS
        ],
        draft_picks=[dp for dp in DRAFT_PICKS if dp.tid == AI_TID],
    ),
}


def get_llm() -> LLMClient:
    if os.environ.get("OPENAI_API_KEY"):
        from trade_agent.llm.openai_client import OpenAILLMClient

        return OpenAILLMClient()
    return MockLLMClient()


def main():
    llm = get_llm()

    for name, request in SCENARIOS.items():
        print("=" * 80)
        print(f"SCENARIO: {name}")
        print("=" * 80)

        response = run_negotiation(request, llm, valuation_config=DEMO_VALUATION)
        outcome = response.outcome

        print(f"Status: {outcome.status.value}")
        print(f"Initial dv: {outcome.initial_dv:.2f}")
        if outcome.status == EqualizeStatus.OK:
            requester, counterparty = outcome.proposal.teams
            print(f"Final dv:   {outcome.final_dv:.2f}")
            print(f"Team {requester.tid} gives: pids={list(requester.pids)} dpids={list(requester.dpids)}")
            print(
                f"Team {counterparty.tid} gives: pids={list(counterparty.pids)} "
                f"dpids={list(counterparty.dpids)}"
            )
        print("\nSearch trace:")
        for step in outcome.steps:
            print(
                f"  depth={step.depth} round={step.round} {step.asset.label():<22} "
                f"{step.dv_before:8.2f} -> {step.dv_after:8.2f}  {step.decision.value}"
            )
        print(f"\nSummary: {response.explanation.summary}\n")


if __name__ == "__main__":
    main()
