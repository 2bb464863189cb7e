"""Tests for the table valuation oracle."""

import pytest

from trade_agent.config import ValuationConfig
from trade_agent.models import DraftPickRecord, PlayerRecord
from trade_agent.roster import InMemoryRoster
from trade_agent.valuation import TableValuationOracle, ValuationOracle


USER = 0
AI = 1


def make_oracle(**config) -> TableValuationOracle:
    return TableValuationOracle(
        player_values={1: 10.0, 2: 4.0, 3: 6.0},
        pick_values={100: 2.0},
        config=ValuationConfig(**config),
    )


def dv(oracle, perspective, requester_pids=(), counterparty_pids=(), requester_dpids=(),
       counterparty_dpids=(), session_key="s"):
    return oracle.value_change(
        perspective,
        list(requester_pids),
        list(counterparty_pids),
        list(requester_dpids),
        list(counterparty_dpids),
        session_key,
        USER,
    )


class TestTableValuationOracle:
    def test_satisfies_protocol(self):
        assert isinstance(make_oracle(), ValuationOracle)

    def test_counterparty_perspective(self):
        oracle = make_oracle(outgoing_premium=0.0)

        # AI receives 10 + 2, gives 4
        assert dv(oracle, AI, requester_pids=[1], counterparty_pids=[2], requester_dpids=[100]) == 8

    def test_requester_perspective_is_mirrored(self):
        oracle = make_oracle(outgoing_premium=0.0)

        assert dv(oracle, USER, requester_pids=[1], counterparty_pids=[2]) == -6

    def test_outgoing_premium(self):
        oracle = make_oracle(outgoing_premium=0.5)

        assert dv(oracle, AI, requester_pids=[1], counterparty_pids=[2]) == pytest.approx(4.0)

    def test_empty_trade_is_zero(self):
        assert dv(make_oracle(), AI) == 0

    def test_exponent_favors_stars(self):
        oracle = make_oracle(outgoing_premium=0.0, value_exponent=2.0)

        # 10^2 beats 4^2 + 6^2
        assert dv(oracle, AI, requester_pids=[1], counterparty_pids=[2, 3]) == pytest.approx(48.0)

    def test_noise_fixed_per_session_key(self):
        oracle = make_oracle(value_noise=0.2)

        a = dv(oracle, AI, requester_pids=[1], counterparty_pids=[2], session_key="x")
        b = dv(oracle, AI, requester_pids=[1], counterparty_pids=[2], session_key="x")

        assert a == b

    def test_noise_varies_across_session_keys(self):
        oracle = make_oracle(value_noise=0.2)

        values = {
            dv(oracle, AI, requester_pids=[1], counterparty_pids=[2], session_key=f"key-{i}")
            for i in range(10)
        }

        assert len(values) > 1

    def test_noise_bounded(self):
        oracle = make_oracle(outgoing_premium=0.0, value_noise=0.1)

        for i in range(20):
            value = dv(oracle, AI, requester_pids=[1], session_key=str(i))
            assert 9.0 <= value <= 11.0

    def test_records_calls_and_keys(self):
        oracle = make_oracle()

        dv(oracle, AI, session_key="a")
        dv(oracle, AI, session_key="b")
        dv(oracle, AI, session_key="a")

        assert oracle.call_count == 3
        assert oracle.session_keys_seen == {"a", "b"}

    def test_unknown_asset_raises(self):
        with pytest.raises(KeyError):
            dv(make_oracle(), AI, requester_pids=[42])

    def test_from_roster(self):
        roster = InMemoryRoster(
            players=[PlayerRecord(pid=5, tid=USER, position="C", value=7)],
            draft_picks=[DraftPickRecord(dpid=50, tid=AI, value=3)],
        )

        oracle = TableValuationOracle.from_roster(roster, ValuationConfig(outgoing_premium=0.0))

        assert dv(oracle, AI, requester_pids=[5], counterparty_dpids=[50]) == 4
