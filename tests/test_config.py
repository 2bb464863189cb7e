"""Tests for configuration models and defaults."""

import pytest
from pydantic import ValidationError

from trade_agent.config import (
    DEFAULT_ENGINE_CONFIG,
    DEFAULT_LLM_CONFIG,
    DEFAULT_POSITIONS,
    DEFAULT_VALUATION_CONFIG,
    EngineConfig,
    LLMConfig,
    ValuationConfig,
)


class TestEngineConfig:
    def test_defaults(self):
        assert DEFAULT_ENGINE_CONFIG.positions == DEFAULT_POSITIONS
        assert DEFAULT_ENGINE_CONFIG.expand_position_groups is True
        assert DEFAULT_ENGINE_CONFIG.max_workers == 1

    def test_positions_not_shared(self):
        config = EngineConfig()
        config.positions.append("X")
        assert "X" not in DEFAULT_POSITIONS

    def test_max_workers_bounds(self):
        with pytest.raises(ValidationError):
            EngineConfig(max_workers=0)
        with pytest.raises(ValidationError):
            EngineConfig(max_workers=33)


class TestValuationConfig:
    def test_defaults(self):
        assert DEFAULT_VALUATION_CONFIG.outgoing_premium == 0.05
        assert DEFAULT_VALUATION_CONFIG.value_exponent == 1.0
        assert DEFAULT_VALUATION_CONFIG.value_noise == 0.0

    def test_premium_bounds(self):
        with pytest.raises(ValidationError):
            ValuationConfig(outgoing_premium=-0.1)
        with pytest.raises(ValidationError):
            ValuationConfig(outgoing_premium=1.0)

    def test_exponent_below_one_rejected(self):
        with pytest.raises(ValidationError):
            ValuationConfig(value_exponent=0.5)


class TestLLMConfig:
    def test_defaults(self):
        assert DEFAULT_LLM_CONFIG.model == "gpt-4o"
        assert DEFAULT_LLM_CONFIG.max_tokens == 400

    def test_temperature_bounds(self):
        with pytest.raises(ValidationError):
            LLMConfig(temperature=3)
