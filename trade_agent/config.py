"""
Configuration for Trade Agent.

All configurable parameters live here - no magic numbers in engine code.
"""

from pydantic import BaseModel, Field


# =============================================================================
# Positions
# =============================================================================

# Basketball positions, guards to bigs. Combo positions (GF, FC) match
# both of their groups when a request names G, F or C.
DEFAULT_POSITIONS: list[str] = ["PG", "SG", "G", "GF", "SF", "F", "PF", "FC", "C"]


# =============================================================================
# Engine Configuration
# =============================================================================


class EngineConfig(BaseModel):
    """
    Parameters for the candidate collector and the forward-selection engine.

    Passed explicitly to engine functions rather than hardcoded.
    """

    positions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_POSITIONS),
        description="Known roster positions used to expand position groups",
    )
    expand_position_groups: bool = Field(
        default=True,
        description="Expand G/F/C requests to every position containing them",
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        le=32,
        description="Threads used to score one round of candidates (1 = sequential)",
    )


DEFAULT_ENGINE_CONFIG = EngineConfig()


# =============================================================================
# Valuation Configuration
# =============================================================================


class ValuationConfig(BaseModel):
    """
    Parameters for the table valuation oracle.

    The oracle is a stand-in for a real team valuation model; these knobs
    shape how hard the counterparty bargains.
    """

    outgoing_premium: float = Field(
        default=0.05,
        ge=0,
        lt=1,
        description="Extra weight on value the evaluating team gives up",
    )
    value_exponent: float = Field(
        default=1.0,
        ge=1,
        le=10,
        description="values are raised to this power so one star beats many role players",
    )
    value_noise: float = Field(
        default=0.0,
        ge=0,
        lt=1,
        description="Max relative per-asset noise, fixed for a given session key",
    )


DEFAULT_VALUATION_CONFIG = ValuationConfig()


# =============================================================================
# LLM Configuration
# =============================================================================


class LLMConfig(BaseModel):
    """
    Configuration for LLM client.

    Controls model selection, temperature, and token limits.
    """

    model: str = Field(
        default="gpt-4o",
        description="OpenAI model used for trade summaries",
    )
    temperature: float = Field(
        default=0.4,
        ge=0,
        le=2,
        description="Sampling temperature",
    )
    max_tokens: int = Field(
        default=400,
        gt=0,
        description="Maximum tokens in response",
    )


DEFAULT_LLM_CONFIG = LLMConfig()
