"""
Valuation module for Trade Agent.

Contains the valuation oracle interface and the table-driven implementation
used by the API and tests.
"""

from trade_agent.valuation.interface import ValuationOracle
from trade_agent.valuation.table import TableValuationOracle

__all__ = [
    "ValuationOracle",
    "TableValuationOracle",
]
