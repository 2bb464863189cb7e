"""
Exceptions for Trade Agent that are not about the caller's input.

Bad requests raise trade_agent.validation.ValidationError; a negotiation
that finds no deal is a normal outcome, not an exception.
"""


class InfrastructureError(Exception):
    """
    A backing service failed (OpenAI unreachable, 5xx).

    The request itself may be fine and could succeed on retry, so
    POST /api/runs answers 503 and records nothing.
    """
