# xlfin/finance/errors.py
"""
Failure types raised by the calculation core.

Callers branch on the class (or on ``exc.kind``), never on the message.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_ARGUMENTS = "invalid_arguments"
    CONVERGENCE_FAILURE = "convergence_failure"
    NUMERIC_DEGENERATE = "numeric_degenerate"


class FinanceError(ArithmeticError):
    """Base class for every failure the core signals."""

    kind: ErrorKind


class InvalidArgumentsError(FinanceError, ValueError):
    """Input combination is undefined or contradictory; raised before iterating."""

    kind = ErrorKind.INVALID_ARGUMENTS

    def __init__(self, message: str = "Error in supplied arguments.") -> None:
        super().__init__(message)


class ConvergenceError(FinanceError):
    """Inputs were well formed but the root search failed."""

    kind = ErrorKind.CONVERGENCE_FAILURE


class NumericDegenerateError(FinanceError):
    """A closed form hit a singularity (zero division, log of <= 0, inf/nan)."""

    kind = ErrorKind.NUMERIC_DEGENERATE


__all__ = [
    "ErrorKind",
    "FinanceError",
    "InvalidArgumentsError",
    "ConvergenceError",
    "NumericDegenerateError",
]
