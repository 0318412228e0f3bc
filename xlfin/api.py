"""
Public facade.

Design:
- The solvers live only in xlfin.finance.tvm; root finding only in
  xlfin.finance.roots.
- This module re-exports them and adds spreadsheet-named aliases
  (PV, FV, PMT, NPER, RATE) whose timing argument is called `type`.
"""
from __future__ import annotations

from typing import Optional

from .finance.errors import (
    ConvergenceError,
    ErrorKind,
    FinanceError,
    InvalidArgumentsError,
    NumericDegenerateError,
)
from .finance.tvm import (
    PaymentDue,
    When,
    future_value,
    number_of_periods,
    payment,
    present_value,
    rate,
)


def PV(rate: float, nper: float, pmt: float, fv: Optional[float] = None, type: When = None) -> float:
    return present_value(rate, nper, pmt, fv, type)


def FV(rate: float, nper: float, pmt: float, pv: Optional[float] = None, type: When = None) -> float:
    return future_value(rate, nper, pmt, pv, type)


def PMT(rate: float, nper: float, pv: float, fv: Optional[float] = None, type: When = None) -> float:
    return payment(rate, nper, pv, fv, type)


def NPER(rate: float, pmt: float, pv: float, fv: Optional[float] = None, type: When = None) -> float:
    return number_of_periods(rate, pmt, pv, fv, type)


def RATE(
    nper: float,
    pmt: float,
    pv: float,
    fv: Optional[float] = None,
    type: When = None,
    guess: Optional[float] = None,
) -> float:
    return rate(nper, pmt, pv, fv, type, guess)


__all__ = [
    "PaymentDue",
    "present_value",
    "future_value",
    "payment",
    "number_of_periods",
    "rate",
    "PV",
    "FV",
    "PMT",
    "NPER",
    "RATE",
    "ErrorKind",
    "FinanceError",
    "InvalidArgumentsError",
    "ConvergenceError",
    "NumericDegenerateError",
]
