# xlfin/adapters.py
"""
Caller side of the calculation core.

Takes one calculation (fully resolved numbers, as loaded from a sheet),
calls the matching solver and returns a tagged CalcResult instead of
letting FinanceError escape. Failed values render as "N/A".
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .finance.errors import ErrorKind, FinanceError
from .finance.tvm import (
    future_value,
    number_of_periods,
    payment,
    present_value,
    rate,
)
from .schema import OUTPUTS, inputs_for

NOT_AVAILABLE = "N/A"

_SOLVERS: Dict[str, Callable[..., float]] = {
    "pv": present_value,
    "fv": future_value,
    "pmt": payment,
    "nper": number_of_periods,
    "rate": rate,
}


@dataclass(frozen=True)
class CalcResult:
    name: str
    output: str
    value: Optional[float] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_row(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "output": self.output,
            "value": self.value if self.ok else NOT_AVAILABLE,
            "error": self.error.value if self.error else "",
            "message": self.message,
        }


# ------------------------------
# Small helpers (no policy here)
# ------------------------------
def _as_float(v: Any, default: Optional[float] = None) -> Optional[float]:
    try:
        return float(v) if v is not None else default
    except (TypeError, ValueError):
        return default


def resolve_inputs(calc: Dict[str, Any], defaults: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Pick the inputs that apply to calc['output'], filling gaps from defaults.
    Optional inputs nobody supplied stay out, so the solver's own defaults apply.
    """
    defaults = defaults or {}
    out: Dict[str, Any] = {}
    for k in inputs_for(calc["output"]):
        v = calc.get(k, defaults.get(k))
        if v is None:
            continue
        out[k] = v if k == "when" else _as_float(v)
    return out


# ------------------------------
# Public adapter(s)
# ------------------------------
def solve(output: str, **inputs: Any) -> float:
    """Call the solver for `output` with keyword inputs; FinanceError propagates."""
    if output not in _SOLVERS:
        raise ValueError(f"unknown output {output!r}; expected one of {sorted(_SOLVERS)}")
    return _SOLVERS[output](**inputs)


def evaluate(calc: Dict[str, Any], defaults: Optional[Dict[str, Any]] = None) -> CalcResult:
    output = calc.get("output")
    name = str(calc.get("name") or output)
    if output not in OUTPUTS:
        raise ValueError(f"{name}: unknown output {output!r}")

    inputs = resolve_inputs(calc, defaults)
    required, _ = OUTPUTS[output]
    missing = [k for k in required if inputs.get(k) is None]
    if missing:
        # Incomplete inputs render as N/A, same as a failed calculation.
        return CalcResult(name, output, error=ErrorKind.INVALID_ARGUMENTS,
                          message=f"missing inputs: {missing}")
    try:
        value = solve(output, **inputs)
    except FinanceError as e:
        return CalcResult(name, output, error=e.kind, message=str(e))
    return CalcResult(name, output, value=value)


__all__ = ["NOT_AVAILABLE", "CalcResult", "resolve_inputs", "solve", "evaluate"]
