from __future__ import annotations
from typing import Dict, Any, Tuple

# Input fields of a calculation: units, type and description.
SCHEMA: Dict[str, Dict[str, Any]] = {
    "rate":  {"unit": "fraction/period", "type": "float", "desc": "Periodic interest rate (0.005 = 0.5%)"},
    "nper":  {"unit": "periods",         "type": "float", "desc": "Number of payment periods"},
    "pmt":   {"unit": "currency",        "type": "float", "desc": "Level payment per period (outflow < 0)"},
    "pv":    {"unit": "currency",        "type": "float", "desc": "Present value / opening balance"},
    "fv":    {"unit": "currency",        "type": "float", "desc": "Future value / closing balance"},
    "when":  {"unit": "enum",            "type": "when", "desc": "Payment timing: end (0) or begin (1)"},
    "guess": {"unit": "fraction/period", "type": "float", "desc": "Starting estimate for the rate solver"},
}

# Output quantity -> (required inputs, optional inputs)
OUTPUTS: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    "pv":   (("rate", "nper", "pmt"), ("fv", "when")),
    "fv":   (("rate", "nper", "pmt"), ("pv", "when")),
    "pmt":  (("rate", "nper", "pv"),  ("fv", "when")),
    "nper": (("rate", "pmt", "pv"),   ("fv", "when")),
    "rate": (("nper", "pmt", "pv"),   ("fv", "when", "guess")),
}

# Keys a calculation may carry besides its inputs.
META_KEYS = ("name", "output", "inputs", "desc")


def inputs_for(output: str) -> Tuple[str, ...]:
    required, optional = OUTPUTS[output]
    return required + optional
