"""
Monte Carlo round-trip check for the rate solver.

Samples random level-payment loans, prices each payment twice (our closed
form and numpy-financial as an independent reference), then solves back for
the rate and records how far the round trip lands from the sampled rate.
"""
from typing import Optional, Dict
import warnings

import numpy as np
import numpy_financial as npf
import pandas as pd

from .finance.errors import FinanceError
from .finance.tvm import future_value, payment, rate


def generate_mc_parameters(
    n_scenarios: int,
    seed: Optional[int] = None,
    rate_range: tuple = (0.0005, 0.02),
    nper_range: tuple = (6, 120),
    pv_range: tuple = (1_000.0, 50_000.0),
) -> Dict[str, np.ndarray]:
    """
    Generate Monte Carlo loan samples.

    Args:
        n_scenarios: Number of scenarios to generate
        seed: Random seed for reproducibility
        rate_range: Periodic rate bounds
        nper_range: Inclusive bounds on the (integer) number of periods
        pv_range: Bounds on the amount borrowed

    Returns:
        Dictionary of parameter arrays
    """
    rng = np.random.default_rng(seed)
    return {
        "rate": rng.uniform(rate_range[0], rate_range[1], n_scenarios),
        "nper": rng.integers(nper_range[0], nper_range[1] + 1, n_scenarios),
        "pv": rng.uniform(pv_range[0], pv_range[1], n_scenarios),
        "when": rng.integers(0, 2, n_scenarios),
    }


def run_monte_carlo(
    iterations: int = 1000,
    seed: Optional[int] = None,
    guess: float = 0.1,
) -> pd.DataFrame:
    """
    Run the round trip rate -> payment -> rate over sampled loans.

    Args:
        iterations: Number of sampled loans
        seed: Random seed for reproducibility
        guess: Starting guess passed to the rate solver

    Returns:
        DataFrame with one row per successful iteration
    """
    scenarios = generate_mc_parameters(iterations, seed)
    out_data = []

    failed_count = 0

    for i in range(iterations):
        r = float(scenarios["rate"][i])
        n = int(scenarios["nper"][i])
        pv = float(scenarios["pv"][i])
        when = int(scenarios["when"][i])
        try:
            pmt = payment(r, n, pv, 0.0, when)
            pmt_ref = float(npf.pmt(r, n, pv, 0.0, when=when))
            solved = rate(n, pmt, pv, 0.0, when, guess)
            residual = future_value(solved, n, pmt, pv, when)
        except FinanceError as e:
            failed_count += 1
            warnings.warn(f"Scenario {i+1} failed: {e.kind.value}: {e}")
            continue

        out_data.append({
            "iteration": i + 1,
            "rate": r,
            "nper": n,
            "pv": pv,
            "when": when,
            "pmt": pmt,
            "pmt_reference": pmt_ref,
            "solved_rate": solved,
            "rate_error": abs(solved - r),
            "fv_residual": residual,
        })

    if failed_count > 0:
        warnings.warn(f"Monte Carlo: {failed_count}/{iterations} scenarios failed")

    df = pd.DataFrame(out_data)

    # Add summary statistics as attributes
    df.attrs["success_rate"] = len(df) / iterations if iterations else 0.0
    if len(df) > 0:
        df.attrs["max_rate_error"] = float(df["rate_error"].max())
        df.attrs["max_payment_error"] = float((df["pmt"] - df["pmt_reference"]).abs().max())
        df.attrs["max_abs_fv_residual"] = float(df["fv_residual"].abs().max())

    return df
