import numpy as np
import pandas as pd

from xlfin.monte_carlo import generate_mc_parameters, run_monte_carlo


def test_generate_mc_parameters_is_reproducible():
    a = generate_mc_parameters(50, seed=11)
    b = generate_mc_parameters(50, seed=11)
    for k in ("rate", "nper", "pv", "when"):
        assert np.array_equal(a[k], b[k])
    assert a["nper"].min() >= 6 and a["nper"].max() <= 120
    assert set(np.unique(a["when"])) <= {0, 1}


def test_run_monte_carlo_round_trips():
    df = run_monte_carlo(iterations=40, seed=2015)
    assert isinstance(df, pd.DataFrame)
    assert len(df) == 40
    assert df.attrs["success_rate"] == 1.0
    assert df.attrs["max_rate_error"] < 1e-6
    assert df.attrs["max_payment_error"] < 1e-6
    assert (df["fv_residual"].abs() <= 1e-6 * df["pv"]).all()


def test_run_monte_carlo_zero_iterations():
    df = run_monte_carlo(iterations=0, seed=1)
    assert df.empty
    assert df.attrs["success_rate"] == 0.0
