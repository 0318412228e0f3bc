import pytest

from xlfin.adapters import NOT_AVAILABLE, CalcResult, evaluate, resolve_inputs, solve
from xlfin.finance.errors import ErrorKind, InvalidArgumentsError


def test_resolve_inputs_fills_from_defaults_and_drops_unrelated():
    calc = {"name": "a", "output": "pmt", "rate": "0.01", "nper": 12, "pv": -1000, "guess": 0.3}
    got = resolve_inputs(calc, {"fv": 0, "when": "begin"})
    assert got == {"rate": 0.01, "nper": 12.0, "pv": -1000.0, "fv": 0.0, "when": "begin"}


def test_evaluate_success():
    res = evaluate({"name": "loan", "output": "pmt", "rate": 0.005, "nper": 60, "pv": -10000})
    assert res.ok
    assert res.value == pytest.approx(193.328, abs=1e-3)
    assert res.as_row()["value"] == res.value
    assert res.as_row()["error"] == ""


@pytest.mark.parametrize(
    "calc,kind",
    [
        ({"output": "pv", "rate": -1, "nper": 10, "pmt": -100}, ErrorKind.INVALID_ARGUMENTS),
        ({"output": "nper", "rate": 0.1, "pmt": -50, "pv": 1000}, ErrorKind.NUMERIC_DEGENERATE),
        ({"output": "pmt", "rate": 0.1, "nper": 12}, ErrorKind.INVALID_ARGUMENTS),
    ],
)
def test_evaluate_failure_is_tagged(calc, kind):
    res = evaluate(calc)
    assert not res.ok
    assert res.value is None
    assert res.error is kind
    assert res.name == calc["output"]
    assert res.as_row()["value"] == NOT_AVAILABLE


def test_evaluate_convergence_failure_is_tagged(monkeypatch):
    from xlfin.finance import roots

    monkeypatch.setattr(roots, "newton", lambda *a, **k: None)
    monkeypatch.setattr(roots, "BOUNDS_MAX_TRIES", 1)
    res = evaluate({"output": "rate", "nper": 60, "pmt": -193.33, "pv": 10000})
    assert res.error is ErrorKind.CONVERGENCE_FAILURE


def test_evaluate_unknown_output():
    with pytest.raises(ValueError):
        evaluate({"output": "irr"})


def test_solve_propagates_core_errors():
    assert solve("pv", rate=0, nper=10, pmt=-100) == 1000
    with pytest.raises(InvalidArgumentsError):
        solve("pmt", rate=0.1, nper=12, pv=0)
    with pytest.raises(ValueError, match="unknown output"):
        solve("npv", rate=0.1)


def test_calc_result_is_immutable():
    res = CalcResult("a", "pv", value=1.0)
    with pytest.raises(AttributeError):
        res.value = 2.0
