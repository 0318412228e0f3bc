# xlfin/cli.py
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .adapters import NOT_AVAILABLE, evaluate
from .config import DEFAULT_SHEET
from .schema import OUTPUTS


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="xlfin",
        description="Spreadsheet-compatible time-value-of-money calculator",
    )
    p.add_argument(
        "--mode",
        default="sheet",
        choices=["calc", "sheet", "montecarlo"],
        help="Execution mode (default: sheet).",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING).",
    )

    calc = p.add_argument_group("calc mode")
    calc.add_argument("--solve", choices=sorted(OUTPUTS), help="Quantity to solve for.")
    for name in ("rate", "nper", "pmt", "pv", "fv", "guess"):
        calc.add_argument(f"--{name}", type=float, default=None)
    calc.add_argument("--when", default=None, help="Payment timing: end|begin|0|1 (default: end).")

    sheet = p.add_argument_group("sheet mode")
    sheet.add_argument(
        "--config",
        default=None,
        help="Path to a sheet (YAML/JSON) or a directory of sheets. Defaults to the packaged demo sheet.",
    )
    sheet.add_argument(
        "--outputs-dir",
        default="outputs",
        help="Directory to write result files (default: outputs). Will be created if missing.",
    )
    sheet.add_argument(
        "--format",
        dest="fmt",
        default="csv",
        choices=["csv", "jsonl"],
        help="Output format for per-calculation results (default: csv).",
    )
    sheet.add_argument(
        "--save-results",
        action="store_true",
        help="If set, write one row per calculation alongside summary.json.",
    )
    v = sheet.add_mutually_exclusive_group()
    v.add_argument("--strict", action="store_true", help="Enable strict validation (unknown keys raise).")
    v.add_argument("--relaxed", action="store_true", help="Enable relaxed validation.")

    mc = p.add_argument_group("montecarlo mode")
    mc.add_argument("--iterations", type=int, default=1000)
    mc.add_argument("--seed", type=int, default=None)
    return p.parse_args(argv)


def _apply_validation_mode(ns: argparse.Namespace) -> None:
    # Default: leave env as-is; flags override explicitly.
    if ns.strict:
        os.environ["VALIDATION_MODE"] = "strict"
    elif ns.relaxed:
        os.environ["VALIDATION_MODE"] = "relaxed"


def _run_calc(ns: argparse.Namespace) -> int:
    if not ns.solve:
        print("ERROR: --solve is required in calc mode", file=sys.stderr)
        return 2
    calc = {"name": ns.solve, "output": ns.solve}
    for name in ("rate", "nper", "pmt", "pv", "fv", "guess", "when"):
        val = getattr(ns, name)
        if val is not None:
            calc[name] = val
    res = evaluate(calc)
    if res.ok:
        print(f"{res.value:.10g}")
        return 0
    print(NOT_AVAILABLE)
    print(f"{res.error.value}: {res.message}", file=sys.stderr)
    return 1


def _run_sheet(ns: argparse.Namespace) -> int:
    from .sheet_runner import run_sheet

    _apply_validation_mode(ns)
    outputs_dir = Path(ns.outputs_dir).resolve()
    cfg_path = Path(ns.config).resolve() if ns.config else DEFAULT_SHEET
    res = run_sheet(cfg_path, outputs_dir, fmt=ns.fmt, save_results=ns.save_results)
    runs = res if isinstance(res, list) else [res]
    for r in runs:
        print(f"{r.summary['sheet']}: {r.summary['count']} calculations, "
              f"{r.summary['failed']} N/A -> {r.summary_path}")
    return 0


def _run_montecarlo(ns: argparse.Namespace) -> int:
    from .monte_carlo import run_monte_carlo

    df = run_monte_carlo(iterations=ns.iterations, seed=ns.seed)
    print(f"Ran {ns.iterations} loans, success rate {df.attrs['success_rate']:.2%}")
    if len(df):
        print(f"Max rate error: {df.attrs['max_rate_error']:.3e}")
        print(f"Max payment deviation vs numpy-financial: {df.attrs['max_payment_error']:.3e}")
    return 0


def main(argv: list[str] | None = None) -> int:
    ns = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, ns.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if ns.mode == "calc":
            return _run_calc(ns)
        if ns.mode == "montecarlo":
            return _run_montecarlo(ns)
        return _run_sheet(ns)
    except Exception as e:
        # Fail noisily with non-zero
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


__all__ = ["main"]
