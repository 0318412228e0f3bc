# xlfin/sheet_runner.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Optional
from datetime import datetime
import json, csv
import logging

from .adapters import CalcResult, evaluate
from .config import load_sheet
from .validate import iter_sheet_files, mode_from_env_or_flag, validate_sheet

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    summary: Dict[str, Any]
    summary_path: Path
    results_path: Optional[Path] = None


def _write_jsonl(path: Path, rows: List[Dict[str, Any]]) -> None:
    with path.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row) + "\n")


def _write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    if not rows:
        path.write_text("", encoding="utf-8")
        return
    hdr = list(rows[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=hdr)
        w.writeheader()
        w.writerows(rows)


def _with_unique_names(calcs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Unnamed calculations are keyed by their output. When that key is shared
    with another calculation, the unnamed ones become '<output>#<position>'.
    """
    keys = [c.get("name") or c.get("output") for c in calcs]
    out: List[Dict[str, Any]] = []
    for i, c in enumerate(calcs, start=1):
        if not c.get("name") and keys.count(c.get("output")) > 1:
            c = {**c, "name": f"{c.get('output')}#{i}"}
        out.append(c)
    return out


def _sheet_out_dirs(root: Path, files: List[Path]) -> List[Path]:
    """
    One output directory per sheet: its path under root without the suffix,
    e.g. sub/a for sub/a.yaml. Sheets that would share a directory keep
    their suffix instead (a_yaml, a_json).
    """
    rel = [f.relative_to(root) for f in files]
    bare = [r.with_suffix("") for r in rel]
    return [
        b if bare.count(b) == 1 else r.with_name(f"{r.stem}_{r.suffix.lstrip('.')}")
        for r, b in zip(rel, bare)
    ]


def evaluate_sheet(
    defaults: Dict[str, Any],
    calcs: List[Dict[str, Any]],
    *,
    mode: str = "relaxed",
    where: str = "<mem>",
) -> List[CalcResult]:
    validate_sheet(defaults, calcs, mode=mode, where=where)
    results = [evaluate(c, defaults) for c in _with_unique_names(calcs)]
    for r in results:
        if not r.ok:
            logger.info("%s: %s -> N/A (%s: %s)", where, r.name, r.error.value, r.message)
    return results


def summarize(sheet: str, results: List[CalcResult]) -> Dict[str, Any]:
    return {
        "sheet": sheet,
        "count": len(results),
        "failed": sum(1 for r in results if not r.ok),
        "results": {r.name: r.value for r in results},
    }


def run_sheet(
    config: str | Path,
    out_dir: str | Path,
    *,
    fmt: str = "jsonl",
    save_results: bool = False,
    mode: str | None = None,
) -> RunResult | List[RunResult]:
    """
    Validate and evaluate one sheet file, writing <out_dir>/summary.json and,
    with save_results, a per-calculation results file. A directory runs every
    sheet in it, each into <out_dir>/<sheet path without suffix>/.
    """
    if fmt not in ("jsonl", "csv"):
        raise ValueError(f"unknown fmt: {fmt}")
    cfg_path = Path(config)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    mode = mode_from_env_or_flag(mode)

    if cfg_path.is_dir():
        files = [f for f in iter_sheet_files(cfg_path) if f.is_file()]
        if not files:
            raise ValueError(f"{cfg_path}: no sheet files found")
        return [
            run_sheet(f, out / sub, fmt=fmt, save_results=save_results, mode=mode)
            for f, sub in zip(files, _sheet_out_dirs(cfg_path, files))
        ]

    defaults, calcs = load_sheet(cfg_path)
    results = evaluate_sheet(defaults, calcs, mode=mode, where=str(cfg_path))
    summary = summarize(cfg_path.stem, results)
    logger.info("%s: %d calculations, %d failed", cfg_path, summary["count"], summary["failed"])

    summary_path = out / "summary.json"
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")

    results_path: Optional[Path] = None
    if save_results:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        base = f"{cfg_path.stem}_results_{stamp}"
        rows = [r.as_row() for r in results]
        if fmt == "jsonl":
            results_path = out / f"{base}.jsonl"
            _write_jsonl(results_path, rows)
        else:
            results_path = out / f"{base}.csv"
            _write_csv(results_path, rows)

    return RunResult(summary=summary, summary_path=summary_path, results_path=results_path)


__all__ = ["RunResult", "evaluate_sheet", "summarize", "run_sheet"]
