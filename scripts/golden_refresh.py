from __future__ import annotations
import json, os, subprocess, sys
from pathlib import Path

ROOT     = Path(__file__).resolve().parents[1]
SHEET    = ROOT / "xlfin" / "inputs" / "sheets" / "release_case.yaml"
OUTDIR   = ROOT / "_out_golden_baseline"
BASELINE = ROOT / "tests" / "golden" / "summary.json"

def main() -> int:
    if not SHEET.exists():
        print(f"[x] Missing sheet: {SHEET}", file=sys.stderr)
        return 2

    OUTDIR.mkdir(parents=True, exist_ok=True)
    env = os.environ.copy()
    env["VALIDATION_MODE"] = "relaxed"

    cmd = [
        sys.executable, "-m", "xlfin",
        "--mode", "sheet",
        "--config", str(SHEET),
        "--outputs-dir", str(OUTDIR),
        "--format", "csv",
    ]
    subprocess.run(cmd, check=True, env=env, cwd=ROOT)

    sj = OUTDIR / "summary.json"
    if not sj.exists():
        print("[x] summary.json not produced; check CLI/run_sheet", file=sys.stderr)
        return 3

    data = json.loads(sj.read_text(encoding="utf-8"))
    results = data.get("results") or {}
    if not results:
        print("[x] summary.json has no results", file=sys.stderr)
        return 4

    # Only the per-calculation values are frozen
    BASELINE.parent.mkdir(parents=True, exist_ok=True)
    BASELINE.write_text(json.dumps(results, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    print(f"[ok] Wrote baseline {BASELINE}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
