# xlfin/validate.py
from __future__ import annotations
import os, sys
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .config import load_sheet
from .finance.errors import InvalidArgumentsError
from .finance.tvm import resolve_when
from .schema import META_KEYS, OUTPUTS, SCHEMA, inputs_for


def mode_from_env_or_flag(flag: str | None) -> str:
    if flag in ("strict", "relaxed"):
        return flag
    env = (os.environ.get("VALIDATION_MODE") or "").lower()
    return env if env in ("strict", "relaxed") else "relaxed"


def _check_value(key: str, value: Any, where: str) -> None:
    kind = SCHEMA[key]["type"]
    if kind == "when":
        try:
            resolve_when(value)
        except InvalidArgumentsError as e:
            raise ValueError(f"{where}: {key}: {e}") from e
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}: {key} must be a number, got {value!r}")


def validate_calc_dict(
    calc: Dict[str, Any],
    defaults: Dict[str, Any] | None = None,
    *,
    mode: str = "relaxed",
    where: str = "<mem>",
) -> None:
    """
    Guardrails for one calculation:
      - relaxed: known `output`; required inputs present (here or in defaults) and numeric
      - strict : also a `name`, no unknown keys, no input that does not apply to `output`
    """
    defaults = defaults or {}
    name = calc.get("name")
    if name:
        where = f"{where}[{name}]"

    output = calc.get("output")
    if output not in OUTPUTS:
        raise ValueError(f"{where}: output must be one of {sorted(OUTPUTS)}, got {output!r}")

    required, _ = OUTPUTS[output]
    missing = [k for k in required if k not in calc and k not in defaults]
    if missing:
        raise ValueError(f"{where}: missing required inputs: {missing}")

    allowed = inputs_for(output)
    for k in allowed:
        if k in calc and calc[k] is not None:
            _check_value(k, calc[k], where)
        elif k in defaults and defaults[k] is not None:
            _check_value(k, defaults[k], f"{where}(defaults)")

    if mode == "strict":
        if not name:
            raise ValueError(f"{where}: strict mode requires a 'name'")
        unknown = [k for k in calc if k not in SCHEMA and k not in META_KEYS]
        if unknown:
            raise ValueError(f"{where}: unknown keys (strict mode): {unknown}")
        stray = [k for k in calc if k in SCHEMA and k not in allowed]
        if stray:
            raise ValueError(f"{where}: inputs {stray} do not apply to output '{output}'")


def validate_sheet(
    defaults: Dict[str, Any],
    calcs: List[Dict[str, Any]],
    *,
    mode: str = "relaxed",
    where: str = "<mem>",
) -> None:
    unknown = [k for k in defaults if k not in SCHEMA]
    if unknown and mode == "strict":
        raise ValueError(f"{where}: unknown defaults (strict mode): {unknown}")
    if not calcs:
        raise ValueError(f"{where}: no calculations found")
    seen = set()
    for i, c in enumerate(calcs, start=1):
        validate_calc_dict(c, defaults, mode=mode, where=f"{where}#{i}")
        name = c.get("name")
        if name and name in seen:
            raise ValueError(f"{where}: duplicate calculation name {name!r}")
        seen.add(name)


def iter_sheet_files(p: Path) -> Iterable[Path]:
    if p.is_file():
        yield p
    elif p.is_dir():
        for ext in ("*.yaml", "*.yml", "*.json"):
            yield from sorted(p.rglob(ext))


def _main(argv: List[str] | None = None) -> int:
    import argparse
    parser = argparse.ArgumentParser(prog="xlfin.validate", add_help=True)
    parser.add_argument("paths", nargs="+", help="YAML/JSON sheets or directories to validate")
    parser.add_argument("--mode", choices=["strict", "relaxed"], default=None, help="validation mode")
    args = parser.parse_args(argv)

    mode = mode_from_env_or_flag(args.mode)
    had_error = False

    for raw in args.paths:
        target = Path(raw)
        any_seen = False
        for f in iter_sheet_files(target):
            any_seen = True
            try:
                defaults, calcs = load_sheet(f)
                validate_sheet(defaults, calcs, mode=mode, where=str(f))
                print(f"OK: {f}")
            except ValueError as e:
                print(str(e), file=sys.stderr)
                had_error = True
            except Exception as e:
                print(f"{f}: ERROR: {e}", file=sys.stderr)
                had_error = True
        if not any_seen:
            print(f"{target}: no YAML/JSON files found", file=sys.stderr)
            had_error = True

    return 1 if had_error else 0


if __name__ == "__main__":
    raise SystemExit(_main())
