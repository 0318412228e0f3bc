from __future__ import annotations

from typing import Any, Dict, List, Tuple
import io
import json
import os
from pathlib import Path

import yaml

DEFAULT_SHEET = Path(__file__).resolve().parent / "inputs" / "sheets" / "release_case.yaml"

# Grouped sections folded into the calculation itself.
_GROUPS = ("inputs",)


def _flatten_grouped(calc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten shallow groups like {'inputs': {...}} into one level.
    Prefers top-level keys if collisions occur.
    """
    flat: Dict[str, Any] = {k: v for k, v in calc.items() if k not in _GROUPS}
    for k in _GROUPS:
        v = calc.get(k)
        if isinstance(v, dict):
            for sk, sv in v.items():
                flat.setdefault(sk, sv)
    return flat


def _read_text(source: str | os.PathLike | io.StringIO) -> Tuple[str, str]:
    if hasattr(source, "read"):
        return str(source.read()), ""
    p = Path(os.fspath(source))
    return p.read_text(encoding="utf-8"), p.suffix.lower()


def parse_sheet(data: Any) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """
    Split a loaded document into (defaults, calculations).

    A bare list is taken as the calculations; a single mapping without a
    'calculations' key is taken as one calculation.
    """
    if data is None:
        return {}, []
    if isinstance(data, list):
        defaults: Dict[str, Any] = {}
        calcs = data
    elif isinstance(data, dict):
        defaults = dict(data.get("defaults") or {})
        calcs = data["calculations"] if "calculations" in data else [data]
    else:
        raise ValueError(f"sheet must be a mapping or a list, got {type(data).__name__}")

    if not isinstance(calcs, list):
        raise ValueError("'calculations' must be a list")
    out: List[Dict[str, Any]] = []
    for i, c in enumerate(calcs):
        if not isinstance(c, dict):
            raise ValueError(f"calculation #{i + 1} must be a mapping")
        out.append(_flatten_grouped(c))
    return defaults, out


def load_sheet(
    source: str | os.PathLike | io.StringIO,
) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """
    Load a calculation sheet from a path or text stream.
    .json files are read as JSON, everything else as YAML.
    Returns (defaults, calculations).
    """
    text, suffix = _read_text(source)
    if suffix == ".json":
        data = json.loads(text or "null")
    else:
        data = yaml.safe_load(text)
    return parse_sheet(data)


__all__ = ["DEFAULT_SHEET", "parse_sheet", "load_sheet"]
