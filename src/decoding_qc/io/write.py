from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

VERDICT_TABLE_COLUMNS = [
    "cycle",
    "series",
    "verdict",
    "mode",
    "bootstrap",
    "n_bad_bins",
    "bad_bins",
]


def _json_default(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def verdict_frame(rows: Sequence[dict[str, Any]]) -> pd.DataFrame:
    frame = pd.DataFrame(list(rows), columns=VERDICT_TABLE_COLUMNS)
    if frame.empty:
        return frame
    return frame.sort_values(["cycle", "series"], kind="stable").reset_index(drop=True)


def write_table(df: pd.DataFrame, path: Path, fmt: str = "csv") -> Path:
    target = path.with_suffix(f".{fmt}")
    target.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "parquet":
        df.to_parquet(target, index=False)
        return target
    if fmt == "csv":
        df.to_csv(target, index=False)
        return target
    raise ValueError(f"Unsupported table format: {fmt}")


def write_summary(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, indent=2, sort_keys=True, default=_json_default),
        encoding="utf-8",
    )
    return path
