from __future__ import annotations

from pathlib import Path

import pandas as pd

from decoding_qc.series import MonitorObject

REQUIRED_COLUMNS = ["cycle", "series", "bin", "count"]

CycleBatch = tuple[int, dict[str, MonitorObject]]


def _validate_required_columns(df: pd.DataFrame) -> pd.DataFrame:
    for column in REQUIRED_COLUMNS:
        if column not in df.columns:
            raise ValueError(f"Cycle data missing column: {column}")
    return df


def cycles_from_frame(df: pd.DataFrame, n_kinds: int) -> list[CycleBatch]:
    """Pivot long-format counts into one host batch per cycle, in cycle order."""
    frame = _validate_required_columns(df)[REQUIRED_COLUMNS].copy()
    frame["bin"] = pd.to_numeric(frame["bin"], errors="raise").astype(int)
    out_of_range = frame[(frame["bin"] < 0) | (frame["bin"] >= n_kinds)]
    if not out_of_range.empty:
        bad_bins = ", ".join(str(value) for value in sorted(out_of_range["bin"].unique()))
        raise ValueError(f"Bin index outside [0, {n_kinds}): {bad_bins}")

    pivot = (
        frame.pivot_table(
            index=["cycle", "series"],
            columns="bin",
            values="count",
            aggfunc="sum",
            fill_value=0,
        )
        .reindex(columns=range(n_kinds), fill_value=0)
        .sort_index()
    )

    batches: list[CycleBatch] = []
    for cycle, cycle_rows in pivot.groupby(level="cycle", sort=True):
        objects: dict[str, MonitorObject] = {}
        for (_, series_name), row in cycle_rows.iterrows():
            name = str(series_name)
            objects[name] = MonitorObject(name=name, data=row.reset_index(drop=True))
        batches.append((int(cycle), objects))
    return batches


def load_cycles(path: Path, n_kinds: int) -> list[CycleBatch]:
    df = pd.read_csv(path, encoding="utf-8-sig")
    return cycles_from_frame(df, n_kinds)
