from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from decoding_qc.io.read import cycles_from_frame, load_cycles
from decoding_qc.io.write import verdict_frame, write_summary, write_table
from decoding_qc.paths import build_output_paths, figure_stem

LINK = "General/LinkErrorPlots"


def test_load_cycles_pivots_long_format_and_fills_missing_bins(tmp_path: Path) -> None:
    csv_path = tmp_path / "cycles.csv"
    pd.DataFrame(
        {
            "cycle": [2, 1, 1, 2, 1],
            "series": [LINK, LINK, LINK, LINK, "General/ChipErrorPlots"],
            "bin": [0, 0, 2, 2, 1],
            "count": [16, 10, 10, 12, 300],
        }
    ).to_csv(csv_path, index=False)

    batches = load_cycles(csv_path, n_kinds=3)

    assert [cycle for cycle, _ in batches] == [1, 2]
    first = batches[0][1]
    assert sorted(first) == ["General/ChipErrorPlots", LINK]
    assert first[LINK].data.tolist() == [10, 0, 10]
    assert first["General/ChipErrorPlots"].data.tolist() == [0, 300, 0]
    assert batches[1][1][LINK].data.tolist() == [16, 0, 12]


def test_cycles_from_frame_validates_columns_and_bin_range() -> None:
    with pytest.raises(ValueError, match="missing column: count"):
        cycles_from_frame(pd.DataFrame({"cycle": [1], "series": [LINK], "bin": [0]}), 3)
    with pytest.raises(ValueError, match="outside"):
        cycles_from_frame(
            pd.DataFrame({"cycle": [1], "series": [LINK], "bin": [3], "count": [1]}), 3
        )


def test_write_table_and_summary(tmp_path: Path) -> None:
    frame = verdict_frame(
        [
            {"cycle": 2, "series": "b", "verdict": "GOOD", "mode": "vector"},
            {"cycle": 1, "series": "a", "verdict": "BAD", "mode": "vector"},
        ]
    )
    assert frame["cycle"].tolist() == [1, 2]

    table_path = write_table(frame, tmp_path / "tables" / "verdicts", fmt="csv")
    assert table_path.suffix == ".csv"
    assert pd.read_csv(table_path)["verdict"].tolist() == ["BAD", "GOOD"]
    with pytest.raises(ValueError, match="Unsupported table format"):
        write_table(frame, tmp_path / "x", fmt="xlsx")

    summary_path = write_summary({"out": tmp_path, "n": 1}, tmp_path / "summary" / "s.json")
    assert json.loads(summary_path.read_text(encoding="utf-8")) == {"n": 1, "out": str(tmp_path)}


def test_output_paths_and_figure_stem(tmp_path: Path) -> None:
    paths = build_output_paths(tmp_path / "out")
    assert paths.figures.is_dir()
    assert paths.tables.is_dir()
    assert figure_stem("General/LinkErrorPlots") == "General_LinkErrorPlots"
    assert figure_stem("///") == "series"
