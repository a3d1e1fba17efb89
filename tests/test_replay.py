from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from decoding_qc.config import AppConfig, CheckParameters
from decoding_qc.io.read import cycles_from_frame
from decoding_qc.pipeline.replay import replay_cycles
from decoding_qc.quality import Verdict

LINK = "General/LinkErrorPlots"


def _config() -> AppConfig:
    return AppConfig(check=CheckParameters(limits="5,-1,3"), error_kinds=["A", "B", "C"])


def _batches():
    frame = pd.DataFrame(
        {
            "cycle": [1, 1, 1, 2, 2, 2, 3, 3, 3],
            "series": [LINK] * 9,
            "bin": [0, 1, 2] * 3,
            "count": [10, 10, 10, 16, 50, 12, 17, 60, 13],
        }
    )
    return cycles_from_frame(frame, 3)


def test_replay_cycles_writes_table_and_summary(tmp_path: Path) -> None:
    outcome = replay_cycles(_batches(), out_dir=tmp_path, config=_config())

    assert outcome.verdicts == {1: Verdict.GOOD, 2: Verdict.BAD, 3: Verdict.GOOD}
    assert outcome.overall is Verdict.BAD
    assert outcome.figure_paths == []

    table = pd.read_csv(outcome.table_path)
    assert table["verdict"].tolist() == ["GOOD", "BAD", "GOOD"]
    assert table["bootstrap"].tolist() == [True, False, False]
    assert table["n_bad_bins"].tolist() == [0, 1, 0]

    summary = json.loads(outcome.summary_path.read_text(encoding="utf-8"))
    assert summary["overall_verdict"] == "BAD"
    assert summary["flags"] == {"2": ["BAD: ID = 0, A"]}
    assert summary["n_flat_check_cycles"] == 0


def test_replay_cycles_renders_annotated_figures(tmp_path: Path) -> None:
    outcome = replay_cycles(_batches(), out_dir=tmp_path, config=_config(), render_figures=True)

    assert len(outcome.figure_paths) == 3
    assert all(path.exists() for path in outcome.figure_paths)
    assert outcome.figure_paths[1].parent.name == "cycle_0002"
